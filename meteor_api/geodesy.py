from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional

from .impact_model import ImpactResults

R_EARTH_KM = 6371.0      # spherical Earth, no ellipsoid correction
DEFAULT_STEPS = 128      # 129 vertices per ring incl. closing duplicate

GeoPolygon = list[tuple[float, float]]  # (lng, lat) degrees, first == last


@dataclass(frozen=True)
class GeoLocation:
    lat: float
    lng: float


@dataclass(frozen=True)
class ImpactRing:
    id: str
    radius_km: float
    color: Optional[str] = None
    label: Optional[str] = None


# Overlay styling for the standard effect rings, outermost effects first
RING_STYLES = {
    "noise":         ("#38bdf8", "Noise damage (windows break)"),
    "second_degree": ("#facc15", "2nd degree burns"),
    "third_degree":  ("#f97316", "3rd degree burns"),
    "severe_blast":  ("#ef4444", "Severe damage (~5 psi)"),
    "crater":        ("#7f1d1d", "Crater"),
}


def _destination_point(lon_deg: float, lat_deg: float, bearing_rad: float, distance_km: float) -> tuple[float, float]:
    """Point reached from (lon,lat) going 'distance_km' along 'bearing_rad' on a sphere."""
    δ = max(0.0, distance_km) / R_EARTH_KM
    φ1 = math.radians(lat_deg)
    λ1 = math.radians(lon_deg)
    θ = bearing_rad

    sinφ2 = math.sin(φ1)*math.cos(δ) + math.cos(φ1)*math.sin(δ)*math.cos(θ)
    φ2 = math.asin(min(1.0, max(-1.0, sinφ2)))  # clamp keeps asin defined near the poles
    y = math.sin(θ)*math.sin(δ)*math.cos(φ1)
    x = math.cos(δ) - math.sin(φ1)*math.sin(φ2)
    λ2 = λ1 + math.atan2(y, x)
    return math.degrees(λ2), math.degrees(φ2)


def geodesic_circle(center: GeoLocation, radius_km: float, steps: int = DEFAULT_STEPS) -> GeoPolygon:
    """Closed ring approximating the circle of constant great-circle radius around center."""
    steps = max(1, int(steps))
    radius = radius_km if math.isfinite(radius_km) else 0.0
    coords = []
    for i in range(steps + 1):  # bearing 0 and 2*pi both included -> closed ring
        b = 2 * math.pi * (i / steps)
        coords.append(_destination_point(center.lng, center.lat, b, radius))
    return coords


def _paint_order_key(ring: ImpactRing) -> float:
    r = ring.radius_km
    return max(0.0, r) if math.isfinite(r) else 0.0


def build_rings(center: GeoLocation, rings: list[ImpactRing],
                steps: int = DEFAULT_STEPS) -> list[tuple[ImpactRing, GeoPolygon]]:
    """
    Polygons for every ring, largest radius first, so stacked fills paint
    outer rings underneath inner ones. Ties keep their input order.
    """
    ordered = sorted(rings, key=_paint_order_key, reverse=True)
    return [(ring, geodesic_circle(center, ring.radius_km, steps)) for ring in ordered]


def rings_to_feature_collection(center: GeoLocation, rings: list[ImpactRing],
                                steps: int = DEFAULT_STEPS) -> dict:
    """GeoJSON FeatureCollection, one Polygon feature per ring in paint order."""
    features = []
    for ring, polygon in build_rings(center, rings, steps):
        features.append({
            "type": "Feature",
            "properties": {
                "id": ring.id,
                "radius_km": ring.radius_km,
                "color": ring.color,
                "label": ring.label,
            },
            "geometry": {"type": "Polygon", "coordinates": [[[x, y] for x, y in polygon]]},
        })
    return {"type": "FeatureCollection", "features": features}


def impact_rings(results: ImpactResults) -> list[ImpactRing]:
    """Standard overlay rings for one evaluation; the crater ring uses half the diameter."""
    radii = {
        "noise": results.noise_damage_radius_km,
        "second_degree": results.second_degree_burn_radius_km,
        "third_degree": results.third_degree_burn_radius_km,
        "severe_blast": results.severe_damage_radius_km,
        "crater": results.crater_diameter_km / 2.0,
    }
    return [ImpactRing(id=k, radius_km=r, color=RING_STYLES[k][0], label=RING_STYLES[k][1])
            for k, r in radii.items()]
