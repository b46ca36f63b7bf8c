from fastapi import FastAPI, Query, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field, ValidationError, model_validator
import httpx
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from . import config
from .formatting import format_scientific_with_label, pretty_number, round_to
from .geodesy import GeoLocation, ImpactRing, impact_rings, rings_to_feature_collection
from .impact_model import ImpactResults, evaluate
from .presets import (ANGLE, DEFAULT_STATE, DENSITY, DIAMETER, REFERENCE_METEORS, VELOCITY,
                      MeteorState, get_reference_meteor)

app = FastAPI(title="Meteor Impact Effects", version="1.0.0")

# GeoNames status code for "no ocean at this point" (i.e. land)
GEONAMES_NO_RESULT = 15

# -------------------------------
# Health + reference data
# -------------------------------
@app.get("/health")
def health():
    return {"status": "ok"}

@app.get("/presets")
def presets():
    return {
        "ranges": {
            "diameter_m": asdict(DIAMETER),
            "velocity_kms": asdict(VELOCITY),
            "angle_deg": asdict(ANGLE),
            "density_kgpm3": asdict(DENSITY),
        },
        "default_state": asdict(DEFAULT_STATE),
        "meteors": [asdict(m) for m in REFERENCE_METEORS],
    }

@app.get("/isOcean")
def is_ocean(
    lat: float = Query(..., ge=-90, le=90, description="Latitude in decimal degrees"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude in decimal degrees")
):
    geonames_username = config.geonames_username()
    if not geonames_username:
        raise HTTPException(status_code=500, detail="GeoNames username not configured.")

    try:
        timeout_s = config.geonames_timeout_s()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))

    url = f"{config.geonames_base_url()}/oceanJSON"
    print(f"[isOcean] lat={lat} lon={lon} url={url}")
    try:
        r = httpx.get(url, params={"lat": lat, "lng": lon, "username": geonames_username},
                      timeout=timeout_s)
        r.raise_for_status()
        data = r.json()
    except httpx.HTTPError as e:
        raise HTTPException(status_code=502, detail=f"Error fetching data from GeoNames: {str(e)}")

    if "ocean" in data:
        return True
    status = data.get("status") or {}
    if status.get("value") == GEONAMES_NO_RESULT:
        return False
    msg = status.get("message") or "GeoNames returned an unexpected response."
    print(f"[isOcean.error] {msg}")
    raise HTTPException(status_code=502, detail=msg)

# -------------------------------
# Impact simulation endpoints
# -------------------------------

class LocationIn(BaseModel):
    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

class ImpactRequest(BaseModel):
    diameter_m: float = Field(..., gt=0, description="Impactor diameter in meters")
    velocity_kms: float = Field(..., gt=0, description="Impact velocity in km/s")
    density_kgpm3: float = Field(DENSITY.avg, gt=0, description="Bulk density in kg/m^3")
    angle_deg: float = Field(ANGLE.avg, ge=0, le=90, description="Entry angle to horizontal in degrees")
    impact_location: Optional[LocationIn] = None
    ring_steps: Optional[int] = Field(None, ge=8, le=512, description="Vertices per overlay ring")

class RingIn(BaseModel):
    id: str
    radius_km: float = Field(..., ge=0, description="Geodesic radius in kilometers")
    color: Optional[str] = None
    label: Optional[str] = None

class RingsRequest(BaseModel):
    center: LocationIn
    rings: List[RingIn] = Field(default_factory=list)
    steps: Optional[int] = Field(None, ge=8, le=512)

class OverlayPointIn(BaseModel):
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)

    @model_validator(mode="after")
    def _both_or_neither(self):
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must be given together")
        return self


def _steps_or_default(steps: Optional[int]) -> int:
    if steps is not None:
        return steps
    try:
        return config.ring_steps()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))

def _display(res: ImpactResults) -> Dict[str, str]:
    """Human-readable rendering of the result record."""
    return {
        "mass": f"{format_scientific_with_label(res.mass_kg)} kg",
        "kinetic_energy": f"{format_scientific_with_label(res.kinetic_energy_J)} J",
        "energy_tnt": f"{format_scientific_with_label(res.energy_tnt_tons)} tons TNT",
        "volcano_equivalent": f"{round_to(res.volcano_equivalent, 2):.2f}x Krakatoa",
        "crater_diameter": f"{round_to(res.crater_diameter_km, 2):.2f} km",
        "severe_damage_radius": f"{round_to(res.severe_damage_radius_km, 2):.2f} km",
        "third_degree_burn_radius": f"{round_to(res.third_degree_burn_radius_km, 2):.2f} km",
        "second_degree_burn_radius": f"{round_to(res.second_degree_burn_radius_km, 2):.2f} km",
        "noise_damage_radius": f"{round_to(res.noise_damage_radius_km, 2):.2f} km",
        "ozone_depletion": f"{round_to(res.ozone_depletion_percent, 1):.1f} %",
    }

def _impact_response(state: MeteorState, steps: Optional[int]) -> Dict[str, Any]:
    inputs = state.to_impact_inputs()
    res = evaluate(inputs)
    print(f"[impact.summary] d={pretty_number(inputs.diameter_m)}m v={inputs.velocity_mps}m/s "
          f"rho={inputs.density_kgpm3} angle={inputs.angle_deg} E_Mt={res.energy_tnt_megatons:.3g} "
          f"crater_km={res.crater_diameter_km:.3g}")

    resp: Dict[str, Any] = {
        "inputs": asdict(inputs),
        "results": res.as_dict(),
        "display": _display(res),
    }
    if state.impact_location is not None:
        n_steps = _steps_or_default(steps)
        rings = impact_rings(res)
        resp["overlay"] = rings_to_feature_collection(state.impact_location, rings, n_steps)
        print(f"[geojson.rings] center={state.impact_location} rings={len(rings)} steps={n_steps}")
    return resp

@app.post("/impact/summary")
def impact_summary(req: ImpactRequest):
    # Build domain objects; km/s -> m/s happens in to_impact_inputs()
    loc = req.impact_location
    state = MeteorState(
        diameter_m=req.diameter_m,
        velocity_kms=req.velocity_kms,
        angle_deg=req.angle_deg,
        density_kgpm3=req.density_kgpm3,
        impact_location=GeoLocation(lat=loc.lat, lng=loc.lng) if loc else None,
    )
    return _impact_response(state, req.ring_steps)

@app.get("/impact/presets/{preset_id}")
def impact_preset(
    preset_id: str,
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Impact latitude for the overlay"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="Impact longitude for the overlay"),
    ring_steps: Optional[int] = Query(None, ge=8, le=512),
):
    meteor = get_reference_meteor(preset_id)
    if meteor is None:
        raise HTTPException(status_code=404, detail=f"Unknown reference meteor '{preset_id}'.")
    try:
        point = OverlayPointIn(lat=lat, lng=lng)
    except ValidationError as e:
        # same 422 shape as FastAPI's own query validation
        raise RequestValidationError([{**err, "loc": ("query", *err["loc"])}
                                      for err in e.errors(include_url=False, include_context=False)])
    loc = GeoLocation(lat=point.lat, lng=point.lng) if point.lat is not None else None
    resp = _impact_response(meteor.to_state(impact_location=loc), ring_steps)
    resp["meteor"] = asdict(meteor)
    return resp

@app.post("/impact/rings")
def impact_rings_geojson(req: RingsRequest):
    center = GeoLocation(lat=req.center.lat, lng=req.center.lng)
    rings = [ImpactRing(id=r.id, radius_km=r.radius_km, color=r.color, label=r.label) for r in req.rings]
    n_steps = _steps_or_default(req.steps)
    print(f"[geojson.rings] center=[{center.lng},{center.lat}] rings={len(rings)} steps={n_steps}")
    return rings_to_feature_collection(center, rings, n_steps)
