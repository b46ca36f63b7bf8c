from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .geodesy import GeoLocation
from .impact_model import ImpactInputs, KilometersPerSecond


@dataclass(frozen=True)
class ParameterRange:
    min: float
    avg: float
    max: float


# UI slider ranges (placeholder prototype bounds)
DIAMETER = ParameterRange(min=10.0, avg=100.0, max=10000.0)   # m, ~10 km = Chicxulub-scale
VELOCITY = ParameterRange(min=12.0, avg=20.0, max=72.0)       # km/s, atmospheric entry range
ANGLE = ParameterRange(min=5.0, avg=45.0, max=90.0)           # deg from horizontal
DENSITY = ParameterRange(min=1000.0, avg=3000.0, max=8000.0)  # kg/m^3, ice .. rock .. iron


@dataclass(frozen=True)
class MeteorState:
    """What the user picked, in user-facing units (velocity in km/s)."""
    diameter_m: float
    velocity_kms: KilometersPerSecond
    angle_deg: float
    density_kgpm3: float = DENSITY.avg
    impact_location: Optional[GeoLocation] = None

    def to_impact_inputs(self) -> ImpactInputs:
        return ImpactInputs.from_kms(
            diameter_m=self.diameter_m,
            density_kgpm3=self.density_kgpm3,
            velocity_kms=self.velocity_kms,
            angle_deg=self.angle_deg,
        )


DEFAULT_STATE = MeteorState(
    diameter_m=DIAMETER.avg,
    velocity_kms=KilometersPerSecond(VELOCITY.avg),
    angle_deg=ANGLE.avg,
    density_kgpm3=DENSITY.avg,
)


@dataclass(frozen=True)
class ReferenceMeteor:
    id: str
    name: str
    diameter_m: float
    velocity_kms: float
    angle_deg: float
    description: str
    impact_year: str
    location: str

    def to_state(self, impact_location: Optional[GeoLocation] = None) -> MeteorState:
        # no density on record for historical events -> default rock
        return MeteorState(
            diameter_m=self.diameter_m,
            velocity_kms=KilometersPerSecond(self.velocity_kms),
            angle_deg=self.angle_deg,
            impact_location=impact_location,
        )


REFERENCE_METEORS: tuple[ReferenceMeteor, ...] = (
    ReferenceMeteor(
        id="chicxulub",
        name="Chicxulub Impactor",
        diameter_m=10000.0, velocity_kms=20.0, angle_deg=60.0,
        description="The asteroid that caused the Cretaceous-Paleogene extinction event, wiping out the dinosaurs.",
        impact_year="66 million years ago",
        location="Yucatán Peninsula, Mexico",
    ),
    ReferenceMeteor(
        id="tunguska",
        name="Tunguska Event",
        diameter_m=50.0, velocity_kms=15.0, angle_deg=30.0,
        description="A massive explosion over Siberia that flattened 2,000 square kilometers of forest.",
        impact_year="1908",
        location="Tunguska, Siberia",
    ),
    ReferenceMeteor(
        id="chelyabinsk",
        name="Chelyabinsk Meteor",
        diameter_m=20.0, velocity_kms=19.0, angle_deg=18.0,
        description="A superbolide that exploded over Russia, injuring over 1,000 people.",
        impact_year="2013",
        location="Chelyabinsk, Russia",
    ),
    ReferenceMeteor(
        id="barringer",
        name="Barringer Crater",
        diameter_m=50.0, velocity_kms=12.0, angle_deg=45.0,
        description="A well-preserved meteor crater in Arizona, created by an iron meteorite.",
        impact_year="50,000 years ago",
        location="Arizona, USA",
    ),
)


def get_reference_meteor(meteor_id: str) -> Optional[ReferenceMeteor]:
    for m in REFERENCE_METEORS:
        if m.id == meteor_id.lower():
            return m
    return None
