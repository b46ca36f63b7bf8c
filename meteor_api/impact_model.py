from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from math import pi, sin, radians, isfinite
from typing import NewType

# -----------------------------
# Physical constants & defaults
# -----------------------------
G_EARTH = 9.81                   # m/s^2
RHO_TARGET_CRUST = 2700.0        # kg/m^3, generic crustal rock
J_PER_TON_TNT = 4.184e9          # J in 1 ton TNT (exact)
TONS_PER_KT = 1e3
TONS_PER_MT = 1e6
KRAKATOA_MT = 200.0              # reference eruption yield

# Point-source crater scaling (Holsapple & Schmidt, rock-like targets)
MU_ROCK = 0.22
K1_ROCK = 1.161
CRATER_COLLAPSE_FACTOR = 1.3     # transient -> final
MIN_ANGLE_DEG = 0.1
MAX_ANGLE_DEG = 90.0

# Yield-scaled damage radii (km). Mt for blast/thermal, kt for noise.
SEVERE_BLAST_KM_PER_MT = 4.5     # ~5 psi, W^(1/3)
THIRD_DEGREE_KM_PER_MT = 8.0     # W^0.40
SECOND_DEGREE_KM_PER_MT = 13.0   # W^0.40
BURN_EXPONENT = 0.40
BURN_ORDER_FACTOR = 1.1          # 2nd-degree >= 1.1 x 3rd-degree when inverted
NOISE_KM_PER_KT = 15.0           # window break, W^(1/4)

# Ozone: 5 * W^0.25 (Mt), hard ceiling for Chicxulub-class events
OZONE_COEFF = 5.0
OZONE_CAP_PERCENT = 50.0

ACID_RAIN_GLOBAL_J = 1e18
ACID_RAIN_REGIONAL_J = 1e16
CLIMATE_REGIONAL_MT = 1.0
CLIMATE_GLOBAL_MT = 1000.0

MetersPerSecond = NewType("MetersPerSecond", float)
KilometersPerSecond = NewType("KilometersPerSecond", float)


def kms_to_mps(v_kms: KilometersPerSecond) -> MetersPerSecond:
    """User-facing km/s -> model m/s. The only sanctioned velocity conversion."""
    return MetersPerSecond(v_kms * 1000.0)


class AcidRainSeverity(str, Enum):
    SEVERE = "Severe acid rain likely (global)"
    REGIONAL = "Regional acid rain possible"
    LOCALIZED = "Localized acid rain possible"


class ClimateImpact(str, Enum):
    NEGLIGIBLE = "Negligible global climate impact"
    REGIONAL_COOLING = "Regional cooling ('mini impact winter')"
    IMPACT_WINTER = "Global impact winter (years of cooling) followed by greenhouse warming"


def clamp(n: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, n))


def safe(x: float) -> float:
    """Finite and positive passes, everything else (NaN, inf, <= 0) becomes 0."""
    return x if isfinite(x) and x > 0 else 0.0


def _power(base: float, exponent: float) -> float:
    # float ** float raises or goes complex where the closed-form laws would just give NaN/inf
    if base != base or base < 0.0 or (base == 0.0 and exponent < 0.0):
        return float("nan")
    try:
        return base ** exponent
    except OverflowError:
        return float("inf")


@dataclass(frozen=True)
class ImpactInputs:
    diameter_m: float
    density_kgpm3: float
    velocity_mps: MetersPerSecond
    angle_deg: float  # to HORIZONTAL, 90 = vertical

    @classmethod
    def from_kms(cls, diameter_m: float, density_kgpm3: float,
                 velocity_kms: KilometersPerSecond, angle_deg: float) -> "ImpactInputs":
        return cls(diameter_m, density_kgpm3, kms_to_mps(velocity_kms), angle_deg)

    @property
    def radius_m(self) -> float:
        return max(0.0, 0.5 * self.diameter_m)


@dataclass(frozen=True)
class Target:
    density_kgpm3: float = RHO_TARGET_CRUST
    gravity_mps2: float = G_EARTH


@dataclass(frozen=True)
class ImpactResults:
    mass_kg: float
    kinetic_energy_J: float
    energy_tnt_tons: float
    volcano_equivalent: float          # multiples of Krakatoa
    crater_diameter_km: float
    severe_damage_radius_km: float
    third_degree_burn_radius_km: float
    second_degree_burn_radius_km: float
    noise_damage_radius_km: float
    ozone_depletion_percent: float
    acid_rain_severity: AcidRainSeverity
    climate_impact: ClimateImpact

    @property
    def energy_tnt_kilotons(self) -> float:
        return self.energy_tnt_tons / TONS_PER_KT

    @property
    def energy_tnt_megatons(self) -> float:
        return self.energy_tnt_tons / TONS_PER_MT

    def as_dict(self) -> dict:
        return {
            "mass_kg": self.mass_kg,
            "kinetic_energy_J": self.kinetic_energy_J,
            "energy_tnt_tons": self.energy_tnt_tons,
            "volcano_equivalent": self.volcano_equivalent,
            "crater_diameter_km": self.crater_diameter_km,
            "severe_damage_radius_km": self.severe_damage_radius_km,
            "third_degree_burn_radius_km": self.third_degree_burn_radius_km,
            "second_degree_burn_radius_km": self.second_degree_burn_radius_km,
            "noise_damage_radius_km": self.noise_damage_radius_km,
            "ozone_depletion_percent": self.ozone_depletion_percent,
            "acid_rain_severity": self.acid_rain_severity.value,
            "climate_impact": self.climate_impact.value,
        }


# ---------- Crater scaling ----------
def crater_diameter_m(diameter_m: float, density_kgpm3: float, velocity_mps: MetersPerSecond,
                      angle_deg: float, target: Target = Target()) -> float:
    """
    Final crater diameter (m), point-source scaling:
      D_tc = k1 * g^-mu * (rho_i/rho_t)^(1/3) * r^(1-mu) * v^(2 mu) * sin(theta)^(1/3)
      D_fr = 1.3 * D_tc
    The angle floor of 0.1 deg keeps sin(theta) away from zero.
    """
    theta = radians(clamp(angle_deg, MIN_ANGLE_DEG, MAX_ANGLE_DEG))
    r = max(0.0, diameter_m / 2.0)
    if target.density_kgpm3 == 0.0:
        return 0.0
    transient = (K1_ROCK
                 * _power(target.gravity_mps2, -MU_ROCK)
                 * _power(density_kgpm3 / target.density_kgpm3, 1.0 / 3.0)
                 * _power(r, 1.0 - MU_ROCK)
                 * _power(velocity_mps, 2.0 * MU_ROCK)
                 * _power(sin(theta), 1.0 / 3.0))
    final = transient * CRATER_COLLAPSE_FACTOR
    return final if final > 0.0 else 0.0


# ---------- Yield-scaled damage radii ----------
def burn_radii_km(energy_mt: float, second_coeff: float = SECOND_DEGREE_KM_PER_MT,
                  third_coeff: float = THIRD_DEGREE_KM_PER_MT) -> tuple[float, float]:
    """(third_degree_km, second_degree_km); 2nd-degree is kept outside 3rd-degree."""
    scale = _power(energy_mt, BURN_EXPONENT)
    third = third_coeff * scale
    second = second_coeff * scale
    if second < third:
        second = third * BURN_ORDER_FACTOR
    return third, second


def estimate_ozone_depletion(energy_mt: float) -> float:
    """
    Global ozone depletion (%) from yield in megatons.
    ~5 * W^0.25: 1 Mt -> 5 %, 100 Mt -> ~16 %, >= 1e4 Mt -> 50 % (cap).
    """
    if not isfinite(energy_mt) or energy_mt <= 0.0:
        return 0.0
    return clamp(OZONE_COEFF * _power(energy_mt, 0.25), 0.0, OZONE_CAP_PERCENT)


def classify_acid_rain(kinetic_energy_J: float) -> AcidRainSeverity:
    if kinetic_energy_J >= ACID_RAIN_GLOBAL_J:
        return AcidRainSeverity.SEVERE
    if kinetic_energy_J >= ACID_RAIN_REGIONAL_J:
        return AcidRainSeverity.REGIONAL
    return AcidRainSeverity.LOCALIZED


def classify_climate(energy_mt: float) -> ClimateImpact:
    if energy_mt < CLIMATE_REGIONAL_MT:
        return ClimateImpact.NEGLIGIBLE
    if energy_mt < CLIMATE_GLOBAL_MT:
        return ClimateImpact.REGIONAL_COOLING
    return ClimateImpact.IMPACT_WINTER


class ImpactModel:
    """
    Energetics + crater + blast/thermal/acoustic radii + atmospheric effects.
    Every law is closed form; the yield is computed once and each law reads it
    in the unit its constant was calibrated in (tons, kt or Mt).
    """

    def __init__(self, inputs: ImpactInputs, target: Target = Target()):
        self.p = inputs
        self.t = target

    # ---------- Energetics ----------
    def mass_kg(self) -> float:
        r = self.p.radius_m
        return (4.0 / 3.0) * pi * (r * r * r) * self.p.density_kgpm3

    def kinetic_energy_J(self) -> float:
        v = self.p.velocity_mps
        return 0.5 * self.mass_kg() * (v * v)

    def energy_tnt_tons(self) -> float:
        tons = self.kinetic_energy_J() / J_PER_TON_TNT
        return tons if tons > 0.0 else 0.0

    def energy_kt_tnt(self) -> float:
        return self.energy_tnt_tons() / TONS_PER_KT

    def energy_mt_tnt(self) -> float:
        return self.energy_tnt_tons() / TONS_PER_MT

    def volcano_equivalent(self) -> float:
        return self.energy_mt_tnt() / KRAKATOA_MT

    # ---------- Crater ----------
    def crater_diameter_km(self) -> float:
        return crater_diameter_m(self.p.diameter_m, self.p.density_kgpm3, self.p.velocity_mps,
                                 self.p.angle_deg, target=self.t) / 1000.0

    # ---------- Blast / thermal / acoustic ----------
    def severe_damage_radius_km(self) -> float:
        return SEVERE_BLAST_KM_PER_MT * _power(self.energy_mt_tnt(), 1.0 / 3.0)

    def burn_radii_km(self) -> tuple[float, float]:
        return burn_radii_km(self.energy_mt_tnt())

    def noise_damage_radius_km(self) -> float:
        return NOISE_KM_PER_KT * _power(self.energy_kt_tnt(), 0.25)

    # ---------- Summary ----------
    def results(self) -> ImpactResults:
        E_J = self.kinetic_energy_J()
        E_Mt = self.energy_mt_tnt()
        third, second = self.burn_radii_km()
        return ImpactResults(
            mass_kg=safe(self.mass_kg()),
            kinetic_energy_J=safe(E_J),
            energy_tnt_tons=safe(self.energy_tnt_tons()),
            volcano_equivalent=safe(self.volcano_equivalent()),
            crater_diameter_km=safe(self.crater_diameter_km()),
            severe_damage_radius_km=safe(self.severe_damage_radius_km()),
            third_degree_burn_radius_km=safe(third),
            second_degree_burn_radius_km=safe(second),
            noise_damage_radius_km=safe(self.noise_damage_radius_km()),
            ozone_depletion_percent=clamp(estimate_ozone_depletion(E_Mt), 0.0, 100.0),
            acid_rain_severity=classify_acid_rain(E_J),
            climate_impact=classify_climate(E_Mt),
        )


def evaluate(inputs: ImpactInputs, target: Target = Target()) -> ImpactResults:
    return ImpactModel(inputs, target).results()
