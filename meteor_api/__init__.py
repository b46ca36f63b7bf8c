from .impact_model import (AcidRainSeverity, ClimateImpact, ImpactInputs, ImpactModel, ImpactResults,
                           KilometersPerSecond, MetersPerSecond, Target, evaluate, kms_to_mps)
from .geodesy import GeoLocation, ImpactRing, build_rings, impact_rings, rings_to_feature_collection

__version__ = "1.0.0"
