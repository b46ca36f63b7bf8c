"""Display helpers for result values (numbers are rendered, never re-parsed)."""
from __future__ import annotations
import math

from .impact_model import clamp

__all__ = ["clamp", "round_to", "pretty_number", "format_scientific_with_label"]

_SCALES = (
    (1e21, "sextillion"),
    (1e18, "quintillion"),
    (1e15, "quadrillion"),
    (1e12, "trillion"),
    (1e9, "billion"),
    (1e6, "million"),
)


def round_to(n: float, places: int = 0) -> float:
    """Half-up rounding to 'places' decimals (round() would round half to even). NaN/inf pass through."""
    if not math.isfinite(n):
        return n
    p = 10 ** places
    return math.floor(n * p + 0.5) / p


def _grouped(n: float, max_decimals: int) -> str:
    s = f"{n:,.{max_decimals}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def pretty_number(n: float) -> str:
    return _grouped(n, 0)


def format_scientific_with_label(n: float, digits: int = 2) -> str:
    """'7.51e+13 (75.1 trillion)'; '—' for NaN/inf; no label below one million."""
    if not math.isfinite(n):
        return "—"
    scientific = f"{n:.{digits}e}"
    abs_value = abs(n)
    for value, label in _SCALES:
        if abs_value >= value:
            scaled = n / value
            decimals = 0 if scaled >= 100 else 1 if scaled >= 10 else 2
            return f"{scientific} ({_grouped(scaled, decimals)} {label})"
    return scientific
