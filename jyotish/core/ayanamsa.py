# jyotish/core/ayanamsa.py
from __future__ import annotations

"""
Ayanamsa (precession) model and tropical → sidereal conversion.

Linear Lahiri approximation: a fixed base angle at the 1900 reference epoch
plus a constant 50.29″/yr precession rate. Strictly increasing in JD.
"""

from jyotish.core.constants import J1900_JD, DAYS_PER_JULIAN_YEAR, wrap_deg

__all__ = ["AYANAMSA_MODEL", "lahiri_ayanamsa", "to_sidereal"]

AYANAMSA_MODEL: str = "Lahiri"

_BASE_DEG: float = 23.0 + 51.0 / 60.0 + 26.5 / 3600.0   # 23°51′26.5″ at J1900_JD
_RATE_DEG_PER_YEAR: float = 50.29 / 3600.0


def lahiri_ayanamsa(jd: float) -> float:
    years_since_epoch = (jd - J1900_JD) / DAYS_PER_JULIAN_YEAR
    return _BASE_DEG + _RATE_DEG_PER_YEAR * years_since_epoch


def to_sidereal(tropical_deg: float, ayanamsa_deg: float) -> float:
    """Tropical longitude minus ayanamsa, wrapped to [0, 360)."""
    return wrap_deg(tropical_deg - ayanamsa_deg)
