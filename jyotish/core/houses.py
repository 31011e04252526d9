# jyotish/core/houses.py
from __future__ import annotations

"""
Ascendant and Whole-Sign houses.

Ascendant chain (mean quantities only):
    JD → GMST (IAU 1982 polynomial) → LST = GMST + λ_east → ascendant via
    atan2(cos LST, −sin ε·tan φ − cos ε·sin LST), ε from a linear obliquity model.

KNOWN LIMITATION
    tan φ is singular at the geographic poles. The formula is still evaluated
    at |φ| = 90°; `is_polar_singular` lets callers surface that instead of
    silently clamping the latitude.

Whole-Sign rule:
    house(sign) = ((sign − ascSign) mod 12) + 1; house h holds sign (ascSign + h − 1) mod 12.
"""

from typing import Final, List, Tuple
import math

from jyotish.core.constants import J2000_JD, ZODIAC_SIGNS, wrap_deg
from jyotish.core.timescales import julian_centuries

__all__ = [
    "greenwich_mean_sidereal_time",
    "local_sidereal_time",
    "mean_obliquity",
    "tropical_ascendant",
    "is_polar_singular",
    "house_for_sign",
    "whole_sign_houses",
]

POLAR_LATITUDE_DEG: Final[float] = 90.0


# ──────────────────────────────────────────────────────────────────────────────
# Sidereal time / obliquity
# ──────────────────────────────────────────────────────────────────────────────
def greenwich_mean_sidereal_time(jd: float) -> float:
    t = julian_centuries(jd)
    theta = (
        280.46061837
        + 360.98564736629 * (jd - J2000_JD)
        + 0.000387933 * t * t
        - t * t * t / 38710000.0
    )
    return wrap_deg(theta)


def local_sidereal_time(jd: float, longitude_east: float) -> float:
    return wrap_deg(greenwich_mean_sidereal_time(jd) + longitude_east)


def mean_obliquity(jd: float) -> float:
    return 23.4393 - 0.0000004 * (jd - J2000_JD)


# ──────────────────────────────────────────────────────────────────────────────
# Ascendant
# ──────────────────────────────────────────────────────────────────────────────
def is_polar_singular(latitude: float) -> bool:
    return abs(float(latitude)) >= POLAR_LATITUDE_DEG


def tropical_ascendant(jd: float, latitude: float, longitude_east: float) -> float:
    lst = math.radians(local_sidereal_time(jd, longitude_east))
    phi = math.radians(latitude)
    eps = math.radians(mean_obliquity(jd))
    y = math.cos(lst)
    x = -(math.sin(eps) * math.tan(phi)) - math.cos(eps) * math.sin(lst)
    return wrap_deg(math.degrees(math.atan2(y, x)))


# ──────────────────────────────────────────────────────────────────────────────
# Whole-Sign houses
# ──────────────────────────────────────────────────────────────────────────────
def house_for_sign(sign_index: int, ascendant_sign_index: int) -> int:
    return ((sign_index - ascendant_sign_index) % 12 + 12) % 12 + 1


def whole_sign_houses(ascendant_sign_index: int) -> List[Tuple[int, int, str]]:
    """[(house_number, sign_index, sign_name)] for houses 1..12."""
    out: List[Tuple[int, int, str]] = []
    for h in range(1, 13):
        s = (ascendant_sign_index + h - 1) % 12
        out.append((h, s, ZODIAC_SIGNS[s]))
    return out
