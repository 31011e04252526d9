# -*- coding: utf-8 -*-
"""
Closed-form body positions (tropical, ecliptic-of-date, geocentric).

Models
------
- Sun: mean longitude + 3-term equation of center.
- Moon: mean longitude + 6 principal periodic terms (D, M, M′, F).
- Mercury..Saturn: linear mean motion only (no eccentricity, no perturbations).
- Rahu: mean node with constant regression; Ketu = Rahu + 180°.

Retrograde flags for the five planets are an elongation heuristic, not the
sign of a velocity: inner bodies within 30° of the Sun, outer bodies in the
150°–210° band around opposition. Near those band edges the flag can
disagree with true stations. Nodes are always flagged retrograde.

Public API:
    sun_longitude(jd), moon_longitude(jd), planet_longitude(name, jd),
    rahu_longitude(jd), ketu_longitude(jd)   -> BodyLongitude
    body_longitude(name, jd)                 -> BodyLongitude
    all_body_longitudes(jd)                  -> Dict[str, BodyLongitude]
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple
import math

from jyotish.core.constants import (
    BODIES,
    INNER_BODIES,
    OUTER_BODIES,
    J2000_JD,
    wrap_deg,
)
from jyotish.core.timescales import julian_centuries

__all__ = [
    "BodyLongitude",
    "PLANET_ELEMENTS",
    "sun_longitude",
    "moon_longitude",
    "planet_longitude",
    "rahu_longitude",
    "ketu_longitude",
    "body_longitude",
    "all_body_longitudes",
]


@dataclass(frozen=True)
class BodyLongitude:
    longitude: float      # tropical, [0, 360)
    retrograde: bool = False


# ───────────────────────────── Sun ─────────────────────────────
def sun_longitude(jd: float) -> BodyLongitude:
    t = julian_centuries(jd)
    l0 = wrap_deg(280.46646 + 36000.76983 * t + 0.0003032 * t * t)
    m = math.radians(wrap_deg(357.52911 + 35999.05029 * t - 0.0001537 * t * t))
    c = (
        (1.914602 - 0.004817 * t - 0.000014 * t * t) * math.sin(m)
        + (0.019993 - 0.000101 * t) * math.sin(2.0 * m)
        + 0.000289 * math.sin(3.0 * m)
    )
    return BodyLongitude(wrap_deg(l0 + c), False)


# ───────────────────────────── Moon ─────────────────────────────
def moon_longitude(jd: float) -> BodyLongitude:
    t = julian_centuries(jd)
    lm = wrap_deg(218.3165 + 481267.8813 * t)
    d = math.radians(wrap_deg(297.8502 + 445267.1115 * t))     # elongation from Sun
    ms = math.radians(wrap_deg(357.5291 + 35999.0503 * t))     # Sun's mean anomaly
    mm = math.radians(wrap_deg(134.9634 + 477198.8675 * t))    # Moon's mean anomaly
    f = math.radians(wrap_deg(93.2721 + 483202.0175 * t))      # argument of latitude
    correction = (
        6.289 * math.sin(mm)
        + 1.274 * math.sin(2.0 * d - mm)
        + 0.658 * math.sin(2.0 * d)
        + 0.214 * math.sin(2.0 * mm)
        - 0.186 * math.sin(ms)
        - 0.114 * math.sin(2.0 * f)
    )
    return BodyLongitude(wrap_deg(lm + correction), False)


# ───────────────────────────── Planets ─────────────────────────────
# (mean longitude at J2000 [deg], rate [deg / Julian century])
PLANET_ELEMENTS: Dict[str, Tuple[float, float]] = {
    "Mercury": (252.2509, 149472.6746),
    "Venus": (181.9798, 58517.8157),
    "Mars": (355.4330, 19140.2993),
    "Jupiter": (34.3515, 3034.9057),
    "Saturn": (50.0774, 1222.1138),
}


def _retrograde_by_elongation(name: str, lon: float, sun_lon: float) -> bool:
    elongation = abs(lon - sun_lon)
    if name in INNER_BODIES:
        return elongation < 30.0 or elongation > 330.0
    if name in OUTER_BODIES:
        return 150.0 < elongation < 210.0
    return False


def planet_longitude(name: str, jd: float) -> BodyLongitude:
    try:
        l0, rate = PLANET_ELEMENTS[name]
    except KeyError:
        raise ValueError(f"no mean-motion model for body '{name}'") from None
    lon = wrap_deg(l0 + rate * julian_centuries(jd))
    sun = sun_longitude(jd).longitude
    return BodyLongitude(lon, _retrograde_by_elongation(name, lon, sun))


# ───────────────────────────── Lunar nodes ─────────────────────────────
_NODE_J2000_DEG = 125.04
_NODE_RATE_DEG_PER_DAY = -0.0529539


def rahu_longitude(jd: float) -> BodyLongitude:
    return BodyLongitude(wrap_deg(_NODE_J2000_DEG + (jd - J2000_JD) * _NODE_RATE_DEG_PER_DAY), True)


def ketu_longitude(jd: float) -> BodyLongitude:
    return BodyLongitude(wrap_deg(rahu_longitude(jd).longitude + 180.0), True)


# ───────────────────────────── Dispatch ─────────────────────────────
_MODELS: Dict[str, Callable[[float], BodyLongitude]] = {
    "Sun": sun_longitude,
    "Moon": moon_longitude,
    "Rahu": rahu_longitude,
    "Ketu": ketu_longitude,
}


def body_longitude(name: str, jd: float) -> BodyLongitude:
    fn = _MODELS.get(name)
    if fn is not None:
        return fn(jd)
    return planet_longitude(name, jd)


def all_body_longitudes(jd: float) -> Dict[str, BodyLongitude]:
    """All nine bodies, keyed by name, in canonical chart order."""
    return {name: body_longitude(name, jd) for name in BODIES}
