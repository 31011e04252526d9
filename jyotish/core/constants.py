# jyotish/core/constants.py
# -*- coding: utf-8 -*-
"""
Jyotish engine: core constants & small helpers

Purpose
-------
Single source of truth for:
- body names & canonical chart order
- zodiac sign and nakshatra tables
- Vimshottari dasha sequence (lord, years)
- epoch / time constants
- angle wrap helper

Design
------
- Pure-Python, no external dependencies.
- Safe to import from any core module.
- Tables are tuples: immutable, indexable modulo their length.
"""

from __future__ import annotations
from typing import Tuple
import math

__all__ = [
    # bodies
    "BODIES", "INNER_BODIES", "OUTER_BODIES", "ASCENDANT_NAME",
    # zodiac
    "ZODIAC_SIGNS", "NAKSHATRAS", "SIGN_SPAN_DEG", "NAKSHATRA_SPAN_DEG", "QUARTER_SPAN_DEG",
    # dasha
    "DASHA_SEQUENCE", "DASHA_TOTAL_YEARS",
    # time constants
    "J2000_JD", "J1900_JD", "DAYS_PER_JULIAN_CENTURY", "DAYS_PER_JULIAN_YEAR",
    "MEAN_GREGORIAN_MONTH_D",
    # helpers
    "wrap_deg",
]

# ── canonical bodies ─────────────────────────────────────────────────────────
# Order matches the chart payload consumed by the mobile client.
BODIES: Tuple[str, ...] = (
    "Sun", "Moon", "Mars", "Mercury", "Jupiter",
    "Venus", "Saturn", "Rahu", "Ketu",
)

INNER_BODIES: Tuple[str, ...] = ("Mercury", "Venus")
OUTER_BODIES: Tuple[str, ...] = ("Mars", "Jupiter", "Saturn")

# Label of the rising-degree pseudo-body. Not a member of BODIES.
ASCENDANT_NAME: str = "Ascendant"

# ── zodiac / nakshatra tables ────────────────────────────────────────────────
ZODIAC_SIGNS: Tuple[str, ...] = (
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
)

NAKSHATRAS: Tuple[str, ...] = (
    "Ashwini", "Bharani", "Krittika", "Rohini", "Mrigashira", "Ardra",
    "Punarvasu", "Pushya", "Ashlesha", "Magha", "Purva Phalguni", "Uttara Phalguni",
    "Hasta", "Chitra", "Swati", "Vishakha", "Anuradha", "Jyeshtha",
    "Mula", "Purva Ashadha", "Uttara Ashadha", "Shravana", "Dhanishta", "Shatabhisha",
    "Purva Bhadrapada", "Uttara Bhadrapada", "Revati",
)

SIGN_SPAN_DEG: float = 30.0
NAKSHATRA_SPAN_DEG: float = 360.0 / 27.0     # 13°20′
QUARTER_SPAN_DEG: float = NAKSHATRA_SPAN_DEG / 4.0  # pada, 3°20′

# ── Vimshottari dasha ────────────────────────────────────────────────────────
# Index i rules nakshatras i, i+9, i+18.
DASHA_SEQUENCE: Tuple[Tuple[str, int], ...] = (
    ("Ketu", 7),
    ("Venus", 20),
    ("Sun", 6),
    ("Moon", 10),
    ("Mars", 7),
    ("Rahu", 18),
    ("Jupiter", 16),
    ("Saturn", 19),
    ("Mercury", 17),
)
DASHA_TOTAL_YEARS: int = 120

# ── epochs & time constants ──────────────────────────────────────────────────
J2000_JD: float = 2451545.0
J1900_JD: float = 2415020.5          # ayanamsa reference epoch
DAYS_PER_JULIAN_CENTURY: float = 36525.0
DAYS_PER_JULIAN_YEAR: float = 365.25
MEAN_GREGORIAN_MONTH_D: float = 365.2425 / 12.0

# ── angle helper ───────────────────────────────────────────────────────────
def wrap_deg(x: float) -> float:
    """
    Wrap any angle to [0, 360).

    fmod keeps the remainder exact; the final guard catches tiny negatives
    that round up to 360.0 after the shift.
    """
    x = math.fmod(float(x), 360.0)
    if x < 0.0:
        x += 360.0
    return 0.0 if x >= 360.0 else x

# Guard at import to catch accidental table edits early
if sum(y for _, y in DASHA_SEQUENCE) != DASHA_TOTAL_YEARS:
    raise RuntimeError("DASHA_SEQUENCE must sum to DASHA_TOTAL_YEARS")
