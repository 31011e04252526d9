# jyotish/core/dasha.py
"""
Vimshottari mahadasha timeline.

The Moon's nakshatra at birth picks the opening lord (nakshatra index mod 9);
the opening period is only the unelapsed share of that lord's years. Full
periods then follow the fixed 9-lord cycle. Each period starts at the exact
instant that ended the previous one, so the timeline has no gaps and no
overlaps.

Offsets are added in UTC and the boundaries are shown in the birth zone, so
a DST change never stretches or shrinks a period.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple
import math

from dateutil.relativedelta import relativedelta

from jyotish.core.constants import (
    DASHA_SEQUENCE,
    MEAN_GREGORIAN_MONTH_D,
    NAKSHATRA_SPAN_DEG,
    wrap_deg,
)
from jyotish.core.zodiac import mansion_index

__all__ = [
    "PlanetaryPeriod",
    "PRIMARY_LEVEL",
    "balance_at_birth",
    "add_years",
    "vimshottari_periods",
    "current_period",
]

PRIMARY_LEVEL = "primary"
DEFAULT_CYCLES = 2
DEFAULT_MAX_PERIODS = 20


@dataclass(frozen=True)
class PlanetaryPeriod:
    ruling_body: str
    start: datetime
    end: datetime
    years: float
    partial: bool = False
    level: str = PRIMARY_LEVEL


def _lord_at(index: int) -> Tuple[str, int]:
    return DASHA_SEQUENCE[index % len(DASHA_SEQUENCE)]


def _utc(dt: datetime) -> datetime:
    # datetimes sharing one tzinfo compare by wall clock, not by instant
    return dt.astimezone(timezone.utc) if dt.tzinfo is not None else dt


def _in_zone(dt: datetime, zone) -> datetime:
    return dt.astimezone(zone) if zone is not None else dt


def balance_at_birth(moon_sidereal_deg: float) -> Tuple[int, float, float]:
    """
    Return (lord_index, fraction_elapsed, remaining_years) for the opening period.
    """
    lon = wrap_deg(moon_sidereal_deg)
    lord_index = mansion_index(lon) % len(DASHA_SEQUENCE)
    fraction_elapsed = (lon % NAKSHATRA_SPAN_DEG) / NAKSHATRA_SPAN_DEG
    _, years = _lord_at(lord_index)
    return lord_index, fraction_elapsed, years * (1.0 - fraction_elapsed)


def add_years(start: datetime, years: float) -> datetime:
    """
    Calendar offset: whole years and months via relativedelta, leftover
    fraction of a month as days of a mean Gregorian month.
    """
    whole_years = int(math.floor(years))
    months = (years - whole_years) * 12.0
    whole_months = int(math.floor(months))
    frac_month = months - whole_months
    end = start + relativedelta(years=whole_years, months=whole_months)
    if frac_month > 1e-9:
        end = end + timedelta(days=frac_month * MEAN_GREGORIAN_MONTH_D)
    return end


def vimshottari_periods(
    moon_sidereal_deg: float,
    birth: datetime,
    *,
    cycles: int = DEFAULT_CYCLES,
    max_periods: Optional[int] = DEFAULT_MAX_PERIODS,
) -> List[PlanetaryPeriod]:
    """
    Opening partial period plus `cycles` full 9-lord cycles, truncated to
    `max_periods` entries (None keeps all).
    """
    lord_index, _, remaining = balance_at_birth(moon_sidereal_deg)
    lord, _ = _lord_at(lord_index)

    zone = birth.tzinfo
    periods: List[PlanetaryPeriod] = []
    cursor = add_years(_utc(birth), remaining)
    shown = _in_zone(cursor, zone)
    periods.append(PlanetaryPeriod(lord, birth, shown, remaining, partial=True))

    for offset in range(1, max(0, cycles) * len(DASHA_SEQUENCE) + 1):
        lord, years = _lord_at(lord_index + offset)
        cursor = add_years(cursor, years)
        start, shown = shown, _in_zone(cursor, zone)
        periods.append(PlanetaryPeriod(lord, start, shown, float(years)))

    if max_periods is not None:
        periods = periods[: max(0, max_periods)]
    return periods


def current_period(periods: Sequence[PlanetaryPeriod], at: datetime) -> Optional[PlanetaryPeriod]:
    """Period whose half-open [start, end) interval contains the instant `at`."""
    at_u = _utc(at)
    for p in periods:
        if _utc(p.start) <= at_u < _utc(p.end):
            return p
    return None
