# jyotish/core/timescales.py
# -----------------------------------------------------------------------------
# Civil time → continuous day count (Julian Day)
#
# Public API:
#   julian_day(year, month, day, hour=0.0) -> float
#   civil_to_day_count(date_str, time_str, tz_name, *, apply_offset=True) -> DayCount
#
# Guarantees:
#   • Gregorian calendar, Meeus day-count formula (no POSIX timestamp math).
#   • Time zone offset via zoneinfo; DST ambiguity / gap flagged as warnings.
#   • apply_offset=False reproduces the legacy "local clock as UT" behavior.
#   • julian_day() itself never validates: callers pre-validate the date.
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging
import math
import re

from jyotish.core.constants import J2000_JD, DAYS_PER_JULIAN_CENTURY

__all__ = [
    "DayCount",
    "julian_day",
    "julian_centuries",
    "civil_to_day_count",
]

log = logging.getLogger(__name__)

# ───────────────────────────── Dataclass ─────────────────────────────

@dataclass(frozen=True)
class DayCount:
    jd: float
    utc: datetime              # instant fed into the day count (aware, UTC)
    local: datetime            # aware local civil time as given by the caller
    tz_offset_seconds: int
    timezone: str
    offset_applied: bool
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["utc"] = self.utc.isoformat()
        out["local"] = self.local.isoformat()
        out["warnings"] = list(self.warnings)
        return out

# ───────────────────────────── Day count ─────────────────────────────

def julian_day(year: int, month: int, day: int, hour: float = 0.0) -> float:
    """
    Gregorian calendar date + fractional hour → Julian Day.

    January and February are counted as months 13/14 of the previous year
    so the leap day falls at the end of the computational year.
    """
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    return (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + day
        + hour / 24.0
        + b
        - 1524.5
    )


def julian_centuries(jd: float) -> float:
    """Julian centuries since J2000.0."""
    return (jd - J2000_JD) / DAYS_PER_JULIAN_CENTURY

# ───────────────────────────── Parsing helpers ─────────────────────────────

_DATE_RE = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})\s*$")
_TIME_RE = re.compile(r"^\s*(?P<h>\d{1,2}):(?P<m>\d{2})(?::(?P<s>\d{2}))?\s*$")

def _parse_date_str(date_str: str) -> Tuple[int, int, int]:
    m = _DATE_RE.match(date_str or "")
    if not m:
        raise ValueError(f"Invalid date_str '{date_str}': expected YYYY-MM-DD")
    iy, im, iday = int(m.group(1)), int(m.group(2)), int(m.group(3))
    datetime(iy, im, iday)  # existence check
    return iy, im, iday

def _parse_time_str(time_str: str) -> Tuple[int, int, int]:
    m = _TIME_RE.match(time_str or "")
    if not m:
        raise ValueError(f"Invalid time_str '{time_str}': expected HH:MM[:SS]")
    ih, imin, isec = int(m.group("h")), int(m.group("m")), int(m.group("s") or 0)
    if not (0 <= ih <= 23 and 0 <= imin <= 59 and 0 <= isec <= 59):
        raise ValueError(f"Invalid time fields: hh={ih}, mm={imin}, ss={isec}")
    return ih, imin, isec

def _hour_fraction(dt: datetime) -> float:
    return dt.hour + dt.minute / 60.0 + (dt.second + dt.microsecond / 1e6) / 3600.0

# ───────────────────────────── Time zone helpers ─────────────────────────────

def _zone_warnings(z: ZoneInfo, naive_local: datetime) -> Tuple[int, List[str]]:
    """
    Offset seconds for a naive local datetime plus DST warnings.
    fold=0 is preferred when the wall time is ambiguous.
    """
    warnings: List[str] = []
    aware0 = naive_local.replace(tzinfo=z, fold=0)
    off0 = aware0.utcoffset()
    if off0 is None:
        raise ValueError("Timezone returned None utcoffset()")
    off1 = naive_local.replace(tzinfo=z, fold=1).utcoffset()
    if off1 is not None and off1 != off0:
        # Both folds differ either for a repeated hour or for a skipped one.
        roundtrip = aware0.astimezone(timezone.utc).astimezone(z).replace(tzinfo=None)
        warnings.append("dst_nonexistent" if roundtrip != naive_local else "dst_ambiguous")
    return int(off0.total_seconds()), warnings

# ───────────────────────────── Public builder ─────────────────────────────

def civil_to_day_count(
    date_str: str,
    time_str: str,
    tz_name: str = "UTC",
    *,
    apply_offset: bool = True,
) -> DayCount:
    """
    Resolve a local civil date/time in an IANA zone to a DayCount.

    With apply_offset=False the zone is carried for display only and the
    local clock reading is converted as if it were UT.
    """
    iy, im, iday = _parse_date_str(date_str)
    ih, imin, isec = _parse_time_str(time_str)

    try:
        z = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ValueError(f"Unknown IANA time zone '{tz_name}'") from e

    naive_local = datetime(iy, im, iday, ih, imin, isec)
    tz_off_sec, warnings = _zone_warnings(z, naive_local)
    for w in warnings:
        log.warning("%s for %s %s in %s", w, date_str, time_str, tz_name)

    aware_local = naive_local.replace(tzinfo=z, fold=0)
    if apply_offset:
        instant = aware_local.astimezone(timezone.utc)
    else:
        instant = naive_local.replace(tzinfo=timezone.utc)

    jd = julian_day(instant.year, instant.month, instant.day, _hour_fraction(instant))

    return DayCount(
        jd=float(jd),
        utc=instant,
        local=aware_local,
        tz_offset_seconds=tz_off_sec,
        timezone=tz_name,
        offset_applied=bool(apply_offset),
        warnings=tuple(warnings),
    )
