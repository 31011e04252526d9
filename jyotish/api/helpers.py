from __future__ import annotations
from typing import Any, Dict, Optional, Union

from jyotish.core.chart import Ascendant, BirthChart, Body, House
from jyotish.core.dasha import PlanetaryPeriod

# ---- Serialization -----------------------------------------------------------
# Flat camelCase payloads consumed by the mobile client. Datetimes go out as
# ISO-8601 strings with their UTC offset.

def _placement_dict(item: Union[Body, Ascendant]) -> Dict[str, Any]:
    p = item.placement
    return {
        "name": item.name,
        "sign": p.sign,
        "signIndex": p.sign_index,
        "degree": p.degree,
        "longitude": p.longitude,
        "lunarMansion": p.mansion,
        "lunarMansionIndex": p.mansion_index,
        "mansionQuarter": p.quarter,
        "house": item.house,
        "isRetrograde": item.retrograde,
    }

def house_to_dict(h: House) -> Dict[str, Any]:
    return {
        "number": h.number,
        "sign": h.sign,
        "signIndex": h.sign_index,
        "degree": 0.0,
        "longitude": h.cusp_longitude,
    }

def period_to_dict(p: Optional[PlanetaryPeriod]) -> Optional[Dict[str, Any]]:
    if p is None:
        return None
    return {
        "rulingBody": p.ruling_body,
        "startDate": p.start.isoformat(),
        "endDate": p.end.isoformat(),
        "level": p.level,
        "years": p.years,
    }

def chart_to_dict(chart: BirthChart) -> Dict[str, Any]:
    """BirthChart -> JSON-ready dict (top-level fields echo the birth input)."""
    b = chart.birth
    return {
        "id": chart.id,
        "name": b.name,
        "place": b.place,
        "birthDate": b.date.isoformat(),
        "birthTime": b.time.strftime("%H:%M"),
        "latitude": b.latitude,
        "longitude": b.longitude,
        "timezone": b.timezone,
        "ascendant": _placement_dict(chart.ascendant),
        "planets": [_placement_dict(x) for x in chart.bodies],
        "houses": [house_to_dict(h) for h in chart.houses],
        "dashas": [period_to_dict(p) for p in chart.periods],
        "ayanamsa": chart.ayanamsa,
        "ayanamsaName": chart.ayanamsa_model,
        "calculatedAt": chart.calculated_at.isoformat(),
        "meta": {
            "dayCount": chart.day_count,
            "timezoneApplied": chart.timezone_applied,
            "tzOffsetSeconds": chart.tz_offset_seconds,
            "warnings": list(chart.warnings),
        },
    }
