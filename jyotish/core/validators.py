# jyotish/core/validators.py
from __future__ import annotations

import re
from datetime import datetime, date, time
from typing import Any, Dict, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from jyotish.core.chart import BirthInstant

# ───────────────────────── errors ─────────────────────────

class ValidationError(ValueError):
    """Structured validator error; routes serialize .errors() as the 400 body."""
    def __init__(self, details: Union[str, Dict[str, Any], List[Dict[str, Any]]]):
        if isinstance(details, str):
            self._details = [{"loc": [], "msg": details, "type": "value_error"}]
            super().__init__(details)
        elif isinstance(details, dict):
            self._details = [details]
            super().__init__(details.get("msg", "validation_error"))
        elif isinstance(details, list):
            self._details = details
            super().__init__(self._details[0]["msg"] if self._details else "validation_error")
        else:
            self._details = [{"loc": [], "msg": "validation_error", "type": "value_error"}]
            super().__init__("validation_error")

    def errors(self) -> List[Dict[str, Any]]:
        return list(self._details)


# ───────────────────────── helpers ─────────────────────────

def _err(loc: List[str] | str, msg: str, typ: str = "value_error") -> Dict[str, Any]:
    return {"loc": [loc] if isinstance(loc, str) else loc, "msg": msg, "type": typ}

def _as_float(v: Any) -> Optional[float]:
    if isinstance(v, bool) or v is None:
        return None
    try:
        x = float(v)
    except (TypeError, ValueError):
        return None
    if x != x or x in (float("inf"), float("-inf")):
        return None
    return x

def _validate_iana_tz(tz: str, loc: Optional[List[str]] = None) -> str:
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise ValidationError([{
            "loc": loc or ["timezone"],
            "msg": "must be a valid IANA zone like 'Asia/Kolkata'",
            "type": "value_error",
        }])
    return tz


# ───────────────────────── atomic parsers ─────────────────────────

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^\d{2}:\d{2}$")

# Dasha timelines run ~240 years past birth; keep every date inside datetime range.
MIN_BIRTH_YEAR = 1800
MAX_BIRTH_YEAR = 2400

def parse_date(s: str, loc: str = "birthDate") -> date:
    if not _DATE_RE.match(s or ""):
        raise ValidationError(_err(loc, "Invalid birthDate format. Expected YYYY-MM-DD", "value_error.date"))
    try:
        d = datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(_err(loc, "birthDate is not a valid calendar date", "value_error.date"))
    if not (MIN_BIRTH_YEAR <= d.year <= MAX_BIRTH_YEAR):
        raise ValidationError(_err(
            loc, f"birthDate year must be between {MIN_BIRTH_YEAR} and {MAX_BIRTH_YEAR}", "value_error.date",
        ))
    return d

def parse_time(s: str, loc: str = "birthTime") -> time:
    if not _TIME_RE.match(s or ""):
        raise ValidationError(_err(loc, "Invalid birthTime format. Expected HH:MM", "value_error.time"))
    try:
        return datetime.strptime(s, "%H:%M").time()
    except ValueError:
        raise ValidationError(_err(loc, "birthTime fields out of range", "value_error.time"))

def parse_latlon(lat: Any, lon: Any, lat_key="latitude", lon_key="longitude") -> Tuple[float, float]:
    lat_f = _as_float(lat); lon_f = _as_float(lon)
    if lat_f is None or lon_f is None:
        raise ValidationError(_err([lat_key, lon_key], "latitude/longitude must be finite numbers", "type_error.float"))
    if not (-90.0 <= lat_f <= 90.0):
        raise ValidationError(_err(lat_key, "latitude must be between -90 and 90"))
    if not (-180.0 <= lon_f <= 180.0):
        raise ValidationError(_err(lon_key, "longitude must be between -180 and 180"))
    return float(lat_f), float(lon_f)

def _optional_label(body: Dict[str, Any], key: str) -> Optional[str]:
    v = body.get(key)
    if v is None:
        return None
    if not isinstance(v, str):
        raise ValidationError(_err(key, "must be a string", "type_error.str"))
    return v.strip() or None


# ───────────────────────── chart request ─────────────────────────

REQUIRED_FIELDS = ("birthDate", "birthTime", "latitude", "longitude")

def parse_birth_payload(body: Any) -> BirthInstant:
    """
    Validate a chart request and return the engine's BirthInstant.

    - birthDate 'YYYY-MM-DD', birthTime 'HH:MM' (24 h) are required strings.
    - latitude/longitude are required, finite and in range (poles allowed).
    - timezone is optional (defaults to 'UTC') and must be an IANA zone.
    - name/place are optional display labels.
    All missing required fields are reported together.
    """
    if not isinstance(body, dict):
        raise ValidationError("payload must be an object")

    missing = [k for k in REQUIRED_FIELDS if body.get(k) is None or body.get(k) == ""]
    if missing:
        raise ValidationError([_err(k, "field required", "value_error.missing") for k in missing])

    date_s = body.get("birthDate")
    time_s = body.get("birthTime")
    if not isinstance(date_s, str):
        raise ValidationError(_err("birthDate", "required string", "type_error.str"))
    if not isinstance(time_s, str):
        raise ValidationError(_err("birthTime", "required string", "type_error.str"))

    d = parse_date(date_s.strip())
    t = parse_time(time_s.strip())
    lat, lon = parse_latlon(body.get("latitude"), body.get("longitude"))

    tz = body.get("timezone") or "UTC"
    if not isinstance(tz, str) or not tz.strip():
        raise ValidationError(_err("timezone", "must be a string (IANA)", "type_error.str"))
    tz = _validate_iana_tz(tz.strip(), ["timezone"])

    return BirthInstant(
        date=d,
        time=t,
        latitude=lat,
        longitude=lon,
        timezone=tz,
        name=_optional_label(body, "name"),
        place=_optional_label(body, "place"),
    )
