# jyotish/api/routes.py
"""
Jyotish API routes
- Ops: /api/health, /api/config
- Charts: generate, test calculation, lookup by id (+ running Dasha at a date)

Charts are kept in the per-app ChartStore (app.extensions["chart_store"]);
the engine itself holds no state.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date, datetime, time, timezone
from typing import Any, Dict
from zoneinfo import ZoneInfo

from flask import Blueprint, current_app, jsonify, request

from jyotish.api.helpers import chart_to_dict, period_to_dict
from jyotish.core.chart import BirthChart, BirthInstant, EngineSettings, compute_birth_chart
from jyotish.core.dasha import current_period
from jyotish.core.validators import ValidationError, parse_birth_payload
from jyotish.utils.cache import ChartStore
from jyotish.utils.metrics import MET_CHARTS
from jyotish.version import VERSION

log = logging.getLogger(__name__)
api = Blueprint("api", __name__)

TEST_BIRTH = BirthInstant(
    date=date(2000, 1, 1),
    time=time(12, 0),
    latitude=40.7128,
    longitude=-74.0060,
    timezone="America/New_York",
)


# ───────────────────────── helpers ─────────────────────────
def _json_error(code: str, details: Any = None, http: int = 400):
    out: Dict[str, Any] = {"ok": False, "error": code}
    if details is not None:
        out["details"] = details
    return jsonify(out), http


def _settings() -> EngineSettings:
    return current_app.extensions["engine_settings"]


def _store() -> ChartStore:
    return current_app.extensions["chart_store"]


def _compute(birth: BirthInstant) -> BirthChart:
    try:
        chart = compute_birth_chart(birth, _settings())
    except Exception:
        MET_CHARTS.labels(result="error").inc()
        raise
    MET_CHARTS.labels(result="ok").inc()
    for w in chart.warnings:
        log.warning("chart %s: %s", chart.id, w)
    return chart


def _parse_at(raw: str, tz_name: str) -> datetime:
    """ISO date or datetime; naive values are read in the chart's own zone."""
    try:
        at = datetime.fromisoformat(raw.strip())
    except ValueError:
        raise ValidationError([{
            "loc": ["at"],
            "msg": "must be an ISO-8601 date or datetime",
            "type": "value_error.datetime",
        }])
    if at.tzinfo is None:
        at = at.replace(tzinfo=ZoneInfo(tz_name))
    try:
        at.astimezone(timezone.utc)
    except OverflowError:
        raise ValidationError([{
            "loc": ["at"],
            "msg": "datetime is out of range",
            "type": "value_error.datetime",
        }])
    return at


# ───────────────────────── health / ops ─────────────────────────
@api.get("/api/health")
def health():
    return jsonify({"ok": True, "status": "up", "version": VERSION}), 200


@api.get("/api/config")
def config_info():
    cfg = getattr(current_app, "cfg", {}) or {}
    return jsonify(
        {
            "ok": True,
            "mode": cfg.get("mode"),
            "ayanamsa": cfg.get("ayanamsa"),
            "house_system": cfg.get("house_system"),
            "engine": asdict(_settings()),
            "chart_store": {"capacity": _store().capacity, "size": len(_store())},
            "version": VERSION,
        }
    ), 200


# ───────────────────────── charts ─────────────────────────
@api.post("/api/chart/generate")
def generate_chart():
    body = request.get_json(silent=True)
    try:
        birth = parse_birth_payload(body)
    except ValidationError as e:
        MET_CHARTS.labels(result="invalid").inc()
        return _json_error("validation_error", e.errors(), 400)

    chart = _compute(birth)
    _store().set(chart.id, chart)
    log.info("chart %s generated (%s %s %s)", chart.id, birth.date, birth.time, birth.timezone)
    return jsonify({"success": True, "chart": chart_to_dict(chart)}), 200


@api.get("/api/chart/test/calculate")
def test_calculate():
    chart = _compute(TEST_BIRTH)
    return jsonify({
        "success": True,
        "message": "Test calculation for Jan 1, 2000, 12:00 PM, New York",
        "chart": chart_to_dict(chart),
    }), 200


@api.get("/api/chart/<chart_id>")
def get_chart(chart_id: str):
    chart = _store().get(chart_id)
    if chart is None:
        return _json_error("chart_not_found", {"id": chart_id}, 404)

    out = {"success": True, "chart": chart_to_dict(chart)}
    raw_at = request.args.get("at")
    if raw_at:
        try:
            at = _parse_at(raw_at, chart.birth.timezone)
        except ValidationError as e:
            return _json_error("validation_error", e.errors(), 400)
        out["currentDasha"] = period_to_dict(current_period(chart.periods, at))
    return jsonify(out), 200
