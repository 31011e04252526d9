# tests/test_endpoints.py
from __future__ import annotations

import base64

import pytest

sample = {
    "name": "Asha",
    "birthDate": "1992-11-04",
    "birthTime": "05:25",
    "place": "Chennai",
    "latitude": 13.0827,
    "longitude": 80.2707,
    "timezone": "Asia/Kolkata",
}

PLACEMENT_KEYS = {
    "name", "sign", "signIndex", "degree", "longitude", "lunarMansion",
    "lunarMansionIndex", "mansionQuarter", "house", "isRetrograde",
}


def test_health(client):
    rv = client.get("/api/health")
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["ok"] is True
    assert data["status"] == "up"
    assert "version" in data


def test_root_health_routes(client):
    assert client.get("/health").get_json()["status"] == "ok"
    assert client.get("/").get_json()["service"] == "jyotish"


def test_config(client):
    rv = client.get("/api/config")
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["ayanamsa"] == "lahiri"
    assert data["engine"] == {"apply_timezone_offset": True, "dasha_cycles": 2, "dasha_max_periods": 20}
    assert data["chart_store"]["size"] == 0


def test_generate_and_fetch(client):
    rv = client.post("/api/chart/generate", json=sample)
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["success"] is True
    chart = data["chart"]

    assert chart["name"] == "Asha" and chart["place"] == "Chennai"
    assert chart["birthDate"] == "1992-11-04" and chart["birthTime"] == "05:25"
    assert chart["timezone"] == "Asia/Kolkata"
    assert chart["ayanamsaName"] == "Lahiri"
    assert set(chart["ascendant"]) == PLACEMENT_KEYS
    assert chart["ascendant"]["name"] == "Ascendant"
    assert chart["ascendant"]["house"] == 1
    assert [p["name"] for p in chart["planets"]] == [
        "Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn", "Rahu", "Ketu",
    ]
    for p in chart["planets"]:
        assert set(p) == PLACEMENT_KEYS
        assert 0.0 <= p["longitude"] < 360.0
        assert 1 <= p["house"] <= 12
    assert len(chart["houses"]) == 12
    assert chart["houses"][0]["sign"] == chart["ascendant"]["sign"]
    assert len(chart["dashas"]) == 19
    for a, b in zip(chart["dashas"], chart["dashas"][1:]):
        assert a["endDate"] == b["startDate"]
    assert chart["meta"]["timezoneApplied"] is True
    assert chart["meta"]["tzOffsetSeconds"] == 19800

    rv2 = client.get(f"/api/chart/{chart['id']}")
    assert rv2.status_code == 200
    assert rv2.get_json()["chart"] == chart


def test_fetch_with_running_dasha(client):
    chart = client.post("/api/chart/generate", json=sample).get_json()["chart"]
    second = chart["dashas"][1]
    rv = client.get(f"/api/chart/{chart['id']}", query_string={"at": second["startDate"]})
    assert rv.status_code == 200
    assert rv.get_json()["currentDasha"] == second

    before_birth = client.get(f"/api/chart/{chart['id']}", query_string={"at": "1900-01-01"})
    assert before_birth.get_json()["currentDasha"] is None


def test_fetch_with_bad_at(client):
    chart = client.post("/api/chart/generate", json=sample).get_json()["chart"]
    rv = client.get(f"/api/chart/{chart['id']}", query_string={"at": "soon"})
    assert rv.status_code == 400
    assert rv.get_json()["details"][0]["loc"] == ["at"]


def test_fetch_with_out_of_range_at(client):
    chart = client.post("/api/chart/generate", json=sample).get_json()["chart"]
    rv = client.get(f"/api/chart/{chart['id']}", query_string={"at": "0001-01-01"})
    assert rv.status_code == 400
    assert rv.get_json()["details"][0]["loc"] == ["at"]


def test_unknown_chart_is_404(client):
    rv = client.get("/api/chart/does-not-exist")
    assert rv.status_code == 404
    data = rv.get_json()
    assert data["ok"] is False
    assert data["error"] == "chart_not_found"


def test_charts_are_per_app(app):
    from jyotish.main import create_app
    chart_id = app.test_client().post("/api/chart/generate", json=sample).get_json()["chart"]["id"]
    other = create_app().test_client()
    assert other.get(f"/api/chart/{chart_id}").status_code == 404


@pytest.mark.parametrize("patch,loc", [
    ({"birthDate": "04-11-1992"}, ["birthDate"]),
    ({"birthTime": "5:25 AM"}, ["birthTime"]),
    ({"latitude": 123.0}, ["latitude"]),
    ({"timezone": "Nowhere/Special"}, ["timezone"]),
    ({"timezone": "A" * 400}, ["timezone"]),
    ({"birthDate": "9900-01-01"}, ["birthDate"]),
    ({"birthDate": "0001-01-01", "birthTime": "00:00"}, ["birthDate"]),
])
def test_generate_validation_errors(client, patch, loc):
    rv = client.post("/api/chart/generate", json={**sample, **patch})
    assert rv.status_code == 400
    data = rv.get_json()
    assert data["ok"] is False
    assert data["error"] == "validation_error"
    assert data["details"][0]["loc"] == loc


def test_generate_missing_fields(client):
    rv = client.post("/api/chart/generate", json={"name": "x"})
    assert rv.status_code == 400
    assert len(rv.get_json()["details"]) == 4


def test_generate_non_json_body(client):
    rv = client.post("/api/chart/generate", data="not json", content_type="text/plain")
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "validation_error"


def test_test_calculate_is_new_york(client):
    rv = client.get("/api/chart/test/calculate")
    assert rv.status_code == 200
    chart = rv.get_json()["chart"]
    assert chart["timezone"] == "America/New_York"
    assert chart["ascendant"]["sign"] == "Pisces"
    assert chart["meta"]["dayCount"] == pytest.approx(2451545.2083333335, abs=1e-9)
    assert chart["dashas"][0]["rulingBody"] == "Jupiter"


def test_unknown_route_is_json_404(client):
    rv = client.get("/api/nope")
    assert rv.status_code == 404
    assert rv.get_json()["error"] == "http_error"


def test_metrics_requires_basic_auth(client, monkeypatch):
    monkeypatch.setenv("METRICS_USER", "prom")
    monkeypatch.setenv("METRICS_PASS", "s3cret")
    assert client.get("/metrics").status_code == 401

    client.post("/api/chart/generate", json=sample)
    token = base64.b64encode(b"prom:s3cret").decode()
    rv = client.get("/metrics", headers={"Authorization": f"Basic {token}"})
    assert rv.status_code == 200
    body = rv.get_data(as_text=True)
    assert "jyotish_charts_total" in body
    assert 'jyotish_api_requests_total{route="/api/chart/generate"}' in body
