# jyotish/utils/metrics.py
from __future__ import annotations

from typing import Final

from prometheus_client import Counter, Gauge, Histogram

# Names are scraped by dashboards; keep them stable.
MET_REQUESTS: Final = Counter("jyotish_api_requests_total", "API requests", ["route"])
REQ_LATENCY: Final = Histogram("jyotish_request_seconds", "API request latency", ["route"])
MET_CHARTS: Final = Counter("jyotish_charts_total", "Chart computations by outcome", ["result"])
GAUGE_APP_UP: Final = Gauge("jyotish_app_up", "1 if app is running")

CHART_RESULTS = ("ok", "invalid", "error")


def seed(routes) -> None:
    """Touch every label combination so series exist before the first scrape."""
    for route in routes:
        MET_REQUESTS.labels(route=route).inc(0)
        REQ_LATENCY.labels(route=route)
    for result in CHART_RESULTS:
        MET_CHARTS.labels(result=result).inc(0)
    GAUGE_APP_UP.set(1.0)
