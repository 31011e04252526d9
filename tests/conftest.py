# tests/conftest.py
from __future__ import annotations

"""
Pytest configuration for the jyotish engine suite.

- Registers Hypothesis profiles for local dev and CI.
- Freezes the process TZ to UTC (we always pass IANA zones explicitly).
- Provides a fresh Flask app per test so the chart store starts empty.
- Sanity-checks ERFA availability for the calendar cross-checks.
"""

import os
import pytest
from hypothesis import settings, HealthCheck


# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
settings.register_profile(
    "dev",
    settings(
        deadline=None,           # avoid flaky timeouts on slower runners
        max_examples=60,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=200,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# ──────────────────────────────────────────────────────────────────────────────
# Global fixtures
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session", autouse=True)
def freeze_tz_env():
    prev = os.environ.get("TZ")
    os.environ["TZ"] = "UTC"
    try:
        yield
    finally:
        if prev is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = prev


@pytest.fixture(scope="session")
def ensure_erfa():
    """Fail early if pyERFA isn't importable or lacks cal2jd."""
    import erfa  # pyERFA exposes the ERFA namespace as 'erfa'
    assert hasattr(erfa, "cal2jd"), "ERFA.cal2jd not available"
    return erfa


@pytest.fixture()
def app(monkeypatch):
    for var in ("ASTRO_CONFIG", "ASTRO_APPLY_TZ_OFFSET", "ASTRO_DASHA_CYCLES",
                "ASTRO_DASHA_MAX_PERIODS", "ASTRO_CHART_STORE_CAPACITY"):
        monkeypatch.delenv(var, raising=False)
    from jyotish.main import create_app
    application = create_app()
    application.testing = True
    return application


@pytest.fixture()
def client(app):
    return app.test_client()
