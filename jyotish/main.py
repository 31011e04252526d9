# jyotish/main.py
from __future__ import annotations

import logging
import os
import traceback
from time import perf_counter

from flask import Flask, Response, g, jsonify, request
from flask_cors import CORS
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from jyotish.api.routes import api as api_bp
from jyotish.utils.cache import ChartStore
from jyotish.utils.config import engine_settings, load_config
from jyotish.utils.metrics import GAUGE_APP_UP, MET_REQUESTS, REQ_LATENCY, seed
from jyotish.version import VERSION

SEEDED_ROUTES = (
    "/", "/health", "/metrics",
    "/api/health", "/api/config",
    "/api/chart/generate", "/api/chart/test/calculate", "/api/chart/<chart_id>",
)

# ───────────────────────── helpers: logging & errors ─────────────────────────
def _configure_logging(app: Flask) -> None:
    gerr = logging.getLogger("gunicorn.error")
    if gerr.handlers:
        app.logger.handlers = gerr.handlers
        app.logger.setLevel(gerr.level)
        logging.getLogger("jyotish").handlers = gerr.handlers
        logging.getLogger("jyotish").setLevel(gerr.level)
    else:
        logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

def _register_errors(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        app.logger.warning("HTTP %s at %s %s: %s", e.code, request.method, request.path, e.description)
        return jsonify(
            ok=False,
            error="http_error",
            code=e.code,
            name=e.name,
            message=e.description,
            path=request.path,
        ), e.code

    @app.errorhandler(Exception)
    def _any(e: Exception):
        tb = traceback.format_exc()
        app.logger.error("UNHANDLED %s at %s %s\n%s", type(e).__name__, request.method, request.path, tb)
        return jsonify(
            ok=False,
            error="internal_error",
            type=type(e).__name__,
            message=str(e),
            path=request.path,
        ), 500

# ───────────────────────── health & metrics ─────────────────────────
def _register_health(app: Flask) -> None:
    @app.route("/", methods=["GET"])
    def root():
        return jsonify(ok=True, service="jyotish", health="/health"), 200

    @app.route("/health", methods=["GET"])
    @app.route("/healthz", methods=["GET"])
    def health():
        return jsonify(ok=True, status="ok"), 200

def _metrics_auth_ok() -> bool:
    auth = request.authorization
    user = os.getenv("METRICS_USER", "")
    pw = os.getenv("METRICS_PASS", "")
    return bool(
        auth and auth.type == "basic" and auth.username == user and auth.password == pw and user and pw
    )

def _register_metrics(app: Flask) -> None:
    @app.before_request
    def _before():
        g.t0 = perf_counter()

    @app.after_request
    def _after(resp):
        # label by URL rule so chart ids don't explode cardinality
        rule = request.url_rule.rule if request.url_rule is not None else None
        if rule in SEEDED_ROUTES:
            MET_REQUESTS.labels(route=rule).inc()
            if "t0" in g:
                REQ_LATENCY.labels(route=rule).observe(perf_counter() - g.t0)
        return resp

    # /metrics (Basic Auth)
    @app.route("/metrics", methods=["GET"])
    def metrics_endpoint():
        if not _metrics_auth_ok():
            return Response("Unauthorized", 401, {"WWW-Authenticate": 'Basic realm="metrics"'})
        GAUGE_APP_UP.set(1.0)
        return Response(generate_latest(REGISTRY), mimetype=CONTENT_TYPE_LATEST)

# ───────────────────────── app factory ─────────────────────────
def create_app(config_path: str | None = None) -> Flask:
    app = Flask(__name__)
    app.json.sort_keys = False
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore

    _configure_logging(app)

    app.cfg = load_config(config_path)  # type: ignore[attr-defined]
    app.extensions["engine_settings"] = engine_settings(app.cfg)  # type: ignore[attr-defined]
    app.extensions["chart_store"] = ChartStore(int(app.cfg.chart_store.capacity))  # type: ignore[attr-defined]

    seed(SEEDED_ROUTES)

    _register_health(app)
    _register_errors(app)
    _register_metrics(app)
    app.register_blueprint(api_bp)

    app.logger.info(
        "App initialized; version=%s settings=%s",
        VERSION, app.extensions["engine_settings"],
    )
    return app

# ───────────────────────── app instance ─────────────────────────
app = create_app()

# CORS for browser UIs
_allowed_origin = os.environ.get("CORS_ALLOW_ORIGIN") or "*"
CORS(
    app,
    resources={r"/.*": {"origins": _allowed_origin}},
    supports_credentials=False,
    methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=600,
)

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
