# panchang/main.py
from __future__ import annotations

import logging
import os
import traceback
from time import perf_counter

import yaml
from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from panchang.api.routes import api as _routes_bp
from panchang.core.ephemeris_adapter import default_backend
from panchang.core.errors import EphemerisError, PanchangError
from panchang.core.timescales import J2000_JD
from panchang.utils.config import config_path, load_config
from panchang.utils.metrics import GAUGE_APP_UP, MET_REQUESTS, MET_WARNINGS, REQ_LATENCY
from panchang.version import VERSION

_TRACKED_PATHS = ("/", "/health", "/healthz", "/metrics")


# ───────────────────────── helpers: logging & errors ─────────────────────────
def _configure_logging(app: Flask) -> None:
    gerr = logging.getLogger("gunicorn.error")
    if gerr.handlers:
        app.logger.handlers = gerr.handlers
        app.logger.setLevel(gerr.level)
        logging.getLogger("panchang").setLevel(gerr.level)
    else:
        logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))


def _register_errors(app: Flask) -> None:
    @app.errorhandler(PanchangError)
    def _invalid(e: PanchangError):
        app.logger.info("rejected %s %s: %s", request.method, request.path, e)
        return jsonify(ok=False, error=e.code, message=e.message, path=request.path), 400

    @app.errorhandler(EphemerisError)
    def _ephem(e: EphemerisError):
        app.logger.error("ephemeris %s error at %s %s: %s", e.stage, request.method, request.path, e.message)
        return jsonify(
            ok=False,
            error=f"ephemeris_{e.stage}",
            message=e.message,
            context=e.context,
            path=request.path,
        ), 503

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
        return jsonify(ok=True, service="panchang", version=VERSION, health="/health"), 200

    @app.route("/health", methods=["GET"])
    @app.route("/healthz", methods=["GET"])
    def health():
        # a misconfigured PANCHANG_BACKEND raises EphemerisError → 503
        backend = default_backend()
        ready = backend.position(J2000_JD, "Sun") is not None
        return jsonify(
            ok=True,
            status="ok" if ready else "degraded",
            backend=backend.name,
            backend_ready=ready,
        ), 200


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
        p = request.path or ""
        if p.startswith("/api/") or p in _TRACKED_PATHS:
            route = request.url_rule.rule if request.url_rule is not None else p
            MET_REQUESTS.labels(route=route).inc()
            request.environ["panchang.t0"] = perf_counter()

    @app.after_request
    def _after(resp):
        t0 = request.environ.get("panchang.t0")
        if t0 is not None:
            route = request.url_rule.rule if request.url_rule is not None else request.path
            REQ_LATENCY.labels(route=route).observe(perf_counter() - t0)
        return resp

    @app.route("/metrics", methods=["GET"])
    def metrics_endpoint():
        if not _metrics_auth_ok():
            return Response("Unauthorized", 401, {"WWW-Authenticate": 'Basic realm="metrics"'})
        GAUGE_APP_UP.set(1.0)
        return Response(generate_latest(REGISTRY), mimetype=CONTENT_TYPE_LATEST)


# ───────────────────────── app factory ─────────────────────────
def create_app() -> Flask:
    app = Flask(__name__)
    app.json.sort_keys = False
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore

    _configure_logging(app)

    cfg_path = config_path()
    try:
        app.cfg = load_config(cfg_path)  # type: ignore[attr-defined]
    except (OSError, yaml.YAMLError) as e:
        app.logger.warning("config %s not loaded (%s); using built-in defaults", cfg_path, e)
        app.cfg = {}  # type: ignore[attr-defined]

    # seed series so dashboards show zeros before first traffic
    for route in ("/api/panchanga", "/api/horizon", "/api/ayanamsa") + _TRACKED_PATHS:
        MET_REQUESTS.labels(route=route).inc(0)
    MET_WARNINGS.labels(kind="ephemeris_fallback").inc(0)
    GAUGE_APP_UP.set(1.0)

    _register_metrics(app)
    _register_health(app)
    _register_errors(app)
    app.register_blueprint(_routes_bp)

    # CORS for browser UIs
    CORS(
        app,
        resources={r"/.*": {"origins": os.environ.get("CORS_ALLOW_ORIGIN") or "*"}},
        supports_credentials=False,
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=600,
    )

    app.logger.info("App initialized; version=%s; config=%s", VERSION, cfg_path)
    return app


# ───────────────────────── app instance ─────────────────────────
app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
