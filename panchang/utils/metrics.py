# panchang/utils/metrics.py
from __future__ import annotations

from typing import Final, Iterable

from prometheus_client import Counter, Gauge, Histogram

# Metric names are part of the dashboard contract; keep them stable.
MET_REQUESTS: Final = Counter("panchang_api_requests_total", "API requests", ["route"])
MET_FALLBACKS: Final = Counter(
    "panchang_fallback_total", "Positions served by the portable model instead of the backend", ["body"]
)
MET_WARNINGS: Final = Counter("panchang_warning_total", "Non-fatal computation warnings", ["kind"])
REQ_LATENCY: Final = Histogram("panchang_request_seconds", "API request latency", ["route"])
GAUGE_APP_UP: Final = Gauge("panchang_app_up", "1 if app is running")


def record_warnings(warnings: Iterable[str]) -> None:
    """Count result warnings; ``ephemeris_fallback:<body>`` also feeds the per-body fallback counter."""
    for w in warnings:
        kind, _, detail = w.partition(":")
        MET_WARNINGS.labels(kind=kind).inc()
        if kind == "ephemeris_fallback" and detail:
            MET_FALLBACKS.labels(body=detail).inc()
