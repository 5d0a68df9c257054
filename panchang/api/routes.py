# panchang/api/routes.py
"""
Panchanga API routes
- /api/panchanga         full day (JSON), GET query or POST body
- /api/panchanga/report  same, as a plain-text summary
- /api/horizon           sunrise / sunset / moonrise / moonset
- /api/ayanamsa[/<key>]  catalogue and single-system lookup
- /api/health

Request fields (query string or JSON object):
  date (YYYY-MM-DD, required), time (HH:MM[:SS], default from config),
  tz (IANA), latitude/lat, longitude/lon/lng, altitude/alt,
  ayanamsa (id or name), at (sunrise | instant), name

Validation failures raise InvalidInputError; the app turns those into
HTTP 400 with the {"ok": false, "error": code, "message": ...} envelope.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from flask import Blueprint, Response, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from panchang.core import ayanamsa as _ayanamsa
from panchang.core.errors import InvalidInputError
from panchang.core.ephemeris_adapter import Ephemeris, default_backend
from panchang.core.horizon import lunar_events, solar_events
from panchang.core.location import GeoLocation
from panchang.core.panchanga import PanchangaResult, compute_panchanga
from panchang.core.report import format_report
from panchang.core.settings import EngineSettings
from panchang.core.timescales import ensure_in_range, parse_instant
from panchang.utils.metrics import record_warnings
from panchang.version import VERSION

log = logging.getLogger(__name__)
api = Blueprint("api", __name__)


# ───────────────────────── helpers ─────────────────────────
def _json_error(code: str, message: Any = None, http: int = 400):
    out: Dict[str, Any] = {"ok": False, "error": code}
    if message is not None:
        out["message"] = message
    return jsonify(out), http


def _cfg(key: str, default: Any) -> Any:
    cfg = getattr(current_app, "cfg", None) or {}
    value = cfg.get(key) if isinstance(cfg, Mapping) else None
    return default if value is None else value


def _params() -> Dict[str, Any]:
    """Query args for GET, JSON object for POST (query args fill the gaps)."""
    out: Dict[str, Any] = dict(request.args.items())
    if request.method == "POST":
        body = request.get_json(silent=True)
        if body is None and request.data:
            raise BadRequest("request body must be JSON")
        if body is not None and not isinstance(body, dict):
            raise BadRequest("JSON body must be an object")
        out.update(body or {})
    return out


def _instant(p: Mapping[str, Any]):
    date_s = p.get("date")
    if not isinstance(date_s, str) or not date_s.strip():
        raise InvalidInputError("invalid_date", "provide 'date' as YYYY-MM-DD")
    time_s = str(p.get("time") or _cfg("default_time", "12:00"))
    tz = p.get("tz") or p.get("timezone") or _cfg("timezone", "UTC")
    parsed = parse_instant(date_s, time_s, str(tz))
    ensure_in_range(parsed.instant)
    return parsed


def _location(p: Mapping[str, Any], tz_name: str) -> GeoLocation:
    data = dict(p)
    data.setdefault("timezone", tz_name)
    return GeoLocation.from_mapping(data)


def _ayanamsa_id(value: Any) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        value = _cfg("ayanamsa", EngineSettings().ayanamsa_default)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    hit = _ayanamsa.lookup(_ayanamsa.J2000_JD, str(value))
    if hit is None:
        raise InvalidInputError("unknown_ayanamsa", f"unknown ayanamsa {value!r}")
    return hit.system_id


def _compute(p: Mapping[str, Any]) -> tuple[PanchangaResult, Dict[str, Any]]:
    parsed = _instant(p)
    loc = _location(p, parsed.timezone)
    result = compute_panchanga(
        parsed.instant,
        loc,
        _ayanamsa_id(p.get("ayanamsa")),
        at=str(p.get("at") or _cfg("evaluate_at", "sunrise")),
    )
    record_warnings(result.warnings)
    return result, parsed.to_dict()


# ───────────────────────── health ─────────────────────────
@api.get("/api/health")
def health():
    return jsonify({"ok": True, "status": "up", "version": VERSION}), 200


# ───────────────────────── panchanga ─────────────────────────
@api.route("/api/panchanga", methods=["GET", "POST"])
def panchanga():
    result, parsed = _compute(_params())
    return jsonify({"ok": True, "input": parsed, "panchanga": result.to_dict()}), 200


@api.route("/api/panchanga/report", methods=["GET", "POST"])
def panchanga_report():
    result, _parsed = _compute(_params())
    return Response(format_report(result), 200, mimetype="text/plain")


# ───────────────────────── horizon ─────────────────────────
@api.route("/api/horizon", methods=["GET", "POST"])
def horizon():
    p = _params()
    parsed = _instant(p)
    loc = _location(p, parsed.timezone)
    ephem = Ephemeris(default_backend())
    try:
        solar = solar_events(parsed.instant, loc, ephemeris=ephem)
        lunar = lunar_events(parsed.instant, loc, ephemeris=ephem, step_minutes=EngineSettings().moon_scan_step_min)
    except OverflowError as e:
        raise InvalidInputError("out_of_range", "rise/set times for this date fall outside 0001-01-01..9999-12-31 UTC") from e
    record_warnings(f"ephemeris_fallback:{b}" for b in ephem.fallbacks)

    def iso(v):
        return v.isoformat() if v is not None else None

    return jsonify({
        "ok": True,
        "input": parsed.to_dict(),
        "sunrise": iso(solar.sunrise),
        "sunset": iso(solar.sunset),
        "solar_noon": iso(solar.solar_noon),
        "moonrise": iso(lunar.moonrise),
        "moonset": iso(lunar.moonset),
        "status": solar.status,
        "backend": ephem.name,
    }), 200


# ───────────────────────── ayanamsa ─────────────────────────
def _ayanamsa_when(p: Mapping[str, Any]) -> datetime:
    if p.get("date"):
        return _instant(p).instant
    return datetime.now(timezone.utc)


@api.get("/api/ayanamsa")
def ayanamsa_catalogue():
    p = _params()
    when = _ayanamsa_when(p)
    rows = [v.to_dict() for v in _ayanamsa.catalogue(when)]
    return jsonify({"ok": True, "at": when.isoformat(), "count": len(rows), "systems": rows}), 200


@api.get("/api/ayanamsa/<key>")
def ayanamsa_lookup(key: str):
    when = _ayanamsa_when(_params())
    hit = _ayanamsa.lookup(when, key)
    if hit is None:
        return _json_error("unknown_ayanamsa", f"no ayanamsa system matches {key!r}", 404)
    return jsonify({"ok": True, "at": when.isoformat(), "ayanamsa": hit.to_dict()}), 200
