# panchang/core/__init__.py
from __future__ import annotations

from .ayanamsa import catalogue, lookup, value_at
from .ephemeris_adapter import (
    Ephemeris,
    EphemerisBackend,
    ErfaEphemeris,
    PortableEphemeris,
    SkyfieldEphemeris,
    default_backend,
)
from .errors import EphemerisError, InvalidInputError, PanchangError
from .horizon import moonrise, moonset, solar_events, sunrise, sunset
from .location import GeoLocation
from .panchanga import PanchangaResult, compute_panchanga
from .report import format_report
from .settings import EngineSettings
from .transitions import find_boundary_crossing

__all__ = [
    "compute_panchanga",
    "PanchangaResult",
    "GeoLocation",
    "EngineSettings",
    "format_report",
    "value_at",
    "catalogue",
    "lookup",
    "sunrise",
    "sunset",
    "moonrise",
    "moonset",
    "solar_events",
    "find_boundary_crossing",
    "Ephemeris",
    "EphemerisBackend",
    "ErfaEphemeris",
    "PortableEphemeris",
    "SkyfieldEphemeris",
    "default_backend",
    "PanchangError",
    "InvalidInputError",
    "EphemerisError",
]
