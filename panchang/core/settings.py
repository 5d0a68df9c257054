# panchang/core/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

__all__ = ["EngineSettings"]


def _bool_env(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return float(v)


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return int(v)


@dataclass(frozen=True)
class EngineSettings:
    """Knobs for one computation. Defaults are read from the environment at construction."""
    ayanamsa_default: int = field(default_factory=lambda: _env_int("PANCHANG_AYANAMSA_DEFAULT", 1))
    backend: str = field(default_factory=lambda: os.getenv("PANCHANG_BACKEND", "erfa").strip().lower())
    transition_precision_s: float = field(
        default_factory=lambda: _env_float("PANCHANG_TRANSITION_PRECISION_S", 60.0)
    )
    moon_scan_step_min: float = field(default_factory=lambda: _env_float("PANCHANG_MOON_SCAN_STEP_MIN", 60.0))
    widen_transitions: bool = field(default_factory=lambda: _bool_env("PANCHANG_WIDEN_TRANSITIONS", True))
    ephemeris_path: Optional[str] = field(default_factory=lambda: os.getenv("PANCHANG_EPHEMERIS") or None)
    # DE421 nominal span
    kernel_jd_min: float = field(default_factory=lambda: _env_float("PANCHANG_KERNEL_JD_MIN", 2414992.5))
    kernel_jd_max: float = field(default_factory=lambda: _env_float("PANCHANG_KERNEL_JD_MAX", 2469807.5))
