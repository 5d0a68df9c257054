# panchang/core/angles.py
"""
Angle helpers (degrees).

Every angle leaving this package is normalized to [0, 360). Anything that
compares two angles across the 0°/360° seam must go through
``forward_diff`` or ``signed_diff``; raw subtraction is wrong there.
"""
from __future__ import annotations

import math
from typing import Tuple

__all__ = ["normalize", "forward_diff", "signed_diff", "to_dms", "format_dms"]

_ABS_ZERO_TOL_DEG = 1e-12


def normalize(angle: float) -> float:
    """Map any finite angle to [0, 360)."""
    v = math.fmod(float(angle), 360.0)
    if v < 0.0:
        v += 360.0
    # tiny negatives can round up to exactly 360.0 after the add
    if v >= 360.0 or abs(v) < _ABS_ZERO_TOL_DEG:
        return 0.0
    return v


def forward_diff(a_from: float, a_to: float) -> float:
    """Degrees travelled going forward (increasing) from ``a_from`` to ``a_to``, in [0, 360)."""
    return normalize(a_to - a_from)


def signed_diff(a: float, b: float) -> float:
    """Shortest signed difference (a - b) in [-180, 180)."""
    d = (float(a) - float(b) + 540.0) % 360.0 - 180.0
    return -180.0 if d == 180.0 else d


def to_dms(angle: float) -> Tuple[int, int, float]:
    a = normalize(angle)
    deg = int(a)
    rem = (a - deg) * 60.0
    minutes = int(rem)
    seconds = (rem - minutes) * 60.0
    # 59.9999" rounding guard
    if seconds >= 59.9995:
        seconds = 0.0
        minutes += 1
    if minutes == 60:
        minutes = 0
        deg = (deg + 1) % 360
    return deg, minutes, seconds


def format_dms(angle: float) -> str:
    d, m, s = to_dms(angle)
    return f"{d:3d}° {m:02d}' {s:05.2f}\""
