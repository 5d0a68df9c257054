# panchang/core/solar_lunar.py
# -----------------------------------------------------------------------------
# Portable (dependency-free) tropical positions
#
#   • Sun   : low-precision closed form (≈0.01°)
#   • Moon  : truncated periodic series, Meeus ch. 47 main terms (≈0.05°)
#   • Rahu  : mean ascending node polynomial; Ketu = Rahu + 180°
#   • Others: linear mean motion from a J2000 epoch longitude (DEGRADED tier,
#             good to a few degrees at best; tagged source="portable").
#
# All longitudes are ecliptic-of-date, degrees, normalized to [0, 360).
# Input is a Julian Day (UT); the few seconds of ΔT are below model noise.
# -----------------------------------------------------------------------------
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from .angles import normalize
from .timescales import days_since_j2000, julian_centuries

__all__ = [
    "CelestialPosition",
    "SUPPORTED_BODIES",
    "sun_position",
    "sun_mean_longitude",
    "moon_position",
    "mean_node_longitude",
    "mean_motion_position",
    "tropical_position",
    "ketu_from_rahu",
]

SUPPORTED_BODIES: Tuple[str, ...] = (
    "Sun", "Moon", "Mercury", "Venus", "Mars", "Jupiter", "Saturn",
    "Uranus", "Neptune", "Pluto", "Rahu", "Ketu",
)


@dataclass(frozen=True)
class CelestialPosition:
    longitude: float
    latitude: float
    source: str = "portable"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _sind(x: float) -> float:
    return math.sin(math.radians(x))

# ───────────────────────────── Sun ─────────────────────────────

def sun_mean_longitude(jd: float) -> float:
    return normalize(280.460 + 0.9856474 * days_since_j2000(jd))


def sun_position(jd: float) -> CelestialPosition:
    d = days_since_j2000(jd)
    L = 280.460 + 0.9856474 * d
    g = 357.528 + 0.9856003 * d
    lam = L + 1.915 * _sind(g) + 0.020 * _sind(2.0 * g)
    return CelestialPosition(normalize(lam), 0.0)

# ───────────────────────────── Moon ─────────────────────────────

# (D, M, M', F, coefficient in 1e-6 degrees)
_MOON_LON_TERMS: Tuple[Tuple[int, int, int, int, int], ...] = (
    (0, 0, 1, 0, 6288774), (2, 0, -1, 0, 1274027), (2, 0, 0, 0, 658314),
    (0, 0, 2, 0, 213618), (0, 1, 0, 0, -185116), (0, 0, 0, 2, -114332),
    (2, 0, -2, 0, 58793), (2, -1, -1, 0, 57066), (2, 0, 1, 0, 53322),
    (2, -1, 0, 0, 45758), (0, 1, -1, 0, -40923), (1, 0, 0, 0, -34720),
    (0, 1, 1, 0, -30383), (2, 0, 0, -2, 15327), (0, 0, 1, 2, -12528),
    (0, 0, 1, -2, 10980), (4, 0, -1, 0, 10675), (0, 0, 3, 0, 10034),
    (4, 0, -2, 0, 8548), (2, 1, -1, 0, -7888), (2, 1, 0, 0, -6766),
    (1, 0, -1, 0, -5163), (1, 1, 0, 0, 4987), (2, -1, 1, 0, 4036),
    (2, 0, 2, 0, 3994), (4, 0, 0, 0, 3861), (2, 0, -3, 0, 3665),
    (0, 1, -2, 0, -2689), (2, 0, -1, 2, -2602), (2, -1, -2, 0, 2390),
    (1, 0, 1, 0, -2348), (2, -2, 0, 0, 2236), (0, 1, 2, 0, -2120),
    (0, 2, 0, 0, -2069),
)

_MOON_LAT_TERMS: Tuple[Tuple[int, int, int, int, int], ...] = (
    (0, 0, 0, 1, 5128122), (0, 0, 1, 1, 280602), (0, 0, 1, -1, 277693),
    (2, 0, 0, -1, 173237), (2, 0, -1, 1, 55413), (2, 0, -1, -1, 46271),
    (2, 0, 0, 1, 32573), (0, 0, 2, 1, 17198), (2, 0, 1, -1, 9266),
    (0, 0, 2, -1, 8822), (2, -1, 0, -1, 8216), (2, 0, -2, -1, 4324),
    (2, 0, 1, 1, 4200),
)


def _moon_arguments(T: float) -> Tuple[float, float, float, float, float]:
    Lp = 218.3164477 + 481267.88123421 * T - 0.0015786 * T * T
    D = 297.8501921 + 445267.1114034 * T - 0.0018819 * T * T
    M = 357.5291092 + 35999.0502909 * T
    Mp = 134.9633964 + 477198.8675055 * T + 0.0087414 * T * T
    F = 93.2720950 + 483202.0175233 * T - 0.0036539 * T * T
    return Lp, D, M, Mp, F


def _series(terms, D: float, M: float, Mp: float, F: float, E: float) -> float:
    total = 0.0
    for d, m, mp, f, coeff in terms:
        arg = math.radians(d * D + m * M + mp * Mp + f * F)
        c = coeff * (E ** abs(m))
        total += c * math.sin(arg)
    return total


def moon_position(jd: float) -> CelestialPosition:
    T = julian_centuries(jd)
    Lp, D, M, Mp, F = _moon_arguments(T)
    E = 1.0 - 0.002516 * T - 0.0000074 * T * T
    A1 = 119.75 + 131.849 * T
    A2 = 53.09 + 479264.290 * T
    A3 = 313.45 + 481266.484 * T

    sl = _series(_MOON_LON_TERMS, D, M, Mp, F, E)
    sl += 3958.0 * _sind(A1) + 1962.0 * _sind(Lp - F) + 318.0 * _sind(A2)

    sb = _series(_MOON_LAT_TERMS, D, M, Mp, F, E)
    sb += (-2235.0 * _sind(Lp) + 382.0 * _sind(A3) + 175.0 * _sind(A1 - F)
           + 175.0 * _sind(A1 + F) + 127.0 * _sind(Lp - Mp) - 115.0 * _sind(Lp + Mp))

    omega = 125.04452 - 1934.136261 * T
    nutation = -0.004778 * _sind(omega)
    lon = Lp + sl / 1e6 + nutation
    return CelestialPosition(normalize(lon), sb / 1e6)

# ───────────────────────────── Nodes ─────────────────────────────

def mean_node_longitude(jd: float) -> float:
    """Mean longitude of the Moon's ascending node (Rahu)."""
    T = julian_centuries(jd)
    omega = 125.04452 - 1934.136261 * T + 0.0020708 * T * T + (T ** 3) / 450000.0
    return normalize(omega)


def ketu_from_rahu(rahu: CelestialPosition) -> CelestialPosition:
    return CelestialPosition(normalize(rahu.longitude + 180.0), -rahu.latitude, rahu.source)

# ───────────────────────────── Mean motion tier ─────────────────────────────

# J2000 epoch longitude (deg), daily motion (deg/day)
_MEAN_ELEMENTS: Dict[str, Tuple[float, float]] = {
    "Sun": (280.460, 0.985647),
    "Moon": (218.316, 13.176396),
    "Mercury": (252.251, 4.092317),
    "Venus": (181.980, 1.602136),
    "Mars": (355.433, 0.524071),
    "Jupiter": (34.351, 0.083056),
    "Saturn": (50.078, 0.033371),
    "Uranus": (314.055, 0.011733),
    "Neptune": (304.349, 0.005982),
    "Pluto": (238.929, 0.003975),
}


def mean_motion_position(jd: float, body: str) -> Optional[CelestialPosition]:
    el = _MEAN_ELEMENTS.get(body)
    if el is None:
        return None
    lon0, rate = el
    return CelestialPosition(normalize(lon0 + rate * days_since_j2000(jd)), 0.0)


def tropical_position(jd: float, body: str) -> Optional[CelestialPosition]:
    """Best portable position for ``body``; None for names outside SUPPORTED_BODIES."""
    if body == "Sun":
        return sun_position(jd)
    if body == "Moon":
        return moon_position(jd)
    if body == "Rahu":
        return CelestialPosition(mean_node_longitude(jd), 0.0)
    if body == "Ketu":
        return ketu_from_rahu(CelestialPosition(mean_node_longitude(jd), 0.0))
    return mean_motion_position(jd, body)
