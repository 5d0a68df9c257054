# panchang/core/ephemeris_adapter.py
# -----------------------------------------------------------------------------
# Ephemeris backends + fallback resolver
#
# Highlights
# • Backend protocol: position(jd_ut, body) / ayanamsa_degree(jd_ut, system_id),
#   both returning None for "unavailable" (a normal outcome, not an error).
# • ErfaEphemeris: pyERFA epv00/moon98/plan94 rotated to the ecliptic of date
#   (ecm06 + nut06a), mean node via faom03. No data files needed.
# • SkyfieldEphemeris: JPL kernel (DE421 by default), thread-safe lazy load,
#   JD-span guard; missing kernel → None.
# • Ephemeris resolver: backend first, portable model second; Ketu is always
#   derived from Rahu; fallbacks are recorded for the caller's warnings.
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import math
import os
import threading
import warnings
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

import erfa  # pyERFA

from . import ayanamsa as _ayanamsa
from .angles import normalize, signed_diff
from .errors import EphemerisError
from .settings import EngineSettings
from .solar_lunar import CelestialPosition, ketu_from_rahu, tropical_position
from .timescales import J2000_JD, delta_t_seconds

log = logging.getLogger(__name__)

__all__ = [
    "EphemerisBackend",
    "PortableEphemeris",
    "ErfaEphemeris",
    "SkyfieldEphemeris",
    "Ephemeris",
    "default_backend",
    "clear_kernel_cache",
    "BACKEND_NAMES",
]

BACKEND_NAMES: Tuple[str, ...] = ("erfa", "skyfield", "portable")

# annual aberration constant (κ), degrees
_ABERRATION_DEG = 20.49552 / 3600.0

# ─────────────────────────────────────────────────────────────────────────────
# Protocol
# ─────────────────────────────────────────────────────────────────────────────
@runtime_checkable
class EphemerisBackend(Protocol):
    name: str

    def position(self, jd_ut: float, body: str) -> Optional[CelestialPosition]:
        ...

    def ayanamsa_degree(self, jd_ut: float, system_id: int) -> Optional[float]:
        ...

# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────
def _split_jd(jd: float) -> Tuple[float, float]:
    d = math.floor(jd)
    return float(d), float(jd - d)


def _lonlat_from_xyz(x: float, y: float, z: float) -> Tuple[float, float]:
    rho = math.hypot(x, y)
    lon = normalize(math.degrees(math.atan2(y, x)))
    lat = math.degrees(math.atan2(z, rho)) if rho > 0.0 else (90.0 if z > 0.0 else -90.0)
    return lon, lat

# ─────────────────────────────────────────────────────────────────────────────
# Portable
# ─────────────────────────────────────────────────────────────────────────────
class PortableEphemeris:
    """Closed-form Sun/Moon, mean node, mean-motion planets (degraded for planets)."""
    name = "portable"

    def position(self, jd_ut: float, body: str) -> Optional[CelestialPosition]:
        return tropical_position(jd_ut, body)

    def ayanamsa_degree(self, jd_ut: float, system_id: int) -> Optional[float]:
        return None

# ─────────────────────────────────────────────────────────────────────────────
# ERFA
# ─────────────────────────────────────────────────────────────────────────────
_PLAN94_INDEX: Dict[str, int] = {
    "Mercury": 1, "Venus": 2, "Mars": 4, "Jupiter": 5,
    "Saturn": 6, "Uranus": 7, "Neptune": 8,
}


class ErfaEphemeris:
    """
    Geocentric apparent-ish positions from pyERFA, ecliptic of date.

    Accuracy is arcseconds for Sun/Moon and well under an arcminute for the
    planets inside 1000–3000 CE (plan94's range); no light-time correction.
    """
    name = "erfa"

    def _tt_parts(self, jd_ut: float) -> Tuple[float, float]:
        return _split_jd(jd_ut + delta_t_seconds(jd_ut) / 86400.0)

    def _to_ecliptic_of_date(self, d1: float, d2: float, p) -> Tuple[float, float]:
        rm = erfa.ecm06(d1, d2)
        v = erfa.rxp(rm, p)
        lon, lat = _lonlat_from_xyz(float(v[0]), float(v[1]), float(v[2]))
        dpsi, _deps = erfa.nut06a(d1, d2)
        return normalize(lon + math.degrees(float(dpsi))), lat

    def position(self, jd_ut: float, body: str) -> Optional[CelestialPosition]:
        d1, d2 = self._tt_parts(jd_ut)
        with warnings.catch_warnings():
            # plan94/epv00 flag dates outside their fit range as "dubious"
            warnings.simplefilter("ignore", erfa.ErfaWarning)
            if body == "Rahu":
                t = ((d1 - J2000_JD) + d2) / 36525.0
                return CelestialPosition(normalize(math.degrees(erfa.faom03(t))), 0.0, self.name)
            if body == "Sun":
                pvh, _pvb = erfa.epv00(d1, d2)
                p = -pvh["p"]
                lon, lat = self._to_ecliptic_of_date(d1, d2, p)
                return CelestialPosition(normalize(lon - _ABERRATION_DEG), lat, self.name)
            if body == "Moon":
                pv = erfa.moon98(d1, d2)
                lon, lat = self._to_ecliptic_of_date(d1, d2, pv["p"])
                return CelestialPosition(lon, lat, self.name)
            idx = _PLAN94_INDEX.get(body)
            if idx is None:
                return None
            earth, _pvb = erfa.epv00(d1, d2)
            planet = erfa.plan94(d1, d2, idx)
            lon, lat = self._to_ecliptic_of_date(d1, d2, planet["p"] - earth["p"])
            return CelestialPosition(lon, lat, self.name)

    def ayanamsa_degree(self, jd_ut: float, system_id: int) -> Optional[float]:
        # ERFA has no sidereal modes; the polynomial table answers instead.
        return None

# ─────────────────────────────────────────────────────────────────────────────
# Skyfield (JPL kernel)
# ─────────────────────────────────────────────────────────────────────────────
_SKYFIELD_KEYS: Dict[str, str] = {
    "Sun": "sun",
    "Moon": "moon",
    "Mercury": "mercury",
    "Venus": "venus",
    "Mars": "mars",
    "Jupiter": "jupiter barycenter",
    "Saturn": "saturn barycenter",
    "Uranus": "uranus barycenter",
    "Neptune": "neptune barycenter",
    "Pluto": "pluto barycenter",
}


def _looks_like_lfs_pointer(path: str) -> bool:
    if os.path.getsize(path) > 512:
        return False
    with open(path, "rb") as f:
        head = f.read(128)
    return head.startswith(b"version https://git-lfs.github.com/spec/v1")


# process-wide: kernel path → (kernel, timescale); (None, None) when unusable
_KERNELS: Dict[str, Tuple[Any, Any]] = {}
_LOCK_KERNEL = threading.Lock()


def _kernel_for(path: Optional[str]) -> Tuple[Any, Any]:
    key = path or ""
    hit = _KERNELS.get(key)
    if hit is not None:
        return hit
    with _LOCK_KERNEL:
        hit = _KERNELS.get(key)
        if hit is not None:
            return hit
        kernel = ts = None
        if not path or not os.path.isfile(path):
            log.warning("Skyfield backend unavailable: kernel not found (%s)", path or "PANCHANG_EPHEMERIS unset")
        elif _looks_like_lfs_pointer(path):
            log.warning("Skyfield backend unavailable: kernel looks like a Git LFS pointer: %s", path)
        else:
            from skyfield.api import load

            kernel = load(path)
            ts = load.timescale()
            log.info("Skyfield kernel loaded: %s", os.path.basename(path))
        _KERNELS[key] = (kernel, ts)
        return kernel, ts


def clear_kernel_cache() -> None:
    """Forget loaded kernels (tests, or after replacing a kernel file)."""
    with _LOCK_KERNEL:
        _KERNELS.clear()


class SkyfieldEphemeris:
    """
    Positions from a local JPL SPK kernel via Skyfield.

    The kernel is loaded lazily on first use and cached per path for the
    whole process, so every instance (and thread) shares one load. When no
    usable kernel is configured the backend is simply unavailable and every
    call returns None; the verdict is cached too until clear_kernel_cache().
    """
    name = "skyfield"

    def __init__(self, kernel_path: Optional[str] = None, *,
                 jd_min: Optional[float] = None, jd_max: Optional[float] = None):
        cfg = EngineSettings()
        self.kernel_path = kernel_path or cfg.ephemeris_path
        self.jd_min = cfg.kernel_jd_min if jd_min is None else float(jd_min)
        self.jd_max = cfg.kernel_jd_max if jd_max is None else float(jd_max)

    def _load(self) -> Tuple[Any, Any]:
        return _kernel_for(self.kernel_path)

    @property
    def available(self) -> bool:
        kernel, _ts = self._load()
        return kernel is not None

    def position(self, jd_ut: float, body: str) -> Optional[CelestialPosition]:
        key = _SKYFIELD_KEYS.get(body)
        if key is None or not (self.jd_min <= jd_ut <= self.jd_max):
            return None
        kernel, ts = self._load()
        if kernel is None:
            return None
        from skyfield.framelib import ecliptic_frame

        t = ts.ut1_jd(jd_ut)
        geo = kernel["earth"].at(t).observe(kernel[key]).apparent()
        lat, lon, _dist = geo.frame_latlon(ecliptic_frame)
        return CelestialPosition(normalize(float(lon.degrees)), float(lat.degrees), self.name)

    def ayanamsa_degree(self, jd_ut: float, system_id: int) -> Optional[float]:
        return None

# ─────────────────────────────────────────────────────────────────────────────
# Resolver
# ─────────────────────────────────────────────────────────────────────────────
def default_backend(name: Optional[str] = None, settings: Optional[EngineSettings] = None) -> EphemerisBackend:
    cfg = settings or EngineSettings()
    key = (name or cfg.backend or "erfa").strip().lower()
    if key == "erfa":
        return ErfaEphemeris()
    if key == "skyfield":
        return SkyfieldEphemeris(cfg.ephemeris_path, jd_min=cfg.kernel_jd_min, jd_max=cfg.kernel_jd_max)
    if key == "portable":
        return PortableEphemeris()
    raise EphemerisError("config", f"unknown ephemeris backend {key!r}", allowed=list(BACKEND_NAMES))


class Ephemeris:
    """
    Per-computation position source.

    Asks ``backend`` first and falls back to the portable model whenever the
    backend answers None. Bodies that needed the fallback are listed in
    ``fallbacks`` so the caller can surface a degraded-accuracy warning.
    """

    def __init__(self, backend: Optional[EphemerisBackend] = None):
        self.backend = backend
        self._portable = PortableEphemeris()
        self._fallbacks: List[str] = []

    @property
    def name(self) -> str:
        return self.backend.name if self.backend is not None else self._portable.name

    @property
    def fallbacks(self) -> Tuple[str, ...]:
        return tuple(self._fallbacks)

    def _note_fallback(self, what: str) -> None:
        if what not in self._fallbacks:
            self._fallbacks.append(what)
            log.debug("ephemeris fallback to portable model for %s (backend=%s)", what, self.name)

    def tropical(self, jd_ut: float, body: str) -> CelestialPosition:
        if body == "Ketu":
            return ketu_from_rahu(self.tropical(jd_ut, "Rahu"))
        if self.backend is not None:
            pos = self.backend.position(jd_ut, body)
            if pos is not None:
                return pos
            self._note_fallback(body)
        pos = self._portable.position(jd_ut, body)
        if pos is None:
            raise EphemerisError("body", f"unsupported body {body!r}")
        return pos

    def ayanamsa(self, jd_ut: float, system_id: int) -> float:
        if self.backend is not None:
            deg = self.backend.ayanamsa_degree(jd_ut, system_id)
            if deg is not None:
                return signed_diff(deg, 0.0)
        return _ayanamsa.value_at(jd_ut, system_id)

    def sidereal(self, jd_ut: float, body: str, system_id: int) -> CelestialPosition:
        pos = self.tropical(jd_ut, body)
        return CelestialPosition(normalize(pos.longitude - self.ayanamsa(jd_ut, system_id)), pos.latitude, pos.source)
