# panchang/core/horizon.py
# -----------------------------------------------------------------------------
# Sunrise / sunset / moonrise / moonset
#
# Sun : hour-angle equation with refraction + semi-diameter (h0 = −0.8333°),
#       horizon dip for observer altitude, equation-of-time transit, three
#       fixed refinement passes. Anchored on 0h UT of the instant's own civil
#       date; the result may legitimately fall before 0h or after 24h UT.
# Moon: altitude scan over the local civil day (GMST → LST → hour angle),
#       bisection on the first sign change.
#
# "No event" (polar day/night, no crossing in the window) is None, never an
# exception; SolarDay.status tells polar day from polar night.
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple

from .angles import normalize, signed_diff
from .ephemeris_adapter import Ephemeris, EphemerisBackend
from .errors import InvalidInputError
from .location import GeoLocation
from .solar_lunar import sun_mean_longitude
from .timescales import (
    ensure_aware,
    from_julian_day,
    jd_at_midnight_ut,
    julian_centuries,
    local_civil_date,
    local_midnight,
    to_julian_day,
)

log = logging.getLogger(__name__)

__all__ = [
    "SUN_STANDARD_ALTITUDE",
    "MOON_STANDARD_ALTITUDE",
    "OBLIQUITY_DEG",
    "STATUS_NORMAL",
    "STATUS_POLAR_DAY",
    "STATUS_POLAR_NIGHT",
    "SolarDay",
    "MoonDay",
    "ecliptic_to_equatorial",
    "gmst_deg",
    "altitude_deg",
    "solar_events",
    "lunar_events",
    "sunrise",
    "sunset",
    "moonrise",
    "moonset",
]

SUN_STANDARD_ALTITUDE = -0.8333
MOON_STANDARD_ALTITUDE = -0.8333
OBLIQUITY_DEG = 23.439
_DIP_DEG_PER_SQRT_M = 0.0347
_SOLAR_PASSES = 3

STATUS_NORMAL = "normal"
STATUS_POLAR_DAY = "polar_day"
STATUS_POLAR_NIGHT = "polar_night"


@dataclass(frozen=True)
class SolarDay:
    sunrise: Optional[datetime]
    sunset: Optional[datetime]
    solar_noon: Optional[datetime]
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MoonDay:
    moonrise: Optional[datetime]
    moonset: Optional[datetime]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

# ───────────────────────────── coordinates ─────────────────────────────

def _sind(x: float) -> float:
    return math.sin(math.radians(x))


def _cosd(x: float) -> float:
    return math.cos(math.radians(x))


def ecliptic_to_equatorial(lon: float, lat: float = 0.0, obliquity: float = OBLIQUITY_DEG) -> Tuple[float, float]:
    """(λ, β) → (α, δ), degrees; α in [0, 360)."""
    se, ce = _sind(obliquity), _cosd(obliquity)
    sl, cl = _sind(lon), _cosd(lon)
    sb, cb = _sind(lat), _cosd(lat)
    ra = math.degrees(math.atan2(sl * ce - (sb / cb if cb else 0.0) * se, cl)) if cb else 0.0
    dec = math.degrees(math.asin(max(-1.0, min(1.0, sb * ce + cb * se * sl))))
    return normalize(ra), dec


def gmst_deg(jd_ut: float) -> float:
    """Greenwich mean sidereal time, degrees (Meeus 12.4)."""
    T = julian_centuries(jd_ut)
    theta = (
        280.46061837
        + 360.98564736629 * (jd_ut - 2451545.0)
        + 0.000387933 * T * T
        - (T ** 3) / 38710000.0
    )
    return normalize(theta)


def altitude_deg(jd_ut: float, ra: float, dec: float, location: GeoLocation) -> float:
    lst = gmst_deg(jd_ut) + location.longitude
    h = lst - ra
    phi = location.latitude
    s = _sind(phi) * _sind(dec) + _cosd(phi) * _cosd(dec) * _cosd(h)
    return math.degrees(math.asin(max(-1.0, min(1.0, s))))


def _horizon_altitude(base: float, location: GeoLocation) -> float:
    return base - _DIP_DEG_PER_SQRT_M * math.sqrt(max(0.0, location.altitude))

# ───────────────────────────── Sun ─────────────────────────────

def _equation_of_time_deg(jd_ut: float, ra: float) -> float:
    # Meeus 28.1 without the nutation term
    return signed_diff(sun_mean_longitude(jd_ut) - 0.0057183, ra)


def _solar_hour_angle(dec: float, lat: float, h0: float) -> Tuple[Optional[float], str]:
    denom = _cosd(lat) * _cosd(dec)
    num = _sind(h0) - _sind(lat) * _sind(dec)
    if abs(denom) < 1e-12:
        # observer at a pole: the Sun circles at altitude ≈ ±δ
        return None, (STATUS_POLAR_DAY if _sind(lat) * _sind(dec) > _sind(h0) else STATUS_POLAR_NIGHT)
    cos_h = num / denom
    if cos_h < -1.0:
        return None, STATUS_POLAR_DAY
    if cos_h > 1.0:
        return None, STATUS_POLAR_NIGHT
    return math.degrees(math.acos(cos_h)), STATUS_NORMAL


def _sun_radec(ephem: Ephemeris, jd_ut: float) -> Tuple[float, float]:
    return ecliptic_to_equatorial(ephem.tropical(jd_ut, "Sun").longitude, 0.0)


def _solar_event_ut(ephem: Ephemeris, jd0: float, location: GeoLocation, h0: float,
                    sign: int) -> Tuple[Optional[float], str]:
    """UT hours after ``jd0`` of rise (sign=-1), set (+1) or transit (0)."""
    ut = 12.0 - location.longitude / 15.0
    status = STATUS_NORMAL
    for _ in range(_SOLAR_PASSES):
        jd = jd0 + ut / 24.0
        ra, dec = _sun_radec(ephem, jd)
        transit = 12.0 - location.longitude / 15.0 - _equation_of_time_deg(jd, ra) / 15.0
        if sign == 0:
            ut = transit
            continue
        H, status = _solar_hour_angle(dec, location.latitude, h0)
        if H is None:
            return None, status
        ut = transit + sign * H / 15.0
    return ut, status


def _ut_to_instant(jd0: float, ut: Optional[float]) -> Optional[datetime]:
    return None if ut is None else from_julian_day(jd0 + ut / 24.0)


def solar_events(instant: datetime, location: GeoLocation,
                 backend: Optional[EphemerisBackend] = None, *,
                 ephemeris: Optional[Ephemeris] = None) -> SolarDay:
    """Sunrise, sunset and solar noon for the instant's civil date."""
    inst = ensure_aware(instant)
    ephem = ephemeris or Ephemeris(backend)
    jd0 = jd_at_midnight_ut(local_civil_date(inst))
    h0 = _horizon_altitude(SUN_STANDARD_ALTITUDE, location)

    rise, status_r = _solar_event_ut(ephem, jd0, location, h0, -1)
    sset, status_s = _solar_event_ut(ephem, jd0, location, h0, +1)
    noon, _ = _solar_event_ut(ephem, jd0, location, h0, 0)
    if rise is not None and sset is not None and sset <= rise:
        rise = sset = None
    status = status_r if status_r != STATUS_NORMAL else status_s
    if status != STATUS_NORMAL:
        log.debug("no sunrise/sunset at lat=%.4f on %s: %s", location.latitude, local_civil_date(inst), status)
    return SolarDay(_ut_to_instant(jd0, rise), _ut_to_instant(jd0, sset), _ut_to_instant(jd0, noon), status)


def sunrise(instant: datetime, location: GeoLocation, backend: Optional[EphemerisBackend] = None) -> Optional[datetime]:
    return solar_events(instant, location, backend).sunrise


def sunset(instant: datetime, location: GeoLocation, backend: Optional[EphemerisBackend] = None) -> Optional[datetime]:
    return solar_events(instant, location, backend).sunset

# ───────────────────────────── Moon ─────────────────────────────

def _moon_altitude(ephem: Ephemeris, jd_ut: float, location: GeoLocation) -> float:
    pos = ephem.tropical(jd_ut, "Moon")
    ra, dec = ecliptic_to_equatorial(pos.longitude, pos.latitude)
    return altitude_deg(jd_ut, ra, dec, location)


def _bisect_crossing(f: Callable[[float], float], lo: float, hi: float, precision_days: float) -> float:
    f_lo = f(lo)
    while hi - lo > precision_days:
        mid = 0.5 * (lo + hi)
        f_mid = f(mid)
        if (f_mid > 0.0) == (f_lo > 0.0):
            lo, f_lo = mid, f_mid
        else:
            hi = mid
    return hi


def lunar_events(instant: datetime, location: GeoLocation,
                 backend: Optional[EphemerisBackend] = None, *,
                 ephemeris: Optional[Ephemeris] = None,
                 step_minutes: float = 60.0,
                 precision_seconds: float = 60.0) -> MoonDay:
    """
    First moonrise and first moonset inside the instant's local civil day.

    Scans [local midnight, +24h) in ``step_minutes`` steps and bisects each
    bracketing pair down to ``precision_seconds``. Either event may be None:
    roughly once a month the Moon does not rise (or set) on a given date.
    """
    if not (step_minutes > 0.0 and precision_seconds > 0.0):
        raise InvalidInputError("invalid_window", "moon scan step and precision must be positive")
    ephem = ephemeris or Ephemeris(backend)
    start = to_julian_day(local_midnight(instant))
    end = start + 1.0
    h0 = _horizon_altitude(MOON_STANDARD_ALTITUDE, location)

    def f(jd: float) -> float:
        return _moon_altitude(ephem, jd, location) - h0

    step = step_minutes / 1440.0
    precision = precision_seconds / 86400.0
    rise: Optional[float] = None
    sset: Optional[float] = None
    t0, a0 = start, f(start)
    while t0 < end and (rise is None or sset is None):
        t1 = min(t0 + step, end)
        a1 = f(t1)
        if a0 <= 0.0 < a1 and rise is None:
            rise = _bisect_crossing(f, t0, t1, precision)
        elif a0 > 0.0 >= a1 and sset is None:
            sset = _bisect_crossing(f, t0, t1, precision)
        t0, a0 = t1, a1
    return MoonDay(
        None if rise is None else from_julian_day(rise),
        None if sset is None else from_julian_day(sset),
    )


def moonrise(instant: datetime, location: GeoLocation, backend: Optional[EphemerisBackend] = None) -> Optional[datetime]:
    return lunar_events(instant, location, backend).moonrise


def moonset(instant: datetime, location: GeoLocation, backend: Optional[EphemerisBackend] = None) -> Optional[datetime]:
    return lunar_events(instant, location, backend).moonset
