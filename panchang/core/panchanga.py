# panchang/core/panchanga.py
# -----------------------------------------------------------------------------
# compute_panchanga: one (instant, location, ayanamsa) → PanchangaResult
#
# Policy
#   at="sunrise" (default): the five limbs are read at that civil day's
#   sunrise, the traditional almanac convention; when the Sun does not rise
#   (polar day/night) the requested instant is used instead and the basis is
#   reported as "instant".
#   at="instant": read exactly at the requested instant.
#
# Vara always follows the requested instant's civil date.
# Nothing here raises for polar latitudes or elongation seams; missing events
# are None and explained in ``warnings``.
# -----------------------------------------------------------------------------
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from . import ayanamsa as _ayanamsa
from .calendar_extras import (
    DayDurations,
    LunarMonth,
    PlanetPosition,
    SamvatYears,
    ayana,
    day_durations,
    lunar_month,
    planetary_positions,
    rashi,
    ritu,
    samvat,
)
from .elements import (
    KaranaInfo,
    NakshatraInfo,
    TithiInfo,
    VaraInfo,
    YogaInfo,
    karana,
    moon_phase,
    nakshatra,
    tithi,
    vara,
    yoga,
)
from .ephemeris_adapter import Ephemeris, EphemerisBackend, default_backend
from .errors import InvalidInputError
from .horizon import STATUS_NORMAL, MoonDay, SolarDay, lunar_events, solar_events
from .location import GeoLocation
from .muhurat import KalamWindows, MuhuratPeriods, kalam_periods, muhurat_periods
from .settings import EngineSettings
from .solar_lunar import CelestialPosition
from .timescales import ensure_in_range, local_civil_date, to_julian_day
from .transitions import ElementEndTimes, KaranaSpan, element_end_times, karana_spans, previous_new_moon

log = logging.getLogger(__name__)

__all__ = ["EVALUATION_POLICIES", "CalendarInfo", "PanchangaResult", "compute_panchanga"]

EVALUATION_POLICIES: Tuple[str, ...] = ("sunrise", "instant")

_MEAN_MOTION_BODIES = ("Mercury", "Venus", "Mars", "Jupiter", "Saturn")


def _plain(obj: Any) -> Any:
    """JSON-friendly view: nested to_dict() first, then datetimes / timedeltas / containers."""
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, timedelta):
        return obj.total_seconds()
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return _plain(to_dict())
    if dataclasses.is_dataclass(obj):
        return {f.name: _plain(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, dict):
        return {str(k): _plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_plain(v) for v in obj]
    return obj


@dataclass(frozen=True)
class CalendarInfo:
    lunar_month: Optional[LunarMonth]
    new_moon: Optional[datetime]
    samvat: SamvatYears
    sun_sign: str
    moon_sign: str
    surya_nakshatra: str
    ritu_drik: str
    ritu_vedic: str
    ayana_drik: str
    ayana_vedic: str
    day: Optional[DayDurations]
    karanas: Tuple[KaranaSpan, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _plain(getattr(self, f.name)) for f in dataclasses.fields(self)}


@dataclass(frozen=True)
class PanchangaResult:
    instant: datetime
    location: GeoLocation
    ayanamsa: _ayanamsa.AyanamsaValue
    backend: str
    evaluated_at: datetime
    evaluation_basis: str
    tithi: TithiInfo
    nakshatra: NakshatraInfo
    yoga: YogaInfo
    karana: KaranaInfo
    vara: VaraInfo
    moon_phase: str
    sun: CelestialPosition
    moon: CelestialPosition
    sunrise: Optional[datetime]
    sunset: Optional[datetime]
    solar_noon: Optional[datetime]
    moonrise: Optional[datetime]
    moonset: Optional[datetime]
    day_status: str
    end_times: ElementEndTimes
    kalam: Optional[KalamWindows]
    muhurat: Optional[MuhuratPeriods]
    calendar: CalendarInfo
    planets: Tuple[PlanetPosition, ...]
    warnings: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _plain(getattr(self, f.name)) for f in dataclasses.fields(self)}


def _validate(instant: datetime, location: Any, ayanamsa_system: Any, at: str) -> _ayanamsa.AyanamsaSystem:
    ensure_in_range(instant)
    if not isinstance(location, GeoLocation):
        raise InvalidInputError("invalid_location", f"location must be a GeoLocation, got {type(location).__name__}")
    system = _ayanamsa.get_system(ayanamsa_system)
    if at not in EVALUATION_POLICIES:
        raise InvalidInputError("invalid_policy", f"at must be one of {', '.join(EVALUATION_POLICIES)}, got {at!r}")
    return system


T = TypeVar("T")


def _near_range_limit(warnings: List[str], what: str, fn: Callable[[], T]) -> Optional[T]:
    """Run ``fn``; instants past 0001-01-01 / 9999-12-31 UTC turn into None plus a warning."""
    try:
        return fn()
    except OverflowError:
        log.warning("%s skipped: falls outside the representable date range", what)
        warnings.append(f"date_range_limit:{what}")
        return None


def compute_panchanga(
    instant: datetime,
    location: GeoLocation,
    ayanamsa_system: int = _ayanamsa.LAHIRI,
    *,
    backend: Optional[EphemerisBackend] = None,
    at: str = "sunrise",
    settings: Optional[EngineSettings] = None,
) -> PanchangaResult:
    """
    Full Panchanga for ``location`` on the civil day of ``instant``.

    ``backend`` defaults to the one named by ``settings.backend``; whatever
    it cannot answer comes from the portable model and is listed in
    ``warnings`` as ``ephemeris_fallback:<body>``.
    """
    system = _validate(instant, location, ayanamsa_system, at)
    cfg = settings if settings is not None else EngineSettings()
    ephem = Ephemeris(backend if backend is not None else default_backend(settings=cfg))
    warnings: List[str] = []

    solar = _near_range_limit(warnings, "horizon", lambda: solar_events(instant, location, ephemeris=ephem))
    horizon_known = solar is not None
    if solar is None:
        solar = SolarDay(None, None, None, STATUS_NORMAL)
    lunar = _near_range_limit(warnings, "moon", lambda: lunar_events(
        instant,
        location,
        ephemeris=ephem,
        step_minutes=cfg.moon_scan_step_min,
        precision_seconds=cfg.transition_precision_s,
    )) or MoonDay(None, None)

    if at == "sunrise" and solar.sunrise is not None:
        evaluated_at, basis = solar.sunrise, "sunrise"
    else:
        evaluated_at, basis = instant, "instant"
        if at == "sunrise" and horizon_known:
            warnings.append(f"no_sunrise:{solar.status}")
    if horizon_known and (solar.sunrise is None or solar.sunset is None):
        warnings.append(f"day_status:{solar.status}")

    jd = to_julian_day(evaluated_at)
    sun_t = ephem.tropical(jd, "Sun")
    moon_t = ephem.tropical(jd, "Moon")
    ayan_deg = ephem.ayanamsa(jd, system.id)
    sun_s = ephem.sidereal(jd, "Sun", system.id)
    moon_s = ephem.sidereal(jd, "Moon", system.id)
    if system.approximate:
        warnings.append("ayanamsa_approximate")

    th = tithi(moon_t.longitude, sun_t.longitude)
    nk = nakshatra(moon_s.longitude)
    vr = vara(instant)

    kalam: Optional[KalamWindows] = None
    muhurat: Optional[MuhuratPeriods] = None
    day: Optional[DayDurations] = None
    if solar.sunrise is not None and solar.sunset is not None:
        sr, ss = solar.sunrise, solar.sunset
        kalam = _near_range_limit(warnings, "kalam", lambda: kalam_periods(sr, ss, vr.number))
        muhurat = _near_range_limit(warnings, "muhurat", lambda: muhurat_periods(sr, ss, instant))
        day = day_durations(solar.sunrise, solar.sunset)

    end_times = element_end_times(evaluated_at, ephem, system.id, cfg)
    spans = _near_range_limit(
        warnings, "karana_spans", lambda: karana_spans(evaluated_at, evaluated_at + timedelta(hours=24), ephem, cfg)
    ) or []

    new_moon = previous_new_moon(evaluated_at, ephem, timedelta(seconds=cfg.transition_precision_s))
    month: Optional[LunarMonth] = None
    if new_moon is None:
        warnings.append("new_moon_not_found")
    else:
        nm_sun = ephem.sidereal(to_julian_day(new_moon), "Sun", system.id)
        month = lunar_month(nm_sun.longitude, th.paksha)

    calendar = CalendarInfo(
        lunar_month=month,
        new_moon=new_moon,
        samvat=samvat(local_civil_date(instant)),
        sun_sign=rashi(sun_s.longitude),
        moon_sign=rashi(moon_s.longitude),
        surya_nakshatra=nakshatra(sun_s.longitude).name,
        ritu_drik=ritu(sun_t.longitude),
        ritu_vedic=ritu(sun_s.longitude),
        ayana_drik=ayana(sun_t.longitude),
        ayana_vedic=ayana(sun_s.longitude),
        day=day,
        karanas=tuple(spans),
    )
    planets = planetary_positions(jd, ephem, system.id)

    warnings.extend(f"ephemeris_fallback:{body}" for body in ephem.fallbacks)
    if any(p.source == "portable" for p in planets if p.body in _MEAN_MOTION_BODIES):
        warnings.append("planets_mean_motion")

    log.debug(
        "panchanga %s @ (%.4f, %.4f) basis=%s backend=%s tithi=%s nakshatra=%s",
        instant.isoformat(), location.latitude, location.longitude, basis, ephem.name, th.name, nk.name,
    )
    return PanchangaResult(
        instant=instant,
        location=location,
        ayanamsa=_ayanamsa.AyanamsaValue(system.id, system.name, ayan_deg, system.description),
        backend=ephem.name,
        evaluated_at=evaluated_at,
        evaluation_basis=basis,
        tithi=th,
        nakshatra=nk,
        yoga=yoga(sun_s.longitude, moon_s.longitude),
        karana=karana(moon_t.longitude, sun_t.longitude),
        vara=vr,
        moon_phase=moon_phase(moon_t.longitude, sun_t.longitude),
        sun=sun_s,
        moon=moon_s,
        sunrise=solar.sunrise,
        sunset=solar.sunset,
        solar_noon=solar.solar_noon,
        moonrise=lunar.moonrise,
        moonset=lunar.moonset,
        day_status=solar.status,
        end_times=end_times,
        kalam=kalam,
        muhurat=muhurat,
        calendar=calendar,
        planets=planets,
        warnings=tuple(warnings),
    )
