# panchang/core/transitions.py
# -----------------------------------------------------------------------------
# When does the current tithi / nakshatra / yoga / karana end?
#
# All four are "a monotonically advancing angle reaches the next multiple of
# its span", so one bisection routine serves them all. Progress is measured
# as forward distance from the angle at the search start, which makes the
# 360° → 0° seam a non-event.
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from .angles import forward_diff, normalize
from .constants import KARANA_SPAN, NAKSHATRA_SPAN, TITHI_SPAN
from .elements import KaranaInfo, elongation, karana
from .ephemeris_adapter import Ephemeris
from .errors import InvalidInputError
from .settings import EngineSettings
from .timescales import ensure_aware, to_julian_day

log = logging.getLogger(__name__)

__all__ = [
    "AngleFn",
    "ElementEndTimes",
    "KaranaSpan",
    "find_boundary_crossing",
    "element_end_times",
    "karana_spans",
    "previous_new_moon",
]

AngleFn = Callable[[datetime], float]

DEFAULT_PRECISION = timedelta(seconds=60)
_SYNODIC_DEG_PER_DAY = 12.19
_LAST_INSTANT = datetime.max.replace(tzinfo=timezone.utc)

# nominal search windows; one doubling retry when enabled
_WINDOWS: Dict[str, timedelta] = {
    "tithi": timedelta(hours=24),
    "nakshatra": timedelta(hours=72),
    "yoga": timedelta(hours=24),
    "karana": timedelta(hours=24),
}


@dataclass(frozen=True)
class ElementEndTimes:
    tithi: Optional[datetime]
    nakshatra: Optional[datetime]
    yoga: Optional[datetime]
    karana: Optional[datetime]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class KaranaSpan:
    karana: KaranaInfo
    start: datetime
    end: Optional[datetime]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def find_boundary_crossing(
    start: datetime,
    angle_fn: AngleFn,
    target: float,
    search_window: timedelta,
    precision: timedelta = DEFAULT_PRECISION,
) -> Optional[datetime]:
    """
    First instant in [start, start + search_window] at which ``angle_fn``
    (advancing, degrees) reaches ``target``.

    Returns the upper end of the final bracket (so the element has already
    changed at the returned instant), ``start`` itself when the angle is
    already on the target, and None when the window ends first. A window
    running past 9999-12-31 is cut at the last representable instant.
    """
    start = ensure_aware(start)
    if search_window <= timedelta(0) or precision <= timedelta(0):
        raise InvalidInputError("invalid_window", "search_window and precision must be positive")

    a0 = normalize(angle_fn(start))
    dist = forward_diff(a0, normalize(target))
    if dist == 0.0:
        return start

    def progress(t: datetime) -> float:
        return forward_diff(a0, angle_fn(t))

    lo = start
    try:
        hi = start + search_window
        hi.astimezone(timezone.utc)
    except OverflowError:
        hi = _LAST_INSTANT
    if progress(hi) < dist:
        return None
    while hi - lo > precision:
        mid = lo + (hi - lo) / 2
        if progress(mid) < dist:
            lo = mid
        else:
            hi = mid
    return hi


def _next_boundary(angle: float, span: float) -> float:
    return normalize((int(normalize(angle) // span) + 1) * span)


def _search(name: str, start: datetime, fn: AngleFn, span: float,
            precision: timedelta, widen: bool) -> Optional[datetime]:
    target = _next_boundary(fn(start), span)
    window = _WINDOWS[name]
    hit = find_boundary_crossing(start, fn, target, window, precision)
    if hit is None and widen:
        hit = find_boundary_crossing(start, fn, target, window * 2, precision)
    if hit is None:
        log.debug("%s end not found within %s of %s", name, window * (2 if widen else 1), start.isoformat())
    return hit


def _elongation_fn(ephemeris: Ephemeris) -> AngleFn:
    def fn(t: datetime) -> float:
        jd = to_julian_day(t)
        return elongation(ephemeris.tropical(jd, "Moon").longitude, ephemeris.tropical(jd, "Sun").longitude)
    return fn


def _moon_sidereal_fn(ephemeris: Ephemeris, system_id: int) -> AngleFn:
    def fn(t: datetime) -> float:
        return ephemeris.sidereal(to_julian_day(t), "Moon", system_id).longitude
    return fn


def _yoga_sum_fn(ephemeris: Ephemeris, system_id: int) -> AngleFn:
    def fn(t: datetime) -> float:
        jd = to_julian_day(t)
        return normalize(
            ephemeris.sidereal(jd, "Sun", system_id).longitude
            + ephemeris.sidereal(jd, "Moon", system_id).longitude
        )
    return fn


def element_end_times(instant: datetime, ephemeris: Ephemeris, system_id: int,
                      settings: Optional[EngineSettings] = None) -> ElementEndTimes:
    cfg = settings if settings is not None else EngineSettings()
    precision = timedelta(seconds=cfg.transition_precision_s)
    widen = cfg.widen_transitions
    elong = _elongation_fn(ephemeris)
    return ElementEndTimes(
        tithi=_search("tithi", instant, elong, TITHI_SPAN, precision, widen),
        nakshatra=_search("nakshatra", instant, _moon_sidereal_fn(ephemeris, system_id), NAKSHATRA_SPAN, precision, widen),
        yoga=_search("yoga", instant, _yoga_sum_fn(ephemeris, system_id), NAKSHATRA_SPAN, precision, widen),
        karana=_search("karana", instant, elong, KARANA_SPAN, precision, widen),
    )


def karana_spans(start: datetime, end: datetime, ephemeris: Ephemeris,
                 settings: Optional[EngineSettings] = None) -> List[KaranaSpan]:
    """Karanas in effect over [start, end); the last span may run past ``end``."""
    start, end = ensure_aware(start), ensure_aware(end)
    if end <= start:
        raise InvalidInputError("invalid_window", "karana span period must end after it starts")
    cfg = settings if settings is not None else EngineSettings()
    precision = timedelta(seconds=cfg.transition_precision_s)
    elong = _elongation_fn(ephemeris)

    spans: List[KaranaSpan] = []
    t = start
    # a karana lasts at least ~8h, so a day holds at most four
    for _ in range(8):
        e = elong(t)
        current = karana(e, 0.0)
        stop = _search("karana", t, elong, KARANA_SPAN, precision, cfg.widen_transitions)
        spans.append(KaranaSpan(current, t, stop))
        if stop is None or stop >= end:
            break
        t = stop
    return spans


def previous_new_moon(instant: datetime, ephemeris: Ephemeris,
                      precision: timedelta = DEFAULT_PRECISION) -> Optional[datetime]:
    """Most recent conjunction (elongation 0°) at or before ``instant``."""
    instant = ensure_aware(instant)
    elong = _elongation_fn(ephemeris)
    days_back = elong(instant) / _SYNODIC_DEG_PER_DAY + 2.0
    try:
        start = instant - timedelta(days=days_back)
        hit = find_boundary_crossing(start, elong, 0.0, timedelta(days=5), precision)
    except OverflowError:
        log.warning("previous new moon before %s falls before 0001-01-01", instant.isoformat())
        return None
    if hit is None:
        log.debug("no new moon found in the 5 days after %s", start.isoformat())
    return hit
