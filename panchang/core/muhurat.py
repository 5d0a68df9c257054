# panchang/core/muhurat.py
# -----------------------------------------------------------------------------
# Kalam (eighths of daylight) and Muhurat (fifteenths of day / night) windows
#
#   kalam_periods(sunrise, sunset, weekday)     → KalamWindows
#   muhurat_periods(sunrise, sunset, instant)   → MuhuratPeriods
#   active_muhurats(at, periods) / next_muhurat(at, periods)
#
# weekday: 0 = Sunday … 6 = Saturday. Windows are half-open [start, end).
# -----------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from .errors import InvalidInputError
from .timescales import ensure_aware, local_civil_date

__all__ = [
    "TimeWindow",
    "KalamWindows",
    "MuhuratPeriods",
    "RAHU_KALAM_PART",
    "GULIKAI_KALAM_PART",
    "YAMAGANDA_PART",
    "SARVARTHA_SIDDHI",
    "kalam_periods",
    "muhurat_periods",
    "active_muhurats",
    "next_muhurat",
]

# part index (0..7) of the daylight eighth, Sunday..Saturday
RAHU_KALAM_PART: Tuple[int, ...] = (7, 1, 6, 4, 5, 3, 2)
GULIKAI_KALAM_PART: Tuple[int, ...] = (6, 5, 4, 3, 2, 1, 0)
YAMAGANDA_PART: Tuple[int, ...] = (4, 3, 2, 1, 0, 6, 5)

SARVARTHA_SIDDHI: Tuple[str, ...] = (
    "Ahoratri", "Madhyahna", "Sayahna", "Pratah", "Ahoratri", "Madhyahna", "Sayahna",
)

_DAY = timedelta(hours=24)


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime

    def __contains__(self, t: datetime) -> bool:
        return self.start <= t < self.end

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class KalamWindows:
    rahu: TimeWindow
    gulikai: TimeWindow
    yamaganda: TimeWindow

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name).to_dict() for f in fields(self)}


@dataclass(frozen=True)
class MuhuratPeriods:
    abhijita: TimeWindow
    amrit_kalam: TimeWindow
    amrit_siddhi: TimeWindow
    vijaya: TimeWindow
    godhuli: TimeWindow
    sayahna_sandhya: TimeWindow
    nishita: TimeWindow
    brahma: TimeWindow
    pratah_sandhya: TimeWindow
    sarvartha_siddhi: str

    def windows(self) -> List[Tuple[str, TimeWindow]]:
        return [(f.name, getattr(self, f.name)) for f in fields(self) if f.name != "sarvartha_siddhi"]

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {name: w.to_dict() for name, w in self.windows()}
        out["sarvartha_siddhi"] = self.sarvartha_siddhi
        return out


def _check_day(sunrise: datetime, sunset: datetime, weekday: int) -> timedelta:
    ensure_aware(sunrise, what="sunrise")
    ensure_aware(sunset, what="sunset")
    if sunset <= sunrise:
        raise InvalidInputError("invalid_window", "sunset must be after sunrise")
    if isinstance(weekday, bool) or not isinstance(weekday, int) or not 0 <= weekday <= 6:
        raise InvalidInputError("invalid_weekday", f"weekday must be 0 (Sunday)..6 (Saturday), got {weekday!r}")
    return sunset - sunrise


def _part(sunrise: datetime, unit: timedelta, index: int) -> TimeWindow:
    return TimeWindow(sunrise + unit * index, sunrise + unit * (index + 1))


def kalam_periods(sunrise: datetime, sunset: datetime, weekday: int) -> KalamWindows:
    eighth = _check_day(sunrise, sunset, weekday) / 8
    return KalamWindows(
        rahu=_part(sunrise, eighth, RAHU_KALAM_PART[weekday]),
        gulikai=_part(sunrise, eighth, GULIKAI_KALAM_PART[weekday]),
        yamaganda=_part(sunrise, eighth, YAMAGANDA_PART[weekday]),
    )


def muhurat_periods(sunrise: datetime, sunset: datetime, instant: datetime) -> MuhuratPeriods:
    """
    Named muhurats from one day's sunrise/sunset; ``instant`` fixes the
    weekday (its own civil date) for the Sarvartha Siddhi label.

    A day muhurat is daylight/15 and a night muhurat (24h − daylight)/15;
    Abhijita is the 8th day muhurat, Nishita the 8th night muhurat, Brahma
    the second-to-last night muhurat before sunrise.
    """
    weekday = local_civil_date(instant).isoweekday() % 7
    daylight = _check_day(sunrise, sunset, weekday)
    d = daylight / 15
    n = (_DAY - daylight) / 15
    return MuhuratPeriods(
        abhijita=_part(sunrise, d, 7),
        amrit_kalam=_part(sunrise, d, 6),
        amrit_siddhi=_part(sunrise, d, 2),
        vijaya=_part(sunrise, d, 11),
        godhuli=TimeWindow(sunset - timedelta(minutes=24), sunset + timedelta(minutes=24)),
        sayahna_sandhya=TimeWindow(sunset - timedelta(minutes=12), sunset + timedelta(minutes=12)),
        nishita=_part(sunset, n, 7),
        brahma=TimeWindow(sunrise - 2 * n, sunrise - n),
        pratah_sandhya=TimeWindow(sunrise - n, sunrise),
        sarvartha_siddhi=SARVARTHA_SIDDHI[weekday],
    )


def active_muhurats(at: datetime, periods: MuhuratPeriods) -> List[str]:
    """Names of every muhurat window containing ``at`` (they can overlap)."""
    at = ensure_aware(at)
    return [name for name, w in periods.windows() if at in w]


def next_muhurat(at: datetime, periods: MuhuratPeriods) -> Optional[Tuple[str, TimeWindow]]:
    at = ensure_aware(at)
    upcoming = sorted(
        ((name, w) for name, w in periods.windows() if w.start > at),
        key=lambda item: item[1].start,
    )
    return upcoming[0] if upcoming else None
