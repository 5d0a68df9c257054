# panchang/core/elements.py
# -----------------------------------------------------------------------------
# The five limbs: tithi, nakshatra, yoga, karana, vara (+ moon phase bucket)
#
# Inputs are longitudes in degrees. Tithi/karana/phase depend only on the
# Moon–Sun elongation, so tropical or sidereal inputs give the same answer;
# nakshatra and yoga expect SIDEREAL longitudes.
# -----------------------------------------------------------------------------
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict

from .angles import normalize
from .constants import (
    AMAVASYA,
    FIXED_KARANAS,
    KARANA_SPAN,
    MOON_PHASES,
    MOVABLE_KARANA_SLOTS,
    MOVABLE_KARANAS,
    NAKSHATRA_LORE,
    NAKSHATRA_SPAN,
    PADA_SPAN,
    PURNIMA,
    TITHI_NAMES,
    TITHI_SPAN,
    VARA_LORDS,
    VARA_NAMES,
    YOGA_NAMES,
)
from .timescales import local_civil_date

__all__ = [
    "TithiInfo",
    "NakshatraInfo",
    "NakshatraLore",
    "YogaInfo",
    "KaranaInfo",
    "VaraInfo",
    "elongation",
    "tithi",
    "nakshatra",
    "yoga",
    "karana",
    "karana_from_cycle_index",
    "vara",
    "moon_phase",
]


@dataclass(frozen=True)
class TithiInfo:
    number: int
    absolute: int
    name: str
    paksha: str
    is_waxing: bool
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NakshatraLore:
    ruler: str
    deity: str
    symbol: str


@dataclass(frozen=True)
class NakshatraInfo:
    number: int
    pada: int
    name: str
    ruler_data: NakshatraLore
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class YogaInfo:
    number: int
    name: str
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class KaranaInfo:
    number: int
    name: str
    cycle_index: int
    movable: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class VaraInfo:
    number: int
    name: str
    lord: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _bucket(angle: float, span: float, count: int) -> int:
    # float noise at the very top of the circle must not produce index == count
    return min(int(math.floor(angle / span)), count - 1)


def _percent_within(angle: float, span: float) -> float:
    pct = (math.fmod(angle, span) / span) * 100.0
    return pct if pct < 100.0 else 0.0


def elongation(moon_lon: float, sun_lon: float) -> float:
    """Moon − Sun, degrees in [0, 360)."""
    return normalize(moon_lon - sun_lon)

# ───────────────────────────── tithi ─────────────────────────────

def tithi(moon_lon: float, sun_lon: float) -> TithiInfo:
    e = elongation(moon_lon, sun_lon)
    absolute = _bucket(e, TITHI_SPAN, 30) + 1
    waxing = absolute <= 15
    number = absolute if waxing else absolute - 15
    if number == 15:
        name = PURNIMA if waxing else AMAVASYA
    else:
        name = TITHI_NAMES[number - 1]
    return TithiInfo(
        number=number,
        absolute=absolute,
        name=name,
        paksha="Shukla" if waxing else "Krishna",
        is_waxing=waxing,
        percentage=_percent_within(e, TITHI_SPAN),
    )

# ───────────────────────────── nakshatra ─────────────────────────────

def nakshatra(moon_sidereal_lon: float) -> NakshatraInfo:
    lon = normalize(moon_sidereal_lon)
    idx = _bucket(lon, NAKSHATRA_SPAN, 27)
    within = lon - idx * NAKSHATRA_SPAN
    pada = min(int(math.floor(within / PADA_SPAN)), 3) + 1
    name, ruler, deity, symbol = NAKSHATRA_LORE[idx]
    return NakshatraInfo(
        number=idx + 1,
        pada=pada,
        name=name,
        ruler_data=NakshatraLore(ruler, deity, symbol),
        percentage=_percent_within(within, NAKSHATRA_SPAN),
    )

# ───────────────────────────── yoga ─────────────────────────────

def yoga(sun_sidereal_lon: float, moon_sidereal_lon: float) -> YogaInfo:
    s = normalize(sun_sidereal_lon + moon_sidereal_lon)
    idx = _bucket(s, NAKSHATRA_SPAN, 27)
    return YogaInfo(number=idx + 1, name=YOGA_NAMES[idx], percentage=_percent_within(s, NAKSHATRA_SPAN))

# ───────────────────────────── karana ─────────────────────────────

def karana_from_cycle_index(cycle_index: int) -> KaranaInfo:
    """
    Half-tithi slot → karana.

    Slots 0..56 rotate through the seven movable karanas; 57..59 are the
    fixed Shakuni, Chatushpada, Naga. Kimstughna is kept in the table for the
    clamp but a 60-slot cycle never reaches it.
    """
    ci = max(0, min(int(cycle_index), 59))
    if ci < MOVABLE_KARANA_SLOTS:
        return KaranaInfo(number=ci + 1, name=MOVABLE_KARANAS[ci % 7], cycle_index=ci, movable=True)
    k = ci - MOVABLE_KARANA_SLOTS
    return KaranaInfo(
        number=min(MOVABLE_KARANA_SLOTS + 1 + k, 60),
        name=FIXED_KARANAS[min(k, len(FIXED_KARANAS) - 1)],
        cycle_index=ci,
        movable=False,
    )


def karana(moon_lon: float, sun_lon: float) -> KaranaInfo:
    return karana_from_cycle_index(_bucket(elongation(moon_lon, sun_lon), KARANA_SPAN, 60))

# ───────────────────────────── vara / phase ─────────────────────────────

def vara(instant: datetime) -> VaraInfo:
    # isoweekday: Mon=1..Sun=7 → Sun=0..Sat=6
    n = local_civil_date(instant).isoweekday() % 7
    return VaraInfo(number=n, name=VARA_NAMES[n], lord=VARA_LORDS[n])


def moon_phase(moon_lon: float, sun_lon: float) -> str:
    return MOON_PHASES[_bucket(elongation(moon_lon, sun_lon), 45.0, 8)]
