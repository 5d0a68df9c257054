# panchang/core/calendar_extras.py
"""
Calendar context around the five limbs.

Lunar month (amanta/purnimanta), samvat years and the 60-year samvatsara,
Kali ahargana, rashi placements, ritu and ayana (drik = tropical Sun,
vedic = sidereal Sun), day/night lengths, and the navagraha table.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Tuple

from .angles import normalize
from .constants import (
    GRAHAS,
    LUNAR_MONTHS,
    RASHI_NAMES,
    RASHI_SPAN,
    RITU_NAMES,
    SAMVATSARA_NAMES,
)
from .elements import nakshatra
from .ephemeris_adapter import Ephemeris
from .errors import InvalidInputError
from .timescales import jd_at_midnight_ut

__all__ = [
    "KALI_EPOCH_JD",
    "LunarMonth",
    "SamvatYears",
    "DayDurations",
    "PlanetPosition",
    "paksha",
    "lunar_month",
    "samvat",
    "rashi_index",
    "rashi",
    "ritu",
    "ayana",
    "day_durations",
    "planetary_positions",
]

# Julian calendar −3101-02-18 0h (Kali Yuga epoch)
KALI_EPOCH_JD = 588465.5


@dataclass(frozen=True)
class LunarMonth:
    amanta: str
    purnimanta: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SamvatYears:
    shaka: int
    vikrama: int
    gujarati: int
    samvatsara: str
    kali_ahargana: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DayDurations:
    dinamana: timedelta
    ratrimana: timedelta
    madhyahna: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dinamana_seconds": self.dinamana.total_seconds(),
            "ratrimana_seconds": self.ratrimana.total_seconds(),
            "madhyahna": self.madhyahna.isoformat(),
        }


@dataclass(frozen=True)
class PlanetPosition:
    body: str
    longitude: float
    latitude: float
    rashi: str
    degree_in_rashi: float
    nakshatra: str
    pada: int
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def paksha(tithi_absolute: int) -> str:
    if isinstance(tithi_absolute, bool) or not 1 <= int(tithi_absolute) <= 30:
        raise InvalidInputError("invalid_tithi", f"tithi must be 1..30, got {tithi_absolute!r}")
    return "Shukla" if int(tithi_absolute) <= 15 else "Krishna"


def rashi_index(lon: float) -> int:
    return min(int(normalize(lon) // RASHI_SPAN), 11)


def rashi(lon: float) -> str:
    return RASHI_NAMES[rashi_index(lon)]


def lunar_month(new_moon_sun_sidereal_lon: float, paksha_name: str) -> LunarMonth:
    """
    Month named by the sign the Sun occupies at the new moon that opens it
    (Sun in Mesha → Vaishakha, …). In Krishna paksha the purnimanta month
    has already rolled over to the next name.
    """
    i = (rashi_index(new_moon_sun_sidereal_lon) + 1) % 12
    j = (i + 1) % 12 if paksha_name == "Krishna" else i
    return LunarMonth(amanta=LUNAR_MONTHS[i], purnimanta=LUNAR_MONTHS[j])


def samvat(civil_date: date) -> SamvatYears:
    y = civil_date.year
    shaka = y - 78
    return SamvatYears(
        shaka=shaka,
        vikrama=y + 57,
        gujarati=y + 56,
        samvatsara=SAMVATSARA_NAMES[(shaka + 11) % 60],
        kali_ahargana=int(math.floor(jd_at_midnight_ut(civil_date) - KALI_EPOCH_JD)),
    )


def ritu(sun_lon: float) -> str:
    # Vasanta = Meena + Mesha, then two signs per season
    return RITU_NAMES[int(normalize(sun_lon + 30.0) // 60.0) % 6]


def ayana(sun_lon: float) -> str:
    lon = normalize(sun_lon)
    return "Uttarayana" if lon >= 270.0 or lon < 90.0 else "Dakshinayana"


def day_durations(sunrise: datetime, sunset: datetime) -> DayDurations:
    if sunset <= sunrise:
        raise InvalidInputError("invalid_window", "sunset must be after sunrise")
    day = sunset - sunrise
    return DayDurations(dinamana=day, ratrimana=timedelta(hours=24) - day, madhyahna=sunrise + day / 2)


def planetary_positions(jd: float, ephemeris: Ephemeris, system_id: int,
                        bodies: Tuple[str, ...] = GRAHAS) -> Tuple[PlanetPosition, ...]:
    out = []
    for body in bodies:
        pos = ephemeris.sidereal(jd, body, system_id)
        nk = nakshatra(pos.longitude)
        out.append(PlanetPosition(
            body=body,
            longitude=pos.longitude,
            latitude=pos.latitude,
            rashi=rashi(pos.longitude),
            degree_in_rashi=math.fmod(pos.longitude, RASHI_SPAN),
            nakshatra=nk.name,
            pada=nk.pada,
            source=pos.source,
        ))
    return tuple(out)
