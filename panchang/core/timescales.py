# panchang/core/timescales.py
# -----------------------------------------------------------------------------
# Civil time ⇄ Julian Day for the Panchanga engine
#
# Public API:
#   to_julian_day(instant) -> float            (Meeus, UTC calendar fields only)
#   from_julian_day(jd) -> datetime (UTC)      (inverse Meeus, µs resolution)
#   delta_t_seconds(jd_ut) / jd_tt(jd_ut)      (ERFA: TAI−UTC + 32.184 s)
#   local_civil_date(instant), jd_at_midnight_ut(date)
#   parse_instant(date_str, time_str, tz_name) -> ParsedInstant
#
# Guarantees:
#   • Same instant → same JD regardless of the machine TZ.
#   • Proleptic Gregorian throughout; no leap-second modelling in JD(UTC).
#   • DST ambiguity / gaps are flagged, never silently "fixed".
#   • Instants past 0001-01-01 / 9999-12-31 UTC raise OverflowError, the same
#     error datetime arithmetic raises there.
# -----------------------------------------------------------------------------
from __future__ import annotations

import math
import re
import warnings
from dataclasses import asdict, dataclass
from datetime import MAXYEAR, MINYEAR, date, datetime, time, timedelta, timezone
from typing import Any, Dict, List, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import erfa  # pyERFA

from .errors import InvalidInputError

__all__ = [
    "J2000_JD",
    "ParsedInstant",
    "ensure_aware",
    "ensure_in_range",
    "to_julian_day",
    "from_julian_day",
    "days_since_j2000",
    "julian_centuries",
    "delta_t_seconds",
    "jd_tt",
    "local_civil_date",
    "local_midnight",
    "jd_at_midnight_ut",
    "parse_instant",
]

J2000_JD = 2451545.0
TT_MINUS_TAI_S = 32.184

# ───────────────────────────── Julian Day ─────────────────────────────

def ensure_aware(instant: datetime, *, what: str = "instant") -> datetime:
    if not isinstance(instant, datetime):
        raise InvalidInputError("invalid_instant", f"{what} must be a datetime, got {type(instant).__name__}")
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise InvalidInputError("naive_datetime", f"{what} must be timezone-aware")
    return instant


def ensure_in_range(instant: datetime, *, what: str = "instant") -> datetime:
    """Reject aware instants whose UTC equivalent falls outside years 1..9999."""
    ensure_aware(instant, what=what)
    try:
        instant.astimezone(timezone.utc)
    except OverflowError as e:
        raise InvalidInputError("out_of_range", f"{what} {instant.isoformat()} is outside 0001-01-01..9999-12-31 UTC") from e
    return instant


def to_julian_day(instant: datetime) -> float:
    """Julian Day (UTC) of an aware datetime, Meeus ch. 7."""
    u = ensure_aware(instant).astimezone(timezone.utc)
    y, m = u.year, u.month
    day = u.day + (u.hour + (u.minute + (u.second + u.microsecond / 1e6) / 60.0) / 60.0) / 24.0
    if m <= 2:
        y -= 1
        m += 12
    a = math.floor(y / 100)
    b = 2 - a + math.floor(a / 4)
    return math.floor(365.25 * (y + 4716)) + math.floor(30.6001 * (m + 1)) + day + b - 1524.5


def from_julian_day(jd: float) -> datetime:
    """Inverse of :func:`to_julian_day`; returns an aware UTC datetime."""
    jd = float(jd)
    if not math.isfinite(jd):
        raise InvalidInputError("non_finite", f"Julian Day must be finite, got {jd!r}")
    z = math.floor(jd + 0.5)
    f = (jd + 0.5) - z
    alpha = math.floor((z - 1867216.25) / 36524.25)
    a = z + 1 + alpha - math.floor(alpha / 4)
    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)
    day = int(b - d - math.floor(30.6001 * e))
    month = int(e - 1 if e < 14 else e - 13)
    year = int(c - 4716 if month > 2 else c - 4715)
    if not MINYEAR <= year <= MAXYEAR:
        raise OverflowError(f"Julian Day {jd} falls in year {year}, outside the datetime range")
    return datetime(year, month, day, tzinfo=timezone.utc) + timedelta(days=f)


def days_since_j2000(jd: float) -> float:
    return jd - J2000_JD


def julian_centuries(jd: float) -> float:
    return (jd - J2000_JD) / 36525.0


def _split_jd(jd: float) -> Tuple[float, float]:
    d = math.floor(jd)
    return float(d), float(jd - d)

# ───────────────────────────── ΔT (ERFA) ─────────────────────────────

def delta_t_seconds(jd_ut: float) -> float:
    """
    TT − UTC in seconds: ERFA ΔAT plus the fixed 32.184 s.

    Before 1960 ERFA has no leap-second table and yields ΔAT = 0, so only the
    TT−TAI offset remains; outside the table's validity ERFA warns "dubious
    year", which is expected here and silenced.
    """
    d1, d2 = _split_jd(jd_ut)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", erfa.ErfaWarning)
        iy, im, iday, fd = erfa.jd2cal(d1, d2)
        dat = erfa.dat(int(iy), int(im), int(iday), float(fd))
    return float(dat) + TT_MINUS_TAI_S


def jd_tt(jd_ut: float) -> float:
    return jd_ut + delta_t_seconds(jd_ut) / 86400.0

# ───────────────────────────── Civil dates ─────────────────────────────

def local_civil_date(instant: datetime) -> date:
    """Calendar date of the instant in its own UTC offset (never the machine TZ)."""
    return ensure_aware(instant).date()


def local_midnight(instant: datetime) -> datetime:
    inst = ensure_aware(instant)
    return datetime.combine(inst.date(), time(0, 0), tzinfo=inst.tzinfo)


def jd_at_midnight_ut(civil_date: date) -> float:
    return to_julian_day(datetime.combine(civil_date, time(0, 0), tzinfo=timezone.utc))

# ───────────────────────────── Parsing ─────────────────────────────

_DATE_RE = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})\s*$")
_TIME_RE = re.compile(r"^\s*(?P<h>\d{1,2}):(?P<m>\d{2})(?::(?P<s>\d{2})(?:\.(?P<f>\d+))?)?\s*$")


@dataclass(frozen=True)
class ParsedInstant:
    instant: datetime
    timezone: str
    tz_offset_seconds: int
    warnings: List[str]

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["instant"] = self.instant.isoformat()
        return out


def _parse_date_str(date_str: str) -> date:
    m = _DATE_RE.match(date_str or "")
    if not m:
        raise InvalidInputError("invalid_date", f"Invalid date '{date_str}': expected YYYY-MM-DD")
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError as e:
        raise InvalidInputError("invalid_date", str(e)) from e


def _parse_time_str(time_str: str) -> Tuple[time, List[str]]:
    m = _TIME_RE.match(time_str or "")
    if not m:
        raise InvalidInputError("invalid_time", f"Invalid time '{time_str}': expected HH:MM[:SS[.frac]]")
    hh, mm = int(m.group("h")), int(m.group("m"))
    ss = int(m.group("s") or 0)
    frac = m.group("f") or ""
    if not (0 <= hh <= 23 and 0 <= mm <= 59 and 0 <= ss <= 59):
        raise InvalidInputError("invalid_time", f"time fields out of range: {time_str!r}")
    warn: List[str] = []
    if len(frac) > 6:
        warn.append("time_fraction_clamped_to_microseconds")
    micro = int((frac[:6]).ljust(6, "0")) if frac else 0
    return time(hh, mm, ss, micro), warn


def _resolve_zone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo((tz_name or "UTC").strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidInputError("invalid_timezone", f"timezone must be an IANA zone like 'Asia/Kolkata', got {tz_name!r}") from e


def _fold_offsets(z: ZoneInfo, naive_local: datetime) -> Tuple[datetime, List[str]]:
    """Attach the zone, preferring fold=0; flag ambiguous and non-existent wall times."""
    warn: List[str] = []
    a = naive_local.replace(tzinfo=z, fold=0)
    b = naive_local.replace(tzinfo=z, fold=1)
    if a.utcoffset() != b.utcoffset():
        # round-trip through UTC tells a gap from an overlap
        back = a.astimezone(timezone.utc).astimezone(z).replace(tzinfo=None)
        if back == naive_local:
            warn.append("dst_ambiguous_fold0")
        else:
            warn.append("dst_gap_shifted")
    return a, warn


def parse_instant(date_str: str, time_str: str, tz_name: str = "UTC") -> ParsedInstant:
    """Civil date + wall time + IANA zone → aware instant (plus structured warnings)."""
    d = _parse_date_str(date_str)
    t, warn = _parse_time_str(time_str)
    z = _resolve_zone(tz_name)
    local, fold_warn = _fold_offsets(z, datetime.combine(d, t))
    warn.extend(fold_warn)
    offset = local.utcoffset() or timedelta(0)
    return ParsedInstant(
        instant=local,
        timezone=str(z.key),
        tz_offset_seconds=int(offset.total_seconds()),
        warnings=warn,
    )
