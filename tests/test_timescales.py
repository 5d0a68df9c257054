# tests/test_timescales.py
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from hypothesis import given, strategies as st

from panchang.core.errors import InvalidInputError
from panchang.core.timescales import (
    J2000_JD,
    delta_t_seconds,
    ensure_in_range,
    from_julian_day,
    jd_at_midnight_ut,
    local_civil_date,
    parse_instant,
    to_julian_day,
)

TZS = [
    "UTC",
    "Asia/Kolkata",         # +05:30 no DST
    "Australia/Eucla",      # +08:45 quarter-hour
    "America/New_York",     # DST region
    "America/St_Johns",     # -03:30
    "Pacific/Kiritimati",   # +14:00 extreme positive
    "Pacific/Pago_Pago",    # -11:00 extreme negative
]

# ─────────────────────────────────────────────────────────────────────────────
# Julian Day
# ─────────────────────────────────────────────────────────────────────────────

def test_j2000_epoch() -> None:
    assert to_julian_day(datetime(2000, 1, 1, 12, tzinfo=timezone.utc)) == J2000_JD


def test_meeus_reference_date() -> None:
    # Meeus example 7.a: 1957-10-04.81
    t = datetime(1957, 10, 4, 19, 26, 24, tzinfo=timezone.utc)
    assert to_julian_day(t) == pytest.approx(2436116.31, abs=1e-6)


def test_same_instant_same_jd_regardless_of_offset() -> None:
    utc = datetime(2025, 7, 20, 19, 0, tzinfo=timezone.utc)
    local = utc.astimezone(ZoneInfo("America/Vancouver"))
    assert to_julian_day(utc) == to_julian_day(local)


def test_naive_datetime_rejected() -> None:
    with pytest.raises(InvalidInputError) as exc:
        to_julian_day(datetime(2025, 1, 1))
    assert exc.value.code == "naive_datetime"


@pytest.mark.parametrize("bad", [float("nan"), float("inf")])
def test_from_julian_day_rejects_non_finite(bad: float) -> None:
    with pytest.raises(InvalidInputError):
        from_julian_day(bad)


# 0000-12-30 12h and 10000-01-01 12h UT
@pytest.mark.parametrize("jd", [1721424.0, 5373485.0])
def test_from_julian_day_outside_datetime_range_overflows(jd: float) -> None:
    with pytest.raises(OverflowError):
        from_julian_day(jd)


def test_ensure_in_range_rejects_unrepresentable_utc() -> None:
    ist = timezone(timedelta(hours=5, minutes=30))
    with pytest.raises(InvalidInputError) as exc:
        ensure_in_range(datetime(1, 1, 1, 2, tzinfo=ist))
    assert exc.value.code == "out_of_range"
    edge = datetime(9999, 12, 31, 23, tzinfo=timezone.utc)
    assert ensure_in_range(edge) is edge


@given(
    y=st.integers(min_value=1, max_value=9998),
    doy=st.integers(min_value=0, max_value=364),
    secs=st.integers(min_value=0, max_value=86399),
)
def test_julian_day_round_trip_sub_second(y: int, doy: int, secs: int) -> None:
    t = datetime(y, 1, 1, tzinfo=timezone.utc) + timedelta(days=doy, seconds=secs)
    back = from_julian_day(to_julian_day(t))
    assert abs((back - t).total_seconds()) < 1.0

# ─────────────────────────────────────────────────────────────────────────────
# ΔT and civil days
# ─────────────────────────────────────────────────────────────────────────────

def test_delta_t_modern_and_pre_1960(ensure_erfa) -> None:
    assert delta_t_seconds(J2000_JD) == pytest.approx(32.0 + 32.184)
    assert delta_t_seconds(2415020.5) == pytest.approx(32.184)


def test_local_civil_date_uses_instants_own_offset() -> None:
    t = datetime(2025, 7, 20, 23, 30, tzinfo=timezone(timedelta(hours=-7)))
    assert local_civil_date(t) == date(2025, 7, 20)
    assert local_civil_date(t.astimezone(timezone.utc)) == date(2025, 7, 21)


def test_jd_at_midnight_ut() -> None:
    assert jd_at_midnight_ut(date(2000, 1, 1)) == J2000_JD - 0.5

# ─────────────────────────────────────────────────────────────────────────────
# Parsing
# ─────────────────────────────────────────────────────────────────────────────

def test_parse_instant_basic(ensure_tzdata) -> None:
    p = parse_instant("2025-07-20", "12:00", "America/Vancouver")
    assert p.instant.utcoffset() == timedelta(hours=-7)
    assert p.tz_offset_seconds == -7 * 3600
    assert p.timezone == "America/Vancouver"
    assert p.warnings == []


def test_dst_ambiguity_warning_new_york_fall_back() -> None:
    p = parse_instant("2024-11-03", "01:30:00", "America/New_York")
    assert "dst_ambiguous_fold0" in p.warnings
    assert p.tz_offset_seconds == -4 * 3600


def test_dst_gap_warning_new_york_spring_forward() -> None:
    p = parse_instant("2024-03-10", "02:30", "America/New_York")
    assert "dst_gap_shifted" in p.warnings


def test_microsecond_clamp_warning() -> None:
    p = parse_instant("2025-01-01", "00:00:00.1234567", "UTC")
    assert "time_fraction_clamped_to_microseconds" in p.warnings
    assert p.instant.microsecond == 123456


@pytest.mark.parametrize(
    "d, t, tz, code",
    [
        ("2025-13-01", "00:00", "UTC", "invalid_date"),
        ("20250101", "00:00", "UTC", "invalid_date"),
        ("2025-01-01", "25:00", "UTC", "invalid_time"),
        ("2025-01-01", "noon", "UTC", "invalid_time"),
        ("2025-01-01", "00:00", "Mars/Olympus_Mons", "invalid_timezone"),
    ],
)
def test_parse_instant_rejects(d: str, t: str, tz: str, code: str) -> None:
    with pytest.raises(InvalidInputError) as exc:
        parse_instant(d, t, tz)
    assert exc.value.code == code


@given(tz=st.sampled_from(TZS), hh=st.integers(0, 23), mm=st.integers(0, 59))
def test_parse_then_jd_is_offset_independent(tz: str, hh: int, mm: int) -> None:
    p = parse_instant("2025-01-15", f"{hh:02d}:{mm:02d}", tz)
    assert to_julian_day(p.instant) == pytest.approx(to_julian_day(p.instant.astimezone(timezone.utc)), abs=1e-9)
