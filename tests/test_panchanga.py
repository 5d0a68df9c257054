# tests/test_panchanga.py
from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from panchang.core.ephemeris_adapter import ErfaEphemeris, PortableEphemeris
from panchang.core.errors import InvalidInputError
from panchang.core.location import GeoLocation
from panchang.core.panchanga import compute_panchanga
from panchang.core.report import format_report
from panchang.core.settings import EngineSettings

UTC = timezone.utc
TROMSO = GeoLocation(69.65, 18.96, timezone="Europe/Oslo", name="Tromsø")
UJJAIN = GeoLocation(23.18, 75.78, timezone="Asia/Kolkata", name="Ujjain")
DHAKA = GeoLocation(23.81, 90.41, timezone="Asia/Dhaka", name="Dhaka")


@pytest.fixture
def at_sunrise(kelowna, kelowna_noon):
    return compute_panchanga(kelowna_noon, kelowna, backend=PortableEphemeris())


@pytest.fixture
def at_instant(kelowna, kelowna_noon):
    return compute_panchanga(kelowna_noon, kelowna, backend=PortableEphemeris(), at="instant")

# ─────────────────────────────────────────────────────────────────────────────
# Kelowna, Sunday 2025-07-20
# ─────────────────────────────────────────────────────────────────────────────

def test_kelowna_at_sunrise(at_sunrise) -> None:
    r = at_sunrise
    assert r.evaluation_basis == "sunrise"
    assert r.evaluated_at == r.sunrise
    assert abs(r.sunrise - datetime(2025, 7, 20, 12, 12, tzinfo=UTC)) < timedelta(minutes=5)
    assert r.vara.name == "Sunday"
    assert (r.tithi.absolute, r.tithi.name, r.tithi.paksha) == (26, "Ekadashi", "Krishna")
    assert r.nakshatra.name == "Krittika"
    assert r.yoga.name == "Ganda"
    assert r.karana.movable
    assert r.day_status == "normal"


def test_kelowna_at_instant(at_instant, kelowna_noon) -> None:
    r = at_instant
    assert r.evaluation_basis == "instant"
    assert r.evaluated_at == kelowna_noon
    assert r.tithi.name == "Ekadashi"
    assert r.nakshatra.name == "Rohini"
    assert r.yoga.name == "Vriddhi"
    assert not any(w.startswith("no_sunrise") for w in r.warnings)


def test_kelowna_windows_and_calendar(at_sunrise) -> None:
    r = at_sunrise
    assert r.kalam is not None and r.muhurat is not None
    # Sunday: Rahu Kalam is the last eighth of daylight
    assert abs(r.kalam.rahu.end - r.sunset) < timedelta(milliseconds=1)
    assert r.muhurat.sarvartha_siddhi == "Ahoratri"
    cal = r.calendar
    assert (cal.lunar_month.amanta, cal.lunar_month.purnimanta) == ("Ashadha", "Shravana")
    assert cal.samvat.samvatsara == "Vishvavasu"
    assert cal.sun_sign == "Karka"
    assert cal.ayana_drik == "Dakshinayana"
    assert cal.day.dinamana == r.sunset - r.sunrise
    assert cal.karanas[0].karana.cycle_index == r.karana.cycle_index
    assert r.calendar.new_moon < r.evaluated_at


def test_end_times_after_evaluation(at_sunrise) -> None:
    et = at_sunrise.end_times
    for t in (et.tithi, et.nakshatra, et.yoga, et.karana):
        assert t is not None and t > at_sunrise.evaluated_at


def test_planets_listed_with_mean_motion_warning(at_sunrise) -> None:
    assert len(at_sunrise.planets) == 9
    assert at_sunrise.backend == "portable"
    assert "planets_mean_motion" in at_sunrise.warnings


def test_erfa_backend_agrees(ensure_erfa, kelowna, kelowna_noon, at_sunrise) -> None:
    r = compute_panchanga(kelowna_noon, kelowna, backend=ErfaEphemeris())
    assert r.backend == "erfa"
    assert r.tithi.absolute == at_sunrise.tithi.absolute
    assert r.nakshatra.name == at_sunrise.nakshatra.name
    assert "planets_mean_motion" not in r.warnings


def test_approximate_ayanamsa_is_flagged(kelowna, kelowna_noon) -> None:
    r = compute_panchanga(kelowna_noon, kelowna, 37, backend=PortableEphemeris())
    assert "ayanamsa_approximate" in r.warnings


def test_settings_pick_the_backend(kelowna, kelowna_noon) -> None:
    r = compute_panchanga(kelowna_noon, kelowna, settings=EngineSettings(backend="portable"))
    assert r.backend == "portable"

# ─────────────────────────────────────────────────────────────────────────────
# Polar day
# ─────────────────────────────────────────────────────────────────────────────

def test_tromso_midsummer_falls_back_to_instant() -> None:
    t = datetime(2025, 6, 21, 12, tzinfo=UTC)
    r = compute_panchanga(t, TROMSO, backend=PortableEphemeris())
    assert r.evaluation_basis == "instant"
    assert r.evaluated_at == t
    assert r.sunrise is None and r.sunset is None
    assert r.kalam is None and r.muhurat is None and r.calendar.day is None
    assert "no_sunrise:polar_day" in r.warnings
    assert "day_status:polar_day" in r.warnings
    assert 1 <= r.tithi.absolute <= 30

# ─────────────────────────────────────────────────────────────────────────────
# Ends of the datetime range
# ─────────────────────────────────────────────────────────────────────────────

def test_first_day_of_year_one() -> None:
    r = compute_panchanga(datetime(1, 1, 1, 12, tzinfo=UTC), DHAKA, backend=PortableEphemeris())
    assert r.evaluation_basis == "sunrise" and r.kalam is not None
    # Brahma muhurat starts on 0000-12-31
    assert r.muhurat is None and "date_range_limit:muhurat" in r.warnings
    assert r.calendar.new_moon is None and r.calendar.lunar_month is None
    assert "new_moon_not_found" in r.warnings
    json.dumps(r.to_dict())


def test_last_day_of_year_9999() -> None:
    r = compute_panchanga(datetime(9999, 12, 31, 6, tzinfo=UTC), UJJAIN, backend=PortableEphemeris())
    assert r.evaluation_basis == "sunrise" and r.sunset is not None
    assert r.muhurat is not None and r.calendar.new_moon is not None
    assert r.calendar.karanas == () and "date_range_limit:karana_spans" in r.warnings
    assert not any(w.startswith(("no_sunrise", "day_status")) for w in r.warnings)
    json.dumps(r.to_dict())

# ─────────────────────────────────────────────────────────────────────────────
# Validation / serialisation
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "kwargs, code",
    [
        ({"instant": datetime(2025, 7, 20, 12)}, "naive_datetime"),
        ({"location": {"lat": 49.9, "lon": -119.5}}, "invalid_location"),
        ({"ayanamsa_system": 99}, "unknown_ayanamsa"),
        ({"at": "noon"}, "invalid_policy"),
        ({"instant": datetime(1, 1, 1, 1, tzinfo=timezone(timedelta(hours=5)))}, "out_of_range"),
    ],
)
def test_invalid_inputs(kelowna, kelowna_noon, kwargs, code: str) -> None:
    args = {"instant": kelowna_noon, "location": kelowna, "backend": PortableEphemeris()}
    args.update(kwargs)
    with pytest.raises(InvalidInputError) as exc:
        compute_panchanga(**args)
    assert exc.value.code == code


def test_to_dict_is_json_serialisable(at_sunrise) -> None:
    d = at_sunrise.to_dict()
    text = json.dumps(d)
    assert '"Ekadashi"' in text
    assert d["evaluation_basis"] == "sunrise"
    assert d["kalam"]["rahu"]["start"].startswith("2025-07-2")
    assert isinstance(d["calendar"]["day"]["dinamana_seconds"], float)


def test_report_lines(at_sunrise) -> None:
    text = format_report(at_sunrise)
    assert text.startswith("Panchanga for Kelowna")
    assert "Sunday 2025-07-20 12:00 (America/Vancouver)" in text
    for needle in ("Krishna Ekadashi", "Krittika", "Rahu Kalam", "Abhijita", "Vishvavasu", "Shaka / Vikrama"):
        assert needle in text
    assert text.endswith("\n")


def test_report_polar_day_has_no_kalam() -> None:
    r = compute_panchanga(datetime(2025, 6, 21, 12, tzinfo=UTC), TROMSO, backend=PortableEphemeris())
    text = format_report(r)
    assert "Rahu Kalam" not in text
    assert "polar day" in text
    assert "warnings:" in text


def test_top_level_api(kelowna, kelowna_noon) -> None:
    import panchang
    assert panchang.compute_panchanga is compute_panchanga
    assert isinstance(panchang.VERSION, str)
    r = panchang.compute_panchanga(kelowna_noon, kelowna, backend=panchang.PortableEphemeris())
    assert panchang.sunrise(kelowna_noon, kelowna, panchang.PortableEphemeris()) == r.sunrise


def test_report_signs_negative_ayanamsa() -> None:
    r = compute_panchanga(datetime(1990, 1, 1, 6, tzinfo=UTC), GeoLocation(23.18, 75.78, name="Ujjain"), 18,
                          backend=PortableEphemeris())
    assert -1.0 < r.ayanamsa.degree < 0.0
    assert "Ayanamsa J2000: -0° " in format_report(r)
