# tests/test_calendar_extras.py
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from panchang.core.angles import signed_diff
from panchang.core.calendar_extras import (
    KALI_EPOCH_JD,
    ayana,
    day_durations,
    lunar_month,
    paksha,
    planetary_positions,
    rashi,
    ritu,
    samvat,
)
from panchang.core.constants import GRAHAS
from panchang.core.errors import InvalidInputError

UTC = timezone.utc


def test_samvat_2025() -> None:
    s = samvat(date(2025, 7, 20))
    assert (s.shaka, s.vikrama, s.gujarati) == (1947, 2082, 2081)
    assert s.samvatsara == "Vishvavasu"
    assert s.kali_ahargana == int(2460876.5 - KALI_EPOCH_JD)


def test_samvatsara_cycle_has_period_sixty() -> None:
    assert samvat(date(1965, 1, 1)).samvatsara == samvat(date(2025, 1, 1)).samvatsara


@pytest.mark.parametrize("t, expected", [(1, "Shukla"), (15, "Shukla"), (16, "Krishna"), (30, "Krishna")])
def test_paksha(t: int, expected: str) -> None:
    assert paksha(t) == expected


@pytest.mark.parametrize("bad", [0, 31, True])
def test_paksha_rejects(bad) -> None:
    with pytest.raises(InvalidInputError) as exc:
        paksha(bad)
    assert exc.value.code == "invalid_tithi"


def test_rashi_boundaries() -> None:
    assert rashi(0.0) == "Mesha"
    assert rashi(29.999) == "Mesha"
    assert rashi(30.0) == "Vrishabha"
    assert rashi(359.999) == "Meena"
    assert rashi(-10.0) == "Meena"

# ─────────────────────────────────────────────────────────────────────────────
# Seasons / months
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("lon, expected", [(330.0, "Vasanta"), (29.9, "Vasanta"), (30.0, "Grishma"),
                                           (100.0, "Varsha"), (150.0, "Sharad"), (210.0, "Hemanta"),
                                           (300.0, "Shishira")])
def test_ritu_bands(lon: float, expected: str) -> None:
    assert ritu(lon) == expected


@pytest.mark.parametrize("lon, expected", [(270.0, "Uttarayana"), (0.0, "Uttarayana"), (89.9, "Uttarayana"),
                                           (90.0, "Dakshinayana"), (269.9, "Dakshinayana")])
def test_ayana(lon: float, expected: str) -> None:
    assert ayana(lon) == expected


def test_lunar_month_shukla_names_agree() -> None:
    m = lunar_month(335.0, "Shukla")   # Sun in Meena at the new moon
    assert (m.amanta, m.purnimanta) == ("Chaitra", "Chaitra")


def test_lunar_month_krishna_rolls_purnimanta_forward() -> None:
    m = lunar_month(70.0, "Krishna")   # Sun in Mithuna at the new moon
    assert (m.amanta, m.purnimanta) == ("Ashadha", "Shravana")
    m = lunar_month(345.0, "Krishna")
    assert (m.amanta, m.purnimanta) == ("Chaitra", "Vaishakha")
    assert lunar_month(320.0, "Krishna").purnimanta == "Chaitra"

# ─────────────────────────────────────────────────────────────────────────────
# Durations / planets
# ─────────────────────────────────────────────────────────────────────────────

def test_day_durations() -> None:
    rise = datetime(2025, 7, 20, 12, 12, tzinfo=UTC)
    dd = day_durations(rise, rise + timedelta(hours=15, minutes=40))
    assert dd.dinamana + dd.ratrimana == timedelta(hours=24)
    assert dd.madhyahna == rise + timedelta(hours=7, minutes=50)
    assert dd.to_dict()["dinamana_seconds"] == 15 * 3600 + 40 * 60
    with pytest.raises(InvalidInputError):
        day_durations(rise, rise)


def test_planetary_positions(portable) -> None:
    rows = planetary_positions(2460876.5, portable, 1)
    assert tuple(r.body for r in rows) == GRAHAS
    by = {r.body: r for r in rows}
    assert abs(signed_diff(by["Ketu"].longitude, by["Rahu"].longitude + 180.0)) < 1e-9
    for r in rows:
        assert 0.0 <= r.degree_in_rashi < 30.0
        assert r.rashi == rashi(r.longitude)
        assert 1 <= r.pada <= 4
    # mid-July: sidereal Sun in Karka
    assert by["Sun"].rashi == "Karka"
