# tests/conftest.py
from __future__ import annotations

"""
Shared setup for the Panchanga suite.

Every instant under test carries its own offset, so the process TZ is pinned
to UTC and any PANCHANG_* override in the caller's shell is masked for the
session. Engine defaults are therefore what the tests see.
"""

import os
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import HealthCheck, settings

from panchang.core.ephemeris_adapter import Ephemeris, PortableEphemeris
from panchang.core.location import GeoLocation

# transition searches and horizon scans are not constant-time
settings.register_profile(
    "dev", settings(deadline=None, max_examples=40, suppress_health_check=[HealthCheck.too_slow])
)
settings.register_profile(
    "ci", settings(deadline=None, max_examples=120, suppress_health_check=[HealthCheck.too_slow])
)

_ON_CI = bool(os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
HYPOTHESIS_PROFILE = "ci" if _ON_CI else os.getenv("HYPOTHESIS_PROFILE", "dev")
settings.load_profile(HYPOTHESIS_PROFILE)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: latitude/season sweeps over the horizon solver")
    config.addinivalue_line("filterwarnings", "ignore::DeprecationWarning")


def pytest_report_header(config: pytest.Config) -> str:
    backend = os.getenv("PANCHANG_BACKEND", "erfa")
    return f"panchang: hypothesis={HYPOTHESIS_PROFILE} shell backend={backend} (masked during tests)"


# ──────────────────────────────────────────────────────────────────────────────
# Environment
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session", autouse=True)
def isolated_env():
    saved = {k: v for k, v in os.environ.items() if k == "TZ" or k.startswith("PANCHANG_")}
    for key in saved:
        del os.environ[key]
    os.environ["TZ"] = "UTC"
    yield
    os.environ.pop("TZ", None)
    os.environ.update(saved)


@pytest.fixture(scope="session")
def ensure_erfa():
    """Fail early if pyERFA is missing any routine the backend or ΔT relies on."""
    import erfa
    missing = [fn for fn in ("dat", "jd2cal", "epv00", "moon98", "plan94", "nut06a", "ecm06", "faom03", "rxp") if not hasattr(erfa, fn)]
    assert not missing, f"pyERFA lacks {', '.join(missing)}"
    return erfa


@pytest.fixture(scope="session")
def ensure_tzdata():
    from zoneinfo import ZoneInfo
    return {name: ZoneInfo(name) for name in ("UTC", "Asia/Kolkata", "America/Vancouver", "Europe/Oslo")}


# ──────────────────────────────────────────────────────────────────────────────
# Reference day: Kelowna, Sunday 2025-07-20 (Krishna Ekadashi)
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def kelowna() -> GeoLocation:
    return GeoLocation(49.8880, -119.4960, timezone="America/Vancouver", name="Kelowna")


@pytest.fixture
def kelowna_noon() -> datetime:
    return datetime(2025, 7, 20, 12, 0, tzinfo=timezone(timedelta(hours=-7)))


@pytest.fixture
def portable() -> Ephemeris:
    return Ephemeris(PortableEphemeris())
