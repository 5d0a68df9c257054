# panchang/core/report.py
"""Plain-text day summary of a PanchangaResult, times in the location's zone."""
from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import List, Optional

from .angles import format_dms
from .panchanga import PanchangaResult

__all__ = ["format_report"]

_RULE = "─" * 56


def _zone(result: PanchangaResult) -> tzinfo:
    return result.location.zone or timezone.utc


def _t(value: Optional[datetime], tz: tzinfo) -> str:
    if value is None:
        return "—"
    return value.astimezone(tz).strftime("%Y-%m-%d %H:%M:%S")


def _hm(value: Optional[datetime], tz: tzinfo) -> str:
    return "—" if value is None else value.astimezone(tz).strftime("%H:%M")


def _row(label: str, value: str) -> str:
    return f"  {label:<20} {value}"


def format_report(result: PanchangaResult) -> str:
    tz = _zone(result)
    loc = result.location
    lines: List[str] = []
    place = loc.name or f"{loc.latitude:.4f}, {loc.longitude:.4f}"
    lines.append(f"Panchanga for {place}")
    lines.append(f"  {result.instant.astimezone(tz).strftime('%A %Y-%m-%d %H:%M')} ({getattr(tz, 'key', 'UTC')})")
    deg = result.ayanamsa.degree
    sign = "-" if deg < 0 else ""
    lines.append(f"  Ayanamsa {result.ayanamsa.name}: {sign}{format_dms(abs(deg)).strip()}")
    lines.append(f"  Evaluated at {result.evaluation_basis}: {_t(result.evaluated_at, tz)}")
    lines.append(_RULE)

    th, nk, yg, kr, vr = result.tithi, result.nakshatra, result.yoga, result.karana, result.vara
    et = result.end_times
    lines.append(_row("Vara", f"{vr.name} (lord {vr.lord})"))
    lines.append(_row("Tithi", f"{th.paksha} {th.name} ({th.percentage:.1f}%) until {_t(et.tithi, tz)}"))
    lines.append(_row("Nakshatra", f"{nk.name} pada {nk.pada} ({nk.ruler_data.ruler}) until {_t(et.nakshatra, tz)}"))
    lines.append(_row("Yoga", f"{yg.name} until {_t(et.yoga, tz)}"))
    lines.append(_row("Karana", f"{kr.name} until {_t(et.karana, tz)}"))
    lines.append(_row("Moon phase", result.moon_phase))
    lines.append(_RULE)

    lines.append(_row("Sunrise", _t(result.sunrise, tz)))
    lines.append(_row("Sunset", _t(result.sunset, tz)))
    lines.append(_row("Moonrise", _t(result.moonrise, tz)))
    lines.append(_row("Moonset", _t(result.moonset, tz)))
    if result.day_status != "normal":
        lines.append(_row("Day status", result.day_status.replace("_", " ")))

    if result.kalam is not None:
        lines.append(_RULE)
        for name in ("rahu", "gulikai", "yamaganda"):
            w = getattr(result.kalam, name)
            lines.append(_row(f"{name.title()} Kalam", f"{_hm(w.start, tz)} - {_hm(w.end, tz)}"))
    if result.muhurat is not None:
        lines.append(_RULE)
        for name, w in result.muhurat.windows():
            label = name.replace("_", " ").title()
            lines.append(_row(label, f"{_hm(w.start, tz)} - {_hm(w.end, tz)}"))
        lines.append(_row("Sarvartha Siddhi", result.muhurat.sarvartha_siddhi))

    cal = result.calendar
    lines.append(_RULE)
    if cal.lunar_month is not None:
        lines.append(_row("Month (amanta)", cal.lunar_month.amanta))
        lines.append(_row("Month (purnimanta)", cal.lunar_month.purnimanta))
    sv = cal.samvat
    lines.append(_row("Samvatsara", sv.samvatsara))
    lines.append(_row("Shaka / Vikrama", f"{sv.shaka} / {sv.vikrama}"))
    lines.append(_row("Sun / Moon sign", f"{cal.sun_sign} / {cal.moon_sign}"))
    lines.append(_row("Ritu (drik/vedic)", f"{cal.ritu_drik} / {cal.ritu_vedic}"))
    lines.append(_row("Ayana (drik/vedic)", f"{cal.ayana_drik} / {cal.ayana_vedic}"))

    if result.warnings:
        lines.append(_RULE)
        lines.append("  warnings: " + ", ".join(result.warnings))
    return "\n".join(lines) + "\n"
