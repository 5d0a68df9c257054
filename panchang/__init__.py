# panchang/__init__.py
"""Vedic Panchanga engine: five limbs, sun/moon events, kalam and muhurat windows."""
from __future__ import annotations

from panchang.core import *  # noqa: F401,F403
from panchang.core import __all__ as _core_all
from panchang.version import VERSION

__all__ = list(_core_all) + ["VERSION"]
