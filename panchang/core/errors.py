# panchang/core/errors.py
from __future__ import annotations

from typing import Any

__all__ = ["PanchangError", "InvalidInputError", "EphemerisError"]


class PanchangError(ValueError):
    """Base error with a stable machine-readable code (used by the API layer)."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


class InvalidInputError(PanchangError):
    """Rejected at the boundary, before any computation runs."""


class EphemerisError(RuntimeError):
    """Categorized backend misconfiguration (never raised for a plain 'unavailable')."""
    def __init__(self, stage: str, message: str, **context: Any):
        super().__init__(f"{stage}: {message}")
        self.stage = stage
        self.message = message
        self.context = context
