# panchang/core/location.py
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import InvalidInputError

__all__ = ["GeoLocation"]


def _finite(name: str, value: Any) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"invalid_{name}", f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(v):
        raise InvalidInputError("non_finite", f"{name} must be finite, got {value!r}")
    return v


@dataclass(frozen=True)
class GeoLocation:
    """
    Observer on the ground. Latitude/longitude in degrees (east positive),
    altitude in metres above sea level; ``timezone`` is an IANA name used only
    for presentation.
    """
    latitude: float
    longitude: float
    altitude: float = 0.0
    timezone: str = "UTC"
    name: Optional[str] = None

    def __post_init__(self) -> None:
        lat = _finite("latitude", self.latitude)
        lon = _finite("longitude", self.longitude)
        alt = _finite("altitude", self.altitude)
        if not -90.0 <= lat <= 90.0:
            raise InvalidInputError("invalid_latitude", f"latitude must be within [-90, 90], got {lat}")
        if not -180.0 <= lon <= 180.0:
            raise InvalidInputError("invalid_longitude", f"longitude must be within [-180, 180], got {lon}")
        if alt < 0.0:
            raise InvalidInputError("invalid_altitude", f"altitude must be >= 0 m, got {alt}")
        tz = str(self.timezone or "UTC").strip() or "UTC"
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)
        object.__setattr__(self, "altitude", alt)
        object.__setattr__(self, "timezone", tz)

    @property
    def zone(self) -> Optional[ZoneInfo]:
        """The IANA zone when resolvable; None otherwise (display falls back to UTC)."""
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            return None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GeoLocation":
        """Accepts ``lat``/``latitude``, ``lon``/``lng``/``longitude``, ``alt``/``altitude``, ``tz``/``timezone``."""
        def pick(*keys: str, default: Any = None) -> Any:
            for k in keys:
                if data.get(k) is not None:
                    return data[k]
            return default

        lat = pick("latitude", "lat")
        lon = pick("longitude", "lon", "lng")
        if lat is None or lon is None:
            raise InvalidInputError("invalid_location", "latitude and longitude are required")
        return cls(
            latitude=lat,
            longitude=lon,
            altitude=pick("altitude", "alt", "elevation", default=0.0),
            timezone=pick("timezone", "tz", default="UTC"),
            name=pick("name", "place"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
