"""
Data model and static district table for Portugal's mainland districts
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Tuple

from constants import (
    FIELD_AREA_ID,
    FIELD_DESCRIPTION,
    FIELD_END_TIME,
    FIELD_LEVEL,
    FIELD_START_TIME,
)
from utils.timestamps import parse_ipma_time


class SeverityLevel(Enum):
    """IPMA awareness levels, ordered green < yellow < orange < red"""

    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)

    @property
    def is_unsafe(self) -> bool:
        return self in (SeverityLevel.ORANGE, SeverityLevel.RED)

    @classmethod
    def from_value(cls, value) -> Optional["SeverityLevel"]:
        """Map a feed value to a level; unknown values map to None"""
        try:
            return cls(value)
        except ValueError:
            return None

    def __lt__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_ORDER = [
    SeverityLevel.GREEN,
    SeverityLevel.YELLOW,
    SeverityLevel.ORANGE,
    SeverityLevel.RED,
]


class FetchStatus(Enum):
    """Fetch state reported to the presentation layer"""

    IDLE = "idle"
    FETCHING = "fetching"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class District:
    """A named bounding box with its IPMA forecast and warning-area codes"""

    name: str
    lat_range: Tuple[float, float]
    lon_range: Tuple[float, float]
    forecast_area_id: Optional[str]
    warning_area_id: Optional[str]

    def contains(self, lat: float, lon: float) -> bool:
        """Both bounds inclusive"""
        min_lat, max_lat = self.lat_range
        min_lon, max_lon = self.lon_range
        return min_lat <= lat <= max_lat and min_lon <= lon <= max_lon

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "lat_range": list(self.lat_range),
            "lon_range": list(self.lon_range),
            "forecast_area_id": self.forecast_area_id,
            "warning_area_id": self.warning_area_id,
        }


@dataclass(frozen=True)
class WarningRecord:
    """One entry of the IPMA warnings feed"""

    area_id: Optional[str]
    start_time: datetime
    end_time: datetime
    severity_level: Optional[SeverityLevel]
    description: Optional[str]
    raw_level: Optional[str] = None

    @classmethod
    def from_feed(cls, item: dict) -> "WarningRecord":
        """Build a record from a decoded warnings-feed object"""
        raw_level = item.get(FIELD_LEVEL)
        return cls(
            area_id=item.get(FIELD_AREA_ID),
            start_time=parse_ipma_time(item.get(FIELD_START_TIME)),
            end_time=parse_ipma_time(item.get(FIELD_END_TIME)),
            severity_level=SeverityLevel.from_value(raw_level),
            description=item.get(FIELD_DESCRIPTION),
            raw_level=raw_level,
        )

    def is_active(self, now: datetime) -> bool:
        """Inclusive at both ends"""
        return self.start_time <= now <= self.end_time

    def to_dict(self) -> dict:
        return {
            "area_id": self.area_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "level": self.severity_level.value if self.severity_level else self.raw_level,
            "description": self.description,
        }


@dataclass(frozen=True)
class LocationFix:
    """A single latitude/longitude fix; only the latest is kept"""

    latitude: float
    longitude: float
    acquired_at: datetime = field(default_factory=datetime.now)
    source: str = "gps"

    def to_dict(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "acquired_at": self.acquired_at.isoformat(),
            "source": self.source,
        }


@dataclass(frozen=True)
class SafetyVerdict:
    """Outcome of a safety evaluation; unpacks to (is_safe, reason)"""

    is_safe: bool
    reason: str
    level: Optional[SeverityLevel] = None

    def __iter__(self):
        return iter((self.is_safe, self.reason))

    def to_dict(self) -> dict:
        return {
            "is_safe": self.is_safe,
            "reason": self.reason,
            "level": self.level.value if self.level else None,
        }


@dataclass
class FetchResult:
    """Success carries the decoded data, failure carries a FetchError"""

    ok: bool
    data: Any = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, data: Any) -> "FetchResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: Exception) -> "FetchResult":
        return cls(ok=False, error=error)


# Approximate boundaries of the mainland districts, in lookup order.
# Coimbra and Castelo Branco both carry warning area "CBR" and Vila Real's
# forecast id is "VRL1171400"; both are kept as published.
DISTRICTS: Tuple[District, ...] = (
    District("Lisboa", (38.6, 39.1), (-9.5, -8.8), "1110600", "LSB"),
    District("Porto", (41.0, 41.4), (-8.8, -8.1), "1131200", "PTO"),
    District("Faro", (36.8, 37.6), (-9.0, -7.3), "1080500", "FAR"),
    District("Braga", (41.3, 41.8), (-8.6, -7.8), "1030300", "BRG"),
    District("Coimbra", (39.9, 40.4), (-8.9, -7.8), "1060300", "CBR"),
    District("Setúbal", (37.8, 38.8), (-9.2, -8.2), "1151200", "STB"),
    District("Aveiro", (40.4, 41.0), (-8.8, -8.0), "1010500", "AVR"),
    District("Leiria", (39.4, 40.0), (-9.2, -8.4), "1100900", "LRA"),
    District("Santarém", (38.8, 39.7), (-8.9, -7.8), "1141600", "STR"),
    District("Viseu", (40.5, 41.2), (-8.1, -7.2), "1182300", "VIS"),
    District("Vila Real", (41.1, 41.8), (-8.0, -7.1), "VRL1171400", "VRL"),
    District("Bragança", (41.3, 41.9), (-7.2, -6.2), "1040200", "BGC"),
    District("Évora", (38.2, 38.9), (-8.5, -7.1), "1070500", "EVR"),
    District("Guarda", (40.2, 41.0), (-7.6, -6.9), "1090700", "GDA"),
    District("Beja", (37.5, 38.3), (-8.5, -7.0), "1020500", "BJA"),
    District("Castelo Branco", (39.5, 40.4), (-8.0, -6.8), "1050200", "CBR"),
    District("Portalegre", (38.8, 39.5), (-8.0, -7.1), "1121400", "PTG"),
    District("Viana do Castelo", (41.5, 42.1), (-8.9, -8.1), "1160900", "VCT"),
)
