import math
from dataclasses import dataclass
from functools import total_ordering

from road_spelling.domain.errors import GraphDataError

EARTH_RADIUS_M = 6_371_000.0

_UNIT_M = {
    "meters": 1.0,
    "kilometers": 1000.0,
    "miles": 1609.344,
    "feet": 0.3048,
}


@total_ordering
@dataclass(frozen=True)
class Distance:
    """Non-negative length, stored in meters."""

    m: float

    def __post_init__(self):
        if not math.isfinite(self.m) or self.m < 0:
            raise ValueError(f"distance must be finite and >= 0, got {self.m!r}")

    @classmethod
    def of(cls, value: float, unit: str = "meters") -> "Distance":
        try:
            return cls(float(value) * _UNIT_M[unit])
        except KeyError:
            raise ValueError(f"Unknown distance unit {unit!r}") from None

    @classmethod
    def meters(cls, value: float) -> "Distance":
        return cls.of(value, "meters")

    @classmethod
    def kilometers(cls, value: float) -> "Distance":
        return cls.of(value, "kilometers")

    @classmethod
    def miles(cls, value: float) -> "Distance":
        return cls.of(value, "miles")

    @classmethod
    def feet(cls, value: float) -> "Distance":
        return cls.of(value, "feet")

    def as_meters(self) -> float:
        return self.m

    def as_miles(self) -> float:
        return self.m / _UNIT_M["miles"]

    def __lt__(self, other: "Distance") -> bool:
        if not isinstance(other, Distance):
            return NotImplemented
        return self.m < other.m

    def is_less_than_or_equal_to(self, other: "Distance") -> bool:
        return self <= other


@dataclass(frozen=True)
class Location:
    lat: float  # degrees WGS-84
    lon: float

    def __post_init__(self):
        lat, lon = self.lat, self.lon
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise GraphDataError(f"non-finite coordinate ({lat!r}, {lon!r})")
        if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
            raise GraphDataError(f"coordinate out of range ({lat}, {lon})")

    def node_key(self, digits: int = 7) -> tuple[float, float]:
        return (round(self.lat, digits), round(self.lon, digits))

    def distance_to(self, other: "Location") -> Distance:
        return Distance(haversine_m(self.lat, self.lon, other.lat, other.lon))


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    p1, p2 = math.radians(lat1), math.radians(lat2)
    dphi = p2 - p1
    dlmb = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dlmb / 2) ** 2
    # clamp: rounding can push a slightly above 1 for antipodal points
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))
