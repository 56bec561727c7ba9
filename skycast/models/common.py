"""Common types and helpers shared across models."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum


class UnitSystem(StrEnum):
    METRIC = "metric"
    IMPERIAL = "imperial"


@dataclass(frozen=True)
class Location:
    """A place to fetch weather for: a city name or a lat/lon pair."""

    city: str | None = None
    lat: float | None = None
    lon: float | None = None

    def __post_init__(self) -> None:
        has_city = bool(self.city and self.city.strip())
        has_coords = self.lat is not None or self.lon is not None
        if has_city == has_coords:
            raise ValueError("Location needs either a city or lat/lon, not both")
        if has_coords:
            if self.lat is None or self.lon is None:
                raise ValueError("Both lat and lon are required")
            if not -90.0 <= self.lat <= 90.0:
                raise ValueError(f"Latitude out of range: {self.lat}")
            if not -180.0 <= self.lon <= 180.0:
                raise ValueError(f"Longitude out of range: {self.lon}")

    @classmethod
    def from_city(cls, city: str) -> "Location":
        return cls(city=city.strip())

    @classmethod
    def from_coords(cls, lat: float, lon: float) -> "Location":
        return cls(lat=float(lat), lon=float(lon))

    @property
    def is_coordinates(self) -> bool:
        return self.city is None

    @property
    def label(self) -> str:
        if self.city is not None:
            return self.city
        return f"{self.lat:.4f},{self.lon:.4f}"

    def query_params(self) -> dict[str, str]:
        if self.city is not None:
            return {"q": self.city}
        return {"lat": str(self.lat), "lon": str(self.lon)}


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()
