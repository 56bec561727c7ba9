"""Current-conditions model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Condition:
    description: str
    icon_code: str
    icon_url: str


@dataclass(frozen=True)
class CurrentConditions:
    city: str
    condition: Condition
    timestamp_seconds: int
    utc_offset_seconds: int
    temperature: int
    feels_like: int
    temp_min: int
    temp_max: int
    humidity: int
    pressure: int
    wind_speed_mps: float
    wind_direction: int | None
    cloudiness: int
    visibility_km: float
    precipitation_mm: int
    sunrise_seconds: int
    sunset_seconds: int
