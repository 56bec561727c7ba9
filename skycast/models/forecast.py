"""Forecast data models: raw provider samples and their normalized forms."""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class RawPeriodSample:
    """One 3-hour slice from the provider's forecast list."""

    timestamp_seconds: int
    temp_current: float
    temp_min: float
    temp_max: float
    description: str
    icon_code: str


@dataclass(frozen=True)
class HourlyEntry:
    time: datetime
    temperature: int
    icon_code: str
    description: str


@dataclass
class DailyBucket:
    """One calendar day of forecast samples.

    ``temp_min``/``temp_max`` start at +inf/-inf and hold rounded integers
    once at least one sample has been folded in.
    """

    date: date
    items: list[HourlyEntry] = field(default_factory=list)
    temp_min: int | float = float("inf")
    temp_max: int | float = float("-inf")

    def fold(self, sample: RawPeriodSample, entry: HourlyEntry) -> None:
        """Fold one sample into the running min/max and item list."""
        self.temp_min = min(self.temp_min, round(sample.temp_min))
        self.temp_max = max(self.temp_max, round(sample.temp_max))
        self.items.append(entry)

    @property
    def icon_code(self) -> str:
        """Representative icon: the first sample seen for the day."""
        return self.items[0].icon_code

    @property
    def description(self) -> str:
        return self.items[0].description


@dataclass(frozen=True)
class ForecastResult:
    daily: list[DailyBucket]
    hourly: list[HourlyEntry]
    utc_offset_seconds: int = 0
    city: str | None = None
