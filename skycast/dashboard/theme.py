"""Background theme and chart view models derived from weather data."""

from dataclasses import dataclass
from typing import Any

from skycast.models.common import UnitSystem
from skycast.models.forecast import DailyBucket
from skycast.normalize.timekeeping import format_day
from skycast.normalize.units import temperature_symbol

DARK_TEXT = "#e2e8f0"
LIGHT_TEXT = "#2d3748"
HIGH_COLOR = "rgba(255, 99, 132, 1)"
LOW_COLOR = "rgba(54, 162, 235, 1)"


@dataclass(frozen=True)
class WeatherTheme:
    background: str
    particle_type: str
    particle_count: int
    lightning: bool = False


PARTICLE_COUNTS = {
    "clear": 40,
    "night": 60,
    "cloudy": 70,
    "rainy": 150,
    "snow": 100,
}


def weather_theme(icon_code: str) -> WeatherTheme:
    """Pick background and particle effect from an OpenWeather icon code."""
    code = icon_code or ""
    if code.startswith(("01d", "02d")):
        return _theme("clear", "clear")
    if code.startswith(("01n", "02n")):
        return _theme("night", "night")
    if code.startswith(("03", "04")):
        return _theme("cloudy", "cloudy")
    if code.startswith(("09", "10")):
        return _theme("rainy", "rainy")
    if code.startswith("11"):
        return _theme("rainy", "rainy", lightning=True)
    if code.startswith("13"):
        # no snow background; cloudy with snow particles
        return _theme("cloudy", "snow")
    return _theme("clear", "clear")


def _theme(background: str, particles: str, lightning: bool = False) -> WeatherTheme:
    return WeatherTheme(
        background=background,
        particle_type=particles,
        particle_count=PARTICLE_COUNTS[particles],
        lightning=lightning,
    )


def temperature_chart(
    daily: list[DailyBucket],
    units: UnitSystem = UnitSystem.METRIC,
    dark_mode: bool = False,
) -> dict[str, Any]:
    """Line-chart data for daily highs and lows, renderer-agnostic."""
    return {
        "labels": [format_day(day.date) for day in daily],
        "datasets": [
            {"label": "High", "data": [day.temp_max for day in daily], "color": HIGH_COLOR},
            {"label": "Low", "data": [day.temp_min for day in daily], "color": LOW_COLOR},
        ],
        "text_color": DARK_TEXT if dark_mode else LIGHT_TEXT,
        "unit": temperature_symbol(units),
    }
