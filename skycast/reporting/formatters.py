"""Output formatters for current conditions and forecasts."""

import json
from typing import Any

from skycast.models.common import UnitSystem
from skycast.models.current import CurrentConditions
from skycast.models.forecast import DailyBucket, ForecastResult, HourlyEntry
from skycast.normalize.timekeeping import (
    format_date,
    format_day,
    format_time,
    format_utc_offset,
    location_time,
)
from skycast.normalize.units import convert_wind_speed, temperature_symbol, wind_unit_label


def format_current_text(c: CurrentConditions, units: UnitSystem) -> str:
    """Plain text current-conditions panel."""
    local = location_time(c.timestamp_seconds, c.utc_offset_seconds)
    sunrise = location_time(c.sunrise_seconds, c.utc_offset_seconds)
    sunset = location_time(c.sunset_seconds, c.utc_offset_seconds)
    symbol = temperature_symbol(units)
    wind = convert_wind_speed(c.wind_speed_mps, units)
    lines = [
        f"=== {c.city} ===",
        f"{format_time(local)}, {format_date(local)} ({format_utc_offset(c.utc_offset_seconds)})",
        f"{c.temperature}{symbol}, {c.condition.description} "
        f"(feels like {c.feels_like}{symbol})",
        f"Humidity: {c.humidity}% | Wind: {wind:.1f} {wind_unit_label(units)} | "
        f"Pressure: {c.pressure} hPa",
        f"Clouds: {c.cloudiness}% | Visibility: {c.visibility_km:.1f} km | "
        f"Precipitation: {c.precipitation_mm} mm",
        f"Sunrise: {format_time(sunrise)} | Sunset: {format_time(sunset)}",
    ]
    return "\n".join(lines)


def format_forecast_text(f: ForecastResult, units: UnitSystem) -> str:
    """Hourly strip followed by one line per day."""
    symbol = temperature_symbol(units)
    lines = ["--- Next hours ---"]
    for h in f.hourly:
        lines.append(f"{format_time(h.time):>8}  {h.temperature:>4}{symbol}  {h.description}")
    lines.append("--- Daily ---")
    for d in f.daily:
        lines.append(
            f"{format_day(d.date):<12} {d.temp_max:>4}{symbol} / {d.temp_min:>4}{symbol}  "
            f"{d.description}"
        )
    return "\n".join(lines)


def format_forecast_json(f: ForecastResult) -> str:
    """JSON forecast for programmatic consumption."""
    data = {
        "city": f.city,
        "utc_offset": format_utc_offset(f.utc_offset_seconds),
        "hourly": [_hourly_dict(h) for h in f.hourly],
        "daily": [_daily_dict(d) for d in f.daily],
    }
    return json.dumps(data, indent=2)


def format_current_json(c: CurrentConditions) -> str:
    data = {
        "city": c.city,
        "description": c.condition.description,
        "icon": c.condition.icon_code,
        "icon_url": c.condition.icon_url,
        "time": location_time(c.timestamp_seconds, c.utc_offset_seconds).isoformat(),
        "temperature": c.temperature,
        "feels_like": c.feels_like,
        "temp_min": c.temp_min,
        "temp_max": c.temp_max,
        "humidity": c.humidity,
        "pressure": c.pressure,
        "wind_speed_mps": round(c.wind_speed_mps, 2),
        "wind_direction": c.wind_direction,
        "cloudiness": c.cloudiness,
        "visibility_km": c.visibility_km,
        "precipitation_mm": c.precipitation_mm,
    }
    return json.dumps(data, indent=2)


def _hourly_dict(h: HourlyEntry) -> dict[str, Any]:
    return {
        "time": h.time.isoformat(),
        "temperature": h.temperature,
        "icon": h.icon_code,
        "description": h.description,
    }


def _daily_dict(d: DailyBucket) -> dict[str, Any]:
    return {
        "date": d.date.isoformat(),
        "temp_min": d.temp_min,
        "temp_max": d.temp_max,
        "icon": d.icon_code,
        "description": d.description,
        "items": [_hourly_dict(i) for i in d.items],
    }
