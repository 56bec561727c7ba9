"""Current-conditions normalization."""

import math
from collections.abc import Mapping
from typing import Any

from skycast.config.defaults import OPENWEATHER_ICON_URL
from skycast.errors import InvalidInputError
from skycast.models.common import UnitSystem
from skycast.models.current import Condition, CurrentConditions
from skycast.normalize.units import to_meters_per_second


def normalize_current(
    payload: Any, units: UnitSystem | str = UnitSystem.METRIC
) -> CurrentConditions:
    """Build CurrentConditions from a current-weather response.

    Temperatures are rounded with ``round`` and must be finite. Wind is
    stored in m/s whatever unit system the payload was requested in.
    """
    if not isinstance(payload, Mapping):
        raise InvalidInputError("Current weather response must be an object")
    try:
        weather = payload["weather"][0]
        main = payload["main"]
        wind = payload.get("wind") or {}
        sys_ = payload.get("sys") or {}
        rain = payload.get("rain") or {}
        icon = str(weather["icon"])
        return CurrentConditions(
            city=str(payload["name"]),
            condition=Condition(
                description=str(weather.get("description", "")),
                icon_code=icon,
                icon_url=OPENWEATHER_ICON_URL.format(icon=icon),
            ),
            timestamp_seconds=int(payload["dt"]),
            utc_offset_seconds=int(payload.get("timezone") or 0),
            temperature=_rounded(main["temp"]),
            feels_like=_rounded(main.get("feels_like", main["temp"])),
            temp_min=_rounded(main.get("temp_min", main["temp"])),
            temp_max=_rounded(main.get("temp_max", main["temp"])),
            humidity=int(main.get("humidity", 0)),
            pressure=int(main.get("pressure", 0)),
            wind_speed_mps=to_meters_per_second(float(wind.get("speed", 0.0)), units),
            wind_direction=wind.get("deg"),
            cloudiness=int((payload.get("clouds") or {}).get("all", 0)),
            visibility_km=float(payload.get("visibility", 0)) / 1000,
            precipitation_mm=_rounded(rain.get("1h", 0)),
            sunrise_seconds=int(sys_.get("sunrise", 0)),
            sunset_seconds=int(sys_.get("sunset", 0)),
        )
    except (KeyError, IndexError, TypeError, ValueError, AttributeError, OverflowError) as e:
        raise InvalidInputError(f"Malformed current weather response: {e!r}") from e


def _rounded(value: Any) -> int:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"non-finite value {value!r}")
    return round(value)
