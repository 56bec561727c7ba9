"""Forecast normalization: 3-hour samples into an hourly strip and day buckets."""

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from skycast.errors import InvalidInputError
from skycast.models.forecast import (
    DailyBucket,
    ForecastResult,
    HourlyEntry,
    RawPeriodSample,
)
from skycast.normalize.timekeeping import day_key, location_time

logger = logging.getLogger(__name__)

HOURLY_LIMIT = 24
DAILY_LIMIT = 5


def normalize_forecast(
    samples: Any,
    utc_offset_seconds: int = 0,
    hourly_limit: int = HOURLY_LIMIT,
    daily_limit: int = DAILY_LIMIT,
) -> ForecastResult:
    """Turn the provider's forecast list into hourly entries and day buckets.

    ``samples`` may hold provider dicts or RawPeriodSample instances and is
    assumed to be in chronological order; it is never re-sorted. The hourly
    strip keeps the first ``hourly_limit`` samples regardless of day. Days
    are keyed in the location's own time (``utc_offset_seconds``) and the
    first ``daily_limit`` distinct days are kept in first-seen order.

    Raises InvalidInputError for None, non-sequences, an empty list, or a
    malformed sample. Nothing is returned unless every sample parses.
    """
    if samples is None:
        raise InvalidInputError("Forecast data is missing")
    if isinstance(samples, (str, bytes)) or not isinstance(samples, Sequence):
        raise InvalidInputError(
            f"Forecast data must be a list, got {type(samples).__name__}"
        )
    if len(samples) == 0:
        raise InvalidInputError("Forecast data is empty")

    buckets: dict[date, DailyBucket] = {}
    hourly: list[HourlyEntry] = []

    for index, raw in enumerate(samples):
        sample = raw if isinstance(raw, RawPeriodSample) else parse_period_sample(raw, index)
        _check_finite(sample, index)
        try:
            when = location_time(sample.timestamp_seconds, utc_offset_seconds)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidInputError(
                f"Timestamp out of range in forecast sample at index {index}"
            ) from e
        entry = HourlyEntry(
            time=when,
            temperature=round(sample.temp_current),
            icon_code=sample.icon_code,
            description=sample.description,
        )

        if len(hourly) < hourly_limit:
            hourly.append(entry)

        key = day_key(when)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = DailyBucket(date=key)
        bucket.fold(sample, entry)

    daily = list(buckets.values())[:daily_limit]
    logger.debug(
        "Normalized %d samples into %d hourly entries and %d of %d days",
        len(samples), len(hourly), len(daily), len(buckets),
    )
    return ForecastResult(
        daily=daily, hourly=hourly, utc_offset_seconds=utc_offset_seconds
    )


def normalize_forecast_payload(
    payload: Any,
    hourly_limit: int = HOURLY_LIMIT,
    daily_limit: int = DAILY_LIMIT,
) -> ForecastResult:
    """Normalize a full forecast response, using its ``city.timezone`` offset."""
    if not isinstance(payload, Mapping):
        raise InvalidInputError("Forecast response must be an object")
    city = payload.get("city") or {}
    if not isinstance(city, Mapping):
        raise InvalidInputError("Forecast city must be an object")
    try:
        offset = int(city.get("timezone") or 0)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidInputError(f"Malformed forecast timezone: {e!r}") from e
    result = normalize_forecast(
        payload.get("list"),
        utc_offset_seconds=offset,
        hourly_limit=hourly_limit,
        daily_limit=daily_limit,
    )
    return ForecastResult(
        daily=result.daily,
        hourly=result.hourly,
        utc_offset_seconds=offset,
        city=city.get("name"),
    )


def parse_period_sample(item: Any, index: int = 0) -> RawPeriodSample:
    """Parse one provider forecast entry (``dt``, ``main``, ``weather[0]``)."""
    try:
        main = item["main"]
        weather = item["weather"][0]
        return RawPeriodSample(
            timestamp_seconds=int(item["dt"]),
            temp_current=float(main["temp"]),
            temp_min=float(main["temp_min"]),
            temp_max=float(main["temp_max"]),
            description=str(weather.get("description", "")),
            icon_code=str(weather.get("icon", "")),
        )
    except (KeyError, IndexError, TypeError, ValueError, AttributeError, OverflowError) as e:
        raise InvalidInputError(f"Malformed forecast sample at index {index}: {e!r}") from e


def _check_finite(sample: RawPeriodSample, index: int) -> None:
    for name in ("temp_current", "temp_min", "temp_max"):
        if not math.isfinite(getattr(sample, name)):
            raise InvalidInputError(
                f"Non-finite {name} in forecast sample at index {index}"
            )
