"""OpenWeather current-conditions and 5-day/3-hour forecast client."""

import logging
import os
from typing import Any

import httpx

from skycast.config.defaults import API_KEY_ENV, OPENWEATHER_BASE_URL
from skycast.errors import FetchError, ProviderResponseError
from skycast.ingest.http_fetcher import (
    DEFAULT_INITIAL_DELAY_MS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    fetch_json_with_retry,
)
from skycast.models.common import Location, UnitSystem

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    """Thin wrapper around the two OpenWeather endpoints the dashboard uses.

    The current-weather endpoint reports success as ``"cod": 200`` and the
    forecast endpoint as ``"cod": "200"``. Both are accepted by comparing
    the string form.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = OPENWEATHER_BASE_URL,
        units: UnitSystem = UnitSystem.METRIC,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_delay_ms: int = DEFAULT_INITIAL_DELAY_MS,
    ):
        self.api_key = api_key or os.environ.get(API_KEY_ENV, "")
        if not self.api_key:
            raise FetchError(f"{API_KEY_ENV} not set", status_code=401)
        self.base_url = base_url.rstrip("/")
        self.units = UnitSystem(units)
        self.timeout = timeout
        self.max_retries = max_retries
        self.initial_delay_ms = initial_delay_ms

    def with_units(self, units: UnitSystem) -> "OpenWeatherClient":
        """Return a copy of this client requesting a different unit system."""
        return OpenWeatherClient(
            api_key=self.api_key,
            base_url=self.base_url,
            units=units,
            timeout=self.timeout,
            max_retries=self.max_retries,
            initial_delay_ms=self.initial_delay_ms,
        )

    async def get_current(
        self, location: Location, client: httpx.AsyncClient | None = None
    ) -> dict[str, Any]:
        """Fetch current conditions for a city or coordinates."""
        data = await self._get("/weather", location, client)
        _check_status(data, "Failed to fetch current weather")
        return data

    async def get_forecast(
        self, location: Location, client: httpx.AsyncClient | None = None
    ) -> dict[str, Any]:
        """Fetch the 5-day / 3-hour forecast for a city or coordinates."""
        data = await self._get("/forecast", location, client)
        _check_status(data, "Failed to fetch forecast")
        return data

    async def _get(
        self,
        endpoint: str,
        location: Location,
        client: httpx.AsyncClient | None,
    ) -> Any:
        params = {
            **location.query_params(),
            "appid": self.api_key,
            "units": self.units.value,
        }
        logger.debug("OpenWeather %s for %s", endpoint, location.label)
        return await fetch_json_with_retry(
            f"{self.base_url}{endpoint}",
            self.max_retries,
            self.initial_delay_ms,
            params=params,
            client=client,
            timeout=self.timeout,
        )


def _check_status(data: Any, default_message: str) -> None:
    if not isinstance(data, dict):
        raise ProviderResponseError(default_message)
    cod = data.get("cod")
    if str(cod) != "200":
        status = int(cod) if str(cod).isdigit() else None
        raise ProviderResponseError(
            str(data.get("message") or default_message), status_code=status
        )
