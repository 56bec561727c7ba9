"""Dashboard orchestration: fetch cycles, preferences and favorites."""

import asyncio
import logging
import sqlite3
from typing import Any

import httpx

from skycast.config.schema import DashboardConfig
from skycast.dashboard.messages import user_message
from skycast.dashboard.state import AppState
from skycast.dashboard.theme import WeatherTheme, temperature_chart, weather_theme
from skycast.errors import GeolocationError, SkycastError
from skycast.ingest.geolocation import GeolocationProvider, locate
from skycast.ingest.openweather_client import OpenWeatherClient
from skycast.models.common import Location, UnitSystem
from skycast.normalize.current import normalize_current
from skycast.normalize.forecast import normalize_forecast_payload
from skycast.storage import preferences_repo

logger = logging.getLogger(__name__)


class WeatherDashboard:
    """Owns the AppState and runs fetch cycles against the provider.

    Each refresh is tagged with a cycle number. When a newer refresh has
    started before an older one finishes, the older results are dropped.
    """

    def __init__(
        self,
        config: DashboardConfig,
        client: OpenWeatherClient,
        conn: sqlite3.Connection,
        http: httpx.AsyncClient | None = None,
    ):
        self.config = config
        self.client = client
        self.conn = conn
        self.http = http
        self.state = AppState.from_store(conn, config)

    async def refresh(self, location: Location | None = None) -> bool:
        """Fetch current conditions and forecast concurrently.

        If either request fails the other is cancelled before returning.

        Returns True when the results were applied to the state. On failure
        ``state.error`` holds a user-facing message and False is returned.
        """
        if location is None:
            location = Location.from_city(
                self.state.current_city or self.config.display.default_city
            )

        cycle = self.state.begin_cycle()
        units = self.state.units
        client = self.client if self.client.units == units else self.client.with_units(units)
        logger.info("Cycle %d: fetching weather for %s (%s)", cycle, location.label, units)

        try:
            current_raw, forecast_raw = await self._fetch_both(client, location)
            current = normalize_current(current_raw, units)
            forecast = normalize_forecast_payload(
                forecast_raw,
                hourly_limit=self.config.display.hourly_limit,
                daily_limit=self.config.display.daily_limit,
            )
        except SkycastError as e:
            if not self.state.is_latest(cycle):
                logger.info("Cycle %d failed after being superseded: %s", cycle, e)
                return False
            logger.error("Cycle %d failed for %s: %s", cycle, location.label, e)
            self.state.error = user_message(e)
            return False

        if not self.state.is_latest(cycle):
            logger.info(
                "Discarding cycle %d results, cycle %d is newer", cycle, self.state.cycle
            )
            return False

        self.state.current = current
        self.state.forecast = forecast
        self.state.current_city = current.city
        self.state.error = None
        preferences_repo.set_last_city(self.conn, current.city)
        logger.info(
            "Cycle %d: %s %d%s, %d forecast days",
            cycle, current.city, current.temperature,
            "F" if units == UnitSystem.IMPERIAL else "C", len(forecast.daily),
        )
        return True

    async def _fetch_both(
        self, client: OpenWeatherClient, location: Location
    ) -> tuple[Any, Any]:
        """Run both requests in a TaskGroup so a failure cancels the other."""
        try:
            async with asyncio.TaskGroup() as tg:
                current = tg.create_task(client.get_current(location, self.http))
                forecast = tg.create_task(client.get_forecast(location, self.http))
        except ExceptionGroup as group:
            failures = [e for e in group.exceptions if isinstance(e, SkycastError)]
            if len(failures) != len(group.exceptions):
                raise
            raise failures[0] from None
        return current.result(), forecast.result()

    async def locate_and_refresh(self, provider: GeolocationProvider) -> bool:
        try:
            location = await locate(provider)
        except GeolocationError as e:
            logger.warning("Geolocation failed: %s", e)
            self.state.error = user_message(e)
            return False
        return await self.refresh(location)

    async def set_units(self, units: UnitSystem | str, reload: bool = True) -> bool:
        """Persist a new unit system, refetching the current city if asked."""
        self.state.units = UnitSystem(units)
        preferences_repo.set_units(self.conn, self.state.units)
        if reload and self.state.current_city:
            return await self.refresh(Location.from_city(self.state.current_city))
        return True

    def toggle_favorite(self, city: str | None = None) -> bool | None:
        """Flip favorite status of ``city`` (default: the current city).

        Returns the new membership, or None when there is no city.
        """
        city = city or self.state.current_city
        if not city:
            return None
        now_favorite = preferences_repo.toggle_favorite(self.conn, city)
        self.state.favorites = preferences_repo.list_favorites(self.conn)
        return now_favorite

    def toggle_theme(self) -> bool:
        self.state.dark_mode = not self.state.dark_mode
        preferences_repo.set_dark_mode(self.conn, self.state.dark_mode)
        return self.state.dark_mode

    def theme(self) -> WeatherTheme | None:
        if self.state.current is None:
            return None
        return weather_theme(self.state.current.condition.icon_code)

    def chart(self) -> dict[str, Any] | None:
        if self.state.forecast is None:
            return None
        return temperature_chart(
            self.state.forecast.daily, self.state.units, self.state.dark_mode
        )
