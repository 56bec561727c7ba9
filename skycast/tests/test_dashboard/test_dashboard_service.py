"""Tests for dashboard fetch cycles and preference handling."""

import asyncio
import json
import sqlite3
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import respx

from skycast.config.schema import DashboardConfig
from skycast.dashboard import messages
from skycast.dashboard.service import WeatherDashboard
from skycast.ingest.geolocation import StaticGeolocation
from skycast.ingest.openweather_client import OpenWeatherClient
from skycast.models.common import Location, UnitSystem
from skycast.storage import preferences_repo
from skycast.tests.samples import BASE_URL


@pytest.fixture
def dashboard(default_config: DashboardConfig, store: sqlite3.Connection) -> WeatherDashboard:
    client = OpenWeatherClient(
        api_key=default_config.provider.api_key,
        base_url=default_config.provider.base_url,
        max_retries=0,
    )
    return WeatherDashboard(default_config, client, store)


def _mock_both(current_payload: dict, forecast_payload: dict) -> tuple[respx.Route, respx.Route]:
    current = respx.get(f"{BASE_URL}/weather").mock(
        return_value=httpx.Response(200, json=current_payload)
    )
    forecast = respx.get(f"{BASE_URL}/forecast").mock(
        return_value=httpx.Response(200, json=forecast_payload)
    )
    return current, forecast


class TestInitialState:
    def test_defaults_from_config(self, dashboard: WeatherDashboard):
        assert dashboard.state.current_city == "New York"
        assert dashboard.state.units == UnitSystem.METRIC
        assert dashboard.state.favorites == []
        assert dashboard.state.cycle == 0

    def test_restores_preferences(self, default_config, store):
        preferences_repo.set_last_city(store, "Lima")
        preferences_repo.set_units(store, UnitSystem.IMPERIAL)
        preferences_repo.add_favorite(store, "Lima")
        preferences_repo.set_dark_mode(store, True)
        client = OpenWeatherClient(api_key="k", base_url=BASE_URL)
        state = WeatherDashboard(default_config, client, store).state
        assert state.current_city == "Lima"
        assert state.units == UnitSystem.IMPERIAL
        assert state.favorites == ["Lima"]
        assert state.dark_mode is True
        assert state.is_favorite


class TestRefresh:
    @pytest.mark.asyncio
    @respx.mock
    async def test_success(self, dashboard, current_payload, forecast_payload, store):
        current_route, forecast_route = _mock_both(current_payload, forecast_payload)

        assert await dashboard.refresh(Location.from_city("london")) is True
        state = dashboard.state
        assert current_route.call_count == 1
        assert forecast_route.call_count == 1
        assert state.current is not None and state.current.city == "London"
        assert state.forecast is not None
        assert len(state.forecast.daily) == 5
        assert len(state.forecast.hourly) == 24
        assert state.current_city == "London"
        assert state.error is None
        assert preferences_repo.get_last_city(store) == "London"

    @pytest.mark.asyncio
    @respx.mock
    async def test_defaults_to_current_city(self, dashboard, current_payload, forecast_payload):
        current_route, _ = _mock_both(current_payload, forecast_payload)

        await dashboard.refresh()
        assert current_route.calls[0].request.url.params["q"] == "New York"

    @pytest.mark.asyncio
    @respx.mock
    async def test_not_found_sets_error(self, dashboard, forecast_payload):
        respx.get(f"{BASE_URL}/weather").mock(
            return_value=httpx.Response(404, json={"cod": "404", "message": "city not found"})
        )
        respx.get(f"{BASE_URL}/forecast").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )

        assert await dashboard.refresh(Location.from_city("Atlantis")) is False
        assert dashboard.state.error == messages.NOT_FOUND
        assert dashboard.state.current is None
        assert dashboard.state.current_city == "New York"

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_forecast_sets_error(self, dashboard, current_payload):
        _mock_both(current_payload, {"cod": "200", "list": [], "city": {"timezone": 0}})

        assert await dashboard.refresh(Location.from_city("London")) is False
        assert dashboard.state.error == messages.BAD_DATA
        assert dashboard.state.forecast is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error(self, dashboard):
        respx.get(f"{BASE_URL}/weather").mock(side_effect=httpx.ConnectError("down"))
        respx.get(f"{BASE_URL}/forecast").mock(side_effect=httpx.ConnectError("down"))

        assert await dashboard.refresh(Location.from_city("London")) is False
        assert dashboard.state.error == messages.NETWORK

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_cleared_on_next_success(self, dashboard, current_payload, forecast_payload):
        dashboard.state.error = "old"
        _mock_both(current_payload, forecast_payload)

        await dashboard.refresh(Location.from_city("London"))
        assert dashboard.state.error is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_superseded_cycle_discarded(self, dashboard, current_payload, forecast_payload):
        def newer_cycle_starts(request):
            dashboard.state.begin_cycle()
            return httpx.Response(200, json=current_payload)

        respx.get(f"{BASE_URL}/weather").mock(side_effect=newer_cycle_starts)
        respx.get(f"{BASE_URL}/forecast").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )

        assert await dashboard.refresh(Location.from_city("London")) is False
        assert dashboard.state.current is None
        assert dashboard.state.forecast is None
        assert dashboard.state.error is None
        assert dashboard.state.cycle == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_requests_state_units(self, dashboard, current_payload, forecast_payload):
        current_route, forecast_route = _mock_both(current_payload, forecast_payload)
        dashboard.state.units = UnitSystem.IMPERIAL

        await dashboard.refresh(Location.from_city("London"))
        assert current_route.calls[0].request.url.params["units"] == "imperial"
        assert forecast_route.calls[0].request.url.params["units"] == "imperial"

    @pytest.mark.asyncio
    @respx.mock
    async def test_failed_fetch_cancels_sibling(self, default_config, store):
        client = OpenWeatherClient(
            api_key="k", base_url=BASE_URL, max_retries=3, initial_delay_ms=20
        )
        dashboard = WeatherDashboard(default_config, client, store)
        respx.get(f"{BASE_URL}/weather").mock(
            return_value=httpx.Response(200, json={"cod": "404", "message": "city not found"})
        )
        forecast_route = respx.get(f"{BASE_URL}/forecast").mock(
            return_value=httpx.Response(503)
        )

        assert await dashboard.refresh(Location.from_city("Atlantis")) is False
        calls_at_return = forecast_route.call_count
        await asyncio.sleep(0.3)
        assert forecast_route.call_count == calls_at_return
        assert dashboard.state.error == messages.NOT_FOUND

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_object_city_sets_error(self, dashboard, current_payload, forecast_payload):
        forecast_payload["city"] = "London"
        _mock_both(current_payload, forecast_payload)

        assert await dashboard.refresh(Location.from_city("London")) is False
        assert dashboard.state.error == messages.BAD_DATA

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_finite_temperature_sets_error(self, dashboard, current_payload, forecast_payload):
        forecast_payload["list"][3]["main"]["temp"] = float("nan")
        respx.get(f"{BASE_URL}/weather").mock(
            return_value=httpx.Response(200, json=current_payload)
        )
        # NaN is not valid strict JSON, so the body is encoded by hand
        respx.get(f"{BASE_URL}/forecast").mock(
            return_value=httpx.Response(200, content=json.dumps(forecast_payload))
        )

        assert await dashboard.refresh(Location.from_city("London")) is False
        assert dashboard.state.error == messages.BAD_DATA


class TestLocate:
    @pytest.mark.asyncio
    @respx.mock
    async def test_uses_coordinates(self, dashboard, current_payload, forecast_payload):
        current_route, _ = _mock_both(current_payload, forecast_payload)

        assert await dashboard.locate_and_refresh(StaticGeolocation(51.5, -0.1)) is True
        params = current_route.calls[0].request.url.params
        assert params["lat"] == "51.5"
        assert params["lon"] == "-0.1"

    @pytest.mark.asyncio
    async def test_denied(self, dashboard):
        provider = MagicMock()
        provider.current_position = AsyncMock(side_effect=PermissionError())

        assert await dashboard.locate_and_refresh(provider) is False
        assert dashboard.state.error == messages.LOCATION_DENIED
        assert dashboard.state.cycle == 0


class TestPreferences:
    @pytest.mark.asyncio
    async def test_set_units_without_reload(self, dashboard, store):
        assert await dashboard.set_units("imperial", reload=False) is True
        assert dashboard.state.units == UnitSystem.IMPERIAL
        assert preferences_repo.get_units(store) == UnitSystem.IMPERIAL

    @pytest.mark.asyncio
    @respx.mock
    async def test_set_units_reloads(self, dashboard, current_payload, forecast_payload):
        current_route, _ = _mock_both(current_payload, forecast_payload)

        assert await dashboard.set_units(UnitSystem.IMPERIAL) is True
        assert current_route.calls[0].request.url.params["units"] == "imperial"

    def test_toggle_favorite(self, dashboard, store):
        dashboard.state.current_city = "Quito"
        assert dashboard.toggle_favorite() is True
        assert dashboard.state.favorites == ["Quito"]
        assert dashboard.state.is_favorite
        assert dashboard.toggle_favorite() is False
        assert preferences_repo.list_favorites(store) == []

    def test_toggle_favorite_without_city(self, dashboard):
        dashboard.state.current_city = None
        assert dashboard.toggle_favorite() is None

    def test_toggle_theme(self, dashboard, store):
        assert dashboard.toggle_theme() is True
        assert preferences_repo.is_dark_mode(store) is True
        assert dashboard.toggle_theme() is False


class TestViews:
    def test_empty_before_refresh(self, dashboard):
        assert dashboard.theme() is None
        assert dashboard.chart() is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_theme_and_chart(self, dashboard, current_payload, forecast_payload):
        _mock_both(current_payload, forecast_payload)
        await dashboard.refresh(Location.from_city("London"))

        theme = dashboard.theme()
        assert theme is not None and theme.background == "rainy"
        chart = dashboard.chart()
        assert chart is not None
        assert chart["labels"][0] == "Mon, Feb 9"
        assert chart["datasets"][0]["data"] == [9, 19, 29, 39, 49]
        assert chart["datasets"][1]["data"] == [-1, 9, 19, 29, 39]
