"""CLI entry point for the weather dashboard."""

import argparse
import asyncio
import logging

import httpx

from skycast.config.defaults import DEFAULT_CONFIG_PATH
from skycast.config.loader import get_config_value, load_config, save_config, set_config_value
from skycast.config.schema import DashboardConfig
from skycast.dashboard.messages import user_message
from skycast.dashboard.service import WeatherDashboard
from skycast.errors import SkycastError
from skycast.ingest.geolocation import StaticGeolocation
from skycast.ingest.openweather_client import OpenWeatherClient
from skycast.models.common import Location, UnitSystem
from skycast.reporting.formatters import (
    format_current_json,
    format_current_text,
    format_forecast_json,
    format_forecast_text,
)
from skycast.storage import preferences_repo
from skycast.storage.database import open_store


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="skycast",
        description="Current conditions and 5-day forecast from OpenWeather",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG_PATH, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite preferences DB path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # current / forecast
    for name, help_text in (
        ("current", "Show current conditions"),
        ("forecast", "Show hourly and 5-day forecast"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("city", nargs="?", help="City name (default: last city)")
        p.add_argument("--lat", type=float, help="Latitude instead of a city")
        p.add_argument("--lon", type=float, help="Longitude instead of a city")
        p.add_argument("--json", action="store_true", help="JSON output")

    # favorites
    fav_p = sub.add_parser("favorites", help="Manage favorite cities")
    fav_p.add_argument("action", choices=["list", "add", "remove", "toggle"])
    fav_p.add_argument("city", nargs="?")

    # units / theme
    units_p = sub.add_parser("units", help="Set the unit system")
    units_p.add_argument("units", choices=[u.value for u in UnitSystem])
    theme_p = sub.add_parser("theme", help="Set dark or light mode")
    theme_p.add_argument("mode", choices=["dark", "light", "toggle"])

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    db_path = args.db or config.storage.db_path

    if args.command in ("current", "forecast"):
        return _cmd_weather(config, db_path, args)
    elif args.command == "favorites":
        return _cmd_favorites(db_path, args)
    elif args.command == "units":
        return _cmd_units(db_path, args)
    elif args.command == "theme":
        return _cmd_theme(db_path, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_weather(config: DashboardConfig, db_path: str, args) -> int:
    if (args.lat is None) != (args.lon is None):
        print("Error: --lat and --lon must be given together")
        return 1

    try:
        client = OpenWeatherClient(
            api_key=config.provider.api_key,
            base_url=config.provider.base_url,
            units=config.display.units,
            timeout=config.provider.timeout_seconds,
            max_retries=config.retry.max_retries,
            initial_delay_ms=config.retry.initial_delay_ms,
        )
    except SkycastError as e:
        print(f"Error: {user_message(e)}")
        return 1

    conn = open_store(db_path)
    try:
        dashboard = WeatherDashboard(config, client, conn)
        ok = asyncio.run(_fetch(dashboard, args))
        if not ok:
            print(f"Error: {dashboard.state.error}")
            return 1

        state = dashboard.state
        assert state.current is not None and state.forecast is not None
        if args.command == "current":
            if args.json:
                print(format_current_json(state.current))
            else:
                print(format_current_text(state.current, state.units))
        elif args.json:
            print(format_forecast_json(state.forecast))
        else:
            print(format_forecast_text(state.forecast, state.units))
        return 0
    finally:
        conn.close()


async def _fetch(dashboard: WeatherDashboard, args) -> bool:
    async with httpx.AsyncClient(timeout=dashboard.config.provider.timeout_seconds) as http:
        dashboard.http = http
        if args.lat is not None:
            return await dashboard.locate_and_refresh(StaticGeolocation(args.lat, args.lon))
        if args.city:
            return await dashboard.refresh(Location.from_city(args.city))
        return await dashboard.refresh()


def _cmd_favorites(db_path: str, args) -> int:
    conn = open_store(db_path)
    try:
        if args.action == "list":
            favorites = preferences_repo.list_favorites(conn)
            if not favorites:
                print("No favorite cities yet.")
            for city in favorites:
                print(city)
            return 0

        city = args.city or preferences_repo.get_last_city(conn)
        if not city:
            print("Error: no city given and no last city recorded")
            return 1
        if args.action == "add":
            added = preferences_repo.add_favorite(conn, city)
            print(f"Added {city}" if added else f"{city} is already a favorite")
        elif args.action == "remove":
            removed = preferences_repo.remove_favorite(conn, city)
            print(f"Removed {city}" if removed else f"{city} is not a favorite")
        else:
            now = preferences_repo.toggle_favorite(conn, city)
            print(f"{city}: {'favorite' if now else 'not favorite'}")
        return 0
    finally:
        conn.close()


def _cmd_units(db_path: str, args) -> int:
    conn = open_store(db_path)
    try:
        preferences_repo.set_units(conn, UnitSystem(args.units))
        print(f"Units: {args.units}")
        return 0
    finally:
        conn.close()


def _cmd_theme(db_path: str, args) -> int:
    conn = open_store(db_path)
    try:
        if args.mode == "toggle":
            enabled = not preferences_repo.is_dark_mode(conn)
        else:
            enabled = args.mode == "dark"
        preferences_repo.set_dark_mode(conn, enabled)
        print(f"Theme: {'dark' if enabled else 'light'}")
        return 0
    finally:
        conn.close()


def _cmd_config(config: DashboardConfig, args) -> int:
    if args.config_command == "show":
        masked = "***" if config.provider.api_key else ""
        shown = config.model_copy(
            update={"provider": config.provider.model_copy(update={"api_key": masked})}
        )
        print(shown.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
        except (KeyError, ValueError) as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"Set {key.strip()} = {get_config_value(new_config, key.strip())}")
        return 0
    else:
        print("Use: config show | config set key=value")
        return 1
