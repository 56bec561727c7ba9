"""Shared test fixtures."""

import sqlite3
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import yaml

from skycast.config.schema import DashboardConfig
from skycast.storage.database import open_store
from skycast.tests.samples import BASE_URL, START_EPOCH, THREE_HOURS, RecordingSleep


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_sample() -> Callable[..., dict[str, Any]]:
    """Factory for one provider forecast entry."""

    def _make(
        dt: int,
        temp: float,
        temp_min: float | None = None,
        temp_max: float | None = None,
        icon: str = "01d",
        description: str = "clear sky",
    ) -> dict[str, Any]:
        return {
            "dt": dt,
            "main": {
                "temp": temp,
                "temp_min": temp if temp_min is None else temp_min,
                "temp_max": temp if temp_max is None else temp_max,
            },
            "weather": [{"description": description, "icon": icon}],
        }

    return _make


@pytest.fixture
def forecast_list(make_sample) -> list[dict[str, Any]]:
    """40 three-hour samples covering 2026-02-09..13 UTC, 8 per day.

    Day d (0-based), slot s: temp = 10*d + s + 0.4, temp_min = temp - 1.2,
    temp_max = temp + 1.2. Icons cycle 01d, 02d, 03d, 04d.
    """
    icons = ["01d", "02d", "03d", "04d"]
    items = []
    for i in range(40):
        day, slot = divmod(i, 8)
        temp = 10 * day + slot + 0.4
        items.append(
            make_sample(
                START_EPOCH + i * THREE_HOURS,
                temp,
                temp_min=temp - 1.2,
                temp_max=temp + 1.2,
                icon=icons[i % 4],
                description=f"sample {i}",
            )
        )
    return items


@pytest.fixture
def forecast_payload(forecast_list) -> dict[str, Any]:
    return {
        "cod": "200",
        "message": 0,
        "cnt": len(forecast_list),
        "list": forecast_list,
        "city": {"name": "London", "timezone": 0},
    }


@pytest.fixture
def current_payload() -> dict[str, Any]:
    return {
        "cod": 200,
        "name": "London",
        "dt": START_EPOCH + 12 * 3600,
        "timezone": 3600,
        "weather": [{"description": "light rain", "icon": "10d"}],
        "main": {
            "temp": 7.6,
            "feels_like": 4.4,
            "temp_min": 6.1,
            "temp_max": 8.5,
            "humidity": 81,
            "pressure": 1012,
        },
        "wind": {"speed": 5.0, "deg": 240},
        "clouds": {"all": 75},
        "visibility": 9000,
        "rain": {"1h": 1.6},
        "sys": {"sunrise": START_EPOCH + 7 * 3600, "sunset": START_EPOCH + 17 * 3600},
    }


@pytest.fixture
def default_config() -> DashboardConfig:
    return DashboardConfig(
        provider={"api_key": "test-key", "base_url": BASE_URL},
        retry={"max_retries": 1, "initial_delay_ms": 1},
    )


@pytest.fixture
def store(tmp_path: Path) -> Iterator[sqlite3.Connection]:
    conn = open_store(tmp_path / "skycast.db")
    yield conn
    conn.close()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "provider": {"api_key": "yaml-key", "base_url": BASE_URL},
        "retry": {"max_retries": 0, "initial_delay_ms": 1},
        "display": {"units": "imperial"},
        "storage": {"db_path": str(tmp_path / "prefs.db")},
    }
    path = tmp_path / "skycast.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
