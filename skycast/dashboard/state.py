"""Explicit application state for one dashboard session."""

import sqlite3
from dataclasses import dataclass, field

from skycast.config.schema import DashboardConfig
from skycast.models.common import UnitSystem
from skycast.models.current import CurrentConditions
from skycast.models.forecast import ForecastResult
from skycast.storage import preferences_repo


@dataclass
class AppState:
    units: UnitSystem = UnitSystem.METRIC
    current_city: str | None = None
    favorites: list[str] = field(default_factory=list)
    dark_mode: bool = False
    current: CurrentConditions | None = None
    forecast: ForecastResult | None = None
    error: str | None = None
    cycle: int = 0

    @classmethod
    def from_store(cls, conn: sqlite3.Connection, config: DashboardConfig) -> "AppState":
        return cls(
            units=preferences_repo.get_units(conn, config.display.units),
            current_city=preferences_repo.get_last_city(conn) or config.display.default_city,
            favorites=preferences_repo.list_favorites(conn),
            dark_mode=preferences_repo.is_dark_mode(conn, config.display.dark_mode),
        )

    def begin_cycle(self) -> int:
        """Start a fetch cycle; results from older cycles are discarded."""
        self.cycle += 1
        return self.cycle

    def is_latest(self, cycle: int) -> bool:
        return cycle == self.cycle

    @property
    def is_favorite(self) -> bool:
        return self.current_city is not None and self.current_city in self.favorites
