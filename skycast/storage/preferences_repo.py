"""Repository for persisted dashboard preferences and favorite cities."""

import sqlite3

from skycast.models.common import UnitSystem

UNITS_KEY = "units"
LAST_CITY_KEY = "last_city"
DARK_MODE_KEY = "dark_mode"

# --- Preferences ---

def get_preference(conn: sqlite3.Connection, key: str) -> str | None:
    row = conn.execute(
        "SELECT value FROM preferences WHERE key = ?", (key,)
    ).fetchone()
    if row is None:
        return None
    return row[0]


def set_preference(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute(
        "INSERT INTO preferences (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        (key, value),
    )
    conn.commit()


def get_units(conn: sqlite3.Connection, default: UnitSystem = UnitSystem.METRIC) -> UnitSystem:
    value = get_preference(conn, UNITS_KEY)
    try:
        return UnitSystem(value) if value else default
    except ValueError:
        return default


def set_units(conn: sqlite3.Connection, units: UnitSystem) -> None:
    set_preference(conn, UNITS_KEY, UnitSystem(units).value)


def get_last_city(conn: sqlite3.Connection) -> str | None:
    return get_preference(conn, LAST_CITY_KEY)


def set_last_city(conn: sqlite3.Connection, city: str) -> None:
    set_preference(conn, LAST_CITY_KEY, city)


def is_dark_mode(conn: sqlite3.Connection, default: bool = False) -> bool:
    value = get_preference(conn, DARK_MODE_KEY)
    if value is None:
        return default
    return value == "true"


def set_dark_mode(conn: sqlite3.Connection, enabled: bool) -> None:
    set_preference(conn, DARK_MODE_KEY, "true" if enabled else "false")


# --- Favorites ---

def list_favorites(conn: sqlite3.Connection) -> list[str]:
    """Favorite cities in the order they were added."""
    rows = conn.execute(
        "SELECT city FROM favorites ORDER BY position"
    ).fetchall()
    return [r[0] for r in rows]


def is_favorite(conn: sqlite3.Connection, city: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM favorites WHERE city = ?", (city,)
    ).fetchone()
    return row is not None


def add_favorite(conn: sqlite3.Connection, city: str) -> bool:
    """Add a city. Returns False if it was already a favorite."""
    if is_favorite(conn, city):
        return False
    next_pos = conn.execute(
        "SELECT COALESCE(MAX(position), -1) + 1 FROM favorites"
    ).fetchone()[0]
    conn.execute(
        "INSERT INTO favorites (city, position) VALUES (?, ?)", (city, next_pos)
    )
    conn.commit()
    return True


def remove_favorite(conn: sqlite3.Connection, city: str) -> bool:
    """Remove a city. Returns False if it was not a favorite."""
    cursor = conn.execute("DELETE FROM favorites WHERE city = ?", (city,))
    conn.commit()
    return cursor.rowcount > 0


def toggle_favorite(conn: sqlite3.Connection, city: str) -> bool:
    """Flip membership. Returns True if the city is now a favorite."""
    if remove_favorite(conn, city):
        return False
    add_favorite(conn, city)
    return True
