"""Unit-system helpers for temperature and wind display.

Wind speed is carried internally in metres per second. Display values are
km/h for metric and mph for imperial.
"""

from skycast.models.common import UnitSystem

MPS_TO_KMH = 3.6
MPS_TO_MPH = 2.237


def convert_wind_speed(meters_per_second: float, unit_system: UnitSystem | str) -> float:
    """Convert a wind speed in m/s to the display unit of ``unit_system``."""
    units = UnitSystem(unit_system)
    if units == UnitSystem.IMPERIAL:
        return meters_per_second * MPS_TO_MPH
    return meters_per_second * MPS_TO_KMH


def to_meters_per_second(speed: float, unit_system: UnitSystem | str) -> float:
    """Undo the provider's unit choice: imperial payloads report mph."""
    if UnitSystem(unit_system) == UnitSystem.IMPERIAL:
        return speed / MPS_TO_MPH
    return float(speed)


def wind_unit_label(unit_system: UnitSystem | str) -> str:
    return "mph" if UnitSystem(unit_system) == UnitSystem.IMPERIAL else "km/h"


def temperature_symbol(unit_system: UnitSystem | str) -> str:
    return "°F" if UnitSystem(unit_system) == UnitSystem.IMPERIAL else "°C"
