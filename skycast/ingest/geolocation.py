"""Device-position collaborator used for "weather at my location"."""

import logging
from typing import Protocol

from skycast.errors import GeolocationError
from skycast.models.common import Location

logger = logging.getLogger(__name__)


class GeolocationProvider(Protocol):
    async def current_position(self) -> tuple[float, float]: ...


class StaticGeolocation:
    """Position supplied up front, e.g. from ``--lat/--lon`` on the CLI."""

    def __init__(self, lat: float | None, lon: float | None):
        self.lat = lat
        self.lon = lon

    async def current_position(self) -> tuple[float, float]:
        if self.lat is None or self.lon is None:
            raise LookupError("no position configured")
        return self.lat, self.lon


async def locate(provider: GeolocationProvider) -> Location:
    """Resolve the provider's position to a Location.

    Failures are surfaced as GeolocationError and never retried.
    """
    try:
        lat, lon = await provider.current_position()
    except PermissionError as e:
        raise GeolocationError(
            "Location access was denied", GeolocationError.PERMISSION_DENIED
        ) from e
    except TimeoutError as e:
        raise GeolocationError(
            "Timed out waiting for location", GeolocationError.TIMEOUT
        ) from e
    except (LookupError, OSError) as e:
        raise GeolocationError(
            f"Location unavailable: {e}", GeolocationError.UNAVAILABLE
        ) from e

    try:
        return Location.from_coords(lat, lon)
    except ValueError as e:
        logger.warning("Geolocation returned invalid position %s,%s", lat, lon)
        raise GeolocationError(
            f"Invalid position: {e}", GeolocationError.UNAVAILABLE
        ) from e
