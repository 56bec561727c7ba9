"""Tests for user-facing error messages."""

import pytest

from skycast.dashboard import messages
from skycast.dashboard.messages import user_message
from skycast.errors import (
    FetchError,
    GeolocationError,
    InvalidInputError,
    ProviderResponseError,
)


class TestUserMessage:
    @pytest.mark.parametrize(
        "error,expected",
        [
            (FetchError("city not found", status_code=404), messages.NOT_FOUND),
            (ProviderResponseError("nothing to geocode", status_code=404), messages.NOT_FOUND),
            (FetchError("Invalid API key", status_code=401), messages.INVALID_KEY),
            (FetchError("Network error: refused"), messages.NETWORK),
            (FetchError("HTTP error, status=500", status_code=500), messages.GENERIC),
            (ProviderResponseError("Failed to fetch forecast"), messages.GENERIC),
            (InvalidInputError("Forecast data is empty"), messages.BAD_DATA),
            (GeolocationError("denied", GeolocationError.PERMISSION_DENIED), messages.LOCATION_DENIED),
            (GeolocationError("gps off"), messages.LOCATION_UNAVAILABLE),
            (RuntimeError("request failed with 404"), messages.NOT_FOUND),
            (RuntimeError("network unreachable"), messages.NETWORK),
            (RuntimeError("boom"), messages.GENERIC),
        ],
    )
    def test_mapping(self, error, expected):
        assert user_message(error) == expected
