"""Map errors to the messages shown to the user."""

from skycast.errors import (
    FetchError,
    GeolocationError,
    InvalidInputError,
    ProviderResponseError,
)

NOT_FOUND = "Location not found. Please try another city."
INVALID_KEY = "Invalid API key. Please contact support."
NETWORK = "Network error. Please check your internet connection."
LOCATION_DENIED = "Unable to retrieve location. Please allow access or search manually."
LOCATION_UNAVAILABLE = "Unable to retrieve your location. Please search manually."
BAD_DATA = "Received unexpected weather data. Please try again."
GENERIC = "An error occurred while fetching weather data."


def user_message(error: BaseException) -> str:
    if isinstance(error, GeolocationError):
        if error.reason == GeolocationError.PERMISSION_DENIED:
            return LOCATION_DENIED
        return LOCATION_UNAVAILABLE
    if isinstance(error, InvalidInputError):
        return BAD_DATA

    text = str(error).lower()
    if isinstance(error, FetchError):
        if error.status_code == 404 or "not found" in text:
            return NOT_FOUND
        if error.status_code == 401:
            return INVALID_KEY
        if error.is_network_error and not isinstance(error, ProviderResponseError):
            return NETWORK

    if "404" in text:
        return NOT_FOUND
    if "401" in text:
        return INVALID_KEY
    if "network" in text:
        return NETWORK
    return GENERIC
