"""Exception taxonomy shared by the fetch, normalize and dashboard layers."""


class SkycastError(Exception):
    """Base class for all skycast errors."""


class FetchError(SkycastError):
    """Raised when an HTTP fetch fails after its retry budget is spent.

    ``status_code`` is None for transport-level failures (DNS, connect,
    read timeout) and the HTTP status otherwise. The fetcher only retries
    errors whose ``retryable`` flag is set.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        retryable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url
        self.retryable = retryable

    @property
    def is_network_error(self) -> bool:
        return self.status_code is None


class ProviderResponseError(FetchError):
    """Raised when a 2xx body reports a non-success ``cod`` field."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
    ):
        super().__init__(message, status_code=status_code, url=url, retryable=False)


class InvalidInputError(SkycastError):
    """Raised when a provider payload is missing, malformed or empty."""


class GeolocationError(SkycastError):
    """Raised when the device position cannot be obtained."""

    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"

    def __init__(self, message: str, reason: str = UNAVAILABLE):
        super().__init__(message)
        self.reason = reason
