"""src/urlcraft/exceptions.py

urlcraft exceptions hierarchy.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from urlcraft.http.response import HttpResponse


class UrlcraftError(Exception):
    """Base exception for all urlcraft errors."""


class UrlParseError(UrlcraftError, ValueError):
    """A URL string did not match the shape a formatter can parse."""


class UnknownServiceError(UrlcraftError, KeyError):
    """No formatter is registered under the requested service name."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead.
        return str(self.args[0]) if self.args else ""


class HttpServiceError(UrlcraftError):
    """General exception for HTTP service errors."""


class RequestAbortedError(HttpServiceError):
    """The request was cancelled by :meth:`HttpService.abort`."""

    def __init__(self, message: str = "Request aborted"):
        super().__init__(message)


class RequestTimeoutError(HttpServiceError):
    """The request exceeded the service's global timeout."""

    def __init__(self, message: str = "Request timed out"):
        super().__init__(message)


class HttpStatusError(HttpServiceError):
    """
    The server answered with an error status.
    The response is available as ``response``.
    """

    def __init__(self, response: "HttpResponse", message: str = ""):
        super().__init__(
            message or f"HTTP {response.status_code} for {response.url or '<unknown>'}"
        )
        self.response = response


class InvalidPayloadError(HttpServiceError):
    """A response body could not be decoded into a payload."""
