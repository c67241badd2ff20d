"""src/urlcraft/__init__.py

urlcraft - bidirectional URL formatter for HTTP service clients.

A :class:`UrlFormatter` turns endpoint templates into full URLs from a
configured protocol, host, port, API version and path prefix, and can be
filled in from an existing URL. :class:`HttpService` is the asynchronous
contract HTTP transports implement on top of it.

Example:
    Building URLs::

        from urlcraft import UrlFormatter

        formatter = UrlFormatter(
            base_url="api.example.com", protocol="https", port=443, version="v1"
        )
        formatter.replacements["userId"] = "42"
        formatter.build("/users/{userId}")
        # 'https://api.example.com:443/v1/users/42'

    Parsing URLs::

        formatter = UrlFormatter()
        if formatter.parse("https://api.example.com:8443/v2/app"):
            print(formatter.port, formatter.version, formatter.post_hostname)

    Named services::

        from urlcraft import HttpServiceManager

        services = HttpServiceManager()
        services.register("api", formatter)
        services.resolve("api://users/me")
"""

from urlcraft.client.service import HttpService
from urlcraft.client.services import HttpServiceManager
from urlcraft.exceptions import (
    HttpServiceError,
    HttpStatusError,
    InvalidPayloadError,
    RequestAbortedError,
    RequestTimeoutError,
    UnknownServiceError,
    UrlcraftError,
    UrlParseError,
)
from urlcraft.http.headers import Headers
from urlcraft.http.response import HttpResponse
from urlcraft.http.verbs import HttpVerb
from urlcraft.url.formatter import UrlFormatter
from urlcraft.url.replacements import apply_replacements
from urlcraft.version import __version__

__all__ = [
    "UrlFormatter",
    "apply_replacements",
    "HttpService",
    "HttpServiceManager",
    "HttpResponse",
    "HttpVerb",
    "Headers",
    "UrlcraftError",
    "UrlParseError",
    "UnknownServiceError",
    "HttpServiceError",
    "HttpStatusError",
    "InvalidPayloadError",
    "RequestAbortedError",
    "RequestTimeoutError",
]
