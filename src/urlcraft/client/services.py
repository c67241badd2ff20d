"""src/urlcraft/client/services.py

Registry of named URL formatters.

A service manager lets callers refer to a backend by name instead of by
address. URLs written as ``"<service>://<endpoint>"`` are rebuilt through
the formatter registered under ``<service>``, and the headers registered
for that service are attached to the request.
"""

import logging
from typing import Any, Dict, Iterator, Optional, Tuple

from urlcraft.exceptions import UnknownServiceError
from urlcraft.url.formatter import SCHEME_SEPARATOR, UrlFormatter

__all__ = ["HttpServiceManager"]

logger = logging.getLogger(__name__)


class HttpServiceManager:
    """
    Named :class:`UrlFormatter` instances plus per-service default headers.

    Attributes:
        default: Name of the service used for relative endpoints.
    """

    __slots__ = ("_formatters", "_headers", "default")

    def __init__(self, *, default: Optional[str] = None) -> None:
        self._formatters: Dict[str, UrlFormatter] = {}
        self._headers: Dict[str, Dict[str, str]] = {}
        self.default = default

    def __contains__(self, name: object) -> bool:
        return name in self._formatters

    def __iter__(self) -> Iterator[str]:
        return iter(self._formatters)

    def __len__(self) -> int:
        return len(self._formatters)

    def register(self, name: str, formatter: UrlFormatter) -> None:
        """
        Register (or replace) the formatter for a service.

        The first service registered becomes the default unless a default
        was set explicitly.
        """
        if not name or SCHEME_SEPARATOR in name:
            raise ValueError(f"Invalid service name: {name!r}")

        self._formatters[name] = formatter
        self._headers.setdefault(name, {})
        if self.default is None:
            self.default = name

        logger.debug("Registered service %r -> %r", name, formatter)

    def unregister(self, name: str) -> None:
        """Remove a service and its headers. Unknown names are ignored."""
        self._formatters.pop(name, None)
        self._headers.pop(name, None)
        if self.default == name:
            self.default = None

    def formatter(self, name: str) -> UrlFormatter:
        """
        Get the formatter registered under ``name``.

        Raises:
            UnknownServiceError: If no such service exists.
        """
        try:
            return self._formatters[name]
        except KeyError:
            raise UnknownServiceError(f"Unknown service: {name!r}") from None

    def add_header(self, name: str, key: str, value: str) -> None:
        """Add a header sent with every request to service ``name``."""
        self.formatter(name)
        self._headers[name][key] = value

    def remove_header(self, name: str, key: str) -> None:
        """Remove a service header. Missing headers are ignored."""
        self.formatter(name)
        self._headers[name].pop(key, None)

    def headers(self, name: str) -> Dict[str, str]:
        """Copy of the headers registered for service ``name``."""
        self.formatter(name)
        return dict(self._headers[name])

    def url(self, endpoint: str, service: Optional[str] = None, **kwargs: Any) -> str:
        """
        Build a URL through a named service's formatter.

        Args:
            endpoint: Endpoint template.
            service: Service name, the default service if None.
            **kwargs: Overrides forwarded to :meth:`UrlFormatter.build`.

        Raises:
            UnknownServiceError: If the service (or default) is not registered.
        """
        return self.formatter(self._service_name(service)).build(endpoint, **kwargs)

    def resolve(self, url: str) -> Tuple[str, Dict[str, str]]:
        """
        Resolve a URL into an absolute URL and the headers to send with it.

        - ``"<service>://endpoint"`` for a registered service is rebuilt
          through that service's formatter.
        - Any other absolute URL is returned unchanged, without headers.
        - A relative URL is built through the default service.

        Raises:
            UnknownServiceError: For a relative URL with no default service.
        """
        index = url.find(SCHEME_SEPARATOR)
        if index != -1:
            name = url[:index]
            if name not in self._formatters:
                return url, {}
            endpoint = url[index + len(SCHEME_SEPARATOR) :]
        else:
            name = self._service_name(None)
            endpoint = url

        return self._formatters[name].build(endpoint), dict(self._headers[name])

    def _service_name(self, service: Optional[str]) -> str:
        name = service if service is not None else self.default
        if name is None:
            raise UnknownServiceError("No service given and no default service set")
        if name not in self._formatters:
            raise UnknownServiceError(f"Unknown service: {name!r}")
        return name
