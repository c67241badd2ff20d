"""src/urlcraft/url/formatter.py

URL builder and parser for urlcraft.

A :class:`UrlFormatter` holds the pieces of a service URL (protocol, host,
port, API version, a fixed path prefix and named replacements) and turns an
endpoint template into a full URL. It can also be filled in from an
existing URL string.
"""

import logging
import re
from typing import Any, Dict, Mapping, Optional

from urlcraft.exceptions import UrlParseError
from urlcraft.url.replacements import apply_replacements

__all__ = ["UrlFormatter", "DEFAULT_PORT"]

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PROTOCOL = "http"
DEFAULT_PARSED_PROTOCOL = "https"
DEFAULT_PORT = 80
SCHEME_SEPARATOR = "://"

_URL_PATTERN = re.compile(
    r"(\w+://)?"
    r"([a-zA-Z0-9_\-\.]+)"
    r"(:\d+)?"
    r"(/v[0-9_\.\-]+/?)?"
    r"(/[a-zA-Z0-9\-\._~/]+)?",
    re.ASCII,
)


class UrlFormatter:
    """
    Utility object for building and parsing service URLs.

    ``build`` only reads the stored configuration. ``parse`` is the only
    method that mutates it and does so all-or-nothing.

    Attributes:
        base_url: Hostname or IP of the service.
        protocol: URL scheme, with or without the trailing ``://``.
        port: Port number. Values <= 0 are emitted as 80.
        version: API version segment, e.g. ``"v1"``. Empty to omit.
        post_hostname: Path prefix inserted after the port. Empty to omit.
        replacements: For each ``(A, B)``, ``"{A}"`` is replaced by ``B``.
    """

    __slots__ = (
        "base_url",
        "protocol",
        "port",
        "version",
        "post_hostname",
        "replacements",
    )

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_HOST,
        protocol: str = DEFAULT_PROTOCOL,
        port: int = DEFAULT_PORT,
        version: str = "",
        post_hostname: str = "",
        replacements: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.base_url = base_url
        self.protocol = protocol
        self.port = port
        self.version = version
        self.post_hostname = post_hostname
        self.replacements: Dict[str, str] = dict(replacements or {})

    @classmethod
    def from_url(cls, url: str) -> "UrlFormatter":
        """
        Create a formatter from an existing URL.

        Raises:
            UrlParseError: If the URL does not match the expected shape.
        """
        formatter = cls()
        if not formatter.parse(url):
            raise UrlParseError(f"Could not parse URL: {url!r}")
        return formatter

    def copy(self) -> "UrlFormatter":
        """Return an independent copy of this formatter."""
        return UrlFormatter(
            base_url=self.base_url,
            protocol=self.protocol,
            port=self.port,
            version=self.version,
            post_hostname=self.post_hostname,
            replacements=self.replacements,
        )

    # pylint: disable=too-many-arguments
    def build(
        self,
        endpoint: Optional[str],
        version: Optional[str] = None,
        port: Optional[int] = None,
        protocol: Optional[str] = None,
        replacements: Optional[Mapping[str, str]] = None,
    ) -> str:
        """
        Create a URL from an endpoint.

        Overrides apply to this call only and never change stored state.

        Args:
            endpoint: Endpoint template, e.g. ``"/users/{userId}"``.
            version: Version that overrides the stored one. ``""`` omits it.
            port: Port that overrides the stored one.
            protocol: Protocol that overrides the stored one.
            replacements: Replacements applied on top of the stored ones.

        Returns:
            The formatted URL.
        """
        version = self.version if version is None else version
        port = self.port if port is None else port
        protocol = self.protocol if protocol is None else protocol

        segments = []
        post_hostname = self._format_post_hostname(self.post_hostname)
        if post_hostname:
            segments.append(post_hostname)
        if version:
            segments.append(self._format_version(version))
        segments.append(self._format_endpoint(endpoint, replacements))

        return (
            f"{self._format_protocol(protocol)}{self._format_base_url()}"
            f":{self._format_port(port)}/{'/'.join(segments)}"
        )

    def parse(self, url: Optional[str]) -> bool:
        """
        Parse a URL and fill out the formatter from it.

        A missing scheme defaults to ``https`` and a missing port to 80.
        Everything after the version segment is stored as ``post_hostname``.
        On failure nothing is modified.

        Args:
            url: The URL to parse.

        Returns:
            True if the URL matched and the formatter was updated.
        """
        if not url:
            return False

        match = _URL_PATTERN.fullmatch(url)
        if match is None:
            logger.debug("URL did not match expected shape: %r", url)
            return False

        scheme, host, port, version, path = match.groups()

        protocol = scheme if scheme is not None else DEFAULT_PARSED_PROTOCOL
        parsed_port = int(port[1:]) if port is not None else DEFAULT_PORT
        parsed_version = version.strip("/") if version is not None else ""
        post_hostname = path.strip("/") if path is not None else ""

        self.protocol = protocol
        self.base_url = host
        self.port = parsed_port
        self.version = parsed_version
        self.post_hostname = post_hostname

        logger.debug(
            "Parsed %r into protocol=%r host=%r port=%d version=%r post_hostname=%r",
            url,
            protocol,
            host,
            parsed_port,
            parsed_version,
            post_hostname,
        )
        return True

    def _format_protocol(self, protocol: str) -> str:
        protocol = protocol or DEFAULT_PROTOCOL
        if not protocol.endswith(SCHEME_SEPARATOR):
            protocol += SCHEME_SEPARATOR
        return protocol

    def _format_base_url(self) -> str:
        """Reduce the stored base URL to a bare host."""
        base_url = (self.base_url or "").strip("/")

        # trim protocol
        index = base_url.find(SCHEME_SEPARATOR)
        if index != -1:
            base_url = base_url[index + len(SCHEME_SEPARATOR) :]

        # trim endpoints off
        base_url = base_url.split("/", 1)[0]

        return base_url or DEFAULT_HOST

    @staticmethod
    def _format_port(port: int) -> int:
        return port if port > 0 else DEFAULT_PORT

    @staticmethod
    def _format_version(version: str) -> str:
        return version.strip("/")

    @staticmethod
    def _format_post_hostname(post_hostname: Optional[str]) -> str:
        return (post_hostname or "").strip("/")

    def _format_endpoint(
        self, endpoint: Optional[str], replacements: Optional[Mapping[str, str]]
    ) -> str:
        if not endpoint:
            return ""

        merged = dict(self.replacements)
        if replacements:
            merged.update(replacements)

        return apply_replacements(endpoint.strip("/"), merged)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, UrlFormatter):
            return NotImplemented
        return (
            self.base_url == other.base_url
            and self.protocol == other.protocol
            and self.port == other.port
            and self.version == other.version
            and self.post_hostname == other.post_hostname
            and self.replacements == other.replacements
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"UrlFormatter(base_url={self.base_url!r}, protocol={self.protocol!r}, "
            f"port={self.port!r}, version={self.version!r}, "
            f"post_hostname={self.post_hostname!r}, "
            f"replacements={self.replacements!r})"
        )
