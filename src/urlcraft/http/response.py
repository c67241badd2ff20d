"""src/urlcraft/http/response.py

HTTP response type returned by :class:`urlcraft.client.service.HttpService`.
"""

from typing import Any, Generic, Optional, TypeVar, cast

from urlcraft.http.headers import Headers
from urlcraft.http.verbs import HttpVerb
from urlcraft.utils.serialization import from_json

__all__ = ["HttpResponse"]

T = TypeVar("T")


class HttpResponse(Generic[T]):
    """
    Represents the result of a request made through an HTTP service.

    Attributes:
        status_code: HTTP status code as integer.
        headers: Response headers.
        body: Raw response body.
        payload: Deserialized payload, set by the service.
        url: URL the request was sent to.
        verb: Verb the request was sent with.
    """

    # pylint: disable=too-many-instance-attributes
    __slots__ = ("status_code", "headers", "body", "payload", "url", "verb")

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        status_code: int,
        *,
        headers: Optional[Headers] = None,
        body: bytes = b"",
        payload: Optional[T] = None,
        url: Optional[str] = None,
        verb: Optional[HttpVerb] = None,
    ) -> None:
        self.status_code = status_code
        self.headers = headers if headers is not None else Headers()
        self.body = body
        self.payload = payload
        self.url = url
        self.verb = verb

    @property
    def ok(self) -> bool:
        """True for any status below 400."""
        return 0 < self.status_code < 400

    def text(self, encoding: Optional[str] = None) -> str:
        """Return the body decoded using ``encoding`` or the Content-Type charset."""
        if encoding is None:
            content_type = cast(str, self.headers.get("Content-Type", ""))
            if "charset=" in content_type:
                encoding = content_type.split("charset=")[-1].split(";")[0].strip()
            else:
                encoding = "utf-8"

        return self.body.decode(encoding, errors="replace")

    def json(self) -> Any:
        """
        Returns JSON-decoded body.

        Raises:
            InvalidPayloadError: If the body is not valid JSON.
        """
        return from_json(self.text())

    def __repr__(self) -> str:
        return f"<HttpResponse [{self.status_code}] {self.verb} {self.url}>"
