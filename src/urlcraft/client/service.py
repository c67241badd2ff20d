"""src/urlcraft/client/service.py

Asynchronous HTTP service contract.

:class:`HttpService` implements everything about a request that does not
depend on the wire: resolving service URLs through an
:class:`HttpServiceManager`, merging headers, encoding payloads and
uploads, firing request hooks, the global timeout, aborting in-flight
requests and decoding responses. Transports subclass it and implement
:meth:`HttpService._send`.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Set,
    Tuple,
)

from urlcraft.client.services import HttpServiceManager
from urlcraft.exceptions import (
    HttpStatusError,
    RequestAbortedError,
    RequestTimeoutError,
)
from urlcraft.http.multipart import FileSource, encode_multipart
from urlcraft.http.response import HttpResponse
from urlcraft.http.verbs import HttpVerb
from urlcraft.utils.serialization import encode_payload, is_json

__all__ = ["HttpService", "RequestHook"]

logger = logging.getLogger(__name__)

RequestHook = Callable[[HttpVerb, str, Dict[str, str], Any], None]
Parser = Callable[[Any], Any]


class HttpService(ABC):
    """
    Base class for asynchronous HTTP services.

    Attributes:
        services: Named formatters used to resolve request URLs.
        headers: Headers sent with every request.
    """

    __slots__ = (
        "services",
        "headers",
        "_timeout_ms",
        "_request_hooks",
        "_in_flight",
        "_aborted",
    )

    def __init__(
        self,
        *,
        services: Optional[HttpServiceManager] = None,
        timeout_ms: int = 0,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            services: Service registry, a new empty one if None.
            timeout_ms: Global timeout in milliseconds, <= 0 disables it.
            headers: Headers sent with every request.
        """
        self.services = services if services is not None else HttpServiceManager()
        self.headers: Dict[str, str] = dict(headers or {})
        self._timeout_ms = int(timeout_ms)
        self._request_hooks: List[RequestHook] = []
        self._in_flight: Set["asyncio.Task[HttpResponse[Any]]"] = set()
        self._aborted: Set["asyncio.Task[HttpResponse[Any]]"] = set()

    @property
    def timeout_ms(self) -> int:
        """Global timeout. If less than or equal to zero, timeout is disabled."""
        return self._timeout_ms

    @timeout_ms.setter
    def timeout_ms(self, value: int) -> None:
        self._timeout_ms = int(value)

    @property
    def timeout(self) -> Optional[float]:
        """Global timeout in seconds, None when disabled."""
        return self._timeout_ms / 1000 if self._timeout_ms > 0 else None

    @property
    def in_flight(self) -> int:
        """Number of requests currently awaiting a response."""
        return len(self._in_flight)

    def add_request_hook(self, hook: RequestHook) -> None:
        """
        Register a request hook.

        The hook receives ``(verb, url, headers, payload)`` for every
        outgoing request, after URL resolution and header merging. Hooks
        are called in FIFO order; exceptions propagate to the caller.
        """
        self._request_hooks.append(hook)

    def remove_request_hook(self, hook: RequestHook) -> None:
        """Unregister a request hook. Unknown hooks are ignored."""
        try:
            self._request_hooks.remove(hook)
        except ValueError:
            pass

    def abort(self) -> int:
        """
        Abort all in-flight requests.

        Each aborted call raises :class:`RequestAbortedError`.

        Returns:
            Number of requests aborted.
        """
        pending = [task for task in self._in_flight if not task.done()]
        for task in pending:
            self._aborted.add(task)
            task.cancel()

        if pending:
            logger.warning("Aborted %d in-flight request(s)", len(pending))
        return len(pending)

    async def get(
        self, url: str, *, parser: Optional[Parser] = None
    ) -> HttpResponse[Any]:
        """Send a GET request. ``url`` may include query parameters."""
        return await self._request(HttpVerb.GET, url, parser=parser)

    async def post(
        self, url: str, payload: Any = None, *, parser: Optional[Parser] = None
    ) -> HttpResponse[Any]:
        """Send a POST request with ``payload`` as body."""
        return await self._request(HttpVerb.POST, url, payload, parser=parser)

    async def put(
        self, url: str, payload: Any = None, *, parser: Optional[Parser] = None
    ) -> HttpResponse[Any]:
        """Send a PUT request with ``payload`` as body."""
        return await self._request(HttpVerb.PUT, url, payload, parser=parser)

    async def patch(
        self, url: str, payload: Any = None, *, parser: Optional[Parser] = None
    ) -> HttpResponse[Any]:
        """Send a PATCH request with ``payload`` as body."""
        return await self._request(HttpVerb.PATCH, url, payload, parser=parser)

    async def delete(
        self, url: str, *, parser: Optional[Parser] = None
    ) -> HttpResponse[Any]:
        """Send a DELETE request."""
        return await self._request(HttpVerb.DELETE, url, parser=parser)

    # pylint: disable=too-many-arguments
    async def post_file(
        self,
        url: str,
        fields: Optional[Iterable[Tuple[str, str]]],
        file: FileSource,
        offset: int = 0,
        count: Optional[int] = None,
        *,
        parser: Optional[Parser] = None,
    ) -> HttpResponse[Any]:
        """
        Send a file through POST.

        Args:
            url: The url to send the request to.
            fields: Optional fields that will precede the file.
            file: Buffer or binary stream. The part is named "file".
            offset: Offset into a buffer.
            count: Number of buffer bytes to send.
            parser: Optional callable producing a typed payload.
        """
        return await self._upload(
            HttpVerb.POST, url, fields, file, offset, count, parser
        )

    # pylint: disable=too-many-arguments
    async def put_file(
        self,
        url: str,
        fields: Optional[Iterable[Tuple[str, str]]],
        file: FileSource,
        offset: int = 0,
        count: Optional[int] = None,
        *,
        parser: Optional[Parser] = None,
    ) -> HttpResponse[Any]:
        """Send a file through PUT. See :meth:`post_file`."""
        return await self._upload(
            HttpVerb.PUT, url, fields, file, offset, count, parser
        )

    async def download(self, url: str) -> HttpResponse[bytes]:
        """Download raw bytes. The payload is the undecoded body."""
        return await self._request(HttpVerb.GET, url, raw=True)

    @abstractmethod
    async def _send(
        self,
        verb: HttpVerb,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes],
    ) -> HttpResponse[Any]:
        """
        Put the request on the wire.

        Implementations return a response with ``status_code``, ``headers``
        and ``body`` set; the payload is filled in by the caller.
        """

    # pylint: disable=too-many-arguments
    async def _upload(
        self,
        verb: HttpVerb,
        url: str,
        fields: Optional[Iterable[Tuple[str, str]]],
        file: FileSource,
        offset: int,
        count: Optional[int],
        parser: Optional[Parser],
    ) -> HttpResponse[Any]:
        field_list = list(fields or ())
        content_type, body = encode_multipart(field_list, file, offset, count)
        return await self._request(
            verb,
            url,
            field_list,
            body=body,
            content_type=content_type,
            parser=parser,
        )

    # pylint: disable=too-many-arguments
    async def _request(
        self,
        verb: HttpVerb,
        url: str,
        payload: Any = None,
        *,
        body: Optional[bytes] = None,
        content_type: Optional[str] = None,
        parser: Optional[Parser] = None,
        raw: bool = False,
    ) -> HttpResponse[Any]:
        """Resolve, send and decode a request."""
        resolved, service_headers = self.services.resolve(url)

        if body is None:
            content_type, body = encode_payload(payload)

        merged_headers = {**self.headers, **service_headers}
        if content_type:
            merged_headers["Content-Type"] = content_type

        # Execute request hooks (FIFO)
        for hook in self._request_hooks:
            hook(verb, resolved, merged_headers, payload)

        logger.debug("%s %s", verb, resolved)

        task = asyncio.ensure_future(self._send(verb, resolved, merged_headers, body))
        self._in_flight.add(task)
        try:
            response = await asyncio.wait_for(task, self.timeout)

        except asyncio.TimeoutError as exc:
            raise RequestTimeoutError(
                f"{verb} {resolved} timed out after {self._timeout_ms} ms"
            ) from exc

        except asyncio.CancelledError:
            if task in self._aborted:
                raise RequestAbortedError(f"{verb} {resolved} aborted") from None
            raise

        finally:
            self._in_flight.discard(task)
            self._aborted.discard(task)

        response.url = response.url or resolved
        response.verb = verb

        if not response.ok:
            raise HttpStatusError(response)

        response.payload = response.body if raw else self._decode(response, parser)
        return response

    @staticmethod
    def _decode(response: HttpResponse[Any], parser: Optional[Parser]) -> Any:
        if not response.body:
            return None

        if is_json(response.headers.get("Content-Type")):
            data = response.json()
        else:
            data = response.text()

        return parser(data) if parser is not None else data
