"""tests/unit/test_service.py

Unit tests for the HttpService base class.

Test Coverage:
    - Verb methods send the resolved URL, merged headers and encoded body
    - Request hooks receive (verb, url, headers, payload) in FIFO order
    - Payload decoding, typed parsers and raw downloads
    - Multipart uploads for POST and PUT
    - Error statuses, global timeout and abort

Testing Strategy:
    - Subclass HttpService with a transport that records calls and
      returns canned responses, so nothing touches the network
"""

import asyncio
import io
from typing import Any, Dict, List, Optional
from unittest import mock

import pytest

from urlcraft.client.service import HttpService
from urlcraft.client.services import HttpServiceManager
from urlcraft.exceptions import (
    HttpStatusError,
    InvalidPayloadError,
    RequestAbortedError,
    RequestTimeoutError,
)
from urlcraft.http.headers import Headers
from urlcraft.http.response import HttpResponse
from urlcraft.http.verbs import HttpVerb
from urlcraft.url.formatter import UrlFormatter

JSON_HEADERS = {"Content-Type": "application/json"}


class RecordingService(HttpService):
    """HttpService whose transport records requests and replays a response."""

    __slots__ = ("sent", "response", "delay")

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.sent: List[Dict[str, Any]] = []
        self.response = HttpResponse(200)
        self.delay = 0.0

    async def _send(
        self,
        verb: HttpVerb,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes],
    ) -> HttpResponse[Any]:
        self.sent.append({"verb": verb, "url": url, "headers": headers, "body": body})
        if self.delay:
            await asyncio.sleep(self.delay)
        return HttpResponse(
            self.response.status_code,
            headers=self.response.headers,
            body=self.response.body,
        )


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def services() -> HttpServiceManager:
    """Manager with a default API service carrying an auth header."""
    manager = HttpServiceManager()
    manager.register(
        "api",
        UrlFormatter(
            base_url="api.example.com", protocol="https", port=443, version="v1"
        ),
    )
    manager.add_header("api", "Authorization", "Bearer token")
    return manager


@pytest.fixture
def service(services) -> RecordingService:
    """Recording service bound to the test services."""
    return RecordingService(services=services, headers={"User-Agent": "urlcraft"})


def _json_response(body: bytes, status: int = 200) -> HttpResponse[Any]:
    return HttpResponse(status, headers=Headers(JSON_HEADERS), body=body)


# ============================================================================
# TEST CLASS: configuration
# ============================================================================


class TestConfiguration:
    """Tests for service construction and properties."""

    def test_defaults(self):
        """Test default configuration."""
        service = RecordingService()
        assert isinstance(service.services, HttpServiceManager)
        assert service.timeout_ms == 0
        assert service.timeout is None
        assert service.headers == {}
        assert service.in_flight == 0

    @pytest.mark.parametrize(
        "timeout_ms, seconds", [(0, None), (-5, None), (1500, 1.5)]
    )
    def test_timeout(self, timeout_ms, seconds):
        """Test conversion of the global timeout."""
        service = RecordingService()
        service.timeout_ms = timeout_ms
        assert service.timeout_ms == timeout_ms
        assert service.timeout == seconds

    def test_abstract(self):
        """Test that HttpService cannot be instantiated directly."""
        with pytest.raises(TypeError):
            HttpService()  # type: ignore[abstract]


# ============================================================================
# TEST CLASS: verbs
# ============================================================================


class TestVerbs:
    """Tests for the verb methods."""

    @pytest.mark.asyncio
    async def test_get_resolves_service_url(self, service):
        """Test that a service URL is resolved and headers merged."""
        await service.get("api://users/me")

        sent = service.sent[0]
        assert sent["verb"] == HttpVerb.GET
        assert sent["url"] == "https://api.example.com:443/v1/users/me"
        assert sent["headers"] == {
            "User-Agent": "urlcraft",
            "Authorization": "Bearer token",
        }
        assert sent["body"] is None

    @pytest.mark.asyncio
    async def test_get_absolute_url(self, service):
        """Test that an absolute URL is sent unchanged without service headers."""
        await service.get("http://other.example.com:80/ping")
        assert service.sent[0]["url"] == "http://other.example.com:80/ping"
        assert "Authorization" not in service.sent[0]["headers"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, verb",
        [("post", HttpVerb.POST), ("put", HttpVerb.PUT), ("patch", HttpVerb.PATCH)],
    )
    async def test_payload_verbs(self, service, method, verb):
        """Test that payload verbs JSON-encode their payload."""
        await getattr(service, method)("/items", {"name": "chair"})

        sent = service.sent[0]
        assert sent["verb"] == verb
        assert sent["url"] == "https://api.example.com:443/v1/items"
        assert sent["headers"]["Content-Type"] == "application/json"
        assert sent["body"] == b'{"name": "chair"}'

    @pytest.mark.asyncio
    async def test_post_bytes_payload(self, service):
        """Test that bytes payloads are sent as-is without a content type."""
        await service.post("/raw", b"\x00\x01")
        assert service.sent[0]["body"] == b"\x00\x01"
        assert "Content-Type" not in service.sent[0]["headers"]

    @pytest.mark.asyncio
    async def test_delete(self, service):
        """Test DELETE."""
        await service.delete("/items/1")
        assert service.sent[0]["verb"] == HttpVerb.DELETE
        assert service.sent[0]["body"] is None

    @pytest.mark.asyncio
    async def test_response_records_request(self, service):
        """Test that the response carries the verb and resolved URL."""
        response = await service.get("/a")
        assert response.verb == HttpVerb.GET
        assert response.url == "https://api.example.com:443/v1/a"


# ============================================================================
# TEST CLASS: hooks
# ============================================================================


class TestRequestHooks:
    """Tests for request hooks."""

    @pytest.mark.asyncio
    async def test_hook_receives_request(self, service):
        """Test hook arguments."""
        hook = mock.Mock()
        service.add_request_hook(hook)

        await service.post("/items", {"a": 1})

        hook.assert_called_once()
        verb, url, headers, payload = hook.call_args.args
        assert verb == HttpVerb.POST
        assert url == "https://api.example.com:443/v1/items"
        assert headers["Authorization"] == "Bearer token"
        assert payload == {"a": 1}

    @pytest.mark.asyncio
    async def test_hooks_fifo(self, service):
        """Test that hooks run in registration order."""
        order: List[str] = []
        service.add_request_hook(lambda *args: order.append("first"))
        service.add_request_hook(lambda *args: order.append("second"))

        await service.get("/a")

        assert order == ["first", "second"]

    @pytest.mark.asyncio
    async def test_remove_hook(self, service):
        """Test that removed hooks are not called."""
        hook = mock.Mock()
        service.add_request_hook(hook)
        service.remove_request_hook(hook)
        service.remove_request_hook(hook)

        await service.get("/a")

        hook.assert_not_called()

    @pytest.mark.asyncio
    async def test_hook_exception_propagates(self, service):
        """Test that a failing hook stops the request."""
        service.add_request_hook(mock.Mock(side_effect=RuntimeError("boom")))

        with pytest.raises(RuntimeError, match="boom"):
            await service.get("/a")

        assert not service.sent


# ============================================================================
# TEST CLASS: response decoding
# ============================================================================


class TestDecoding:
    """Tests for payload decoding."""

    @pytest.mark.asyncio
    async def test_json_payload(self, service):
        """Test that JSON bodies are decoded."""
        service.response = _json_response(b'{"id": 42}')
        response = await service.get("/a")
        assert response.payload == {"id": 42}

    @pytest.mark.asyncio
    async def test_parser(self, service):
        """Test that a parser produces a typed payload."""
        service.response = _json_response(b'{"id": 42}')
        response = await service.get("/a", parser=lambda data: data["id"])
        assert response.payload == 42

    @pytest.mark.asyncio
    async def test_text_payload(self, service):
        """Test that non-JSON bodies are decoded as text."""
        service.response = HttpResponse(200, body=b"pong")
        response = await service.get("/a")
        assert response.payload == "pong"

    @pytest.mark.asyncio
    async def test_empty_body(self, service):
        """Test that an empty body yields no payload and skips the parser."""
        parser = mock.Mock()
        response = await service.get("/a", parser=parser)
        assert response.payload is None
        parser.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_json(self, service):
        """Test that a malformed JSON body raises InvalidPayloadError."""
        service.response = _json_response(b"{oops")
        with pytest.raises(InvalidPayloadError):
            await service.get("/a")

    @pytest.mark.asyncio
    async def test_download_returns_bytes(self, service):
        """Test that download does not decode the body."""
        service.response = _json_response(b'{"id": 42}')
        response = await service.download("/file")
        assert response.payload == b'{"id": 42}'
        assert service.sent[0]["verb"] == HttpVerb.GET

    @pytest.mark.asyncio
    async def test_error_status(self, service):
        """Test that error statuses raise HttpStatusError."""
        service.response = HttpResponse(404)
        with pytest.raises(HttpStatusError) as exc_info:
            await service.get("/missing")
        assert exc_info.value.response.status_code == 404
        assert exc_info.value.response.url == "https://api.example.com:443/v1/missing"


# ============================================================================
# TEST CLASS: uploads
# ============================================================================


class TestUploads:
    """Tests for post_file and put_file."""

    @pytest.mark.asyncio
    async def test_post_file_buffer(self, service):
        """Test uploading a slice of a buffer with fields."""
        hook = mock.Mock()
        service.add_request_hook(hook)

        await service.post_file("/upload", [("name", "scene")], b"0123456789", 2, 4)

        sent = service.sent[0]
        assert sent["verb"] == HttpVerb.POST
        assert sent["headers"]["Content-Type"].startswith(
            "multipart/form-data; boundary="
        )
        body = sent["body"]
        assert body.index(b'name="name"') < body.index(b'name="file"')
        assert b"\r\n\r\n2345\r\n" in body
        assert hook.call_args.args[3] == [("name", "scene")]

    @pytest.mark.asyncio
    async def test_put_file_stream(self, service):
        """Test uploading a stream through PUT."""
        await service.put_file("/upload", None, io.BytesIO(b"stream-data"))

        sent = service.sent[0]
        assert sent["verb"] == HttpVerb.PUT
        assert b"\r\n\r\nstream-data\r\n" in sent["body"]

    @pytest.mark.asyncio
    async def test_invalid_slice(self, service):
        """Test that an invalid buffer slice fails before sending."""
        with pytest.raises(ValueError):
            await service.post_file("/upload", None, b"abc", 2, 5)
        assert not service.sent


# ============================================================================
# TEST CLASS: timeout and abort
# ============================================================================


class TestTimeoutAndAbort:
    """Tests for the global timeout and abort."""

    @pytest.mark.asyncio
    async def test_timeout(self, service):
        """Test that slow requests raise RequestTimeoutError."""
        service.timeout_ms = 10
        service.delay = 1.0

        with pytest.raises(RequestTimeoutError):
            await service.get("/slow")

        assert service.in_flight == 0

    @pytest.mark.asyncio
    async def test_no_timeout_when_disabled(self, service):
        """Test that a disabled timeout lets slow requests finish."""
        service.timeout_ms = 0
        service.delay = 0.01

        response = await service.get("/slow")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_abort_all(self, service):
        """Test that abort cancels every in-flight request."""
        service.delay = 10.0
        first = asyncio.ensure_future(service.get("/a"))
        second = asyncio.ensure_future(service.post("/b", {"x": 1}))
        await asyncio.sleep(0.01)
        assert service.in_flight == 2

        assert service.abort() == 2

        for task in (first, second):
            with pytest.raises(RequestAbortedError):
                await task
        assert service.in_flight == 0

    @pytest.mark.asyncio
    async def test_abort_with_timeout_configured(self, service):
        """Test that abort wins over a pending timeout."""
        service.timeout_ms = 5000
        service.delay = 10.0
        task = asyncio.ensure_future(service.get("/a"))
        await asyncio.sleep(0.01)

        service.abort()

        with pytest.raises(RequestAbortedError):
            await task

    def test_abort_nothing_in_flight(self, service):
        """Test abort with no requests."""
        assert service.abort() == 0

    @pytest.mark.asyncio
    async def test_caller_cancellation_not_reported_as_abort(self, service):
        """Test that cancelling the caller propagates CancelledError."""
        service.delay = 10.0
        task = asyncio.ensure_future(service.get("/a"))
        await asyncio.sleep(0.01)

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
