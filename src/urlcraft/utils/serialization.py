"""src/urlcraft/utils/serialization.py

JSON serialization of request payloads and response bodies.
"""

import json
from typing import Any, Optional, Tuple, Union

from urlcraft.exceptions import InvalidPayloadError

__all__ = ["to_json", "from_json", "encode_payload", "is_json"]

JSON_CONTENT_TYPE = "application/json"


def to_json(data: Any) -> str:
    """Serializes data to a JSON string."""
    return json.dumps(data)


def from_json(text: str) -> Any:
    """
    Deserializes a JSON string.

    Raises:
        InvalidPayloadError: If the text is not valid JSON.
    """
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError, ValueError) as exc:
        raise InvalidPayloadError("Failed to decode JSON payload") from exc


def encode_payload(payload: Any) -> Tuple[Optional[str], Optional[bytes]]:
    """
    Encode a request payload into ``(content_type, body)``.

    ``None`` yields no body. ``bytes`` and ``str`` are sent as-is without a
    content type; anything else is JSON-encoded.
    """
    if payload is None:
        return None, None
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return None, bytes(payload)
    if isinstance(payload, str):
        return None, payload.encode("utf-8")

    try:
        text = to_json(payload)
    except (TypeError, ValueError) as exc:
        raise InvalidPayloadError(
            f"Payload of type {type(payload).__name__} is not JSON serializable"
        ) from exc
    return JSON_CONTENT_TYPE, text.encode("utf-8")


def is_json(content_type: Union[str, None]) -> bool:
    """Whether a Content-Type header value denotes JSON."""
    if not content_type:
        return False
    media_type = content_type.split(";")[0].strip().lower()
    return media_type == JSON_CONTENT_TYPE or media_type.endswith("+json")
