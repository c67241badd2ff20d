"""src/urlcraft/http/multipart.py

multipart/form-data encoding for file uploads.

Form fields are written first, followed by a single file part named
``file``. The file is either an in-memory buffer (optionally sliced with
an offset and count) or a binary stream read to EOF.
"""

import os
from typing import IO, Iterable, Iterator, List, Optional, Tuple, Union

__all__ = ["encode_multipart", "iter_stream", "FileSource"]

FileSource = Union[bytes, bytearray, memoryview, IO[bytes]]

CRLF = b"\r\n"


def iter_stream(fileobj: IO[bytes], chunk_size: int = 8192) -> Iterator[bytes]:
    """
    Convert a file-like object into a bytes iterator.

    Args:
        fileobj: File-like object opened in binary mode.
        chunk_size: Number of bytes per chunk.

    Yields:
        Chunks of bytes read from the file.
    """
    while True:
        chunk = fileobj.read(chunk_size)
        if not chunk:
            break
        yield chunk


def _slice_buffer(
    buffer: Union[bytes, bytearray, memoryview], offset: int, count: Optional[int]
) -> bytes:
    size = len(buffer)
    if count is None:
        count = size - offset
    if offset < 0 or count < 0 or offset + count > size:
        raise ValueError(
            f"Invalid slice offset={offset} count={count} for buffer of {size} bytes"
        )
    return bytes(buffer[offset : offset + count])


def _read_file(file: FileSource, offset: int, count: Optional[int]) -> bytes:
    if isinstance(file, (bytes, bytearray, memoryview)):
        return _slice_buffer(file, offset, count)
    return b"".join(iter_stream(file))


# pylint: disable=too-many-arguments
def encode_multipart(
    fields: Optional[Iterable[Tuple[str, str]]],
    file: FileSource,
    offset: int = 0,
    count: Optional[int] = None,
    *,
    boundary: Optional[str] = None,
    filename: str = "file",
    content_type: str = "application/octet-stream",
) -> Tuple[str, bytes]:
    """
    Encode fields and a file as a multipart/form-data body.

    Args:
        fields: Optional ``(name, value)`` pairs that precede the file.
        file: Buffer or binary stream holding the file contents.
        offset: Offset into a buffer. Ignored for streams.
        count: Number of buffer bytes to send, rest of buffer if None.
            Ignored for streams.
        boundary: Part boundary, random if not given.
        filename: Filename advertised for the file part.
        content_type: Content type of the file part.

    Returns:
        ``(content_type_header, body)``.

    Raises:
        ValueError: If offset/count fall outside the buffer.
    """
    boundary = boundary or os.urandom(16).hex()
    delimiter = f"--{boundary}".encode("ascii")

    parts: List[bytes] = []
    for name, value in fields or ():
        parts.append(delimiter + CRLF)
        parts.append(
            f'Content-Disposition: form-data; name="{name}"'.encode("utf-8") + CRLF
        )
        parts.append(CRLF)
        parts.append(str(value).encode("utf-8") + CRLF)

    parts.append(delimiter + CRLF)
    parts.append(
        f'Content-Disposition: form-data; name="file"; filename="{filename}"'.encode(
            "utf-8"
        )
        + CRLF
    )
    parts.append(f"Content-Type: {content_type}".encode("ascii") + CRLF)
    parts.append(CRLF)
    parts.append(_read_file(file, offset, count) + CRLF)
    parts.append(delimiter + b"--" + CRLF)

    return f"multipart/form-data; boundary={boundary}", b"".join(parts)
