"""Writing HTTP/1.1 responses, fixed-length or chunked, to a byte stream."""

from __future__ import annotations

import enum
from typing import Protocol

from httpfromtcp.headers import Headers

_CRLF = b"\r\n"
_PROTOCOL = "HTTP/1.1"


class StatusCode(enum.IntEnum):
    OK = 200
    BAD_REQUEST = 400
    INTERNAL_SERVER_ERROR = 500


_REASONS = {
    StatusCode.OK: "OK",
    StatusCode.BAD_REQUEST: "Bad Request",
    StatusCode.INTERNAL_SERVER_ERROR: "Internal Server Error",
}


class WriterStateError(RuntimeError):
    """Raised when response parts are written out of order."""


class _State(enum.Enum):
    PENDING_STATUS_LINE = enum.auto()
    PENDING_HEADERS = enum.auto()
    PENDING_BODY = enum.auto()
    DONE = enum.auto()


class _Stream(Protocol):
    def write(self, data: bytes) -> int | None: ...


def get_default_headers(content_length: int) -> Headers:
    """Headers for a plain-text response of ``content_length`` bytes."""
    headers = Headers()
    headers.set("content-length", str(content_length))
    headers.set("connection", "close")
    headers.set("content-type", "text/plain")
    return headers


def _field_lines(headers: Headers) -> bytes:
    lines = b"".join(f"{key}: {value}".encode("utf-8") + _CRLF for key, value in headers.items())
    return lines + _CRLF


class ResponseWriter:
    """Writes a response in order: status line, headers, then body."""

    def __init__(self, stream: _Stream) -> None:
        self._stream = stream
        self._state = _State.PENDING_STATUS_LINE

    def _require(self, state: _State, message: str) -> None:
        if self._state is not state:
            raise WriterStateError(message)

    def write_status_line(self, status_code: int) -> None:
        """Write the status line for ``status_code``."""
        self._require(_State.PENDING_STATUS_LINE, "status line already written")
        code = int(status_code)
        try:
            reason = _REASONS[StatusCode(code)]
        except ValueError:
            reason = ""
        self._stream.write(f"{_PROTOCOL} {code} {reason}".encode("ascii") + _CRLF)
        self._state = _State.PENDING_HEADERS

    def write_headers(self, headers: Headers) -> None:
        """Write the header section, ending with a blank line."""
        self._require(_State.PENDING_HEADERS, "headers already written or not ready yet")
        self._stream.write(_field_lines(headers))
        self._state = _State.PENDING_BODY

    def write_body(self, data: bytes) -> int:
        """Write the whole body; return the number of bytes written."""
        self._require(_State.PENDING_BODY, "body already written or not ready yet")
        data = bytes(data)
        self._stream.write(data)
        self._state = _State.DONE
        return len(data)

    def write_chunked_body(self, data: bytes) -> int:
        """Write one chunk of a chunked body; return the payload size."""
        self._require(_State.PENDING_BODY, "body already written or not ready yet")
        data = bytes(data)
        self._stream.write(f"{len(data):x}".encode("ascii") + _CRLF + data + _CRLF)
        return len(data)

    def write_chunked_body_done(self) -> int:
        """Write the final zero-length chunk; return the bytes written."""
        self._require(_State.PENDING_BODY, "body already written or not ready yet")
        marker = b"0" + _CRLF
        self._stream.write(marker)
        self._state = _State.DONE
        return len(marker)

    def write_trailers(self, headers: Headers) -> None:
        """Write trailer fields after a finished chunked body."""
        self._require(_State.DONE, "trailers not ready yet")
        self._stream.write(_field_lines(headers))