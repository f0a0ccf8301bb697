"""Incremental parsing of HTTP/1.1 requests from a byte stream."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Protocol

from httpfromtcp.headers import CRLF, HeaderError, Headers

_READ_SIZE = 1024
_SUPPORTED_VERSION = "HTTP/1.1"


class RequestError(ValueError):
    """Raised when a request cannot be parsed."""


class ParserState(enum.Enum):
    INITIALIZED = enum.auto()
    PARSING_HEADERS = enum.auto()
    PARSING_BODY = enum.auto()
    DONE = enum.auto()


@dataclass(frozen=True)
class RequestLine:
    http_version: str = ""
    request_target: str = ""
    method: str = ""


class _Reader(Protocol):
    def read(self, size: int = -1) -> bytes: ...


@dataclass
class Request:
    request_line: RequestLine = field(default_factory=RequestLine)
    headers: Headers = field(default_factory=Headers)
    body: bytearray = field(default_factory=bytearray)
    state: ParserState = ParserState.INITIALIZED

    def _content_length(self) -> int | None:
        raw = self.headers.get("content-length", "")
        if raw == "":
            return None
        try:
            return int(raw)
        except ValueError as exc:
            raise RequestError(f"invalid content-length: {raw!r}") from exc

    def _parse(self, data: bytes) -> int:
        """Consume as much of ``data`` as possible; return bytes consumed."""
        total = 0
        while self.state is not ParserState.DONE:
            consumed = self._parse_single(data[total:])
            total += consumed
            if consumed == 0:
                break
        return total

    def _parse_single(self, data: bytes) -> int:
        if self.state is ParserState.INITIALIZED:
            request_line, consumed = parse_request_line(data)
            if request_line is not None:
                self.request_line = request_line
                self.state = ParserState.PARSING_HEADERS
            return consumed

        if self.state is ParserState.PARSING_HEADERS:
            try:
                consumed, done = self.headers.parse(data)
            except HeaderError as exc:
                raise RequestError(str(exc)) from exc
            if done:
                self.state = ParserState.PARSING_BODY
            return consumed

        if self.state is ParserState.PARSING_BODY:
            content_length = self._content_length()
            if content_length is None:
                self.state = ParserState.DONE
                return 0
            self.body += data
            if len(self.body) > content_length:
                raise RequestError("body is longer than content-length")
            if len(self.body) == content_length:
                self.state = ParserState.DONE
            return len(data)

        raise RequestError("trying to read data in a done state")

    def _finish(self) -> None:
        """Handle end of input: check the body against content-length."""
        self.state = ParserState.DONE
        content_length = self._content_length()
        if content_length is not None and len(self.body) < content_length:
            raise RequestError("body shorter than content-length")


def request_from_reader(reader: _Reader) -> Request:
    """Read and parse one request from a binary stream.

    The stream must offer ``read(size)`` (``read1`` is used when present),
    returning ``b""`` at end of input.
    """
    request = Request()
    read = getattr(reader, "read1", None) or reader.read
    pending = bytearray()
    while request.state is not ParserState.DONE:
        chunk = read(_READ_SIZE)
        if not chunk:
            request._finish()
            break
        pending += chunk
        consumed = request._parse(bytes(pending))
        del pending[:consumed]
    return request


def parse_request_line(message: bytes | str) -> tuple[RequestLine | None, int]:
    """Parse a request line from the start of ``message``.

    Returns ``(None, 0)`` while more data is needed; otherwise the parsed
    line and the number of bytes it took, including its CRLF.
    """
    if isinstance(message, str):
        message = message.encode("utf-8")
    message = bytes(message)

    crlf_idx = message.find(CRLF)
    if crlf_idx == -1 or message.count(CRLF) < 2:
        return None, 0

    line = message[:crlf_idx].decode("utf-8", errors="replace")
    parts = line.split(" ")
    if len(parts) != 3:
        raise RequestError("request line must have exactly three parts")

    method, target, version = parts
    if method != method.upper():
        raise RequestError("request method must be uppercase")
    if version != _SUPPORTED_VERSION:
        raise RequestError(f"unsupported protocol version: {version!r}")

    return (
        RequestLine(
            http_version=version.split("/")[1],
            request_target=target,
            method=method,
        ),
        crlf_idx + len(CRLF),
    )