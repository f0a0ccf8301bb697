import io

import pytest

from httpfromtcp.request import (
    ParserState,
    RequestError,
    RequestLine,
    parse_request_line,
    request_from_reader,
)


class ChunkReader:
    """Hands out at most ``per_read`` bytes on each read."""

    def __init__(self, data, per_read):
        self._data = data.encode("utf-8") if isinstance(data, str) else data
        self._per_read = per_read
        self._pos = 0

    def read(self, size=-1):
        if size < 0:
            size = self._per_read
        end = min(self._pos + min(size, self._per_read), len(self._data))
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk


STANDARD = (
    "GET / HTTP/1.1\r\nHost: localhost:42069\r\n"
    "User-Agent: curl/7.81.0\r\nAccept: */*\r\n\r\n"
)


def test_good_get_request_line():
    r = request_from_reader(ChunkReader(STANDARD, 3))
    assert r.request_line.method == "GET"
    assert r.request_line.request_target == "/"
    assert r.request_line.http_version == "1.1"


def test_good_get_request_line_with_path():
    data = (
        "GET /coffee HTTP/1.1\r\nHost: localhost:42069\r\n"
        "User-Agent: curl/7.81.0\r\nAccept: */*\r\n\r\n"
    )
    r = request_from_reader(ChunkReader(data, 1))
    assert r.request_line.method == "GET"
    assert r.request_line.request_target == "/coffee"
    assert r.request_line.http_version == "1.1"


def test_good_post_request_with_path():
    data = (
        "POST /coffee HTTP/1.1\r\nHost: localhost:42069\r\n"
        "User-Agent: curl/7.81.0\r\nAccept: */*\r\n\r\n"
    )
    r = request_from_reader(ChunkReader(data, 5))
    assert r.request_line.method == "POST"
    assert r.request_line.request_target == "/coffee"
    assert r.request_line.http_version == "1.1"


@pytest.mark.parametrize(
    "data, per_read",
    [
        ("/coffee HTTP/1.1\r\nHost: localhost:42069\r\n"
         "User-Agent: curl/7.81.0\r\nAccept: */*\r\n\r\n", 3),
        ("/coffee POST HTTP/1.1\r\nHost: localhost:42069\r\n"
         "User-Agent: curl/7.81.0\r\nAccept: */*\r\n\r\n", 3),
        ("OPTIONS /prime/rib TCP/1.1\r\nHost: localhost:42069\r\n"
         "User-Agent: curl/7.81.0\r\nAccept: */*\r\n\r\n", 50),
    ],
)
def test_invalid_request_lines(data, per_read):
    with pytest.raises(RequestError):
        request_from_reader(ChunkReader(data, per_read))


def test_standard_headers():
    r = request_from_reader(ChunkReader(STANDARD, 3))
    assert r.headers["host"] == "localhost:42069"
    assert r.headers["user-agent"] == "curl/7.81.0"
    assert r.headers["accept"] == "*/*"


def test_empty_headers():
    r = request_from_reader(ChunkReader("GET / HTTP/1.1\r\n\r\n\r\n", 3))
    assert r.headers == {}
    assert r.request_line == RequestLine("1.1", "/", "GET")
    assert r.state is ParserState.DONE


def test_malformed_header():
    with pytest.raises(RequestError):
        request_from_reader(
            ChunkReader("GET / HTTP/1.1\r\nHost localhost:42069\r\n\r\n", 3)
        )


def test_duplicate_headers():
    data = "GET / HTTP/1.1\r\nCoffee-Type: dark\r\nCoffee-Type: medium\r\n\r\n"
    r = request_from_reader(ChunkReader(data, 3))
    assert r.headers["coffee-type"] == "dark, medium"


def test_case_insensitive_headers():
    data = (
        "GET / HTTP/1.1\r\nHOST: localhost:42069\r\n"
        "user-agent: curl/7.81.0\r\nAcCePt: */*\r\n\r\n"
    )
    r = request_from_reader(ChunkReader(data, 3))
    assert r.headers["host"] == "localhost:42069"
    assert r.headers["user-agent"] == "curl/7.81.0"
    assert r.headers["accept"] == "*/*"


def test_missing_end_of_headers():
    r = request_from_reader(
        ChunkReader("GET / HTTP/1.1\r\nHost: localhost:42069\r\n", 3)
    )
    assert r.headers["host"] == "localhost:42069"


def test_standard_body():
    data = (
        "POST /submit HTTP/1.1\r\n"
        "Host: localhost:42069\r\n"
        "Content-Length: 13\r\n"
        "\r\n"
        "hello world!\n"
    )
    r = request_from_reader(ChunkReader(data, 3))
    assert bytes(r.body) == b"hello world!\n"


def test_empty_body_zero_content_length():
    data = (
        "POST /submit HTTP/1.1\r\n"
        "Host: localhost:42069\r\n"
        "Content-Length: 0\r\n"
        "\r\n"
    )
    r = request_from_reader(ChunkReader(data, 3))
    assert bytes(r.body) == b""
    assert r.headers["content-length"] == "0"


def test_empty_body_no_content_length():
    data = "POST /submit HTTP/1.1\r\nHost: localhost:42069\r\n\r\n"
    r = request_from_reader(ChunkReader(data, 3))
    assert bytes(r.body) == b""
    assert r.request_line.method == "POST"


def test_body_shorter_than_content_length():
    data = (
        "POST /submit HTTP/1.1\r\n"
        "Host: localhost:42069\r\n"
        "Content-Length: 20\r\n"
        "\r\n"
        "partial content"
    )
    with pytest.raises(RequestError, match="shorter"):
        request_from_reader(ChunkReader(data, 3))


def test_no_content_length_but_body_exists():
    data = (
        "POST /submit HTTP/1.1\r\n"
        "Host: localhost:42069\r\n"
        "\r\n"
        "hello world!\n"
    )
    r = request_from_reader(ChunkReader(data, 3))
    assert bytes(r.body) == b""


def test_body_longer_than_content_length_in_one_read():
    data = (
        "POST /submit HTTP/1.1\r\n"
        "Content-Length: 2\r\n"
        "\r\n"
        "hello"
    )
    with pytest.raises(RequestError, match="longer"):
        request_from_reader(ChunkReader(data, 1000))


def test_invalid_content_length():
    data = "POST / HTTP/1.1\r\nContent-Length: abc\r\n\r\nxyz"
    with pytest.raises(RequestError, match="content-length"):
        request_from_reader(ChunkReader(data, 4))


def test_reads_from_binary_stream():
    r = request_from_reader(io.BytesIO(STANDARD.encode()))
    assert r.request_line == RequestLine("1.1", "/", "GET")
    assert r.headers["accept"] == "*/*"


def test_eof_before_request_line_gives_empty_request():
    r = request_from_reader(ChunkReader("GET / HTTP", 3))
    assert r.request_line == RequestLine()
    assert r.state is ParserState.DONE


def test_parse_request_line_needs_two_line_endings():
    assert parse_request_line(b"GET / HTTP/1.1\r\n") == (None, 0)
    assert parse_request_line(b"GET / HTT") == (None, 0)


def test_parse_request_line_consumed_count():
    line, consumed = parse_request_line(b"GET /coffee HTTP/1.1\r\nHost: x\r\n")
    assert line == RequestLine(
        http_version="1.1", request_target="/coffee", method="GET"
    )
    assert consumed == len(b"GET /coffee HTTP/1.1\r\n")


def test_parse_request_line_accepts_text():
    line, consumed = parse_request_line("PUT /a HTTP/1.1\r\n\r\n")
    assert line.method == "PUT"
    assert consumed == 17


def test_parse_request_line_rejects_lowercase_method():
    with pytest.raises(RequestError, match="uppercase"):
        parse_request_line(b"get / HTTP/1.1\r\n\r\n")


def test_parse_request_line_rejects_other_version():
    with pytest.raises(RequestError):
        parse_request_line(b"GET / HTTP/1.0\r\n\r\n")