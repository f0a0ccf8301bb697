"""The demo HTTP server: canned pages, a video, and a chunked httpbin proxy."""

from __future__ import annotations

import argparse
import hashlib
import logging
import signal
import threading
import urllib.request
from pathlib import Path

from httpfromtcp.headers import Headers
from httpfromtcp.request import Request
from httpfromtcp.response import ResponseWriter, StatusCode, get_default_headers
from httpfromtcp.server import (
    BAD_REQUEST_HTML,
    SERVER_ERROR_HTML,
    SUCCESS_HTML,
    serve,
)

logger = logging.getLogger(__name__)

PORT = 42069
HTTPBIN_PREFIX = "/httpbin/"
UPSTREAM_URL = "https://httpbin.org/"
VIDEO_PATH = Path("assets/vim.mp4")

_PROXY_READ_SIZE = 1024


def _write_html(writer: ResponseWriter, status: StatusCode, html: str) -> None:
    body = html.encode("utf-8")
    writer.write_status_line(status)
    headers = get_default_headers(len(body))
    headers.set_content_type("text/html")
    writer.write_headers(headers)
    writer.write_body(body)


def _proxy_httpbin(writer: ResponseWriter, path: str) -> None:
    with urllib.request.urlopen(UPSTREAM_URL + path) as upstream:
        writer.write_status_line(StatusCode.OK)
        headers = get_default_headers(0)
        headers.remove("content-length")
        headers.remove("connection")
        headers.override("content-type", upstream.headers.get("Content-Type", ""))
        headers.set("transfer-encoding", "chunked")
        headers.set("trailer", "x-content-sha256, x-content-length")
        writer.write_headers(headers)

        body = bytearray()
        while chunk := upstream.read(_PROXY_READ_SIZE):
            writer.write_chunked_body(chunk)
            body += chunk
        writer.write_chunked_body_done()

    trailers = Headers()
    trailers.set("x-content-sha256", hashlib.sha256(body).hexdigest())
    trailers.set("x-content-length", str(len(body)))
    writer.write_trailers(trailers)


def handler(writer: ResponseWriter, request: Request) -> None:
    """Route a request to the response for its target."""
    target = request.request_line.request_target

    if target.startswith(HTTPBIN_PREFIX):
        _proxy_httpbin(writer, target[len(HTTPBIN_PREFIX):])
        return

    if target == "/yourproblem":
        _write_html(writer, StatusCode.BAD_REQUEST, BAD_REQUEST_HTML)
    elif target == "/myproblem":
        _write_html(writer, StatusCode.INTERNAL_SERVER_ERROR, SERVER_ERROR_HTML)
    elif target == "/video":
        data = VIDEO_PATH.read_bytes()
        writer.write_status_line(StatusCode.OK)
        headers = get_default_headers(len(data))
        headers.set_content_type("video/mp4")
        writer.write_headers(headers)
        writer.write_body(data)
    else:
        _write_html(writer, StatusCode.OK, SUCCESS_HTML)


def main(argv: list[str] | None = None) -> int:
    """Run the server until SIGINT or SIGTERM."""
    parser = argparse.ArgumentParser(prog="httpserver", description=__doc__)
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    try:
        server = serve(args.port, handler)
    except OSError as exc:
        logger.error("Error starting server: %s", exc)
        return 1

    stop = threading.Event()

    def _request_stop(signum: int, frame: object) -> None:
        stop.set()

    previous = {
        sig: signal.signal(sig, _request_stop) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        with server:
            logger.info("Server started on port %d", server.port)
            while not stop.wait(0.5):
                pass
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)
    logger.info("Server gracefully stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())