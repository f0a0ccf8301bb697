"""A small threaded TCP server that parses HTTP requests itself."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Callable

from httpfromtcp.headers import Headers
from httpfromtcp.request import Request, request_from_reader
from httpfromtcp.response import ResponseWriter, StatusCode

logger = logging.getLogger(__name__)

SUCCESS_HTML = """<html>
  <head>
    <title>200 OK</title>
  </head>
  <body>
    <h1>Success!</h1>
    <p>Your request was an absolute banger.</p>
  </body>
</html>"""

BAD_REQUEST_HTML = """<html>
  <head>
    <title>400 Bad Request</title>
  </head>
  <body>
    <h1>Bad Request</h1>
    <p>Your request honestly kinda sucked.</p>
  </body>
</html>"""

SERVER_ERROR_HTML = """<html>
  <head>
    <title>500 Internal Server Error</title>
  </head>
  <body>
    <h1>Internal Server Error</h1>
    <p>Okay, you know what? This one is on me.</p>
  </body>
</html>"""

Handler = Callable[[ResponseWriter, Request], None]

_ACCEPT_POLL_SECONDS = 0.2


class HandlerError(Exception):
    """An error a handler may raise, carrying a status code and message."""

    def __init__(self, status_code: StatusCode, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class Server:
    """Accepts connections in a background thread and dispatches them."""

    def __init__(self, listener: socket.socket, handler: Handler) -> None:
        self._listener = listener
        self._handler = handler
        self._closed = threading.Event()
        self.port: int = listener.getsockname()[1]
        self._thread = threading.Thread(target=self._listen, daemon=True)
        self._thread.start()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        """Stop accepting connections and release the listening socket."""
        self._closed.set()
        self._thread.join()
        self._listener.close()

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _listen(self) -> None:
        while not self._closed.is_set():
            try:
                conn, _ = self._listener.accept()
            except TimeoutError:
                continue
            except OSError:
                if self._closed.is_set():
                    return
                logger.exception("Error accepting connection")
                return
            conn.setblocking(True)
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        with conn, conn.makefile("rb") as rfile, conn.makefile("wb") as wfile:
            try:
                request = request_from_reader(rfile)
            except (ValueError, OSError):
                writer = ResponseWriter(wfile)
                writer.write_status_line(StatusCode.BAD_REQUEST)
                headers = Headers()
                headers.set_content_type("text/html")
                writer.write_headers(headers)
                writer.write_body(BAD_REQUEST_HTML.encode("utf-8"))
                return
            try:
                self._handler(ResponseWriter(wfile), request)
            except Exception:
                logger.exception("Handler failed")


def serve(port: int, handler: Handler) -> Server:
    """Listen on ``port`` on all interfaces and serve requests with ``handler``."""
    listener = socket.create_server(("", port))
    listener.settimeout(_ACCEPT_POLL_SECONDS)
    return Server(listener, handler)