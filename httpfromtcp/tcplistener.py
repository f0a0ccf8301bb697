"""A TCP listener that prints each HTTP request it receives."""

from __future__ import annotations

import argparse
import contextlib
import socket
from collections.abc import Iterator
from typing import BinaryIO

from httpfromtcp.request import Request, request_from_reader

HOST = "127.0.0.1"
PORT = 42069

_READ_SIZE = 8


def read_lines(stream: BinaryIO) -> Iterator[str]:
    """Yield the newline-separated lines of ``stream``, closing it at the end.

    A trailing piece without a newline is yielded as a last line if it is
    not empty.
    """
    with contextlib.closing(stream):
        pending = b""
        while chunk := stream.read(_READ_SIZE):
            *complete, pending = (pending + chunk).split(b"\n")
            for line in complete:
                yield line.decode("utf-8", errors="replace")
        if pending:
            yield pending.decode("utf-8", errors="replace")


def format_request(request: Request) -> str:
    """Describe a parsed request as printed by the listener."""
    line = request.request_line
    parts = [
        "Request line:",
        f"- Method: {line.method}",
        f"- Target: {line.request_target}",
        f"- Version: {line.http_version}",
        "Headers:",
        *(f"- {key}: {value}" for key, value in request.headers.items()),
        "Body:",
        bytes(request.body).decode("utf-8", errors="replace"),
    ]
    return "\n".join(parts) + "\n"


def main(argv: list[str] | None = None) -> int:
    """Accept connections forever, printing each request."""
    parser = argparse.ArgumentParser(prog="tcplistener", description=__doc__)
    parser.add_argument("--host", default=HOST, help="address to listen on")
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    args = parser.parse_args(argv)

    with socket.create_server((args.host, args.port)) as listener:
        while True:
            conn, _ = listener.accept()
            print("Connection accepted!", flush=True)
            with conn, conn.makefile("rb") as rfile:
                try:
                    request = request_from_reader(rfile)
                except (ValueError, OSError) as exc:
                    raise SystemExit(f"error: {exc}") from exc
            print(format_request(request), end="")
            print("Connection closed!", flush=True)


if __name__ == "__main__":
    raise SystemExit(main())