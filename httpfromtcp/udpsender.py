"""Send lines typed on standard input as UDP datagrams."""

from __future__ import annotations

import argparse
import socket
import sys
from collections.abc import Iterable
from typing import TextIO

HOST = "localhost"
PORT = 42069


def send_lines(sock: socket.socket, lines: Iterable[str], out: TextIO) -> int:
    """Send each newline-terminated line as one datagram; return how many.

    A prompt is written before each line is taken. A final line without a
    newline is incomplete and is not sent.
    """
    sent = 0
    it = iter(lines)
    while True:
        out.write("> ")
        out.flush()
        line = next(it, None)
        if line is None or not line.endswith("\n"):
            return sent
        sock.send(line.encode("utf-8"))
        out.write(f"Message sent: {line}")
        sent += 1


def main(argv: list[str] | None = None) -> int:
    """Read lines from standard input and send them to the target address."""
    parser = argparse.ArgumentParser(prog="udpsender", description=__doc__)
    parser.add_argument("--host", default=HOST, help="destination host")
    parser.add_argument("--port", type=int, default=PORT, help="destination port")
    args = parser.parse_args(argv)

    try:
        family, kind, proto, _, address = socket.getaddrinfo(
            args.host, args.port, type=socket.SOCK_DGRAM
        )[0]
    except socket.gaierror as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    with socket.socket(family, kind, proto) as sock:
        sock.connect(address)
        send_lines(sock, sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())