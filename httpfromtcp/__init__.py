"""HTTP/1.1 request parsing, response writing, a threaded server and small command-line tools on raw sockets."""

__version__ = "0.1.0"

__all__ = [
    "headers",
    "request",
    "response",
    "server",
    "httpserver",
    "tcplistener",
    "udpsender",
]