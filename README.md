# httpfromtcp

An HTTP/1.1 server written directly on top of TCP sockets, with no HTTP library underneath.
The package provides:

- `httpfromtcp.headers`: an incremental field-line parser and a case-insensitive header mapping (`Headers`)
- `httpfromtcp.request`: a request parser that reads from any byte stream (`request_from_reader`, `parse_request_line`)
- `httpfromtcp.response`: a response writer for fixed-length and chunked bodies, including trailers (`ResponseWriter`)
- `httpfromtcp.server`: a threaded TCP server that passes each parsed request to a handler (`serve`, `Server`)

It also installs three small command-line programs.

## Installation

```
pip install .
```

To install the test dependencies and run the tests:

```
pip install ".[test]"
pytest
```

## Commands

### `httpfromtcp-server`

```
httpfromtcp-server [--port PORT]
```

Starts the demo HTTP server on all interfaces, on port 42069 unless `--port` is given.
It runs until it receives SIGINT or SIGTERM, then closes the listener and exits.

Routes:

| Target          | Response                                                             |
|-----------------|----------------------------------------------------------------------|
| `/yourproblem`  | `400 Bad Request` with an HTML page                                  |
| `/myproblem`    | `500 Internal Server Error` with an HTML page                        |
| `/video`        | `200 OK` with `assets/vim.mp4`, read from the working directory, as `video/mp4` |
| `/httpbin/...`  | Fetches the rest of the path from an upstream httpbin service and streams it back with chunked transfer encoding, followed by the trailers `x-content-sha256` and `x-content-length` |
| anything else   | `200 OK` with an HTML success page                                   |

If a request cannot be parsed, the server answers `400 Bad Request` with an HTML page.
If the handler raises (for example because `assets/vim.mp4` is missing or the upstream
fetch fails), the error is logged and the connection is closed.

Try it with:

```
curl -v http://localhost:42069/
curl -v http://localhost:42069/yourproblem
curl --raw -v http://localhost:42069/httpbin/stream/5
```

### `httpfromtcp-tcplistener`

```
httpfromtcp-tcplistener [--host HOST] [--port PORT]
```

Listens on `127.0.0.1:42069` by default and accepts connections one after another.
For each connection it parses one request and prints its request line, headers and body
between `Connection accepted!` and `Connection closed!`. It sends no response. If a
request cannot be parsed, it exits with an `error: ...` message.

### `httpfromtcp-udpsender`

```
httpfromtcp-udpsender [--host HOST] [--port PORT]
```

Reads lines from standard input, showing a `> ` prompt, and sends each complete line as
one UDP datagram to `localhost:42069` by default, printing `Message sent: ...` after each.
It stops at end of input; a last line without a newline is not sent. To receive the
datagrams, run this in another terminal:

```
nc -u -l 42069
```

## Library use

### Parsing a request

`request_from_reader` accepts any object with a `read(size)` method that returns bytes and
`b""` at end of input, such as a socket file or `io.BytesIO`. It uses `read1` when the
object has one.

```python
import io

from httpfromtcp.request import request_from_reader

raw = b"GET /coffee HTTP/1.1\r\nHost: localhost:42069\r\nAccept: */*\r\n\r\n"
req = request_from_reader(io.BytesIO(raw))

print(req.request_line.method)          # GET
print(req.request_line.request_target)  # /coffee
print(req.request_line.http_version)    # 1.1
print(req.headers["host"])              # localhost:42069
```

Behaviour of the parser:

- Header names are lower-cased; repeated headers are joined with `", "`.
- A body is read only when `Content-Length` is present; without it, any body is ignored.
- A body shorter or longer than `Content-Length`, or a `Content-Length` that is not an
  integer, raises `RequestError`.
- A malformed request line or header raises `RequestError`. This includes a request line
  without exactly three parts, a method that is not uppercase and a version other than
  `HTTP/1.1`.
- If the input ends before the blank line that closes the headers, the request is
  returned with the headers read so far.

`Headers.parse(data)` parses a single field line and returns `(consumed, done)`; it
consumes nothing until a full line is available and raises `HeaderError` on a malformed
line. `Headers` also offers `set` (append with `", "`), `override`, `set_content_type` and
`remove`.

### Writing a handler

A handler receives a `ResponseWriter` and the parsed `Request`. It writes the status line,
then the headers, then the body, in that order; calling the writer out of order raises
`WriterStateError`. `StatusCode` names 200, 400 and 500; other codes are written with an
empty reason phrase.

```python
from httpfromtcp.response import StatusCode, get_default_headers
from httpfromtcp.server import serve


def handler(writer, request):
    body = b"hello from httpfromtcp\n"
    writer.write_status_line(StatusCode.OK)
    headers = get_default_headers(len(body))
    writer.write_headers(headers)
    writer.write_body(body)


with serve(8080, handler) as server:
    input(f"serving on port {server.port}, press Enter to stop\n")
```

`get_default_headers(n)` sets `content-length: n`, `connection: close` and
`content-type: text/plain`. `serve` listens on all interfaces; pass port `0` to let the
system pick one and read it from `Server.port`. `Server.close()` (or leaving the `with`
block) stops accepting connections. `HandlerError` is available for handlers that want to
carry a status code and message; the server itself only logs exceptions from handlers.

### Chunked responses

1. Write the headers with `transfer-encoding: chunked`.
2. Call `write_chunked_body` once for each chunk.
3. Finish with `write_chunked_body_done`.
4. Optionally, send trailer fields with `write_trailers`.

## Limitations

- One request is read per connection, and the connection is closed after the response;
  there is no keep-alive.
- Only `HTTP/1.1` request lines are accepted, and request bodies are read only by
  `Content-Length`; chunked request bodies are not supported.
- The server does no routing of its own and serves no files; everything a response
  contains comes from the handler.