# tcphttp

A small HTTP/1.1 server written directly on TCP sockets, using only the
standard library.

## Modules

- `tcphttp.headers`: `Headers` is a `dict` of header fields. `Headers.parse(data)`
  reads complete field lines from a byte buffer and returns
  `(bytes_consumed, done)`. Parsed names are lower-cased. Repeated fields are
  joined with `", "`. Malformed lines raise `HeaderError`: a missing colon, a
  space before the colon, an empty name, or a character that is not allowed in
  a name. `Headers.get(key)` lower-cases `key` and returns `""` when the key is
  missing. `Headers.set(key, value)` returns a changed copy.
  `valid_field_name(name)` checks a field name. `http_copy(mapping)` builds
  `Headers` from a mapping whose values are strings or lists of strings, and
  joins list values with `","`.
- `tcphttp.request`: `request_from_reader(reader)` reads from a socket or a
  binary stream and returns a `Request`. The `Request` has `request_line`
  (`method`, `request_target`, `http_version`), `headers`, `body` and `state`.
  The body length comes from `Content-Length`. `request_from_reader` raises
  `RequestError` in these cases:
  - a malformed request line;
  - a method that is not all upper case;
  - a version other than `HTTP/1.1`;
  - a body longer than declared;
  - input that ends before the request is complete.

  `Request.parse(data)` feeds data into the parser step by step.
- `tcphttp.response`: `Writer(output)` writes a response to a socket or a binary
  stream, one part at a time:
  - `write_status_line`
  - `write_headers`
  - `write_body`, or `write_chunked_body` followed by `write_chunked_body_done`
  - `write_trailers`, when `has_trailers` is set

  Calling these out of order raises `WriterStateError`. `StatusCode` has `OK`,
  `BAD_REQUEST` and `INTERNAL_SERVER_ERROR`. `get_default_headers(length)`
  returns `Content-Length`, `Connection: close` and `Content-Type: text/plain`.
  `status_text(code)` returns the standard reason phrase.
- `tcphttp.server`: `serve(port, handler)` listens on `port` and returns a
  `Server`. Pass port `0` to pick a free port, which is then available as
  `server.port`. The server accepts connections in a background thread and
  handles each connection in its own thread. For each connection it parses the
  request, calls `handler(writer, request)` and then closes the connection.
  Requests that fail to parse are logged and the connection is dropped.
  `Server.close()` stops the server. A `Server` is also a context manager.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

### `tcphttp-server [--port PORT]`

Serves HTTP on port 42069 by default until it receives SIGINT or SIGTERM:

- `/yourproblem` returns a 400 HTML page.
- `/myproblem` returns a 500 HTML page.
- `/video` serves `assets/vim.mp4` from the working directory. If the file
  cannot be read, it returns a 500 with a short message.
- `/httpbin/...` fetches the same path from httpbin.org and passes on the
  upstream status and headers. It drops `Content-Length` and streams the body
  back chunked. The trailers `X-Content-SHA256` and `X-Content-Length` follow
  the body. If the upstream cannot be reached, the connection is closed with no
  response.
- Any other path returns a 200 HTML page.

```
tcphttp-server
curl -v http://localhost:42069/yourproblem
```

### `tcphttp-listener [--port PORT]`

Listens on TCP port 42069 by default and prints each parsed request: the request
line, the headers and the body. It exits when a request fails to parse or when
interrupted.

```
tcphttp-listener
```

### `tcphttp-udpsender [--host HOST] [--port PORT]`

Reads lines from standard input and sends each one as a UDP datagram to
`localhost:42069` by default. It stops at the end of input.

```
tcphttp-udpsender
```

## Using the library

```python
from tcphttp.response import StatusCode, get_default_headers
from tcphttp.server import serve

def hello(writer, request):
    body = b"hello\n"
    writer.write_status_line(StatusCode.OK)
    writer.write_headers(get_default_headers(len(body)))
    writer.write_body(body)

with serve(8080, hello):
    input("serving on 8080, press enter to stop\n")
```

## What it does not do

- Each connection serves exactly one request. There is no keep-alive.
- Request bodies are read only by `Content-Length`. Chunked request bodies are
  not supported.
- There is no TLS and no routing framework. A handler receives every request
  and decides for itself what to write.