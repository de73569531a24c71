"""Demo HTTP server: canned pages, a video file and a chunked httpbin proxy."""

from __future__ import annotations

import argparse
import hashlib
import logging
import signal
import threading
import urllib.error
import urllib.request
from pathlib import Path

from .headers import http_copy
from .request import Request
from .response import StatusCode, Writer, WriterStateError, get_default_headers
from .server import serve

log = logging.getLogger(__name__)

PORT = 42069
HTTPBIN_PREFIX = "/httpbin"
HTTPBIN_URL = "https://httpbin.org"
VIDEO_PATH = Path("assets") / "vim.mp4"
_CHUNK_SIZE = 1024

_BAD_REQUEST_PAGE = """<html>
  <head>
    <title>400 Bad Request</title>
  </head>
  <body>
    <h1>Bad Request</h1>
    <p>Your request honestly kinda sucked.</p>
  </body>
</html>"""

_SERVER_ERROR_PAGE = """<html>
  <head>
    <title>500 Internal Server Error</title>
  </head>
  <body>
    <h1>Internal Server Error</h1>
    <p>Okay, you know what? This one is on me.</p>
  </body>
</html>"""

_OK_PAGE = """<html>
  <head>
    <title>200 OK</title>
  </head>
  <body>
    <h1>Success!</h1>
    <p>Your request was an absolute banger.</p>
  </body>
</html>"""

_PAGES = {
    "/yourproblem": (StatusCode.BAD_REQUEST, _BAD_REQUEST_PAGE),
    "/myproblem": (StatusCode.INTERNAL_SERVER_ERROR, _SERVER_ERROR_PAGE),
}


def handler(writer: Writer, request: Request) -> None:
    """Answer ``request`` according to its target."""
    target = request.request_line.request_target
    if target.startswith(HTTPBIN_PREFIX):
        _proxy(writer, HTTPBIN_URL + target[len(HTTPBIN_PREFIX):])
    elif target == "/video":
        _serve_video(writer)
    else:
        _serve_page(writer, target)


def _proxy(writer: Writer, url: str) -> None:
    try:
        upstream = urllib.request.urlopen(url)
    except urllib.error.HTTPError as exc:
        upstream = exc
    except (urllib.error.URLError, OSError, ValueError) as exc:
        log.warning("error forwarding request to %s: %s", url, exc)
        return

    with upstream:
        writer.write_status_line(upstream.status)

        fields: dict[str, list[str]] = {}
        for key, value in upstream.headers.items():
            fields.setdefault(key, []).append(value)
        response_headers = http_copy(fields)
        for key in [k for k in response_headers if k.lower() == "content-length"]:
            del response_headers[key]
        response_headers["Transfer-Encoding"] = "chunked"
        response_headers["Trailer"] = "X-Content-SHA256, X-Content-Length"
        writer.has_trailers = True
        writer.write_headers(response_headers)

        digest = hashlib.sha256()
        length = 0
        while True:
            try:
                chunk = upstream.read(_CHUNK_SIZE)
            except OSError as exc:
                log.warning("error reading from target %s: %s", url, exc)
                break
            if not chunk:
                break
            try:
                writer.write_chunked_body(chunk)
            except OSError as exc:
                log.warning("error writing chunked body: %s", exc)
                return
            digest.update(chunk)
            length += len(chunk)

    try:
        writer.write_chunked_body_done()
    except (OSError, WriterStateError) as exc:
        log.warning("error writing chunked body done: %s", exc)
        return

    writer.write_trailers(
        {
            "X-Content-SHA256": digest.hexdigest(),
            "X-Content-Length": str(length),
        }
    )


def _serve_video(writer: Writer) -> None:
    response_headers = get_default_headers(0)
    try:
        video = VIDEO_PATH.read_bytes()
    except OSError:
        writer.write_status_line(StatusCode.INTERNAL_SERVER_ERROR)
        writer.write_headers(response_headers)
        writer.write_body(b"Internal Server Error: Could not load video")
        return
    response_headers["Content-Length"] = str(len(video))
    response_headers["Content-Type"] = "video/mp4"
    writer.write_status_line(StatusCode.OK)
    writer.write_headers(response_headers)
    writer.write_body(video)


def _serve_page(writer: Writer, target: str) -> None:
    status, page = _PAGES.get(target, (StatusCode.OK, _OK_PAGE))
    body = page.encode()
    response_headers = get_default_headers(len(body)).set("Content-Type", "text/html")
    writer.write_status_line(status)
    writer.write_headers(response_headers)
    writer.write_body(body)


def main(argv=None) -> int:
    """Run the server until SIGINT or SIGTERM arrives."""
    parser = argparse.ArgumentParser(prog="httpserver", description=__doc__)
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        server = serve(args.port, handler)
    except OSError as exc:
        log.error("Error starting server: %s", exc)
        return 1

    stop = threading.Event()
    signals = (signal.SIGINT, signal.SIGTERM)
    previous = {sig: signal.signal(sig, lambda *_: stop.set()) for sig in signals}
    try:
        with server:
            log.info("Server started on port %d", server.port)
            while not stop.wait(0.5):
                pass
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)
    log.info("Server gracefully stopped")
    return 0