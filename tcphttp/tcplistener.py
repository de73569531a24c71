"""Accept TCP connections and print each parsed HTTP request."""

from __future__ import annotations

import argparse
import logging
import socket

from .request import Request, request_from_reader

log = logging.getLogger(__name__)

PORT = 42069


def format_request(request: Request) -> str:
    """Render a request as the report printed for each connection."""
    line = request.request_line
    lines = [
        "Request line:",
        f"- Method: {line.method}",
        f"- Target: {line.request_target}",
        f"- Version: {line.http_version}",
        "Headers:",
    ]
    lines.extend(f"- {key}: {value}" for key, value in request.headers.items())
    lines.extend(["Body:", request.body.decode("utf-8", "replace"), "..."])
    return "\n".join(lines) + "\n"


def main(argv=None) -> int:
    """Listen for connections and print every request until one fails to parse."""
    parser = argparse.ArgumentParser(prog="tcplistener", description=__doc__)
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        listener = socket.create_server(("", args.port))
    except OSError as exc:
        log.error("Error opening listener on port %d: %s", args.port, exc)
        return 1

    with listener:
        while True:
            try:
                conn, address = listener.accept()
            except KeyboardInterrupt:
                return 0
            except OSError as exc:
                log.error("Could not accept connection: %s", exc)
                return 1
            log.info("Connection has been accepted from %s.", address)
            with conn:
                try:
                    request = request_from_reader(conn)
                except ValueError as exc:
                    log.error("Unable to receive request: %s", exc)
                    return 1
                print(format_request(request), end="", flush=True)
            log.info("Connection from %s has been closed.", address)