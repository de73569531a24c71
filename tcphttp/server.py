"""A small threaded TCP server that parses requests and calls a handler."""

from __future__ import annotations

import logging
import socket
import threading
from collections.abc import Callable

from .request import Request, request_from_reader
from .response import Writer

log = logging.getLogger(__name__)

Handler = Callable[[Writer, Request], None]

_POLL_INTERVAL = 0.1


class Server:
    """Accepts connections on a listening socket and serves each in a thread."""

    def __init__(self, listener: socket.socket, handler: Handler) -> None:
        self.listener = listener
        self.handler = handler
        self.port: int = listener.getsockname()[1]
        self._open = threading.Event()
        self._open.set()
        self.listener.settimeout(_POLL_INTERVAL)
        self._thread = threading.Thread(target=self._listen, daemon=True)
        self._thread.start()

    @property
    def is_open(self) -> bool:
        """Whether the server is still accepting connections."""
        return self._open.is_set()

    def close(self) -> None:
        """Stop accepting connections and close the listening socket."""
        if not self._open.is_set():
            return
        self._open.clear()
        self.listener.close()
        if threading.current_thread() is not self._thread:
            self._thread.join()

    def __enter__(self) -> Server:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _listen(self) -> None:
        while self._open.is_set():
            try:
                conn, _ = self.listener.accept()
            except TimeoutError:
                continue
            except OSError as exc:
                if not self._open.is_set():
                    break
                log.warning("Error with connection: %s", exc)
                continue
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        with conn:
            conn.setblocking(True)
            try:
                request = request_from_reader(conn)
            except ValueError as exc:
                log.warning("Could not parse request: %s", exc)
                return
            try:
                self.handler(Writer(conn), request)
            except Exception:
                log.exception("Handler failed")


def serve(port: int, handler: Handler) -> Server:
    """Start serving on ``port`` (0 picks a free one) with ``handler``."""
    listener = socket.create_server(("", port))
    return Server(listener, handler)