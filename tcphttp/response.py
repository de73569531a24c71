"""Writing HTTP/1.1 responses, including chunked bodies and trailers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from http import HTTPStatus
from typing import Any

from .headers import Headers

_CRLF = b"\r\n"


def status_text(code: int) -> str:
    """Return the standard reason phrase for ``code``, or "" if it is unknown."""
    try:
        return HTTPStatus(int(code)).phrase
    except ValueError:
        return ""


def _status_string(code: int) -> str:
    reason = status_text(code)
    return f"{int(code)} {reason}" if reason else str(int(code))


class StatusCode(IntEnum):
    """Status codes the server produces itself."""

    OK = 200
    BAD_REQUEST = 400
    INTERNAL_SERVER_ERROR = 500

    def __str__(self) -> str:
        return _status_string(self.value)


class WriterState(IntEnum):
    """Stages of writing a response."""

    INITIALISED = 0
    STATUS_DONE = 1
    HEADERS_DONE = 2
    BODY = 3
    BODY_DONE = 4
    COMPLETE = 5

    def __str__(self) -> str:
        return _STATE_DESCRIPTIONS.get(self, f"Writing Status: {self.value}")


_STATE_DESCRIPTIONS = {
    WriterState.STATUS_DONE: "Status written, writing headers",
    WriterState.HEADERS_DONE: "Headers written, writing body",
    WriterState.BODY: "Writing body",
    WriterState.BODY_DONE: "Body written, writing trailers",
    WriterState.COMPLETE: "Response writing complete",
}


class WriterStateError(RuntimeError):
    """Raised when a part of a response is written out of order."""


def get_default_headers(content_length: int) -> Headers:
    """Return the headers sent with a plain response of the given length."""
    headers = Headers()
    headers["Content-Length"] = str(content_length)
    headers["Connection"] = "close"
    headers["Content-Type"] = "text/plain"
    return headers


@dataclass
class Writer:
    """Writes a response, part by part, to a socket or binary stream."""

    output: Any
    state: WriterState = WriterState.INITIALISED
    has_trailers: bool = False

    def _send(self, data: bytes) -> int:
        sendall = getattr(self.output, "sendall", None)
        if sendall is not None:
            sendall(data)
        else:
            self.output.write(data)
        return len(data)

    def _send_fields(self, fields: Mapping[str, str]) -> None:
        for key, value in fields.items():
            self._send(f"{key}: {value}".encode() + _CRLF)
        self._send(_CRLF)

    def write_status_line(self, status: int) -> None:
        """Write the status line for ``status``."""
        if self.state is not WriterState.INITIALISED:
            raise WriterStateError(
                f"cannot write status while writer state is {self.state}"
            )
        self._send(f"HTTP/1.1 {_status_string(status)}".encode() + _CRLF)
        self.state = WriterState.STATUS_DONE

    def write_headers(self, headers: Mapping[str, str]) -> None:
        """Write the header fields and the blank line that ends them."""
        if self.state is not WriterState.STATUS_DONE:
            raise WriterStateError(
                f"cannot write headers while writer state is {self.state}"
            )
        self._send_fields(headers)
        self.state = WriterState.HEADERS_DONE

    def write_body(self, data: bytes) -> int:
        """Write raw body bytes and return how many were written."""
        if self.state not in (WriterState.HEADERS_DONE, WriterState.BODY):
            raise WriterStateError(
                f"cannot write body while writer state is {self.state}"
            )
        return self._send(bytes(data))

    def write_chunked_body(self, data: bytes) -> int:
        """Write ``data`` as one chunk and return its length."""
        if self.state not in (WriterState.HEADERS_DONE, WriterState.BODY):
            raise WriterStateError(
                f"cannot write chunked body in current state: {self.state}"
            )
        self.state = WriterState.BODY
        if not data:
            return 0
        self.write_body(f"{len(data):x}".encode() + _CRLF)
        self.write_body(bytes(data) + _CRLF)
        return len(data)

    def write_chunked_body_done(self) -> int:
        """Write the terminating chunk and return the bytes written."""
        if self.state is not WriterState.BODY:
            raise WriterStateError(
                f"cannot write chunked body done in state {self.state}"
            )
        if self.has_trailers:
            written = self._send(b"0" + _CRLF)
            self.state = WriterState.BODY_DONE
        else:
            written = self._send(b"0" + _CRLF + _CRLF)
            self.state = WriterState.COMPLETE
        return written

    def write_trailers(self, headers: Mapping[str, str]) -> None:
        """Write the trailer fields after a chunked body."""
        if not self.has_trailers:
            raise WriterStateError("no trailers declared in header")
        if self.state is not WriterState.BODY_DONE:
            raise WriterStateError(f"cannot write trailers in state {self.state}")
        self._send_fields(headers)
        self.state = WriterState.COMPLETE