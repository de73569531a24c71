"""Incremental parsing of HTTP/1.1 requests from a byte stream."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .headers import CRLF, Headers

_INITIAL_BUFFER_SIZE = 8
_INTEGER = re.compile(r"[+-]?[0-9]+")


class RequestError(ValueError):
    """Raised when a request cannot be parsed or is not acceptable."""


class RequestState(Enum):
    """Stages of request parsing."""

    INITIALISED = "initialised"
    PARSING_HEADERS = "parsing headers"
    PARSING_BODY = "parsing body"
    DONE = "done"

    def __str__(self) -> str:
        return self.value


@dataclass
class RequestLine:
    """The method, target and version of a request."""

    http_version: str = ""
    request_target: str = ""
    method: str = ""


@dataclass
class Request:
    """A request being built up from incoming data."""

    request_line: RequestLine = field(default_factory=RequestLine)
    state: RequestState = RequestState.INITIALISED
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""

    def parse(self, data: bytes) -> int:
        """Feed ``data`` to the parser and return the number of bytes consumed."""
        total = 0
        while self.state is not RequestState.DONE:
            n = self._parse_single(data[total:])
            if n == 0:
                break
            total += n
        return total

    def _parse_single(self, data: bytes) -> int:
        if self.state is RequestState.INITIALISED:
            line, consumed = parse_request_line(data)
            if consumed == 0 or line is None:
                return 0
            self.request_line = line
            self.state = RequestState.PARSING_HEADERS
            return consumed

        if self.state is RequestState.PARSING_HEADERS:
            if not data:
                return 0
            consumed, done = self.headers.parse(data)
            if done:
                self.state = RequestState.PARSING_BODY
            return consumed

        if self.state is RequestState.PARSING_BODY:
            length = self.headers.get("Content-Length")
            if length == "":
                self.state = RequestState.DONE
                return 0
            if not _INTEGER.fullmatch(length):
                raise RequestError(f"invalid Content-Length: {length!r}")
            content_length = int(length)

            self.body += bytes(data)
            if len(self.body) > content_length:
                raise RequestError("body length exceeds content length")
            if len(self.body) == content_length:
                self.state = RequestState.DONE
            return len(data)

        raise RequestError("trying to read data in a done state")


def parse_request_line(data: bytes) -> tuple[Optional[RequestLine], int]:
    """Parse a request line if a complete one is present.

    Returns the line and the bytes consumed, or (None, 0) if more data is needed.
    """
    index = bytes(data).find(CRLF)
    if index == -1:
        return None, 0
    text = bytes(data[:index]).decode("utf-8", "surrogateescape")
    return request_line_from_string(text), index + len(CRLF)


def request_line_from_string(text: str) -> RequestLine:
    """Split a request line into method, target and version."""
    parts = text.split(" ")
    if len(parts) != 3:
        raise RequestError(f"request line has wrong number of parts: {text}")
    method, target, version = parts
    if version.startswith("HTTP/"):
        version = version[len("HTTP/"):]
    return RequestLine(http_version=version, request_target=target, method=method)


def validate_method(method: str) -> bool:
    """Return True if every character of ``method`` is upper case."""
    return all(char.isupper() for char in method)


def _read_chunk(reader, size: int) -> bytes:
    if hasattr(reader, "recv"):
        return reader.recv(size)
    if hasattr(reader, "read1"):
        return reader.read1(size)
    return reader.read(size)


def request_from_reader(reader) -> Request:
    """Read and parse a full request from a socket or binary stream."""
    request = Request()
    buffer = bytearray()
    capacity = _INITIAL_BUFFER_SIZE

    while request.state is not RequestState.DONE:
        if len(buffer) >= capacity:
            capacity *= 2
        try:
            chunk = _read_chunk(reader, capacity - len(buffer))
        except OSError as exc:
            raise RequestError(f"error reading from reader: {exc}") from exc
        if not chunk:
            break
        buffer += chunk

        consumed = request.parse(bytes(buffer))
        if consumed:
            del buffer[:consumed]

    if request.state is not RequestState.DONE:
        raise RequestError("incomplete request: reached EOF before end of request")

    if not validate_method(request.request_line.method):
        raise RequestError(f"invalid method: {request.request_line.method}")

    if request.request_line.http_version != "1.1":
        raise RequestError("only HTTP/1.1 is supported")

    return request