"""HTTP header field parsing and a simple header mapping."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

CRLF = b"\r\n"

_VALID_FIELD_NAME = re.compile(r"[a-zA-Z0-9!#$%&'*+.^_|~`-]*")


class HeaderError(ValueError):
    """Raised when header data is malformed."""

    def __init__(self, message: str, consumed: int = 0) -> None:
        super().__init__(message)
        self.consumed = consumed


def valid_field_name(name: str) -> bool:
    """Return True if every character of ``name`` is allowed in a field name."""
    return _VALID_FIELD_NAME.fullmatch(name) is not None


class Headers(dict):
    """A mapping of header names to values.

    Parsed names are stored lower-cased; repeated fields are joined with ", ".
    """

    def get(self, key: str, default: str = "") -> str:
        """Look up ``key`` case-insensitively among parsed (lower-case) names."""
        return super().get(key.lower(), default)

    def parse(self, data: bytes) -> tuple[int, bool]:
        """Parse complete header lines from ``data``.

        Returns the number of bytes consumed and whether the blank line ending
        the header section was reached. Raises HeaderError on malformed input.
        """
        if not data:
            raise HeaderError("no data to parse")

        view = bytes(data)
        consumed = 0
        while True:
            index = view.find(CRLF, consumed)
            if index == -1:
                return consumed, False
            if index == consumed:
                return consumed + len(CRLF), True

            line = view[consumed:index].decode("utf-8", "surrogateescape")
            name, sep, value = line.partition(":")
            if not sep:
                raise HeaderError(
                    "invalid header format: missing or multiple colons", consumed
                )
            if name.endswith(" "):
                raise HeaderError(
                    "invalid header format: whitespace before colon", consumed
                )
            name = name.strip()
            if not name:
                raise HeaderError(
                    "invalid header format: field name must have at least one character",
                    consumed,
                )
            if not valid_field_name(name):
                raise HeaderError(
                    "invalid header format: character in field name not permitted",
                    consumed,
                )
            name = name.lower()
            value = value.strip()

            if name in self:
                self[name] = f"{self[name]}, {value}"
            else:
                self[name] = value

            consumed = index + len(CRLF)

    def set(self, key: str, value: str) -> Headers:
        """Return a copy of these headers with ``key`` set to ``value``."""
        updated = self.copy()
        updated[key] = value
        return updated

    def copy(self) -> Headers:
        """Return a shallow copy as a Headers instance."""
        return Headers(self)


def http_copy(mapping: Mapping[str, str | Iterable[str]]) -> Headers:
    """Build Headers from a mapping whose values are strings or lists of strings.

    List values are joined with ",".
    """
    result = Headers()
    for key, value in mapping.items():
        if isinstance(value, str):
            result[key] = value
        else:
            result[key] = ",".join(value)
    return result