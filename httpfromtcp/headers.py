"""HTTP field-line parsing and a case-insensitive header mapping."""

from __future__ import annotations

CRLF = b"\r\n"
_SEPARATOR = b":"
_VALID_NAME_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "0123456789"
    "!#$%'*+-.^_`|~"
)


class HeaderError(ValueError):
    """Raised when a header line is malformed."""


class Headers(dict):
    """A mapping of lower-cased header names to their values."""

    def parse(self, data: bytes) -> tuple[int, bool]:
        """Parse one field line from ``data``.

        Returns the number of bytes consumed and whether the blank line
        ending the header section was reached. Consumes nothing when no
        complete line is available yet.
        """
        data = bytes(data)
        crlf_idx = data.find(CRLF)
        if crlf_idx == -1:
            return 0, False
        if crlf_idx == 0:
            return len(CRLF), True

        raw_name, found, raw_value = data[:crlf_idx].partition(_SEPARATOR)
        if not found:
            raise HeaderError(
                f"invalid header: {data.decode('utf-8', errors='replace')!r}"
            )

        name = raw_name.decode("utf-8", errors="replace").lower()
        if name != name.rstrip(" "):
            raise HeaderError(f"header name ends in whitespace: {name!r}")

        name = name.strip()
        if any(char not in _VALID_NAME_CHARS for char in name):
            raise HeaderError(f"invalid header token found: {name!r}")

        self.set(name, raw_value.decode("utf-8", errors="replace").strip())
        return crlf_idx + len(CRLF), False

    def set(self, key: str, value: str) -> None:
        """Add a value, joining it to any existing one with ', '."""
        key = key.lower()
        existing = self.get(key)
        if existing is not None:
            value = f"{existing}, {value}"
        self[key] = value

    def override(self, key: str, value: str) -> None:
        """Replace any existing value for ``key``."""
        self[key.lower()] = value

    def set_content_type(self, value: str) -> None:
        """Replace the content-type value."""
        self["content-type"] = value

    def remove(self, key: str) -> None:
        """Drop ``key`` if present."""
        self.pop(key.lower(), None)