"""Length-prefixed chat messages: a four character decimal header and a body."""

from __future__ import annotations

from dataclasses import dataclass, field

HEADER_LENGTH = 4
MAX_BODY_LENGTH = 512

_SPACES = b" \t\n\v\f\r"


class HeaderError(ValueError):
    """Raised when a message header announces an invalid body length."""


def _atoi(raw: bytes) -> int:
    """Parse a leading decimal integer the lenient way: junk yields 0."""
    raw = raw.split(b"\0", 1)[0].lstrip(_SPACES)
    sign = 1
    if raw[:1] in (b"+", b"-"):
        sign = -1 if raw[:1] == b"-" else 1
        raw = raw[1:]
    digits = bytearray()
    for byte in raw:
        if not 0x30 <= byte <= 0x39:
            break
        digits.append(byte)
    return sign * int(digits) if digits else 0


@dataclass
class ChatMessage:
    """A chat message; bodies longer than the maximum are cut short."""

    body: bytes = b""
    body_length: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")
        self.body = bytes(self.body[:MAX_BODY_LENGTH])
        self.body_length = len(self.body)

    def __len__(self) -> int:
        return HEADER_LENGTH + self.body_length

    def encode_header(self) -> bytes:
        """Return the header for the current body length, right aligned in four columns."""
        return f"{self.body_length:4d}".encode("ascii")[:HEADER_LENGTH]

    def decode_header(self, header: bytes) -> int:
        """Read the body length from a header and return it.

        Raises HeaderError, and resets the body length to zero, when the
        announced length is negative or above the maximum.
        """
        value = _atoi(bytes(header[:HEADER_LENGTH]))
        if value < 0 or value > MAX_BODY_LENGTH:
            self.body_length = 0
            raise HeaderError(f"invalid body length in header {bytes(header)!r}")
        self.body_length = value
        return value

    def to_bytes(self) -> bytes:
        """Return the header followed by the body, as sent on the wire."""
        return self.encode_header() + self.body[: self.body_length]