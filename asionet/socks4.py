"""SOCKS 4 request and reply wire formats."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from enum import IntEnum

VERSION = 0x04
REPLY_LENGTH = 8


class Command(IntEnum):
    CONNECT = 0x01
    BIND = 0x02


class Status(IntEnum):
    REQUEST_GRANTED = 0x5A
    REQUEST_FAILED = 0x5B
    REQUEST_FAILED_NO_IDENTD = 0x5C
    REQUEST_FAILED_BAD_USER_ID = 0x5D


def _check_port(port: int) -> None:
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port out of range: {port}")


@dataclass
class Socks4Request:
    """A request asking the proxy to connect or bind to an IPv4 endpoint."""

    command: Command
    address: ipaddress.IPv4Address | str
    port: int
    user_id: str = ""

    def __post_init__(self) -> None:
        self.command = Command(self.command)
        address = ipaddress.ip_address(self.address)
        if address.version != 4:
            raise ValueError("address family not supported: SOCKS 4 carries IPv4 only")
        self.address = address
        _check_port(self.port)

    def to_bytes(self) -> bytes:
        return (
            bytes([VERSION, self.command, (self.port >> 8) & 0xFF, self.port & 0xFF])
            + self.address.packed
            + self.user_id.encode("utf-8")
            + b"\0"
        )


@dataclass
class Socks4Reply:
    """The proxy's eight byte answer."""

    null_byte: int = 0
    status: int = 0
    port: int = 0
    address: ipaddress.IPv4Address = field(
        default_factory=lambda: ipaddress.IPv4Address(0)
    )

    @classmethod
    def from_bytes(cls, data: bytes) -> Socks4Reply:
        if len(data) != REPLY_LENGTH:
            raise ValueError(
                f"SOCKS 4 reply must be {REPLY_LENGTH} bytes, got {len(data)}"
            )
        return cls(
            null_byte=data[0],
            status=data[1],
            port=(data[2] << 8) | data[3],
            address=ipaddress.IPv4Address(bytes(data[4:8])),
        )

    def success(self) -> bool:
        return self.null_byte == 0 and self.status == Status.REQUEST_GRANTED

    def endpoint(self) -> tuple[str, int]:
        return str(self.address), self.port