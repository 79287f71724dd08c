"""Read a host from a text stream and resolve it into a socket address."""

from __future__ import annotations

import socket
import sys
from dataclasses import dataclass
from typing import TextIO

HOST_IP_SIZE = 128


class AddressError(Exception):
    """Raised when no usable address can be read or resolved."""


@dataclass(frozen=True)
class ResolvedAddress:
    """Protocol, family and socket address for opening a connection."""

    ip_protocol: int
    family: int
    address: tuple


def read_host(stream: TextIO | None = None) -> str:
    """Read the next non-blank line and return it without its newline."""
    stream = sys.stdin if stream is None else stream
    while True:
        line = stream.readline(HOST_IP_SIZE - 1)
        if not line:
            raise AddressError("no host given before end of input")
        if line != "\n":
            break
    if line.endswith("\n"):
        line = line[:-1]
    return line


def get_addr_from_stream(
    port: int, sock_type: int, stream: TextIO | None = None
) -> ResolvedAddress:
    """Read a host and resolve it; the first IPv4 or IPv6 result wins."""
    host = read_host(stream)
    try:
        results = socket.getaddrinfo(
            host, None, socket.AF_UNSPEC, sock_type, socket.IPPROTO_TCP
        )
    except (socket.gaierror, UnicodeError) as exc:
        raise AddressError(f"cannot resolve {host!r}: {exc}") from exc
    for family, _type, _proto, _canon, sockaddr in results:
        if family == socket.AF_INET:
            return ResolvedAddress(
                socket.IPPROTO_IP, socket.AF_INET, (sockaddr[0], port)
            )
        if family == socket.AF_INET6:
            return ResolvedAddress(
                socket.IPPROTO_IPV6,
                socket.AF_INET6,
                (sockaddr[0], port, sockaddr[2], sockaddr[3]),
            )
    raise AddressError(f"no IPv4 or IPv6 address for {host!r}")