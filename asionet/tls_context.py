"""TLS configuration: method, options and the PEM buffers used by an engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, IntFlag

# Option bits understood by the context.
DEFAULT_WORKAROUNDS = 0
SINGLE_DH_USE = 0
NO_COMPRESSION = 0
NO_SSLV2 = 0x01000000
NO_SSLV3 = 0x02000000
NO_TLSV1 = 0x04000000

ERROR_CATEGORY = "asio.ssl"


class TlsError(Exception):
    """An error reported by the TLS layer, carrying its numeric code."""

    category = ERROR_CATEGORY

    def __init__(self, code: int, message: str | None = None) -> None:
        self.code = code
        super().__init__(message or "asio.mbedtls error")


class TlsMethod(IntEnum):
    SSLV2 = 0
    SSLV2_CLIENT = 1
    SSLV2_SERVER = 2
    SSLV3 = 3
    SSLV3_CLIENT = 4
    SSLV3_SERVER = 5
    TLSV1 = 6
    TLSV1_CLIENT = 7
    TLSV1_SERVER = 8
    SSLV23 = 9
    SSLV23_CLIENT = 10
    SSLV23_SERVER = 11
    TLSV11 = 12
    TLSV11_CLIENT = 13
    TLSV11_SERVER = 14
    TLSV12 = 15
    TLSV12_CLIENT = 16
    TLSV12_SERVER = 17
    TLSV13 = 18
    TLSV13_CLIENT = 19
    TLSV13_SERVER = 20
    TLS = 21
    TLS_CLIENT = 22
    TLS_SERVER = 23


class Container(Enum):
    CERT = "cert"
    CA_CERT = "ca_cert"
    PRIVKEY = "privkey"


class VerifyMode(IntFlag):
    NONE = 0x00
    PEER = 0x01
    FAIL_IF_NO_PEER_CERT = 0x02
    CLIENT_ONCE = 0x04


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("ascii")
    return bytes(data)


@dataclass
class TlsContext:
    """Holds the method, options, certificate chain, private key and CA."""

    method: TlsMethod
    options: int = NO_COMPRESSION
    cert_chain: bytes = b""
    private_key: bytes = b""
    ca_cert: bytes = b""

    def __post_init__(self) -> None:
        self.method = TlsMethod(self.method)

    def set_options(self, options: int) -> None:
        """Replace the option bits."""
        self.options = int(options)

    def add_certificate_authority(self, ca: bytes | str) -> None:
        self.ca_cert = _as_bytes(ca)

    def use_certificate_chain(self, chain: bytes | str) -> None:
        self.cert_chain = _as_bytes(chain)

    def use_private_key(self, private_key: bytes | str) -> None:
        self.private_key = _as_bytes(private_key)

    def data(self, container: Container) -> bytes:
        """Return the buffer held in ``container``."""
        match Container(container):
            case Container.CERT:
                return self.cert_chain
            case Container.CA_CERT:
                return self.ca_cert
            case Container.PRIVKEY:
                return self.private_key
        raise ValueError(f"unknown container {container!r}")

    def size(self, container: Container) -> int:
        return len(self.data(container))