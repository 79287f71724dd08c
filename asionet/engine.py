"""TLS engine driven through an in-memory bio pair.

The engine never touches a socket. Encrypted bytes coming from the transport
are handed over with ``put_input``. Encrypted bytes the engine produced are
collected with ``get_output``. Every operation reports what it needs next as
a ``Want`` value.
"""

from __future__ import annotations

import ssl
import tempfile
from enum import Enum, IntEnum
from pathlib import Path
from typing import Callable, TypeVar

from asionet.bio import DEFAULT_BIO_SIZE, Bio, new_pair
from asionet.tls_context import Container, TlsContext, TlsError, VerifyMode

ERR_SSL_WANT_READ = -0x6900
ERR_SSL_WANT_WRITE = -0x6880
ERR_SSL_PEER_CLOSE_NOTIFY = -0x7880
ERR_SSL_FATAL_ALERT = -0x7080
ERR_SSL_BAD_INPUT_DATA = -0x7100

_T = TypeVar("_T")


class Want(IntEnum):
    """What the caller has to do after an engine operation."""

    INPUT_AND_RETRY = -2
    OUTPUT_AND_RETRY = -1
    NOTHING = 0
    OUTPUT = 1


class State(Enum):
    IDLE = "idle"
    READING = "reading"
    WRITING = "writing"
    CLOSED = "closed"


class EngineError(TlsError):
    """A TLS failure; ``want`` tells whether output is still to be sent."""

    def __init__(self, code: int, message: str, want: Want) -> None:
        super().__init__(code, message)
        self.want = want


def impl_verify_mode(
    verify_mode: VerifyMode | int, is_client: bool
) -> ssl.VerifyMode | None:
    """Translate peer verification flags into a certificate requirement.

    Returns None when the flags leave the requirement unset.
    """
    mode = VerifyMode(verify_mode)
    if is_client:
        if mode & VerifyMode.PEER:
            return ssl.CERT_REQUIRED
        if mode == VerifyMode.NONE:
            return ssl.CERT_NONE
        return None
    if mode & VerifyMode.FAIL_IF_NO_PEER_CERT:
        return ssl.CERT_REQUIRED
    if mode & VerifyMode.PEER:
        return ssl.CERT_OPTIONAL
    if mode == VerifyMode.NONE:
        return ssl.CERT_NONE
    return None


def _load_cert_chain(ssl_context: ssl.SSLContext, chain: bytes, key: bytes) -> None:
    with tempfile.TemporaryDirectory() as directory:
        cert_path = Path(directory) / "cert.pem"
        key_path = Path(directory) / "key.pem"
        cert_path.write_bytes(chain)
        key_path.write_bytes(key)
        ssl_context.load_cert_chain(cert_path, key_path)


class Engine:
    """A client or server TLS endpoint that works on buffers only."""

    def __init__(self, context: TlsContext, bio_size: int = DEFAULT_BIO_SIZE) -> None:
        self.context = context
        self._bio, self._ext_bio = new_pair(bio_size)
        self.state = State.IDLE
        self.verify_mode = VerifyMode.NONE
        self._incoming = ssl.MemoryBIO()
        self._outgoing = ssl.MemoryBIO()
        self._ssl: ssl.SSLObject | None = None
        self._handshake_done = False

    @property
    def ext_bio(self) -> Bio:
        """The transport side of the bio pair."""
        return self._ext_bio

    def set_verify_mode(self, mode: VerifyMode | int) -> None:
        self.verify_mode = VerifyMode(mode)

    # Public operations

    def handshake(self, client: bool) -> Want:
        """Advance the handshake as far as the available input allows."""
        want, _ = self._perform(lambda: (self._handshake_step(client), None))
        return want

    def shutdown(self) -> Want:
        """Send a close notification and mark the engine closed."""
        want, _ = self._perform(lambda: (self._shutdown_step(), None))
        return want

    def write(self, data: bytes) -> tuple[Want, int]:
        """Encrypt ``data``; return what is needed next and the bytes taken."""
        data = bytes(data)
        if not data:
            return Want.NOTHING, 0
        want, transferred = self._perform(lambda: self._write_step(data))
        return want, transferred or 0

    def read(self, size: int) -> tuple[Want, bytes]:
        """Decrypt up to ``size`` bytes; return what is needed next and the data."""
        if size <= 0:
            return Want.NOTHING, b""
        want, data = self._perform(lambda: self._read_step(size))
        return want, data or b""

    def get_output(self, size: int) -> bytes:
        """Take up to ``size`` encrypted bytes to send to the peer."""
        try:
            data = self._ext_bio.read(size)
        except BlockingIOError:
            data = b""
        self._flush_output()
        return data

    def put_input(self, data: bytes) -> bytes:
        """Hand over encrypted bytes from the peer; return what did not fit."""
        data = bytes(data)
        try:
            taken = self._ext_bio.write(data)
        except BlockingIOError:
            taken = 0
        return data[taken:]

    # Internals

    def _configure(self, client: bool) -> ssl.SSLObject:
        protocol = ssl.PROTOCOL_TLS_CLIENT if client else ssl.PROTOCOL_TLS_SERVER
        ssl_context = ssl.SSLContext(protocol)
        ssl_context.check_hostname = False
        mode = impl_verify_mode(self.verify_mode, client)
        if mode is None:
            mode = ssl.CERT_REQUIRED if client else ssl.CERT_NONE
        ssl_context.verify_mode = mode
        try:
            if self.context.size(Container.CERT) and self.context.size(Container.PRIVKEY):
                _load_cert_chain(
                    ssl_context,
                    self.context.data(Container.CERT),
                    self.context.data(Container.PRIVKEY),
                )
            if self.context.size(Container.CA_CERT):
                ssl_context.load_verify_locations(
                    cadata=self.context.data(Container.CA_CERT).decode("ascii")
                )
        except (ssl.SSLError, ValueError, UnicodeError) as exc:
            raise TlsError(ERR_SSL_BAD_INPUT_DATA, f"configuration failed: {exc}") from exc
        return ssl_context.wrap_bio(self._incoming, self._outgoing, server_side=not client)

    def _pump_input(self) -> None:
        pending = self._bio.ctrl_pending()
        if pending:
            self._incoming.write(self._bio.read(pending))

    def _flush_output(self) -> None:
        while self._outgoing.pending:
            room = self._bio.size - self._bio.wpending()
            if room <= 0:
                break
            self._bio.write(self._outgoing.read(room))

    def _run(self, operation: Callable[[], _T]) -> tuple[_T | None, int]:
        self._pump_input()
        try:
            return operation(), 0
        except ssl.SSLWantReadError:
            return None, ERR_SSL_WANT_READ
        except ssl.SSLWantWriteError:
            return None, ERR_SSL_WANT_WRITE
        except ssl.SSLZeroReturnError as exc:
            self.state = State.CLOSED
            raise TlsError(ERR_SSL_PEER_CLOSE_NOTIFY, "peer closed the connection") from exc
        except ssl.SSLError as exc:
            raise TlsError(ERR_SSL_FATAL_ALERT, str(exc)) from exc
        finally:
            self._flush_output()

    def _require_ssl(self) -> ssl.SSLObject:
        if self._ssl is None:
            raise TlsError(ERR_SSL_BAD_INPUT_DATA, "handshake has not been started")
        return self._ssl

    def _handshake_step(self, client: bool) -> int:
        if self._ssl is None:
            self._ssl = self._configure(client)
        _, code = self._run(self._ssl.do_handshake)
        if code == ERR_SSL_WANT_READ:
            self.state = State.READING
        elif code == ERR_SSL_WANT_WRITE:
            self.state = State.WRITING
        else:
            self._handshake_done = True
        return code

    def _shutdown_step(self) -> int:
        try:
            if self._ssl is None or not self._handshake_done:
                return 0
            _, code = self._run(self._ssl.unwrap)
            # The close notification is out; the peer's answer is not awaited.
            return 0 if code == ERR_SSL_WANT_READ else code
        finally:
            self.state = State.CLOSED

    def _write_step(self, data: bytes) -> tuple[int, int | None]:
        ssl_object = self._require_ssl()
        written, code = self._run(lambda: ssl_object.write(data))
        result = code if code else int(written or 0)
        self.state = State.IDLE if result == len(data) else State.WRITING
        return result, (result if result > 0 else None)

    def _read_step(self, size: int) -> tuple[int, bytes | None]:
        ssl_object = self._require_ssl()
        data, code = self._run(lambda: ssl_object.read(size))
        result = code if code else len(data or b"")
        self.state = State.IDLE if result == size else State.READING
        return result, (data if result > 0 else None)

    def _perform(self, operation: Callable[[], tuple[int, _T]]) -> tuple[Want, _T | None]:
        before = self._ext_bio.ctrl_pending()
        try:
            result, payload = operation()
        except TlsError as exc:
            grew = self._ext_bio.ctrl_pending() > before
            raise EngineError(
                exc.code, str(exc), Want.OUTPUT if grew else Want.NOTHING
            ) from exc
        grew = self._ext_bio.ctrl_pending() > before
        if result == 0:
            return (Want.OUTPUT if grew else Want.NOTHING), None
        if result == ERR_SSL_WANT_WRITE:
            return Want.OUTPUT_AND_RETRY, payload
        if grew:
            return (Want.OUTPUT if result > 0 else Want.OUTPUT_AND_RETRY), payload
        if result == ERR_SSL_WANT_READ:
            return Want.INPUT_AND_RETRY, payload
        if self.state is State.CLOSED:
            raise EOFError("TLS stream is closed")
        return Want.NOTHING, payload