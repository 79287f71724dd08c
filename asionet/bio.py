"""Paired in-memory byte pipes connecting a TLS engine to a transport.

Each side of a pair has a bounded buffer. Writing to one side fills its own
buffer; reading from one side drains the buffer of its peer.
"""

from __future__ import annotations

DEFAULT_BIO_SIZE = 16384

_FLAG_READ = 1
_FLAG_WRITE = 2


class Bio:
    """One end of a pair of bounded byte buffers."""

    def __init__(self, size: int = DEFAULT_BIO_SIZE) -> None:
        if size <= 0:
            raise ValueError(f"bio size must be positive, got {size}")
        self.size = size
        self.peer: Bio | None = None
        self._buffer = bytearray()
        self._flags = 0

    def _require_peer(self) -> Bio:
        if self.peer is None:
            raise RuntimeError("bio has no peer")
        return self.peer

    def write(self, data: bytes) -> int:
        """Store as much of ``data`` as fits and return how many bytes were taken.

        Empty data is a no-op returning 0. Raises BlockingIOError when the
        buffer is already full.
        """
        data = bytes(data)
        if not data:
            return 0
        remaining = self.size - len(self._buffer)
        if remaining <= 0:
            self._flags |= _FLAG_WRITE
            raise BlockingIOError("bio buffer is full")
        taken = data[:remaining]
        self._buffer += taken
        if len(taken) == len(data):
            self._flags &= ~_FLAG_WRITE
        return len(taken)

    def read(self, size: int) -> bytes:
        """Take up to ``size`` bytes that the peer has written.

        A non-positive size returns no data. Raises BlockingIOError when the
        peer has nothing pending.
        """
        if size <= 0:
            return b""
        peer = self._require_peer()
        if not peer._buffer:
            self._flags |= _FLAG_READ
            raise BlockingIOError("no data pending from peer")
        count = min(size, len(peer._buffer))
        data = bytes(peer._buffer[:count])
        del peer._buffer[:count]
        if count == size:
            self._flags &= ~_FLAG_READ
        return data

    def wpending(self) -> int:
        """Bytes written to this side and not yet read by the peer."""
        return len(self._buffer)

    def ctrl_pending(self) -> int:
        """Bytes the peer has written and this side has not read yet."""
        return len(self._require_peer()._buffer)

    def should_write(self) -> bool:
        return bool(self._flags & _FLAG_WRITE)

    def should_read(self) -> bool:
        return bool(self._flags & _FLAG_READ)


def new_pair(size: int = DEFAULT_BIO_SIZE) -> tuple[Bio, Bio]:
    """Create two bios, each the other's peer."""
    first = Bio(size)
    second = Bio(size)
    first.peer = second
    second.peer = first
    return first, second