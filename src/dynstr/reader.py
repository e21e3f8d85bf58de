"""Line reader over byte streams.

read_line() pulls one byte at a time from a stream until ``\\n`` or
end-of-stream, holding the stream's lock for the whole line so two threads
reading the same stream never interleave partial lines.

Streams:
    Anything with a binary ``read(size)`` works: open(..., "rb"),
    io.BytesIO, sys.stdin.buffer. Text-mode files that expose ``.buffer``
    (sys.stdin, open(..., "r")) are read through it. Every call made on
    the same underlying file shares one lock (see as_stream()).

Thread Safety:
    The stream lock only covers the stream. The destination DynamicString
    is not protected.

Example:
    >>> import io
    >>> out = DynamicString()
    >>> stream = io.BytesIO(b"foo\\nbar")
    >>> read_line(out, stream), bytes(out)
    (4, b'foo')
    >>> read_line(out, stream), bytes(out)
    (3, b'bar')

"""

from __future__ import annotations

import io
import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO, Protocol, runtime_checkable

from dynstr.buffer import DynamicString
from dynstr.errors import ContractError
from dynstr.utils.logger import get_logger

logger = get_logger(__name__)

EOF = -1
NEWLINE = 0x0A


@runtime_checkable
class ByteSource(Protocol):
    """Character-addressable input consumed by read_line().

    getc() returns the next byte value, or EOF (-1) at end-of-stream.
    lock()/unlock() bracket exclusive access.
    """

    def getc(self) -> int: ...

    def lock(self) -> None: ...

    def unlock(self) -> None: ...


class InputStream:
    """Binary stream paired with a reentrant lock.

    Usually obtained through as_stream() so that every reader of the same
    file shares the lock.
    """

    __slots__ = ("_lock", "_raw")

    def __init__(self, raw: BinaryIO, lock: threading.RLock | None = None) -> None:
        """Wrap a binary file object.

        Args:
            raw: Binary stream, or a text stream exposing ``.buffer``
            lock: Lock to share with other wrappers of the same stream

        Raises:
            ContractError: If raw is a text stream without a binary buffer
        """
        self._raw = _binary(raw)
        self._lock = lock if lock is not None else threading.RLock()

    def getc(self) -> int:
        """Read one byte, or return EOF."""
        data = self._raw.read(1)
        if not data:
            return EOF
        return data[0]

    def lock(self) -> None:
        self._lock.acquire()

    def unlock(self) -> None:
        self._lock.release()

    @contextmanager
    def locked(self) -> Iterator[InputStream]:
        """Hold the stream lock for the duration of the block."""
        self.lock()
        try:
            yield self
        finally:
            self.unlock()


def _binary(raw: object) -> BinaryIO:
    if isinstance(raw, io.TextIOBase):
        buffer = getattr(raw, "buffer", None)
        if buffer is None:
            raise ContractError(f"{type(raw).__name__} is a text stream with no binary buffer")
        return buffer
    return raw


# Shared lock per underlying file, dropped when the file is collected
_stream_locks: weakref.WeakKeyDictionary[object, threading.RLock] = weakref.WeakKeyDictionary()
_registry_lock = threading.Lock()


def as_stream(stream: BinaryIO | ByteSource) -> ByteSource:
    """Return a ByteSource for stream.

    ByteSource objects (including InputStream) are returned unchanged. For a
    plain file object, a wrapper is built around the lock registered for
    that file, creating it on first use.

    Raises:
        ContractError: If stream is a text stream without a binary buffer,
            or cannot be weakly referenced
    """
    if isinstance(stream, ByteSource):
        return stream

    raw = _binary(stream)
    with _registry_lock:
        try:
            lock = _stream_locks.get(raw)
            if lock is None:
                lock = threading.RLock()
                _stream_locks[raw] = lock
        except TypeError as e:
            msg = f"cannot register a lock for {type(raw).__name__}; wrap it in InputStream"
            raise ContractError(msg) from e

    return InputStream(raw, lock)


def read_line(out: DynamicString, stream: BinaryIO | ByteSource) -> int:
    """Read one line from stream into out.

    out is emptied first. Bytes are read until ``\\n`` (consumed, not stored)
    or end-of-stream. A zero byte cannot be stored in a DynamicString and is
    dropped.

    Args:
        out: Receives the line content
        stream: Binary file object or ByteSource

    Returns:
        ``out.length + 1`` if the line ended with ``\\n``, ``out.length`` if
        it ended at end-of-stream. 0 means the stream was already exhausted.
    """
    out.assign(b"")
    source = as_stream(stream)
    line = bytearray()

    source.lock()
    try:
        while True:
            c = source.getc()
            if c == NEWLINE or c == EOF:
                break
            if c:
                line.append(c)
    finally:
        source.unlock()

    out.append(line)

    if c == EOF:
        logger.debug("end of stream after %d byte(s)", out.length)
        return out.length
    return out.length + 1


def iter_lines(stream: BinaryIO | ByteSource) -> Iterator[bytes]:
    """Yield each line of stream (without its terminator) until end-of-stream.

    Example:
        >>> list(iter_lines(io.BytesIO(b"a\\n\\nb")))
        [b'a', b'', b'b']
    """
    source = as_stream(stream)
    with DynamicString() as out:
        while read_line(out, source):
            yield bytes(out)


__all__ = ["EOF", "NEWLINE", "ByteSource", "InputStream", "as_stream", "iter_lines", "read_line"]
