"""DynamicString: a growable, NUL-terminated byte string.

The buffer always carries a zero terminator after its content and never
holds a zero byte inside it, so ``to_cstring()`` can be handed to anything
that expects a C string. Capacity follows the rounding rule in
:mod:`dynstr.growth` and only grows.

Every public mutator runs through ``_resize``, the single place where length
and capacity change, and re-checks the invariant before returning (see
BufferConfig.check_invariants).

Thread Safety:
    No internal locking. An instance must not be shared between threads
    without external synchronization.

Example:
    >>> s = DynamicString.dup(b"hello")
    >>> s.append_bounded(b", world", 1).append_chars("!", 0)
    DynamicString(b'hello,!')
    >>> s.length, s.capacity
    (7, 16)
    >>> s.release()

"""

from __future__ import annotations

from typing import Self

from dynstr.config import get_buffer_config
from dynstr.errors import ContractError, InvariantError
from dynstr.format import append_formatted as _append_formatted
from dynstr.growth import BASELINE_CAPACITY, is_valid_capacity, round_up
from dynstr.text import Char, Text, char_code, natural_bytes
from dynstr.utils.logger import get_logger

logger = get_logger(__name__)


class DynamicString:
    """Owned, growable byte buffer with a trailing zero terminator.

    Attributes are private; use ``length``, ``capacity`` and ``bytes(s)`` to
    observe an instance. Mutators return ``self`` for chaining.

    Instances are context managers and release themselves on exit:

        >>> with DynamicString.new() as s:
        ...     s.append_formatted("%i-%u", -123, 7)
        DynamicString(b'-123-7')

    """

    __slots__ = ("_alloc", "_buf", "_len")

    __hash__ = None  # mutable

    def __init__(self, text: Text | None = None) -> None:
        """Create an empty string, or a copy of text's natural length.

        Args:
            text: Optional external text to copy
        """
        data = b"" if text is None else natural_bytes(text)
        self._len = len(data)
        self._alloc = round_up(self._len + 1)
        self._buf = bytearray(self._alloc)
        self._buf[: self._len] = data
        self._check()

    @classmethod
    def new(cls) -> Self:
        """Create an empty string with baseline capacity."""
        return cls()

    @classmethod
    def dup(cls, text: Text) -> Self:
        """Create a string holding a copy of text.

        Raises:
            ContractError: If text is None
        """
        if text is None:
            raise ContractError("text operand is None")
        return cls(text)

    # ------------------------------------------------------------------
    # Invariant
    # ------------------------------------------------------------------

    def is_ok(self) -> bool:
        """Check the structural invariant.

        True when the capacity is a legal power-of-two allocation for the
        length, the byte at ``length`` is the terminator and no content byte
        is zero. Always False for a released instance.
        """
        buf = self._buf
        if buf is None:
            return False
        return (
            len(buf) == self._alloc
            and is_valid_capacity(self._alloc, self._len)
            and buf[self._len] == 0
            and buf.find(0, 0, self._len) < 0
        )

    def check(self) -> None:
        """Raise unless the instance is live and satisfies the invariant.

        Unlike the internal checks this runs regardless of configuration.

        Raises:
            ContractError: If the instance has been released
            InvariantError: If the invariant does not hold
        """
        if self._buf is None:
            raise ContractError("DynamicString used after release()")
        if not self.is_ok():
            raise InvariantError("DynamicString invariant violated", self._len, self._alloc)

    def _check(self) -> None:
        if self._buf is None:
            raise ContractError("DynamicString used after release()")
        if get_buffer_config().check_invariants and not self.is_ok():
            raise InvariantError("DynamicString invariant violated", self._len, self._alloc)

    # ------------------------------------------------------------------
    # Growth primitive
    # ------------------------------------------------------------------

    def _resize(self, length: int) -> None:
        # May leave zero bytes inside [old length, length) until the caller
        # fills them; never call a public method in between.
        needed = round_up(length + 1)
        if self._alloc < needed:
            logger.debug("growing buffer from %d to %d bytes", self._alloc, needed)
            self._buf.extend(bytes(needed - self._alloc))
            self._alloc = needed

        self._len = length
        self._buf[length] = 0

    def _copy(self, data: bytes) -> None:
        self._resize(len(data))
        self._buf[: len(data)] = data

    def _cat(self, data: bytes) -> None:
        old_len = self._len
        self._resize(old_len + len(data))
        self._buf[old_len : self._len] = data

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def release(self) -> None:
        """Free the buffer and leave the instance in the released state.

        A released instance has length and capacity 0 and rejects every
        further operation. Releasing twice is a no-op.
        """
        self._buf = None
        self._len = 0
        self._alloc = 0

    @property
    def released(self) -> bool:
        """True once release() has been called."""
        return self._buf is None

    def equals(self, other: DynamicString) -> bool:
        """Byte-for-byte equality with another DynamicString.

        Raises:
            ContractError: If other is not a DynamicString, or either
                operand is released
        """
        if not isinstance(other, DynamicString):
            raise ContractError(f"expected DynamicString, got {type(other).__name__}")
        self._check()
        other._check()
        return self._len == other._len and self._buf[: self._len] == other._buf[: other._len]

    def __enter__(self) -> Self:
        self._check()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    def assign(self, text: Text) -> Self:
        """Replace the content with a copy of text."""
        self._check()
        self._copy(natural_bytes(text))
        self._check()
        return self

    def assign_from(self, src: DynamicString) -> Self:
        """Replace the content with a copy of another DynamicString."""
        self._check()
        if not isinstance(src, DynamicString):
            raise ContractError(f"expected DynamicString, got {type(src).__name__}")
        src._check()
        self._copy(bytes(src._buf[: src._len]))
        self._check()
        return self

    def assign_bounded(self, text: Text, max_len: int) -> Self:
        """Replace the content with at most max_len bytes of text."""
        self._check()
        if max_len < 0:
            raise ContractError(f"bound must be non-negative, got {max_len}")
        self._copy(natural_bytes(text)[:max_len])
        self._check()
        return self

    # ------------------------------------------------------------------
    # Concatenation
    # ------------------------------------------------------------------

    def append(self, text: Text) -> Self:
        """Append the whole of text."""
        self._check()
        self._cat(natural_bytes(text))
        self._check()
        return self

    def append_bounded(self, text: Text, n: int) -> Self:
        """Append at most n bytes of text.

        Example:
            >>> DynamicString().append_bounded("hello", 3)
            DynamicString(b'hel')
        """
        self._check()
        if n < 0:
            raise ContractError(f"bound must be non-negative, got {n}")
        self._cat(natural_bytes(text)[:n])
        self._check()
        return self

    def append_all(self, *texts: Text | None) -> Self:
        """Append each text in order.

        ``None`` ends the operand list; operands after it are ignored.
        """
        self._check()
        for text in texts:
            if text is None:
                break
            self._cat(natural_bytes(text))
        self._check()
        return self

    def append_all_owned(self, *strings: DynamicString | None) -> Self:
        """Append the content of each DynamicString in order.

        ``None`` ends the operand list; operands after it are ignored. An
        instance may be appended to itself.
        """
        self._check()
        for s in strings:
            if s is None:
                break
            if not isinstance(s, DynamicString):
                raise ContractError(f"expected DynamicString, got {type(s).__name__}")
            s._check()
            self._cat(bytes(s._buf[: s._len]))
        self._check()
        return self

    def append_chars(self, *chars: Char) -> Self:
        """Append one byte per character operand.

        A zero character ends the list, so a zero byte can never be appended
        this way:

            >>> DynamicString().append_chars("a", "b", 0, "c")
            DynamicString(b'ab')
        """
        self._check()
        for char in chars:
            code = char_code(char)
            if not code:
                break
            self._resize(self._len + 1)
            self._buf[self._len - 1] = code
        self._check()
        return self

    def putc(self, char: Char) -> Self:
        """Append a single character (a zero character appends nothing)."""
        return self.append_chars(char)

    def append_formatted(self, template: Text, *args: object) -> Self:
        """Append template with its ``%`` verbs interpolated.

        See :func:`dynstr.format.append_formatted` for the verb set.
        """
        return _append_formatted(self, template, *args)

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def length(self) -> int:
        """Number of content bytes, terminator excluded."""
        return self._len

    @property
    def capacity(self) -> int:
        """Allocated size of the buffer, terminator included."""
        return self._alloc

    def to_cstring(self) -> bytes:
        """Return the content followed by its zero terminator."""
        self._check()
        return bytes(self._buf[: self._len + 1])

    def decode(self, encoding: str | None = None, errors: str | None = None) -> str:
        """Decode the content, defaulting to the configured codec."""
        self._check()
        config = get_buffer_config()
        return self._buf[: self._len].decode(encoding or config.encoding, errors or config.errors)

    def __bytes__(self) -> bytes:
        self._check()
        return bytes(self._buf[: self._len])

    def __len__(self) -> int:
        return self._len

    def __bool__(self) -> bool:
        return self._len > 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DynamicString):
            return self.equals(other)
        if isinstance(other, (bytes, bytearray)):
            return bytes(self) == other
        return NotImplemented

    def __str__(self) -> str:
        if self._buf is None:
            return ""
        return self.decode(errors="backslashreplace")

    def __repr__(self) -> str:
        if self._buf is None:
            return "DynamicString(<released>)"
        return f"DynamicString({bytes(self._buf[: self._len])!r})"


def create_empty() -> DynamicString:
    """Create an empty DynamicString."""
    return DynamicString()


def create_from(text: Text) -> DynamicString:
    """Create a DynamicString holding a copy of text."""
    return DynamicString.dup(text)


def release(s: DynamicString) -> None:
    """Release s; it must not be used again."""
    s.release()


def equals(a: DynamicString, b: DynamicString) -> bool:
    """Byte-for-byte equality of two DynamicStrings."""
    return a.equals(b)


__all__ = [
    "BASELINE_CAPACITY",
    "DynamicString",
    "create_empty",
    "create_from",
    "equals",
    "release",
]
