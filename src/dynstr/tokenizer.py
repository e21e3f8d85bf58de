"""Cursor-based delimiter tokenizer.

Splits text on any byte of a delimiter set. Runs of delimiters collapse, so
no empty tokens are ever produced. Each call resumes from a Cursor and
hands back the next one, or None once the text is exhausted.

Example:
    >>> token = DynamicString()
    >>> cursor = Cursor.start(b",,a,,b,,")
    >>> cursor = next_token(cursor, token, b",")
    >>> bytes(token)
    b'a'
    >>> list(iter_tokens("usr/local//bin", "/"))
    [b'usr', b'local', b'bin']

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from dynstr.buffer import DynamicString
from dynstr.errors import ContractError
from dynstr.text import Text, natural_bytes


@dataclass(frozen=True, slots=True)
class Cursor:
    """Resume position inside a text being tokenized.

    Attributes:
        text: Natural-length bytes of the whole text
        pos: Offset of the first byte not yet consumed

    """

    text: bytes
    pos: int = 0

    @classmethod
    def start(cls, text: Text | DynamicString) -> Cursor:
        """Create a cursor at the beginning of text.

        A DynamicString is snapshotted; later changes to it do not affect
        the cursor.
        """
        if isinstance(text, DynamicString):
            return cls(bytes(text))
        return cls(natural_bytes(text))

    @property
    def remaining(self) -> bytes:
        """Unconsumed tail of the text."""
        return self.text[self.pos :]


def next_token(cursor: Cursor | None, token: DynamicString, delimiters: Text) -> Cursor | None:
    """Extract the next token at cursor into token.

    Leading delimiters are skipped, then the maximal run of non-delimiter
    bytes is copied into token, replacing its previous content.

    Args:
        cursor: Position to resume from, or None when exhausted
        token: Receives the token (emptied when there is none)
        delimiters: Set of delimiter bytes; must be non-empty

    Returns:
        Cursor just past the token, or None if no token was found

    Raises:
        ContractError: If delimiters is empty
    """
    delims = natural_bytes(delimiters)
    if not delims:
        raise ContractError("delimiter set is empty")

    token.assign(b"")
    if cursor is None:
        return None

    text = cursor.text
    end = len(text)
    pos = cursor.pos

    while pos < end and text[pos] in delims:
        pos += 1

    start = pos
    while pos < end and text[pos] not in delims:
        pos += 1

    if pos == start:
        return None

    token.append(text[start:pos])
    return Cursor(text, pos)


def iter_tokens(text: Text | DynamicString, delimiters: Text) -> Iterator[bytes]:
    """Yield every token of text as bytes.

    Example:
        >>> list(iter_tokens(b" a  b ", b" "))
        [b'a', b'b']
    """
    with DynamicString() as token:
        cursor: Cursor | None = Cursor.start(text)
        while (cursor := next_token(cursor, token, delimiters)) is not None:
            yield bytes(token)


__all__ = ["Cursor", "iter_tokens", "next_token"]
