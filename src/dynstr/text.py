"""Coercion of external operands into raw bytes.

External text is anything the caller hands in that is not a DynamicString:
``bytes``, ``bytearray``, ``memoryview`` or ``str``. A ``str`` is encoded with
the configured codec. Its natural length stops at the first zero byte, the
same as a NUL-terminated C string, which is what keeps zero bytes out of
every DynamicString.

Example:
    >>> natural_bytes(b"abc\\x00def")
    b'abc'
    >>> char_code("A")
    65
"""

from __future__ import annotations

from typing import TypeAlias

from dynstr.config import get_buffer_config
from dynstr.errors import ContractError

Text: TypeAlias = bytes | bytearray | memoryview | str

# Character operands: a byte value or a one-byte text
Char: TypeAlias = int | bytes | str


def natural_bytes(text: Text) -> bytes:
    """Return the bytes of text up to (not including) its first zero byte.

    Args:
        text: External text operand

    Returns:
        The natural-length content of text

    Raises:
        ContractError: If text is None or not a supported text type
    """
    if text is None:
        raise ContractError("text operand is None")

    if isinstance(text, str):
        config = get_buffer_config()
        data = text.encode(config.encoding, config.errors)
    elif isinstance(text, (bytes, bytearray, memoryview)):
        data = bytes(text)
    else:
        raise ContractError(f"expected bytes-like or str text, got {type(text).__name__}")

    end = data.find(0)
    return data if end < 0 else data[:end]


def char_code(char: Char) -> int:
    """Convert a character operand to its byte value.

    Args:
        char: An int in range(256), or a ``bytes``/``str`` holding exactly one
            byte once encoded

    Returns:
        Byte value (0 is returned as-is; callers treat it as a list sentinel)

    Raises:
        ContractError: If the operand does not denote exactly one byte
    """
    if isinstance(char, int):
        if not 0 <= char <= 0xFF:
            raise ContractError(f"character code {char} is outside 0..255")
        return char

    if isinstance(char, str):
        config = get_buffer_config()
        data = char.encode(config.encoding, config.errors)
    elif isinstance(char, (bytes, bytearray)):
        data = bytes(char)
    else:
        raise ContractError(f"expected int, bytes or str character, got {type(char).__name__}")

    if len(data) != 1:
        raise ContractError(f"character operand {char!r} is not exactly one byte")
    return data[0]


__all__ = ["Char", "Text", "char_code", "natural_bytes"]
