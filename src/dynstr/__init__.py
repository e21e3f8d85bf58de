"""
dynstr: growable, NUL-terminated byte strings for Python.

A DynamicString owns a byte buffer that always ends in a zero terminator and
never contains a zero byte, grows in power-of-two steps, and supports bounded
copies, variadic appends, a small ``%`` format language, a delimiter
tokenizer and a locked line reader.

Quick Start:
    >>> from dynstr import DynamicString, iter_tokens
    >>> s = DynamicString.dup("key")
    >>> s.append_formatted("=%i;", -42)
    DynamicString(b'key=-42;')
    >>> list(iter_tokens(s, "=;"))
    [b'key', b'-42']
    >>> s.release()

Lines from a stream:
    >>> import io
    >>> from dynstr import read_line
    >>> with DynamicString() as line:
    ...     read_line(line, io.BytesIO(b"first\\nsecond"))
    6
"""

from dynstr.buffer import DynamicString, create_empty, create_from, equals, release
from dynstr.config import (
    BufferConfig,
    buffer_config_context,
    get_buffer_config,
    reset_buffer_config,
    set_buffer_config,
)
from dynstr.errors import ContractError, DynstrError, FormatVerbError, InvariantError
from dynstr.format import append_formatted
from dynstr.growth import BASELINE_CAPACITY, round_up
from dynstr.reader import EOF, ByteSource, InputStream, as_stream, iter_lines, read_line
from dynstr.tokenizer import Cursor, iter_tokens, next_token

__version__ = "0.1.0"

__all__ = [
    "BASELINE_CAPACITY",
    "EOF",
    "BufferConfig",
    "ByteSource",
    "ContractError",
    "Cursor",
    "DynamicString",
    "DynstrError",
    "FormatVerbError",
    "InputStream",
    "InvariantError",
    "__version__",
    "append_formatted",
    "as_stream",
    "buffer_config_context",
    "create_empty",
    "create_from",
    "equals",
    "get_buffer_config",
    "iter_lines",
    "iter_tokens",
    "next_token",
    "read_line",
    "release",
    "reset_buffer_config",
    "round_up",
    "set_buffer_config",
]
