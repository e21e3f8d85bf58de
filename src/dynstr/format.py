"""Template interpolation into a DynamicString.

A deliberately small verb set, nothing like printf: no width, precision,
flags or ``%%`` escape.

Supported verbs:
    %s  external text (bytes, bytearray, memoryview or str)
    %S  DynamicString
    %i  signed C ``int``
    %I  signed ``intmax_t``
    %u  unsigned C ``unsigned``
    %U  unsigned ``uintmax_t``

Integer operands are range checked against the width of their C type, so a
template written for the C calling convention behaves the same here.

Example:
    >>> s = DynamicString()
    >>> append_formatted(s, "%s=%i (%U)", "x", -5, 2**64 - 1)
    DynamicString(b'x=-5 (18446744073709551615)')

"""

from __future__ import annotations

import operator
import struct
from collections.abc import Callable
from typing import TYPE_CHECKING

from dynstr.errors import ContractError, FormatVerbError
from dynstr.text import Text, natural_bytes

if TYPE_CHECKING:
    from dynstr.buffer import DynamicString

_INT_BITS = struct.calcsize("i") * 8
_INTMAX_BITS = struct.calcsize("q") * 8
_UINTMAX_MASK = (1 << _INTMAX_BITS) - 1

# Fits an intmax_t magnitude with its sign
_SCRATCH_SIZE = 24

_ZERO = ord("0")
_PERCENT = ord("%")

# verb -> (min, max) accepted operand value
INT_RANGES: dict[str, tuple[int, int]] = {
    "i": (-(1 << (_INT_BITS - 1)), (1 << (_INT_BITS - 1)) - 1),
    "I": (-(1 << (_INTMAX_BITS - 1)), (1 << (_INTMAX_BITS - 1)) - 1),
    "u": (0, (1 << _INT_BITS) - 1),
    "U": (0, (1 << _INTMAX_BITS) - 1),
}


def format_unsigned(n: int) -> bytes:
    """Render a non-negative integer as decimal digits.

    Digits are produced least significant first into the tail of a fixed
    scratch buffer, then read back in order.

    Args:
        n: Value in the ``uintmax_t`` range

    Returns:
        ASCII decimal digits
    """
    scratch = bytearray(_SCRATCH_SIZE)
    pos = _SCRATCH_SIZE

    while True:
        pos -= 1
        scratch[pos] = _ZERO + n % 10
        n //= 10
        if not n:
            break

    return bytes(scratch[pos:])


def format_signed(n: int) -> bytes:
    """Render a signed integer as decimal, with a leading ``-`` if negative.

    The magnitude is computed in the unsigned domain, so the most negative
    ``intmax_t`` converts exactly. n must lie in the ``intmax_t`` range.
    """
    if n < 0:
        return b"-" + format_unsigned(-n & _UINTMAX_MASK)
    return format_unsigned(n)


def _integer_operand(verb: str, value: object) -> int:
    try:
        n = operator.index(value)
    except TypeError as e:
        msg = f"'%{verb}' expects an integer, got {type(value).__name__}"
        raise ContractError(msg) from e

    low, high = INT_RANGES[verb]
    if not low <= n <= high:
        raise ContractError(f"'%{verb}' operand {n} is outside [{low}, {high}]")
    return n


def _emit_text(dest: DynamicString, verb: str, value: object) -> None:
    dest.append(value)


def _emit_string(dest: DynamicString, verb: str, value: object) -> None:
    # None would act as the append_all_owned list sentinel and append nothing
    if value is None:
        raise ContractError("'%S' operand is None")
    dest.append_all_owned(value)


def _emit_signed(dest: DynamicString, verb: str, value: object) -> None:
    dest.append(format_signed(_integer_operand(verb, value)))


def _emit_unsigned(dest: DynamicString, verb: str, value: object) -> None:
    dest.append(format_unsigned(_integer_operand(verb, value)))


_VERBS: dict[str, Callable[[DynamicString, str, object], None]] = {
    "s": _emit_text,
    "S": _emit_string,
    "i": _emit_signed,
    "I": _emit_signed,
    "u": _emit_unsigned,
    "U": _emit_unsigned,
}


def append_formatted(dest: DynamicString, template: Text, *args: object) -> DynamicString:
    """Append template to dest, replacing each ``%`` verb with its operand.

    Literal spans between verbs are appended verbatim. Operands are consumed
    left to right, one per verb.

    Args:
        dest: String to append to
        template: Format template
        *args: One operand per verb

    Returns:
        dest, for chaining

    Raises:
        FormatVerbError: On an unsupported verb, ``%%`` or a trailing ``%``
        ContractError: On a missing, surplus or mistyped operand

    Note:
        Output produced before an error is detected stays in dest.
    """
    dest._check()
    fmt = natural_bytes(template)
    end = len(fmt)
    pos = 0
    operand = 0

    while pos < end:
        pct = fmt.find(_PERCENT, pos)
        if pct < 0:
            dest.append(fmt[pos:])
            break

        if pct > pos:
            dest.append(fmt[pos:pct])

        verb = chr(fmt[pct + 1]) if pct + 1 < end else ""
        emit = _VERBS.get(verb)
        if emit is None:
            raise FormatVerbError(verb, pct)

        if operand >= len(args):
            raise ContractError(f"missing operand for '%{verb}' at offset {pct}")

        emit(dest, verb, args[operand])
        operand += 1
        pos = pct + 2

    if operand < len(args):
        raise ContractError(f"{len(args) - operand} operand(s) left over after template")

    return dest


__all__ = ["INT_RANGES", "append_formatted", "format_signed", "format_unsigned"]
