"""Exception classes for dynstr.

Every error raised by the package is a contract violation: the caller broke a
precondition, or an instance was observed in a state it can never legally be
in. None of them are recoverable at the point of detection.
"""

from __future__ import annotations


class DynstrError(Exception):
    """Base exception for all dynstr errors."""

    pass


class ContractError(DynstrError):
    """A caller-side precondition was violated.

    Raised for null text operands, released instances, empty delimiter sets,
    out-of-range character codes and mismatched format operands.
    """

    pass


class InvariantError(ContractError):
    """A DynamicString was observed in a violating state.

    Raised by the internal invariant check. Seeing this means a bug in
    dynstr itself or direct tampering with private attributes.
    """

    def __init__(self, message: str, length: int | None = None, capacity: int | None = None) -> None:
        """Initialize invariant error with the offending sizes.

        Args:
            message: Which invariant failed
            length: Length of the instance when the check ran
            capacity: Capacity of the instance when the check ran
        """
        self.length = length
        self.capacity = capacity

        detail = ""
        if length is not None and capacity is not None:
            detail = f" (length={length}, capacity={capacity})"

        super().__init__(f"{message}{detail}")


class FormatVerbError(ContractError):
    """Unsupported or missing verb in a format template.

    The verb set is fixed (``s S i I u U``); anything else after ``%``,
    including a second ``%`` or the end of the template, lands here.
    """

    def __init__(self, verb: str, offset: int) -> None:
        """Initialize format verb error.

        Args:
            verb: The character following ``%`` ("" when the template ended)
            offset: Offset of the ``%`` in the template (0-indexed)
        """
        self.verb = verb
        self.offset = offset

        shown = f"'%{verb}'" if verb else "trailing '%'"
        super().__init__(f"unsupported format verb {shown} at offset {offset}")
