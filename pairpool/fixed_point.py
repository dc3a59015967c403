"""
Checked fixed-width integer helpers.

Python integers never wrap, so the 64/128-bit widths of the pool's storage
fields are enforced explicitly here:
- products of two u64 values are formed as u128 intermediates,
- every value written back into a u64 field is range-checked,
- all division is floor division of non-negative integers.

Rounding is therefore always toward zero, which is the pool-favouring
direction for both amounts leaving the pool and amounts paid to a caller.
"""

from __future__ import annotations

from .errors import ComputationError, OperationOverflowError


U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def check_u64(value: int, what: str = "value") -> int:
    """Return ``value`` unchanged if it fits in an unsigned 64-bit field."""
    _require_int(what, value)
    if value < 0:
        raise ComputationError(f"{what} is negative: {value}")
    if value > U64_MAX:
        raise OperationOverflowError(f"{what} exceeds u64: {value}")
    return value


def check_u128(value: int, what: str = "value") -> int:
    """Return ``value`` unchanged if it fits in an unsigned 128-bit field."""
    _require_int(what, value)
    if value < 0:
        raise ComputationError(f"{what} is negative: {value}")
    if value > U128_MAX:
        raise OperationOverflowError(f"{what} exceeds u128: {value}")
    return value


def mul_u128(a: int, b: int) -> int:
    """Double-width product of two u64 values."""
    check_u64(a, "lhs")
    check_u64(b, "rhs")
    return check_u128(a * b, "product")


def mul_div(a: int, b: int, c: int) -> int:
    """
    Compute ``floor(a * b / c)`` through a u128 intermediate.

    The quotient is narrowed back to u64 with an explicit check; it never
    truncates silently.
    """
    check_u64(c, "divisor")
    if c == 0:
        raise ComputationError("division by zero")
    return check_u64(mul_u128(a, b) // c, "quotient")


def add_u64(a: int, b: int) -> int:
    """Checked u64 addition."""
    check_u64(a, "lhs")
    check_u64(b, "rhs")
    return check_u64(a + b, "sum")


def sub_u64(a: int, b: int) -> int:
    """Checked u64 subtraction; going below zero is a logic error."""
    check_u64(a, "lhs")
    check_u64(b, "rhs")
    if b > a:
        raise ComputationError(f"u64 underflow: {a} - {b}")
    return a - b
