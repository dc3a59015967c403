# [TESTER] v1

from __future__ import annotations

import pytest

from pairpool.errors import ComputationError, OperationOverflowError
from pairpool.fixed_point import U64_MAX, U128_MAX, add_u64, check_u64, check_u128, mul_div, mul_u128, sub_u64


def test_mul_div_floors() -> None:
    assert mul_div(10, 3, 4) == 7
    assert mul_div(1000, 100, 1100) == 90
    assert mul_div(0, 5, 3) == 0


def test_mul_div_uses_wide_intermediate() -> None:
    # The product overflows u64 but the quotient fits.
    assert mul_div(U64_MAX, U64_MAX, U64_MAX) == U64_MAX
    assert mul_div(1 << 40, 1 << 40, 1 << 30) == 1 << 50


def test_mul_div_rejects_narrowing_overflow() -> None:
    with pytest.raises(OperationOverflowError):
        mul_div(U64_MAX, 2, 1)


def test_mul_div_by_zero_is_a_logic_error() -> None:
    with pytest.raises(ComputationError):
        mul_div(1, 1, 0)


def test_mul_u128_bounds() -> None:
    assert mul_u128(U64_MAX, U64_MAX) == U64_MAX * U64_MAX
    assert U64_MAX * U64_MAX <= U128_MAX
    with pytest.raises(OperationOverflowError):
        mul_u128(U64_MAX + 1, 1)


def test_add_and_sub_are_checked() -> None:
    assert add_u64(U64_MAX - 1, 1) == U64_MAX
    with pytest.raises(OperationOverflowError):
        add_u64(U64_MAX, 1)
    assert sub_u64(5, 5) == 0
    with pytest.raises(ComputationError):
        sub_u64(1, 2)


def test_range_checks() -> None:
    assert check_u64(0) == 0
    assert check_u128(U128_MAX) == U128_MAX
    with pytest.raises(ComputationError):
        check_u64(-1)
    with pytest.raises(OperationOverflowError):
        check_u128(U128_MAX + 1)
    with pytest.raises(TypeError):
        check_u64(True)
