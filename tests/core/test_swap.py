# [TESTER] v1

from __future__ import annotations

import pytest

from pairpool.core.swap import compute_amount, quote, swap
from pairpool.errors import (
    InvalidParameterError,
    OperationOverflowError,
    PoolFrozenError,
    ReservesEmptyError,
    SlippageLimitError,
)
from pairpool.fixed_point import U64_MAX
from pairpool.state.banks import BankState
from pairpool.state.events import BankSnapshot, ReserveSnapshot, Swap, SwapDirection
from pairpool.state.pools import FeeDirection, FeeRates, PoolState


def _pool(
    rx: int,
    ry: int,
    fees: FeeRates = FeeRates(),
    direction: FeeDirection = FeeDirection.COLLECT_ON_X,
    **kw,
) -> PoolState:
    return PoolState(
        token_x="X",
        token_y="Y",
        reserve_x=rx,
        reserve_y=ry,
        lp_supply=1000,
        fees=fees,
        fee_direction=direction,
        **kw,
    )


TREASURY_100 = FeeRates(admin_fee=50, connect_fee=50)


def test_compute_amount_matches_constant_product_floor() -> None:
    assert compute_amount(100, 1000, 1000) == 90
    assert compute_amount(99, 1000, 1000) == 90
    assert compute_amount(0, 1000, 1000) == 0
    # Pure: no hidden state between calls.
    assert compute_amount(100, 1000, 1000) == compute_amount(100, 1000, 1000)


def test_compute_amount_overflow_on_reserve_plus_input() -> None:
    with pytest.raises(OperationOverflowError):
        compute_amount(100, U64_MAX - 10, 1000)


def test_zero_fee_swap_x_to_y() -> None:
    pool = _pool(1000, 1000)
    res = swap(pool, {}, True, 100, 0, 0)
    assert res.amount_out == 90
    assert (res.pool.reserve_x, res.pool.reserve_y) == (1100, 910)
    assert res.pool.get_constant_product() >= pool.get_constant_product()
    assert res.events == (Swap(direction=SwapDirection.X_TO_Y, in_amount=100, out_amount=90),)


def test_lp_fee_on_small_input_rounds_to_zero() -> None:
    pool = _pool(1000, 1000, FeeRates(lp_fee=30))
    res = swap(pool, {}, True, 100, 0, 0)
    assert res.amount_out == 90
    assert res.quote.pool_fee == 0


def test_lp_fee_stays_in_reserve_but_is_not_priced() -> None:
    pool = _pool(1_000_000, 1_000_000, FeeRates(lp_fee=30))
    res = swap(pool, {}, True, 10_000, 0, 0)
    assert res.quote.pool_fee == 30
    assert res.quote.dx == 9_970
    assert res.amount_out == 9_871
    assert (res.pool.reserve_x, res.pool.reserve_y) == (1_010_000, 990_129)
    assert res.banks["X"].balance == 0


def test_treasury_fee_on_input_side() -> None:
    pool = _pool(1_000_000, 1_000_000, TREASURY_100)
    res = swap(pool, {}, True, 10_000, 0, 0)
    assert res.quote.treasury_fee == 100
    assert res.quote.dx == 9_900
    assert res.amount_out == 9_802
    # The treasury fee leaves the pool; only dx is added to the reserve.
    assert (res.pool.reserve_x, res.pool.reserve_y) == (1_009_900, 990_198)
    assert res.banks == {"X": BankState(token="X", balance=100)}


def test_treasury_fee_on_output_side_reduces_what_the_caller_gets() -> None:
    pool = _pool(1_000_000, 1_000_000, TREASURY_100)
    res = swap(pool, {}, False, 10_000, 0, 0)
    assert res.quote.dy == 9_900
    assert res.quote.treasury_fee == 99
    assert res.amount_out == 9_801
    assert (res.pool.reserve_x, res.pool.reserve_y) == (990_100, 1_010_000)
    assert res.banks["X"].balance == 99
    assert res.events == (Swap(direction=SwapDirection.Y_TO_X, in_amount=10_000, out_amount=9_801),)


def test_collect_on_y_routes_to_y_bank() -> None:
    pool = _pool(1_000_000, 1_000_000, TREASURY_100, FeeDirection.COLLECT_ON_Y)
    res = swap(pool, {"Y": BankState(token="Y", balance=7)}, False, 10_000, 0, 0)
    assert res.amount_out == 9_802
    assert res.banks == {"Y": BankState(token="Y", balance=107)}


def test_slippage_checked_after_output_fee() -> None:
    pool = _pool(1_000_000, 1_000_000, TREASURY_100)
    # 9_802 <= raw dy (9_900) but above what the caller receives (9_801).
    with pytest.raises(SlippageLimitError) as exc_info:
        swap(pool, {}, False, 10_000, 9_802, 0)
    assert exc_info.value.amount_out == 9_801
    assert swap(pool, {}, False, 10_000, 9_801, 0).amount_out == 9_801


def test_slippage_limit_exact_boundary() -> None:
    pool = _pool(1000, 1000)
    assert swap(pool, {}, True, 100, 90, 0).amount_out == 90
    with pytest.raises(SlippageLimitError):
        swap(pool, {}, True, 100, 91, 0)


def test_negative_min_amount_out_is_a_parameter_error() -> None:
    pool = _pool(1000, 1000)
    with pytest.raises(InvalidParameterError):
        swap(pool, {}, True, 100, -1, 0)
    with pytest.raises(TypeError):
        swap(pool, {}, True, 100, 1.5, 0)


def test_rejections() -> None:
    with pytest.raises(InvalidParameterError):
        swap(_pool(1000, 1000), {}, True, 0, 0, 0)
    with pytest.raises(PoolFrozenError):
        swap(_pool(1000, 1000, frozen=True), {}, True, 10, 0, 0)
    with pytest.raises(ReservesEmptyError):
        swap(_pool(0, 1000), {}, True, 10, 0, 0)
    with pytest.raises(ReservesEmptyError):
        swap(_pool(1000, 0), {}, False, 10, 0, 0)


def test_reserve_overflow_fails_instead_of_wrapping() -> None:
    pool = _pool(U64_MAX - 10, 1000)
    with pytest.raises(OperationOverflowError):
        swap(pool, {}, True, 100, 0, 0)


def test_swap_does_not_mutate_inputs() -> None:
    pool = _pool(1_000_000, 1_000_000, TREASURY_100)
    banks = {"X": BankState(token="X", balance=1)}
    swap(pool, banks, True, 10_000, 0, 50_000)
    assert (pool.reserve_x, pool.reserve_y, pool.total_trade_x) == (1_000_000, 1_000_000, 0)
    assert banks == {"X": BankState(token="X", balance=1)}


def test_trade_totals_follow_direction() -> None:
    pool = _pool(1000, 1000)
    first = swap(pool, {}, True, 100, 0, 0).pool
    second = swap(first, {}, False, 50, 0, 0)
    assert first.total_trade_x == 100
    assert first.total_trade_y == 90
    assert second.pool.total_trade_y == 90 + 50
    assert second.pool.total_trade_x == 100 + second.amount_out
    assert second.pool.trade_x_24h == second.pool.total_trade_x
    assert second.pool.last_trade_time == 0


def test_timed_swap_emits_snapshots_in_order() -> None:
    pool = _pool(1_000_000, 1_000_000, TREASURY_100)
    now = 100_000
    res = swap(pool, {}, True, 10_000, 0, now)
    assert res.events == (
        BankSnapshot(token="X", amount=100),
        Swap(direction=SwapDirection.X_TO_Y, in_amount=10_000, out_amount=9_802),
        ReserveSnapshot(x=1_009_900, y=990_198),
    )
    assert res.pool.snapshot_last_time == now
    assert res.pool.last_trade_time == now
    assert res.pool.window_start_time == now
    assert res.banks["X"].last_snapshot_time == now


def test_quote_matches_swap_and_ignores_freeze() -> None:
    pool = _pool(1_000_000, 1_000_000, TREASURY_100)
    q = quote(pool, False, 10_000)
    assert q == swap(pool, {}, False, 10_000, 0, 0).quote
    frozen = _pool(1_000_000, 1_000_000, TREASURY_100, frozen=True)
    assert quote(frozen, False, 10_000).amount_out == 9_801
