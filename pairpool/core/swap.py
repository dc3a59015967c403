"""
Constant-product swap engine.

This module prices one-directional swaps with deterministic rounding and
returns the post-swap state as new values; nothing is mutated.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per swap operation
- Invariant: (reserve_in + dx) * (reserve_out - dy) >= reserve_in * reserve_out,
  and k = reserve_x * reserve_y never decreases across a swap.

Fee order:
1. treasury fee (admin + connect) on the input, if the pool collects on the input side
2. pool fee (lp + incentive) stays in the reserve but is not priced
3. treasury fee on the output, if the pool collects on the output side
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Mapping, Tuple

from ..errors import (
    ComputationError,
    InvalidParameterError,
    PoolFrozenError,
    ReservesEmptyError,
    SlippageLimitError,
)
from ..fixed_point import add_u64, check_u64, mul_div, mul_u128, sub_u64
from ..state.balances import Amount, TokenId
from ..state.banks import BankState
from ..state.events import Event, Swap, SwapDirection
from ..state.pools import PoolState
from .fees import extract_fee, route_to_treasury
from .stats import record_trade


@dataclass(frozen=True)
class SwapQuote:
    """Full breakdown of one priced swap."""

    amount_in: Amount
    treasury_fee: Amount
    pool_fee: Amount
    dx: Amount
    dy: Amount
    amount_out: Amount
    new_reserve_in: Amount
    new_reserve_out: Amount


@dataclass(frozen=True)
class SwapResult:
    amount_out: Amount
    pool: PoolState
    banks: Dict[TokenId, BankState]
    events: Tuple[Event, ...]
    quote: SwapQuote


def compute_amount(dx: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
    """
    Constant-product output for a priced input ``dx``:

        dy = floor(reserve_out * dx / (reserve_in + dx))

    Pure: identical inputs always give identical outputs.

    Raises:
        OperationOverflowError: If reserve_in + dx does not fit in u64
    """
    denominator = add_u64(reserve_in, dx)
    return mul_div(reserve_out, dx, denominator)


def _validate_request(pool: PoolState, amount_in: Amount) -> None:
    if not isinstance(amount_in, int) or isinstance(amount_in, bool):
        raise TypeError("amount_in must be an int")
    if amount_in <= 0:
        raise InvalidParameterError(f"amount_in must be positive: {amount_in}")
    check_u64(amount_in, "amount_in")
    if pool.reserve_x == 0 or pool.reserve_y == 0:
        raise ReservesEmptyError(
            f"cannot swap against an empty reserve: ({pool.reserve_x}, {pool.reserve_y})"
        )


def _price(
    pool: PoolState,
    input_is_x: bool,
    amount_in: Amount,
    bank: BankState,
    now: int,
) -> Tuple[SwapQuote, BankState, Tuple[Event, ...]]:
    reserve_in, reserve_out = pool.reserves_for(input_is_x)
    treasury_bps = pool.fees.treasury_bps
    events: Tuple[Event, ...] = ()
    treasury_fee = 0

    net_in = amount_in
    if pool.treasury_on_input(input_is_x):
        route = route_to_treasury(amount_in, treasury_bps, bank, now)
        net_in, treasury_fee, bank = route.remaining, route.fee, route.bank
        events += route.events

    dx, pool_fee = extract_fee(net_in, pool.fees.pool_bps)

    dy = compute_amount(dx, reserve_in, reserve_out)
    if mul_u128(reserve_in + dx, reserve_out - dy) < mul_u128(reserve_in, reserve_out):
        raise ComputationError("priced trade decreases reserve_in * reserve_out")

    new_reserve_in = add_u64(reserve_in, add_u64(dx, pool_fee))
    new_reserve_out = sub_u64(reserve_out, dy)

    amount_out = dy
    if not pool.treasury_on_input(input_is_x):
        route = route_to_treasury(dy, treasury_bps, bank, now)
        amount_out, treasury_fee, bank = route.remaining, route.fee, route.bank
        events += route.events

    quote = SwapQuote(
        amount_in=amount_in,
        treasury_fee=treasury_fee,
        pool_fee=pool_fee,
        dx=dx,
        dy=dy,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
    )
    return quote, bank, events


def quote(pool: PoolState, input_is_x: bool, amount_in: Amount) -> SwapQuote:
    """
    Preview a swap without producing any state.

    Runs the same fee pipeline as ``swap``; frozen pools can still be quoted.
    """
    _validate_request(pool, amount_in)
    q, _, _ = _price(pool, input_is_x, amount_in, BankState(token=pool.treasury_token), 0)
    return q


def swap(
    pool: PoolState,
    banks: Mapping[TokenId, BankState],
    input_is_x: bool,
    amount_in: Amount,
    min_amount_out: Amount,
    now: int,
) -> SwapResult:
    """
    Execute an exact-in swap against ``pool``.

    Args:
        pool: Current pool state
        banks: Current treasury banks keyed by token (missing banks start empty)
        input_is_x: True for X -> Y, False for Y -> X
        amount_in: Gross input amount paid by the caller
        min_amount_out: Minimum amount the caller must receive after all fees
        now: Timestamp in seconds, or 0 to suppress time-driven effects

    Returns:
        SwapResult carrying the caller's output, the next pool state, the
        touched bank(s) and the events in emission order

    Raises:
        InvalidParameterError: If amount_in is zero or min_amount_out is negative
        PoolFrozenError: If the pool is frozen
        ReservesEmptyError: If either reserve is zero
        OperationOverflowError: If a reserve would leave the u64 range
        SlippageLimitError: If the caller would receive less than min_amount_out
        ComputationError: If an invariant check fails
    """
    if pool.frozen:
        raise PoolFrozenError(f"pool ({pool.token_x}, {pool.token_y}) is frozen")
    _validate_request(pool, amount_in)
    if not isinstance(min_amount_out, int) or isinstance(min_amount_out, bool):
        raise TypeError("min_amount_out must be an int")
    if min_amount_out < 0:
        raise InvalidParameterError(f"min_amount_out must be non-negative: {min_amount_out}")
    check_u64(min_amount_out, "min_amount_out")

    k_before = pool.get_constant_product()
    treasury_token = pool.treasury_token
    bank = banks.get(treasury_token) or BankState(token=treasury_token)

    q, bank, events = _price(pool, input_is_x, amount_in, bank, now)

    if input_is_x:
        next_pool = replace(pool, reserve_x=q.new_reserve_in, reserve_y=q.new_reserve_out)
    else:
        next_pool = replace(pool, reserve_x=q.new_reserve_out, reserve_y=q.new_reserve_in)

    k_after = next_pool.get_constant_product()
    if k_after < k_before:
        raise ComputationError(f"k decreased: {k_after} < {k_before}")

    if q.amount_out < min_amount_out:
        raise SlippageLimitError(q.amount_out, min_amount_out)

    next_pool, snapshots = record_trade(next_pool, input_is_x, amount_in, q.amount_out, now)
    events += (Swap(
        direction=SwapDirection.from_input(input_is_x),
        in_amount=amount_in,
        out_amount=q.amount_out,
    ),)
    events += snapshots

    return SwapResult(
        amount_out=q.amount_out,
        pool=next_pool,
        banks={treasury_token: bank},
        events=events,
        quote=q,
    )
