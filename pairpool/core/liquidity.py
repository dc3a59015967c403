"""
Liquidity management operations: add/remove liquidity.

Share math (all floor-rounded, in the pool's favour):

    bootstrap (lp_supply == 0):  shares = BOOTSTRAP_SHARES
    deposit:                     shares = min(floor(x * lp_supply / reserve_x),
                                              floor(y * lp_supply / reserve_y))
    redemption:                  x_out  = floor(reserve_x * shares / lp_supply)
                                 y_out  = floor(reserve_y * shares / lp_supply)

After every operation the per-share backing of each reserve must not
decrease: reserve_before * lp_after <= reserve_after * lp_before.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Mapping, Tuple

from ..errors import (
    ComputationError,
    InvalidParameterError,
    NotEnoughBalanceError,
    PoolFrozenError,
    ReservesEmptyError,
)
from ..fixed_point import add_u64, check_u64, mul_div, mul_u128, sub_u64
from ..state.balances import Amount, TokenId
from ..state.banks import BankState
from ..state.events import Event, Liquidity
from ..state.pools import PoolState
from .fees import route_to_treasury


# First deposit into an empty pool mints this fixed amount, independent of the
# deposited amounts (not their geometric mean).
BOOTSTRAP_SHARES = 1000


@dataclass(frozen=True)
class LiquidityResult:
    """
    Outcome of one liquidity operation.

    ``x_amount``/``y_amount`` are what the caller paid in (add) or receives
    after the withdraw fee (remove); ``x_fee``/``y_fee`` went to the banks.
    """

    lp_amount: Amount
    x_amount: Amount
    y_amount: Amount
    pool: PoolState
    banks: Dict[TokenId, BankState]
    events: Tuple[Event, ...]
    x_fee: Amount = 0
    y_fee: Amount = 0


def _require_positive(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value <= 0:
        raise InvalidParameterError(f"{name} must be positive: {value}")
    check_u64(value, name)


def check_backing_ratio(before: PoolState, after: PoolState) -> None:
    """
    Verify that neither reserve's backing per LP share decreased.

    Raises:
        ComputationError: On violation
    """
    for name, r_before, r_after in (
        ("x", before.reserve_x, after.reserve_x),
        ("y", before.reserve_y, after.reserve_y),
    ):
        if mul_u128(r_before, after.lp_supply) > mul_u128(r_after, before.lp_supply):
            raise ComputationError(f"reserve_{name} backing per share decreased")


def compute_shares(pool: PoolState, x_added: Amount, y_added: Amount) -> Amount:
    """
    Compute LP shares to mint for a deposit.

    The smaller of the two ratios is used, so an unbalanced deposit never
    dilutes existing holders; the excess of the larger side stays in the pool.
    """
    if pool.lp_supply == 0:
        return BOOTSTRAP_SHARES
    if pool.reserve_x == 0 or pool.reserve_y == 0:
        raise ReservesEmptyError("cannot price a deposit against an empty reserve")

    shares_x = mul_div(x_added, pool.lp_supply, pool.reserve_x)
    shares_y = mul_div(y_added, pool.lp_supply, pool.reserve_y)
    return min(shares_x, shares_y)


def compute_redemption(pool: PoolState, shares: Amount) -> Tuple[Amount, Amount]:
    """
    Compute gross token amounts for burning ``shares`` (before withdraw fees).
    """
    if shares > pool.lp_supply:
        raise NotEnoughBalanceError(f"cannot burn more LP than supply: {shares} > {pool.lp_supply}")
    x_out = mul_div(pool.reserve_x, shares, pool.lp_supply)
    y_out = mul_div(pool.reserve_y, shares, pool.lp_supply)
    return x_out, y_out


def add_liquidity(pool: PoolState, x_added: Amount, y_added: Amount) -> LiquidityResult:
    """
    Deposit both tokens in full and mint LP shares.

    Args:
        pool: Current pool state
        x_added: Amount of token_x deposited
        y_added: Amount of token_y deposited

    Returns:
        LiquidityResult with the minted shares and the next pool state

    Raises:
        InvalidParameterError: If an amount is zero or no share would be minted
        PoolFrozenError: If the pool is frozen
        OperationOverflowError: If a reserve or the supply leaves the u64 range
        ComputationError: If the backing ratio would decrease
    """
    _require_positive("x_added", x_added)
    _require_positive("y_added", y_added)
    if pool.frozen:
        raise PoolFrozenError(f"pool ({pool.token_x}, {pool.token_y}) is frozen")

    shares = compute_shares(pool, x_added, y_added)
    if shares == 0:
        raise InvalidParameterError(f"deposit ({x_added}, {y_added}) is too small to mint a share")

    next_pool = replace(
        pool,
        reserve_x=add_u64(pool.reserve_x, x_added),
        reserve_y=add_u64(pool.reserve_y, y_added),
        lp_supply=add_u64(pool.lp_supply, shares),
    )
    check_backing_ratio(pool, next_pool)

    return LiquidityResult(
        lp_amount=shares,
        x_amount=x_added,
        y_amount=y_added,
        pool=next_pool,
        banks={},
        events=(Liquidity(added=True, x_amount=x_added, y_amount=y_added, lp_amount=shares),),
    )


def remove_liquidity(
    pool: PoolState,
    banks: Mapping[TokenId, BankState],
    shares_burned: Amount,
    now: int,
) -> LiquidityResult:
    """
    Burn LP shares for a pro-rata share of both reserves.

    The withdraw fee is taken from each side and merged into that token's
    bank. Withdrawals stay open while the pool is frozen.

    Raises:
        InvalidParameterError: If shares_burned is zero
        NotEnoughBalanceError: If shares_burned exceeds the LP supply
        ComputationError: If the backing ratio would decrease
    """
    _require_positive("shares_burned", shares_burned)
    x_out, y_out = compute_redemption(pool, shares_burned)

    withdraw_fee = pool.fees.withdraw_fee
    bank_x = banks.get(pool.token_x) or BankState(token=pool.token_x)
    bank_y = banks.get(pool.token_y) or BankState(token=pool.token_y)
    route_x = route_to_treasury(x_out, withdraw_fee, bank_x, now)
    route_y = route_to_treasury(y_out, withdraw_fee, bank_y, now)

    next_pool = replace(
        pool,
        reserve_x=sub_u64(pool.reserve_x, x_out),
        reserve_y=sub_u64(pool.reserve_y, y_out),
        lp_supply=sub_u64(pool.lp_supply, shares_burned),
    )
    check_backing_ratio(pool, next_pool)

    events: Tuple[Event, ...] = route_x.events + route_y.events
    events += (Liquidity(
        added=False,
        x_amount=route_x.remaining,
        y_amount=route_y.remaining,
        lp_amount=shares_burned,
    ),)

    return LiquidityResult(
        lp_amount=shares_burned,
        x_amount=route_x.remaining,
        y_amount=route_y.remaining,
        pool=next_pool,
        banks={pool.token_x: route_x.bank, pool.token_y: route_y.bank},
        events=events,
        x_fee=route_x.fee,
        y_fee=route_y.fee,
    )
