"""
Pool state for constant-product pools.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import NamedTuple, Tuple

import hashlib

from ..errors import ComputationError, InvalidParameterError, WrongFeeError
from ..fixed_point import check_u64, check_u128, mul_u128
from .balances import Amount, TokenId


BPS_DENOM = 10_000


@unique
class PoolType(Enum):
    """Pricing family. Stable-swap pools currently price as STANDARD."""
    STANDARD = 0
    STABLE_SWAP = 1


@unique
class FeeDirection(Enum):
    """Which token side always carries the treasury/connect fee."""
    COLLECT_ON_X = 0
    COLLECT_ON_Y = 1


@dataclass(frozen=True)
class FeeRates:
    """Fee schedule in basis points (1/10_000)."""

    admin_fee: int = 0
    lp_fee: int = 0
    incentive_fee: int = 0
    connect_fee: int = 0
    withdraw_fee: int = 0

    def __post_init__(self) -> None:
        for name, v in (
            ("admin_fee", self.admin_fee),
            ("lp_fee", self.lp_fee),
            ("incentive_fee", self.incentive_fee),
            ("connect_fee", self.connect_fee),
            ("withdraw_fee", self.withdraw_fee),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if not (0 <= v < BPS_DENOM):
                raise WrongFeeError(f"{name} must be in [0, {BPS_DENOM}): {v}")
        total = self.lp_fee + self.admin_fee + self.incentive_fee + self.connect_fee
        if total >= BPS_DENOM:
            raise WrongFeeError(f"trading fees must sum below {BPS_DENOM} bps, got {total}")

    @property
    def treasury_bps(self) -> int:
        """Portion routed out of the pool to the treasury bank."""
        return self.admin_fee + self.connect_fee

    @property
    def pool_bps(self) -> int:
        """Portion that stays in the pool, outside the priced input."""
        return self.lp_fee + self.incentive_fee


class PairKey(NamedTuple):
    """Ordered token pair identifying one pool."""

    token_x: TokenId
    token_y: TokenId

    def reversed(self) -> "PairKey":
        return PairKey(self.token_y, self.token_x)


def compute_pool_id(token_x: TokenId, token_y: TokenId) -> str:
    """Deterministically compute a pool_id for an ordered token pair."""
    if token_x == token_y:
        raise InvalidParameterError(f"pool tokens must differ: {token_x}")
    pool_id_data = (
        b"pairpool/pool"
        + len(token_x).to_bytes(4, "big")
        + token_x.encode("utf-8")
        + token_y.encode("utf-8")
    )
    return "0x" + hashlib.sha256(pool_id_data).hexdigest()


@dataclass(frozen=True)
class PoolState:
    """
    State of one liquidity pool.

    Attributes:
        token_x: First token of the ordered pair
        token_y: Second token of the ordered pair
        reserve_x: Live balance of token_x held by the pool (u64)
        reserve_y: Live balance of token_y held by the pool (u64)
        lp_supply: Total outstanding LP shares (u64)
        fees: Fee schedule in bps
        fee_direction: Token side carrying the treasury/connect fee
        pool_type: Pricing family (immutable)
        amp: Stable-swap amplification coefficient (0 for standard pools)
        scale_x: Decimal-alignment multiplier for token_x (0 for standard pools)
        scale_y: Decimal-alignment multiplier for token_y (0 for standard pools)
        frozen: Blocks swaps and deposits; withdrawals stay open
        index: Creation sequence number within the store
        last_trade_time: Timestamp of the last timed trade
        window_start_time: Start of the rolling 24h window
        trade_x_24h / trade_y_24h: Volume in the current 24h window (u128)
        total_trade_x / total_trade_y: Lifetime volume (u128)
        snapshot_last_time: Last reserve snapshot timestamp
    """
    token_x: TokenId
    token_y: TokenId
    reserve_x: Amount = 0
    reserve_y: Amount = 0
    lp_supply: Amount = 0
    fees: FeeRates = field(default_factory=FeeRates)
    fee_direction: FeeDirection = FeeDirection.COLLECT_ON_X
    pool_type: PoolType = PoolType.STANDARD
    amp: int = 0
    scale_x: int = 0
    scale_y: int = 0
    frozen: bool = False
    index: int = 0
    last_trade_time: int = 0
    window_start_time: int = 0
    trade_x_24h: int = 0
    trade_y_24h: int = 0
    total_trade_x: int = 0
    total_trade_y: int = 0
    snapshot_last_time: int = 0

    def __post_init__(self):
        """Validate pool state invariants."""
        if self.token_x == self.token_y:
            raise InvalidParameterError(f"pool tokens must differ: {self.token_x}")
        if not isinstance(self.pool_type, PoolType):
            raise InvalidParameterError(f"invalid pool_type: {self.pool_type!r}")
        if not isinstance(self.fee_direction, FeeDirection):
            raise InvalidParameterError(f"invalid fee_direction: {self.fee_direction!r}")

        for name in ("reserve_x", "reserve_y", "lp_supply"):
            check_u64(getattr(self, name), name)
        for name in ("trade_x_24h", "trade_y_24h", "total_trade_x", "total_trade_y"):
            check_u128(getattr(self, name), name)
        for name in ("last_trade_time", "window_start_time", "snapshot_last_time", "index"):
            if getattr(self, name) < 0:
                raise ComputationError(f"{name} is negative")

    @property
    def pair(self) -> PairKey:
        return PairKey(self.token_x, self.token_y)

    @property
    def pool_id(self) -> str:
        return compute_pool_id(self.token_x, self.token_y)

    @property
    def treasury_token(self) -> TokenId:
        """Token whose bank receives admin + connect fees."""
        if self.fee_direction is FeeDirection.COLLECT_ON_X:
            return self.token_x
        return self.token_y

    def treasury_on_input(self, input_is_x: bool) -> bool:
        """True if the treasury fee is charged on the input side of this trade."""
        return (self.fee_direction is FeeDirection.COLLECT_ON_X) == input_is_x

    def reserves_for(self, input_is_x: bool) -> Tuple[Amount, Amount]:
        """(reserve_in, reserve_out) for a trade direction."""
        if input_is_x:
            return self.reserve_x, self.reserve_y
        return self.reserve_y, self.reserve_x

    def tokens_for(self, input_is_x: bool) -> Tuple[TokenId, TokenId]:
        """(token_in, token_out) for a trade direction."""
        if input_is_x:
            return self.token_x, self.token_y
        return self.token_y, self.token_x

    def get_constant_product(self) -> int:
        """
        Compute k = reserve_x * reserve_y as a u128.
        """
        return mul_u128(self.reserve_x, self.reserve_y)

    def __repr__(self) -> str:
        return (
            f"PoolState(pair=({self.token_x}, {self.token_y}), "
            f"reserves=({self.reserve_x}, {self.reserve_y}), "
            f"lp_supply={self.lp_supply}, frozen={self.frozen})"
        )
