"""
Pool creation and configuration validation.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Union

from ..errors import InvalidParameterError
from ..state.balances import TokenId
from ..state.pools import FeeDirection, FeeRates, PoolState, PoolType, compute_pool_id


MAX_DECIMALS = 18


def _coerce_enum(enum_cls, value, name: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(f"invalid {name}: {value!r}")
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidParameterError(f"invalid {name}: {value!r}") from None


def stable_scales(decimals_x: int, decimals_y: int) -> tuple[int, int]:
    """
    Decimal-alignment multipliers to an 18-decimal base.

    The Y multiplier is derived from ``decimals_x``, not ``decimals_y``. This
    reproduces the deployed behaviour; ``decimals_y`` is only range-checked.
    """
    for name, d in (("decimals_x", decimals_x), ("decimals_y", decimals_y)):
        if not isinstance(d, int) or isinstance(d, bool) or d < 0:
            raise InvalidParameterError(f"{name} must be a non-negative int: {d!r}")
        if d > MAX_DECIMALS:
            raise InvalidParameterError(f"{name} must be <= {MAX_DECIMALS}: {d}")
    scale_x = 10 ** (MAX_DECIMALS - decimals_x)
    scale_y = 10 ** (MAX_DECIMALS - decimals_x)
    return scale_x, scale_y


def create_pool(
    token_x: TokenId,
    token_y: TokenId,
    *,
    fees: FeeRates,
    fee_direction: Union[FeeDirection, int] = FeeDirection.COLLECT_ON_X,
    pool_type: Union[PoolType, int] = PoolType.STANDARD,
    decimals_x: Optional[int] = None,
    decimals_y: Optional[int] = None,
    amp: int = 0,
    index: int = 0,
) -> PoolState:
    """
    Validate a pool configuration and build its empty initial state.

    Stable-swap pools require both token decimals (each <= 18) and ``amp > 0``;
    their amplification and scales are stored but not used for pricing.

    Args:
        token_x: First token of the ordered pair
        token_y: Second token of the ordered pair
        fees: Fee schedule (validated on construction; WrongFeeError on failure)
        fee_direction: FeeDirection member or its integer code
        pool_type: PoolType member or its integer code
        decimals_x: Token X decimal precision (stable-swap only)
        decimals_y: Token Y decimal precision (stable-swap only)
        amp: Amplification coefficient (stable-swap only)
        index: Creation sequence number

    Returns:
        Empty PoolState (zero reserves, zero LP supply)

    Raises:
        InvalidParameterError: If an enum value, token pair, decimals or amp is invalid
    """
    compute_pool_id(token_x, token_y)
    fee_direction = _coerce_enum(FeeDirection, fee_direction, "fee_direction")
    pool_type = _coerce_enum(PoolType, pool_type, "pool_type")
    if not isinstance(fees, FeeRates):
        raise InvalidParameterError(f"fees must be FeeRates, got {type(fees).__name__}")

    scale_x = scale_y = 0
    if pool_type is PoolType.STABLE_SWAP:
        if decimals_x is None or decimals_y is None:
            raise InvalidParameterError("stable-swap pools require decimals_x and decimals_y")
        if not isinstance(amp, int) or isinstance(amp, bool) or amp <= 0:
            raise InvalidParameterError(f"amp must be a positive int: {amp!r}")
        scale_x, scale_y = stable_scales(decimals_x, decimals_y)
    else:
        amp = 0

    return PoolState(
        token_x=token_x,
        token_y=token_y,
        fees=fees,
        fee_direction=fee_direction,
        pool_type=pool_type,
        amp=amp,
        scale_x=scale_x,
        scale_y=scale_y,
        index=index,
    )


def set_frozen(pool: PoolState, frozen: bool) -> PoolState:
    """Return ``pool`` with its freeze flag set."""
    if not isinstance(frozen, bool):
        raise InvalidParameterError(f"frozen must be a bool: {frozen!r}")
    return replace(pool, frozen=frozen)
