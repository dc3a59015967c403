"""
Rolling trade statistics and periodic reserve snapshots.

Three independent rules run on every trade:
- lifetime totals always accumulate,
- the 24h window resets (counters zeroed first) once it is older than 24h,
- a reserve snapshot is emitted at most once per 15 minutes.

The last two are time-driven and only run when ``now > 0``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Tuple

from ..fixed_point import check_u128
from ..state.events import ReserveSnapshot
from ..state.pools import PoolState


TRADE_WINDOW = 24 * 60 * 60
RESERVE_SNAPSHOT_INTERVAL = 15 * 60


def record_trade(
    pool: PoolState,
    input_is_x: bool,
    amount_in: int,
    amount_out: int,
    now: int,
) -> Tuple[PoolState, Tuple[ReserveSnapshot, ...]]:
    """
    Fold one settled trade into ``pool``'s counters.

    ``amount_in`` is credited to the input side and ``amount_out`` to the
    output side, both in the lifetime totals and in the 24h window. The
    snapshot reports the reserves already held by ``pool``.
    """
    trade_x, trade_y = (amount_in, amount_out) if input_is_x else (amount_out, amount_in)

    window_start = pool.window_start_time
    trade_x_24h = pool.trade_x_24h
    trade_y_24h = pool.trade_y_24h
    last_trade_time = pool.last_trade_time
    snapshot_last_time = pool.snapshot_last_time
    events: Tuple[ReserveSnapshot, ...] = ()

    if now > 0:
        last_trade_time = now
        if now > window_start + TRADE_WINDOW:
            window_start = now
            trade_x_24h = 0
            trade_y_24h = 0
        if now > snapshot_last_time + RESERVE_SNAPSHOT_INTERVAL:
            events = (ReserveSnapshot(x=pool.reserve_x, y=pool.reserve_y),)
            snapshot_last_time = now

    next_pool = replace(
        pool,
        total_trade_x=check_u128(pool.total_trade_x + trade_x, "total_trade_x"),
        total_trade_y=check_u128(pool.total_trade_y + trade_y, "total_trade_y"),
        trade_x_24h=check_u128(trade_x_24h + trade_x, "trade_x_24h"),
        trade_y_24h=check_u128(trade_y_24h + trade_y, "trade_y_24h"),
        window_start_time=window_start,
        last_trade_time=last_trade_time,
        snapshot_last_time=snapshot_last_time,
    )
    return next_pool, events
