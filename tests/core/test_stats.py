# [TESTER] v1

from __future__ import annotations

import pytest

from pairpool.core.stats import RESERVE_SNAPSHOT_INTERVAL, TRADE_WINDOW, record_trade
from pairpool.errors import OperationOverflowError
from pairpool.fixed_point import U128_MAX
from pairpool.state.events import ReserveSnapshot
from pairpool.state.pools import PoolState


def _pool(**kw) -> PoolState:
    return PoolState(token_x="X", token_y="Y", reserve_x=500, reserve_y=700, lp_supply=10, **kw)


def test_untimed_trade_only_touches_counters() -> None:
    pool = _pool(window_start_time=5, trade_x_24h=1, snapshot_last_time=7, last_trade_time=9)
    after, events = record_trade(pool, True, 100, 40, 0)
    assert events == ()
    assert (after.total_trade_x, after.total_trade_y) == (100, 40)
    assert (after.trade_x_24h, after.trade_y_24h) == (101, 40)
    assert (after.window_start_time, after.snapshot_last_time, after.last_trade_time) == (5, 7, 9)


def test_y_input_credits_sides_accordingly() -> None:
    after, _ = record_trade(_pool(), False, 100, 40, 0)
    assert (after.total_trade_x, after.total_trade_y) == (40, 100)


def test_window_resets_strictly_after_24h() -> None:
    pool = _pool(window_start_time=1, trade_x_24h=50, trade_y_24h=60, snapshot_last_time=10**9)

    inside, _ = record_trade(pool, True, 10, 20, 1 + TRADE_WINDOW)
    assert inside.window_start_time == 1
    assert (inside.trade_x_24h, inside.trade_y_24h) == (60, 80)

    reset, _ = record_trade(pool, True, 10, 20, 2 + TRADE_WINDOW)
    assert reset.window_start_time == 2 + TRADE_WINDOW
    assert (reset.trade_x_24h, reset.trade_y_24h) == (10, 20)
    assert reset.last_trade_time == 2 + TRADE_WINDOW


def test_reserve_snapshot_at_most_every_interval() -> None:
    pool = _pool()
    _, none = record_trade(pool, True, 1, 1, RESERVE_SNAPSHOT_INTERVAL)
    assert none == ()

    after, events = record_trade(pool, True, 1, 1, RESERVE_SNAPSHOT_INTERVAL + 1)
    assert events == (ReserveSnapshot(x=500, y=700),)
    assert after.snapshot_last_time == RESERVE_SNAPSHOT_INTERVAL + 1

    _, again = record_trade(after, True, 1, 1, 2 * RESERVE_SNAPSHOT_INTERVAL + 1)
    assert again == ()


def test_lifetime_totals_are_u128_checked() -> None:
    pool = _pool(total_trade_x=U128_MAX)
    with pytest.raises(OperationOverflowError):
        record_trade(pool, True, 1, 1, 0)
