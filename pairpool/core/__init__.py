"""
Core pool algorithms
"""

from .fees import BANK_SNAPSHOT_INTERVAL, TreasuryRoute, extract_fee, route_to_treasury
from .lifecycle import create_pool, set_frozen
from .liquidity import (
    BOOTSTRAP_SHARES,
    LiquidityResult,
    add_liquidity,
    check_backing_ratio,
    compute_redemption,
    compute_shares,
    remove_liquidity,
)
from .stats import RESERVE_SNAPSHOT_INTERVAL, TRADE_WINDOW, record_trade
from .swap import SwapQuote, SwapResult, compute_amount, quote, swap

__all__ = [
    "BANK_SNAPSHOT_INTERVAL",
    "TreasuryRoute",
    "extract_fee",
    "route_to_treasury",
    "create_pool",
    "set_frozen",
    "BOOTSTRAP_SHARES",
    "LiquidityResult",
    "add_liquidity",
    "check_backing_ratio",
    "compute_redemption",
    "compute_shares",
    "remove_liquidity",
    "RESERVE_SNAPSHOT_INTERVAL",
    "TRADE_WINDOW",
    "record_trade",
    "SwapQuote",
    "SwapResult",
    "compute_amount",
    "quote",
    "swap",
]
