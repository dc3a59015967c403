"""
State management for pairpool
"""

from .balances import Coin, MintCapability, ValueLedger
from .banks import BankState
from .events import BankSnapshot, EventLog, Liquidity, PoolCreated, ReserveSnapshot, Swap, SwapDirection
from .lp import ShareCapability, ShareLedger
from .pools import FeeDirection, FeeRates, PairKey, PoolState, PoolType
from .store import PoolStore

__all__ = [
    "Coin",
    "MintCapability",
    "ValueLedger",
    "BankState",
    "BankSnapshot",
    "EventLog",
    "Liquidity",
    "PoolCreated",
    "ReserveSnapshot",
    "Swap",
    "SwapDirection",
    "ShareCapability",
    "ShareLedger",
    "FeeDirection",
    "FeeRates",
    "PairKey",
    "PoolState",
    "PoolType",
    "PoolStore",
]
