"""
Typed event records and an append-only per-pool event log.

Events are produced by the functional core as plain values; the shell hands
them to an ``EventSink`` only after the operation that produced them has been
committed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Dict, List, Protocol, Tuple, Union

from .balances import Amount, TokenId


@unique
class SwapDirection(Enum):
    X_TO_Y = "x_to_y"
    Y_TO_X = "y_to_x"

    @classmethod
    def from_input(cls, input_is_x: bool) -> "SwapDirection":
        return cls.X_TO_Y if input_is_x else cls.Y_TO_X


@dataclass(frozen=True)
class PoolCreated:
    index: int


@dataclass(frozen=True)
class Swap:
    direction: SwapDirection
    in_amount: Amount
    out_amount: Amount


@dataclass(frozen=True)
class Liquidity:
    added: bool
    x_amount: Amount
    y_amount: Amount
    lp_amount: Amount


@dataclass(frozen=True)
class ReserveSnapshot:
    x: Amount
    y: Amount


@dataclass(frozen=True)
class BankSnapshot:
    token: TokenId
    amount: Amount


Event = Union[PoolCreated, Swap, Liquidity, ReserveSnapshot, BankSnapshot]


class EventSink(Protocol):
    def emit(self, pool_id: str, event: Event) -> None: ...


class EventLog:
    """
    In-memory append-only event sink.

    Ordering is preserved within a pool's stream; streams of different pools
    are independent.
    """

    def __init__(self) -> None:
        self._streams: Dict[str, List[Event]] = {}

    def emit(self, pool_id: str, event: Event) -> None:
        self._streams.setdefault(pool_id, []).append(event)

    def events_for(self, pool_id: str) -> Tuple[Event, ...]:
        return tuple(self._streams.get(pool_id, ()))

    def __len__(self) -> int:
        return sum(len(stream) for stream in self._streams.values())

    def __repr__(self) -> str:
        return f"EventLog({len(self._streams)} streams, {len(self)} events)"
