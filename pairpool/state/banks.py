"""
Per-token treasury accumulators.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import ComputationError
from ..fixed_point import check_u64
from .balances import Amount, TokenId


@dataclass(frozen=True)
class BankState:
    """Treasury fees collected in one token, plus its snapshot timer."""

    token: TokenId
    balance: Amount = 0
    last_snapshot_time: int = 0

    def __post_init__(self) -> None:
        check_u64(self.balance, "bank balance")
        if self.last_snapshot_time < 0:
            raise ComputationError(f"last_snapshot_time must be non-negative: {self.last_snapshot_time}")


def bank_account(token: TokenId) -> str:
    """Value-ledger account holding the coins backing a bank."""
    return f"bank:{token}"
