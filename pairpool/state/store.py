"""
Keyed store for pools and treasury banks.

A single ``PoolStore`` owns every pool (keyed by ordered token pair) and every
bank (keyed by token). There is no module-level state: callers pass the store
to whatever needs it.
"""

from __future__ import annotations

from typing import Dict, Mapping

from ..errors import PoolNotFoundError
from .balances import TokenId
from .banks import BankState
from .pools import PairKey, PoolState


class PoolStore:
    def __init__(self) -> None:
        self._pools: Dict[PairKey, PoolState] = {}
        self._banks: Dict[TokenId, BankState] = {}

    @property
    def pool_count(self) -> int:
        return len(self._pools)

    def has_pool(self, token_x: TokenId, token_y: TokenId) -> bool:
        """True if a pool exists for the pair in either ordering."""
        key = PairKey(token_x, token_y)
        return key in self._pools or key.reversed() in self._pools

    def get_pool(self, token_x: TokenId, token_y: TokenId) -> PoolState:
        try:
            return self._pools[PairKey(token_x, token_y)]
        except KeyError:
            raise PoolNotFoundError(f"no pool for ({token_x}, {token_y})") from None

    def put_pool(self, pool: PoolState) -> None:
        self._pools[pool.pair] = pool

    def get_bank(self, token: TokenId) -> BankState:
        """Return the bank for ``token``, or a fresh empty one if none exists yet."""
        return self._banks.get(token) or BankState(token=token)

    def has_bank(self, token: TokenId) -> bool:
        return token in self._banks

    def put_bank(self, bank: BankState) -> None:
        self._banks[bank.token] = bank

    def banks_for(self, pool: PoolState) -> Dict[TokenId, BankState]:
        """Banks of both pool tokens, keyed by token."""
        return {token: self.get_bank(token) for token in pool.pair}

    def commit(self, pool: PoolState, banks: Mapping[TokenId, BankState]) -> None:
        """Write a pool and the banks an operation touched, together."""
        for bank in banks.values():
            self._banks[bank.token] = bank
        self._pools[pool.pair] = pool

    def __repr__(self) -> str:
        return f"PoolStore({len(self._pools)} pools, {len(self._banks)} banks)"
