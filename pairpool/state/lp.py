"""
LP share ledger for pools.

LP shares are scoped per pool_id and are tracked separately from token
balances. Minting and burning require the pool's ``ShareCapability``, which the
ledger issues exactly once per pool.
"""

from __future__ import annotations

from typing import Dict, Set, Tuple

from ..errors import InvalidParameterError, NotEnoughBalanceError
from ..fixed_point import add_u64, check_u64
from .balances import Account, Amount, NonCopyable

# Type alias
PoolId = str


class ShareCapability(NonCopyable):
    """Mint/burn authority over one pool's LP shares."""

    __slots__ = ("pool_id", "_ledger_id")

    def __init__(self, pool_id: PoolId, ledger_id: int) -> None:
        self.pool_id = pool_id
        self._ledger_id = ledger_id

    def __repr__(self) -> str:
        return f"ShareCapability({self.pool_id[:18]}...)"


class ShareLedger:
    """
    Deterministic LP balance table mapping (account, pool_id) -> shares.

    Notes:
    - LP balances are always non-negative.
    - Zero balances are omitted to keep the table sparse.
    - ``total_supply`` is maintained independently of the pools, so the engine
      can cross-check it against ``PoolState.lp_supply``.
    """

    def __init__(self) -> None:
        self._balances: Dict[Tuple[Account, PoolId], Amount] = {}
        self._supply: Dict[PoolId, Amount] = {}
        self._issued: Set[PoolId] = set()

    def issue(self, pool_id: PoolId) -> ShareCapability:
        """Issue the single share capability for ``pool_id``."""
        if pool_id in self._issued:
            raise InvalidParameterError(f"share capability for {pool_id} already issued")
        self._issued.add(pool_id)
        self._supply[pool_id] = 0
        return ShareCapability(pool_id, id(self))

    def _require_capability(self, capability: ShareCapability) -> PoolId:
        if not isinstance(capability, ShareCapability) or capability._ledger_id != id(self):
            raise InvalidParameterError("capability was not issued by this ledger")
        return capability.pool_id

    def balance_of(self, account: Account, pool_id: PoolId) -> Amount:
        """Get LP balance for (account, pool_id). Returns 0 if not found."""
        return self._balances.get((account, pool_id), 0)

    def total_supply(self, pool_id: PoolId) -> Amount:
        return self._supply.get(pool_id, 0)

    def mint(self, account: Account, amount: Amount, capability: ShareCapability) -> None:
        """Credit ``amount`` freshly minted shares to ``account``."""
        pool_id = self._require_capability(capability)
        check_u64(amount, "amount")
        new_supply = add_u64(self._supply[pool_id], amount)
        new_balance = add_u64(self.balance_of(account, pool_id), amount)
        self._supply[pool_id] = new_supply
        self._set(account, pool_id, new_balance)

    def burn_from(self, account: Account, amount: Amount, capability: ShareCapability) -> None:
        """Destroy ``amount`` shares held by ``account``."""
        pool_id = self._require_capability(capability)
        check_u64(amount, "amount")
        current = self.balance_of(account, pool_id)
        if current < amount:
            raise NotEnoughBalanceError(
                f"insufficient LP balance: {current} < {amount}"
            )
        self._set(account, pool_id, current - amount)
        self._supply[pool_id] -= amount

    def _set(self, account: Account, pool_id: PoolId, amount: Amount) -> None:
        if amount == 0:
            self._balances.pop((account, pool_id), None)
        else:
            self._balances[(account, pool_id)] = amount

    def __repr__(self) -> str:
        return f"ShareLedger({len(self._balances)} entries)"
