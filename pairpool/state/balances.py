"""
Multi-asset value ledger with explicit coin values.

Implements the value-ledger collaborator the pool engine moves funds through:
    (account, token) -> amount

Value leaves an account as a ``Coin`` and must be deposited somewhere; only
``mint`` and ``burn_from`` (both gated by a ``MintCapability``) change the
circulating supply of a token.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Set, Tuple

from ..errors import CoinNotRegisteredError, InvalidParameterError, NotEnoughBalanceError
from ..fixed_point import add_u64, check_u64


# Type aliases
Account = str
TokenId = str
Amount = int  # Non-negative integer within the u64 range


class NonCopyable:
    """Mixin for capability objects: they can be passed around, never duplicated."""

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} cannot be copied")

    def __reduce__(self):
        raise TypeError(f"{type(self).__name__} cannot be serialized")


class MintCapability(NonCopyable):
    """Authority to mint and burn one token. Issued once per token by the ledger."""

    __slots__ = ("token", "_ledger_id")

    def __init__(self, token: TokenId, ledger_id: int) -> None:
        self.token = token
        self._ledger_id = ledger_id

    def __repr__(self) -> str:
        return f"MintCapability({self.token})"


@dataclass(frozen=True)
class Coin:
    """A detached amount of one token in transit between accounts."""

    token: TokenId
    amount: Amount

    def __post_init__(self) -> None:
        check_u64(self.amount, "coin amount")

    def split(self, amount: Amount) -> Tuple["Coin", "Coin"]:
        """Split off ``amount``; returns ``(split_off, remainder)``."""
        if amount < 0 or amount > self.amount:
            raise NotEnoughBalanceError(f"cannot split {amount} from coin of {self.amount}")
        return Coin(self.token, amount), Coin(self.token, self.amount - amount)


class ValueLedger:
    """
    Deterministic value ledger mapping (account, token) -> amount.

    Notes:
    - An account must ``register`` a token before it can hold it.
    - Zero balances of registered slots are kept (registration is explicit).
    - Do not rely on dict iteration order; callers sort at serialization time.
    """

    def __init__(self) -> None:
        self._balances: Dict[Tuple[Account, TokenId], Amount] = {}
        self._supply: Dict[TokenId, Amount] = {}
        self._capabilities_issued: Set[TokenId] = set()

    def register(self, account: Account, token: TokenId) -> None:
        """Open a balance slot for ``(account, token)``. Idempotent."""
        self._balances.setdefault((account, token), 0)

    def is_registered(self, account: Account, token: TokenId) -> bool:
        return (account, token) in self._balances

    def _require_registered(self, account: Account, token: TokenId) -> None:
        if (account, token) not in self._balances:
            raise CoinNotRegisteredError(f"{account} has no balance slot for {token}")

    def balance_of(self, account: Account, token: TokenId) -> Amount:
        """Get balance for (account, token)."""
        self._require_registered(account, token)
        return self._balances[(account, token)]

    def require_balance(self, account: Account, token: TokenId, amount: Amount) -> None:
        """Raise unless ``account`` could withdraw ``amount`` of ``token``."""
        balance = self.balance_of(account, token)
        if balance < amount:
            raise NotEnoughBalanceError(
                f"{account} holds {balance} of {token}, needs {amount}"
            )

    def can_receive(self, account: Account, token: TokenId, amount: Amount) -> None:
        """Raise unless depositing ``amount`` into the slot would succeed."""
        add_u64(self.balance_of(account, token), amount)

    def withdraw(self, account: Account, token: TokenId, amount: Amount) -> Coin:
        """
        Detach ``amount`` from an account as a coin.

        Raises:
            CoinNotRegisteredError: If the slot does not exist
            NotEnoughBalanceError: If the balance is insufficient
        """
        check_u64(amount, "amount")
        self.require_balance(account, token, amount)
        self._balances[(account, token)] -= amount
        return Coin(token, amount)

    def deposit(self, account: Account, coin: Coin) -> None:
        """Credit a coin into a registered slot."""
        self._require_registered(account, coin.token)
        key = (account, coin.token)
        self._balances[key] = add_u64(self._balances[key], coin.amount)

    def issue_capability(self, token: TokenId) -> MintCapability:
        """Issue the single mint/burn capability for ``token``."""
        if token in self._capabilities_issued:
            raise InvalidParameterError(f"mint capability for {token} already issued")
        self._capabilities_issued.add(token)
        self._supply.setdefault(token, 0)
        return MintCapability(token, id(self))

    def _require_capability(self, capability: MintCapability) -> None:
        if not isinstance(capability, MintCapability) or capability._ledger_id != id(self):
            raise InvalidParameterError("capability was not issued by this ledger")

    def mint(self, amount: Amount, capability: MintCapability) -> Coin:
        """Create new value of the capability's token."""
        self._require_capability(capability)
        token = capability.token
        self._supply[token] = add_u64(self._supply[token], check_u64(amount, "amount"))
        return Coin(token, amount)

    def burn_from(self, account: Account, amount: Amount, capability: MintCapability) -> None:
        """Destroy ``amount`` of the capability's token held by ``account``."""
        self._require_capability(capability)
        coin = self.withdraw(account, capability.token, amount)
        self._supply[coin.token] -= coin.amount

    def total_supply(self, token: TokenId) -> Amount:
        return self._supply.get(token, 0)

    def __repr__(self) -> str:
        return f"ValueLedger({len(self._balances)} slots)"
