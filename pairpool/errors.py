"""Exception types for the pool engine.

Every failure is categorical and surfaced immediately: the core never retries
or recovers, and callers must treat any raised ``PoolError`` as "nothing was
applied".
"""

from __future__ import annotations


class PoolError(Exception):
    """Base class for every pool engine failure."""


class InvalidParameterError(PoolError):
    """Zero amount, unrecognised enum value or non-positive amplifier."""


class WrongFeeError(PoolError):
    """Fee rate out of range, or a fee sum reaching 10_000 bps."""


class ReservesEmptyError(PoolError):
    """Swap attempted against a zero reserve."""


class OperationOverflowError(PoolError):
    """A computed value does not fit its 64-bit (or 128-bit) destination."""


class ComputationError(PoolError):
    """An invariant check failed. Always fatal; signals a logic bug."""

    def __init__(self, violation: str) -> None:
        self.violation = violation
        super().__init__(f"invariant violation: {violation}")


class PermissionDeniedError(PoolError):
    """Caller is not authorised for an admin-gated operation."""


class NotEnoughBalanceError(PoolError):
    """Caller lacks sufficient token or share balance."""


class CoinNotRegisteredError(PoolError):
    """Account has no registered balance slot for a token."""


class PoolFrozenError(PoolError):
    """Swap or deposit attempted while the pool is frozen."""


class SlippageLimitError(PoolError):
    """Realised output fell below the caller's minimum."""

    def __init__(self, amount_out: int, min_amount_out: int) -> None:
        self.amount_out = amount_out
        self.min_amount_out = min_amount_out
        super().__init__(f"amount_out ({amount_out}) < min_amount_out ({min_amount_out})")


class PoolNotFoundError(PoolError):
    """No pool exists for the requested token pair."""


class PoolDuplicateError(PoolError):
    """A pool already exists for the requested token pair."""
