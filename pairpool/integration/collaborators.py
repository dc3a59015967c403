"""
Time source and authorization collaborators.

The functional core never reads a clock or checks a caller; the shell asks
these objects and passes plain values down.
"""

from __future__ import annotations

import time
from typing import FrozenSet, Iterable, Protocol

from ..errors import PermissionDeniedError
from ..state.balances import Account


class Clock(Protocol):
    def now(self) -> int: ...


class SystemClock:
    """Wall-clock seconds since the epoch."""

    def now(self) -> int:
        return int(time.time())


class FixedClock:
    """
    Manually driven clock.

    ``FixedClock(0)`` is the "no time source" sentinel: every time-driven side
    effect (snapshots, window resets) is suppressed.
    """

    def __init__(self, value: int = 0) -> None:
        if value < 0:
            raise ValueError(f"clock value must be non-negative: {value}")
        self.value = value

    def now(self) -> int:
        return self.value

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"clock cannot go backwards: {seconds}")
        self.value += seconds
        return self.value


class Authorizer(Protocol):
    def require_admin(self, account: Account) -> None: ...


class AdminAllowList:
    """Authorizer backed by a fixed set of admin accounts."""

    def __init__(self, admins: Iterable[Account]) -> None:
        self._admins: FrozenSet[Account] = frozenset(admins)

    def require_admin(self, account: Account) -> None:
        if account not in self._admins:
            raise PermissionDeniedError(f"{account} is not authorised for admin operations")

    def __repr__(self) -> str:
        return f"AdminAllowList({len(self._admins)} admins)"
