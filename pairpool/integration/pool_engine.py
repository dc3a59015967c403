"""
Pool execution engine (imperative shell).

Wraps the functional core with its collaborators:
- reads the time source once per operation and passes ``now`` down,
- checks authorization for admin operations,
- moves coins through the value ledger and LP shares through the share ledger,
- commits pool + bank state and publishes events only after the core succeeded.

Atomicity: the core computes the whole next state without side effects, and
every ledger precondition (registration, balances, receiving capacity) is
checked before the first ledger mutation. A raised ``PoolError`` therefore
leaves the store, both ledgers and the event log untouched.

Requests against the same pool must be serialized by the caller; the engine
performs no locking.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Tuple, Union

from ..core import lifecycle
from ..core import liquidity as liquidity_core
from ..core.swap import SwapQuote, quote as quote_swap, swap as run_swap
from ..errors import ComputationError, NotEnoughBalanceError, PoolDuplicateError, PoolError
from ..state.balances import Account, Amount, TokenId, ValueLedger
from ..state.banks import BankState, bank_account
from ..state.events import Event, EventLog, EventSink, PoolCreated
from ..state.lp import ShareCapability, ShareLedger
from ..state.pools import FeeDirection, FeeRates, PoolState, PoolType
from ..state.store import PoolStore
from .collaborators import AdminAllowList, Authorizer, Clock, SystemClock
from .config import EngineConfig

logger = logging.getLogger(__name__)


def pool_account(pool_id: str) -> str:
    """Value-ledger account holding a pool's reserves."""
    return f"pool:{pool_id}"


@contextmanager
def _logged(operation: str, token_x: TokenId, token_y: TokenId) -> Iterator[None]:
    try:
        yield
    except PoolError as exc:
        logger.warning("%s on (%s, %s) rejected: %s: %s", operation, token_x, token_y, type(exc).__name__, exc)
        raise


class PoolEngine:
    """
    Runs swap / liquidity / lifecycle operations against a ``PoolStore``.

    All collaborators are injected; defaults are the in-memory reference
    implementations and the wall clock.
    """

    def __init__(
        self,
        *,
        store: Optional[PoolStore] = None,
        values: Optional[ValueLedger] = None,
        shares: Optional[ShareLedger] = None,
        events: Optional[EventSink] = None,
        clock: Optional[Clock] = None,
        authorizer: Optional[Authorizer] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.store = store or PoolStore()
        self.values = values or ValueLedger()
        self.shares = shares or ShareLedger()
        self.events = events if events is not None else EventLog()
        self.clock = clock or SystemClock()
        self.authorizer = authorizer or AdminAllowList(self.config.admins)
        self._share_caps: Dict[str, ShareCapability] = {}

    # -- Queries -------------------------------------------------------------

    def get_pool(self, token_x: TokenId, token_y: TokenId) -> PoolState:
        return self.store.get_pool(token_x, token_y)

    def get_bank(self, token: TokenId) -> BankState:
        return self.store.get_bank(token)

    def lp_balance(self, account: Account, token_x: TokenId, token_y: TokenId) -> Amount:
        pool = self.store.get_pool(token_x, token_y)
        return self.shares.balance_of(account, pool.pool_id)

    def quote(self, token_x: TokenId, token_y: TokenId, input_is_x: bool, amount_in: Amount) -> SwapQuote:
        return quote_swap(self.store.get_pool(token_x, token_y), input_is_x, amount_in)

    # -- Lifecycle -----------------------------------------------------------

    def create_pool(
        self,
        creator: Account,
        token_x: TokenId,
        token_y: TokenId,
        *,
        fees: Optional[FeeRates] = None,
        fee_direction: Optional[Union[FeeDirection, int]] = None,
        pool_type: Union[PoolType, int] = PoolType.STANDARD,
        decimals_x: Optional[int] = None,
        decimals_y: Optional[int] = None,
        amp: int = 0,
    ) -> PoolState:
        """
        Create an empty pool for the ordered pair (token_x, token_y).

        Raises:
            PermissionDeniedError: If ``creator`` is not an admin
            PoolDuplicateError: If a pool exists for the pair in either order
            InvalidParameterError / WrongFeeError: On invalid configuration
        """
        with _logged("create_pool", token_x, token_y):
            self.authorizer.require_admin(creator)
            if self.store.has_pool(token_x, token_y):
                raise PoolDuplicateError(f"pool for ({token_x}, {token_y}) already exists")

            pool = lifecycle.create_pool(
                token_x,
                token_y,
                fees=fees if fees is not None else self.config.default_fees,
                fee_direction=fee_direction if fee_direction is not None else self.config.default_fee_direction,
                pool_type=pool_type,
                decimals_x=decimals_x,
                decimals_y=decimals_y,
                amp=amp,
                index=self.store.pool_count,
            )

            pool_id = pool.pool_id
            self._share_caps[pool_id] = self.shares.issue(pool_id)
            self.store.put_pool(pool)
            for token in pool.pair:
                if not self.store.has_bank(token):
                    self.store.put_bank(BankState(token=token))
                self.values.register(pool_account(pool_id), token)
                self.values.register(bank_account(token), token)

            self.events.emit(pool_id, PoolCreated(index=pool.index))
            logger.info(
                "Pool %d created: %s/%s type=%s direction=%s",
                pool.index, token_x, token_y, pool.pool_type.name, pool.fee_direction.name,
            )
            return pool

    def set_frozen(self, admin: Account, token_x: TokenId, token_y: TokenId, frozen: bool) -> PoolState:
        """Freeze or unfreeze trading and deposits on a pool."""
        with _logged("set_frozen", token_x, token_y):
            self.authorizer.require_admin(admin)
            pool = lifecycle.set_frozen(self.store.get_pool(token_x, token_y), frozen)
            self.store.put_pool(pool)
            logger.info("Pool %s/%s frozen=%s", token_x, token_y, frozen)
            return pool

    # -- Trading -------------------------------------------------------------

    def _publish(self, pool_id: str, events: Tuple[Event, ...]) -> None:
        # Sinks only promise ``emit``.
        for event in events:
            self.events.emit(pool_id, event)

    def _check_share_supply(self, pool: PoolState) -> None:
        ledger_supply = self.shares.total_supply(pool.pool_id)
        if ledger_supply != pool.lp_supply:
            raise ComputationError(
                f"share ledger supply {ledger_supply} != pool lp_supply {pool.lp_supply}"
            )

    def swap(
        self,
        account: Account,
        token_x: TokenId,
        token_y: TokenId,
        input_is_x: bool,
        amount_in: Amount,
        min_amount_out: Amount = 0,
    ) -> Amount:
        """
        Swap ``amount_in`` of one pool token for the other.

        Returns:
            Amount of the output token credited to ``account``
        """
        with _logged("swap", token_x, token_y):
            pool = self.store.get_pool(token_x, token_y)
            self._check_share_supply(pool)
            now = self.clock.now()

            result = run_swap(
                pool, self.store.banks_for(pool), input_is_x, amount_in, min_amount_out, now
            )
            q = result.quote
            token_in, token_out = pool.tokens_for(input_is_x)
            fee_on_input = pool.treasury_on_input(input_is_x)

            self.values.require_balance(account, token_in, amount_in)
            self.values.can_receive(account, token_out, q.amount_out)

            custody = pool_account(pool.pool_id)
            coin_in = self.values.withdraw(account, token_in, amount_in)
            if fee_on_input:
                fee_coin, coin_in = coin_in.split(q.treasury_fee)
                self.values.deposit(bank_account(token_in), fee_coin)
            self.values.deposit(custody, coin_in)

            coin_out = self.values.withdraw(custody, token_out, q.dy)
            if not fee_on_input:
                fee_coin, coin_out = coin_out.split(q.treasury_fee)
                self.values.deposit(bank_account(token_out), fee_coin)
            self.values.deposit(account, coin_out)

            self.store.commit(result.pool, result.banks)
            self._publish(pool.pool_id, result.events)
            self._check_share_supply(result.pool)

            logger.debug(
                "swap %s/%s %s in=%d out=%d treasury_fee=%d",
                token_x, token_y, "x->y" if input_is_x else "y->x",
                amount_in, q.amount_out, q.treasury_fee,
            )
            return result.amount_out

    def add_liquidity(
        self,
        account: Account,
        token_x: TokenId,
        token_y: TokenId,
        x_added: Amount,
        y_added: Amount,
    ) -> Amount:
        """
        Deposit both tokens in full and mint LP shares to ``account``.

        Returns:
            LP shares minted
        """
        with _logged("add_liquidity", token_x, token_y):
            pool = self.store.get_pool(token_x, token_y)
            self._check_share_supply(pool)

            result = liquidity_core.add_liquidity(pool, x_added, y_added)

            self.values.require_balance(account, token_x, x_added)
            self.values.require_balance(account, token_y, y_added)

            custody = pool_account(pool.pool_id)
            self.values.deposit(custody, self.values.withdraw(account, token_x, x_added))
            self.values.deposit(custody, self.values.withdraw(account, token_y, y_added))
            self.shares.mint(account, result.lp_amount, self._share_caps[pool.pool_id])

            self.store.commit(result.pool, result.banks)
            self._publish(pool.pool_id, result.events)
            self._check_share_supply(result.pool)

            logger.debug(
                "add_liquidity %s/%s x=%d y=%d lp=%d", token_x, token_y, x_added, y_added, result.lp_amount
            )
            return result.lp_amount

    def remove_liquidity(
        self,
        account: Account,
        token_x: TokenId,
        token_y: TokenId,
        shares_burned: Amount,
    ) -> Tuple[Amount, Amount]:
        """
        Burn LP shares held by ``account`` and pay out both tokens net of the
        withdraw fee. Allowed on frozen pools.

        Returns:
            (x_amount, y_amount) credited to ``account``
        """
        with _logged("remove_liquidity", token_x, token_y):
            pool = self.store.get_pool(token_x, token_y)
            self._check_share_supply(pool)
            now = self.clock.now()

            result = liquidity_core.remove_liquidity(
                pool, self.store.banks_for(pool), shares_burned, now
            )

            held = self.shares.balance_of(account, pool.pool_id)
            if held < shares_burned:
                raise NotEnoughBalanceError(f"{account} holds {held} LP shares, burning {shares_burned}")
            self.values.can_receive(account, token_x, result.x_amount)
            self.values.can_receive(account, token_y, result.y_amount)

            self.shares.burn_from(account, shares_burned, self._share_caps[pool.pool_id])
            custody = pool_account(pool.pool_id)
            for token, net, fee in (
                (token_x, result.x_amount, result.x_fee),
                (token_y, result.y_amount, result.y_fee),
            ):
                coin = self.values.withdraw(custody, token, net + fee)
                fee_coin, coin = coin.split(fee)
                self.values.deposit(bank_account(token), fee_coin)
                self.values.deposit(account, coin)

            self.store.commit(result.pool, result.banks)
            self._publish(pool.pool_id, result.events)
            self._check_share_supply(result.pool)

            logger.debug(
                "remove_liquidity %s/%s lp=%d x=%d y=%d",
                token_x, token_y, shares_burned, result.x_amount, result.y_amount,
            )
            return result.x_amount, result.y_amount
