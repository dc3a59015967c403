# [TESTER] v1

from __future__ import annotations

import copy
import pickle

import pytest

from pairpool.errors import (
    CoinNotRegisteredError,
    InvalidParameterError,
    NotEnoughBalanceError,
    OperationOverflowError,
)
from pairpool.fixed_point import U64_MAX
from pairpool.state.balances import Coin, ValueLedger
from pairpool.state.lp import ShareLedger


def _funded(amount: int = 1_000) -> ValueLedger:
    ledger = ValueLedger()
    cap = ledger.issue_capability("X")
    ledger.register("alice", "X")
    ledger.deposit("alice", ledger.mint(amount, cap))
    return ledger


def test_registration_is_required_to_hold_a_token() -> None:
    ledger = ValueLedger()
    assert not ledger.is_registered("alice", "X")
    with pytest.raises(CoinNotRegisteredError):
        ledger.balance_of("alice", "X")
    with pytest.raises(CoinNotRegisteredError):
        ledger.deposit("alice", Coin("X", 1))
    ledger.register("alice", "X")
    ledger.register("alice", "X")
    assert ledger.balance_of("alice", "X") == 0


def test_withdraw_and_deposit_move_coins() -> None:
    ledger = _funded()
    ledger.register("bob", "X")
    coin = ledger.withdraw("alice", "X", 300)
    fee, rest = coin.split(30)
    assert (fee.amount, rest.amount) == (30, 270)
    ledger.deposit("bob", rest)
    ledger.deposit("bob", fee)
    assert ledger.balance_of("alice", "X") == 700
    assert ledger.balance_of("bob", "X") == 300
    assert ledger.total_supply("X") == 1_000


def test_withdraw_more_than_balance_fails_without_change() -> None:
    ledger = _funded(10)
    with pytest.raises(NotEnoughBalanceError):
        ledger.withdraw("alice", "X", 11)
    assert ledger.balance_of("alice", "X") == 10


def test_can_receive_detects_overflow() -> None:
    ledger = _funded(U64_MAX)
    with pytest.raises(OperationOverflowError):
        ledger.can_receive("alice", "X", 1)
    ledger.can_receive("alice", "X", 0)


def test_coin_split_bounds() -> None:
    coin = Coin("X", 10)
    assert coin.split(10) == (Coin("X", 10), Coin("X", 0))
    with pytest.raises(NotEnoughBalanceError):
        coin.split(11)


def test_mint_capability_is_single_issue_and_ledger_bound() -> None:
    ledger = ValueLedger()
    cap = ledger.issue_capability("X")
    with pytest.raises(InvalidParameterError):
        ledger.issue_capability("X")

    other = ValueLedger()
    other.issue_capability("X")
    with pytest.raises(InvalidParameterError):
        other.mint(5, cap)


def test_capabilities_cannot_be_duplicated() -> None:
    cap = ValueLedger().issue_capability("X")
    share_cap = ShareLedger().issue("0xpool")
    for obj in (cap, share_cap):
        with pytest.raises(TypeError):
            copy.copy(obj)
        with pytest.raises(TypeError):
            copy.deepcopy(obj)
        with pytest.raises(TypeError):
            pickle.dumps(obj)


def test_burn_from_reduces_supply() -> None:
    ledger = ValueLedger()
    cap = ledger.issue_capability("X")
    ledger.register("alice", "X")
    ledger.deposit("alice", ledger.mint(100, cap))
    ledger.burn_from("alice", 40, cap)
    assert ledger.balance_of("alice", "X") == 60
    assert ledger.total_supply("X") == 60


def test_share_ledger_mint_and_burn() -> None:
    shares = ShareLedger()
    cap = shares.issue("0xpool")
    assert shares.balance_of("alice", "0xpool") == 0

    shares.mint("alice", 1_000, cap)
    shares.mint("bob", 100, cap)
    assert shares.total_supply("0xpool") == 1_100

    shares.burn_from("alice", 1_000, cap)
    assert shares.total_supply("0xpool") == 100
    assert shares.balance_of("alice", "0xpool") == 0
    assert shares.balance_of("bob", "0xpool") == 100

    with pytest.raises(NotEnoughBalanceError):
        shares.burn_from("bob", 101, cap)
    assert shares.total_supply("0xpool") == 100


def test_share_capability_is_single_issue() -> None:
    shares = ShareLedger()
    shares.issue("0xpool")
    with pytest.raises(InvalidParameterError):
        shares.issue("0xpool")
    with pytest.raises(InvalidParameterError):
        shares.mint("alice", 1, ShareLedger().issue("0xpool"))
