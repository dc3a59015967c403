"""
Fee extraction and treasury routing (deterministic, integer-only).

Fees are always floor-rounded: ``fee = floor(amount * bps / 10_000)``. The
treasury share of a fee leaves the pool and is merged into the per-token
``BankState``; every other fee portion stays in the pool reserves.

Time-driven side effects are gated on ``now``: a ``now`` of 0 means "no time
source" and suppresses them entirely. It is never treated as a timestamp.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from ..errors import WrongFeeError
from ..fixed_point import add_u64, check_u64, mul_div
from ..state.banks import BankState
from ..state.events import BankSnapshot


BPS_DENOM = 10_000
BANK_SNAPSHOT_INTERVAL = 6 * 60 * 60


@dataclass(frozen=True)
class TreasuryRoute:
    remaining: int
    fee: int
    bank: BankState
    events: Tuple[BankSnapshot, ...] = ()


def extract_fee(amount: int, fee_bps: int) -> Tuple[int, int]:
    """
    Split ``amount`` into ``(remaining, fee_portion)``.

        fee_portion = floor(amount * fee_bps / 10_000)
        remaining   = amount - fee_portion
    """
    check_u64(amount, "amount")
    if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
        raise TypeError("fee_bps must be an int")
    if not (0 <= fee_bps < BPS_DENOM):
        raise WrongFeeError(f"fee_bps must be in [0, {BPS_DENOM}): {fee_bps}")
    fee_portion = mul_div(amount, fee_bps, BPS_DENOM)
    return amount - fee_portion, fee_portion


def route_to_treasury(token_amount: int, fee_bps: int, bank: BankState, now: int) -> TreasuryRoute:
    """
    Extract ``fee_bps`` of ``token_amount`` into ``bank``.

    A balance snapshot is emitted when ``now > 0`` and the bank's last snapshot
    is more than ``BANK_SNAPSHOT_INTERVAL`` old; the snapshot timer then moves
    to ``now``.
    """
    remaining, fee = extract_fee(token_amount, fee_bps)
    next_bank = replace(bank, balance=add_u64(bank.balance, fee))

    events: Tuple[BankSnapshot, ...] = ()
    if now > 0 and now > bank.last_snapshot_time + BANK_SNAPSHOT_INTERVAL:
        events = (BankSnapshot(token=bank.token, amount=next_bank.balance),)
        next_bank = replace(next_bank, last_snapshot_time=now)

    return TreasuryRoute(remaining=remaining, fee=fee, bank=next_bank, events=events)
