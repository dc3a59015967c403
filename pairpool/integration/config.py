"""
Engine configuration loaded from YAML.

Example::

    admins: [treasury]
    log_level: INFO
    default_fee_direction: COLLECT_ON_X
    default_fees:
      lp_fee: 25
      admin_fee: 5
      withdraw_fee: 10
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Tuple, Union

import yaml

from ..errors import InvalidParameterError, WrongFeeError
from ..state.balances import Account
from ..state.pools import FeeDirection, FeeRates

logger = logging.getLogger(__name__)

_FEE_KEYS = frozenset(("admin_fee", "lp_fee", "incentive_fee", "connect_fee", "withdraw_fee"))
_TOP_LEVEL_KEYS = frozenset(("admins", "log_level", "default_fees", "default_fee_direction"))
_LOG_LEVELS = frozenset(("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"))


def fee_rates_from_dict(data: Mapping[str, Any]) -> FeeRates:
    unknown = set(data) - _FEE_KEYS
    if unknown:
        raise InvalidParameterError(f"unknown fee keys: {sorted(unknown)}")
    for key, value in data.items():
        if not isinstance(value, int) or isinstance(value, bool):
            raise WrongFeeError(f"{key} must be an integer number of bps, got {value!r}")
    return FeeRates(**data)


@dataclass(frozen=True)
class EngineConfig:
    """Runtime config for the pool engine."""

    admins: Tuple[Account, ...] = ()
    default_fees: FeeRates = field(default_factory=FeeRates)
    default_fee_direction: FeeDirection = FeeDirection.COLLECT_ON_X
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.log_level not in _LOG_LEVELS:
            raise InvalidParameterError(f"invalid log_level: {self.log_level!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EngineConfig":
        if not isinstance(data, Mapping):
            raise InvalidParameterError("config must be a mapping")
        unknown = set(data) - _TOP_LEVEL_KEYS
        if unknown:
            raise InvalidParameterError(f"unknown config keys: {sorted(unknown)}")

        admins = data.get("admins") or ()
        if isinstance(admins, str) or not all(isinstance(a, str) for a in admins):
            raise InvalidParameterError("admins must be a list of account strings")

        direction_raw = data.get("default_fee_direction", FeeDirection.COLLECT_ON_X.name)
        try:
            direction = FeeDirection[str(direction_raw).upper()]
        except KeyError:
            raise InvalidParameterError(f"invalid default_fee_direction: {direction_raw!r}") from None

        return cls(
            admins=tuple(admins),
            default_fees=fee_rates_from_dict(data.get("default_fees") or {}),
            default_fee_direction=direction,
            log_level=str(data.get("log_level", "INFO")).upper(),
        )


def load_config(path: Union[str, Path]) -> EngineConfig:
    """Read an ``EngineConfig`` from a YAML file."""
    text = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    config = EngineConfig.from_dict(data)
    logger.debug("Loaded engine config from %s (%d admins)", path, len(config.admins))
    return config


def configure_logging(config: EngineConfig) -> None:
    """Apply ``config.log_level`` to the package logger."""
    logging.getLogger("pairpool").setLevel(config.log_level)
