"""
Imperative shell: collaborators, configuration and the pool engine.
"""

from .collaborators import AdminAllowList, Authorizer, Clock, FixedClock, SystemClock
from .config import EngineConfig, configure_logging, load_config
from .pool_engine import PoolEngine, pool_account

__all__ = [
    "AdminAllowList",
    "Authorizer",
    "Clock",
    "FixedClock",
    "SystemClock",
    "EngineConfig",
    "configure_logging",
    "load_config",
    "PoolEngine",
    "pool_account",
]
