"""
pairpool: two-asset liquidity pool engine.

- ``pairpool.core``: pure swap / fee / liquidity / statistics math
- ``pairpool.state``: pool and bank state, keyed store, ledgers and events
- ``pairpool.integration``: imperative shell wiring the core to its collaborators
"""

__version__ = "0.1.0"
