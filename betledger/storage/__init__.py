"""Storage layer for the bet ledger.

This package provides:
- The ``BetStore`` interface (id -> Bet map plus the id counter)
- An in-memory store
- A YAML file store with atomic writes
"""

from .base import BetStore
from .memory import InMemoryBetStore
from .yaml_store import LedgerState, YamlBetStore, load_ledger_state, save_ledger_state

__all__ = [
    "BetStore",
    "InMemoryBetStore",
    "YamlBetStore",
    "LedgerState",
    "load_ledger_state",
    "save_ledger_state",
]
