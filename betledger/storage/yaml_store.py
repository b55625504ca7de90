"""Ledger state persisted to a YAML file with atomic writes.

Every commit rewrites the whole file through a tempfile -> rename, so if the
process crashes mid-write the previous ledger.yaml remains intact.
"""

import logging
import os
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from betledger.exceptions import LedgerStateError
from betledger.models import Bet
from betledger.storage.base import BetStore

logger = logging.getLogger(__name__)


class LedgerState(BaseModel):
    """Complete persisted ledger - matches the ledger.yaml schema."""

    last_updated: datetime | None = None
    next_id: int = Field(default=0, ge=0)
    bets: dict[int, Bet] = Field(default_factory=dict)


def _check_state(state: LedgerState, path: Path) -> None:
    for key, bet in state.bets.items():
        if key != bet.id:
            raise LedgerStateError(f"{path}: bet stored under key {key} has id {bet.id}")
        if bet.id >= state.next_id:
            raise LedgerStateError(
                f"{path}: next_id {state.next_id} is not greater than stored bet id {bet.id}"
            )


def load_ledger_state(path: Path) -> LedgerState:
    """Load ledger state from ``path``; a missing or empty file is an empty ledger."""
    if not path.exists():
        logger.info(f"Ledger file not found: {path}. Starting with an empty ledger.")
        return LedgerState()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Corrupted YAML in ledger file: {e}")
        raise

    if not raw_data:
        logger.warning(f"Empty ledger file: {path}. Starting with an empty ledger.")
        return LedgerState()

    if not isinstance(raw_data, dict):
        raise LedgerStateError(f"{path}: expected a mapping, got {type(raw_data).__name__}")

    try:
        state = LedgerState(**raw_data)
    except ValidationError as e:
        logger.error(f"Invalid ledger state in {path}: {e}")
        raise LedgerStateError(f"{path}: invalid ledger state: {e}") from e

    _check_state(state, path)
    logger.debug(f"Loaded {len(state.bets)} bets from {path}")
    return state


def save_ledger_state(state: LedgerState, path: Path) -> None:
    """Atomically write ``state`` to ``path``."""
    state_dict = state.model_dump(mode="json")

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            delete=False,
            suffix=".yaml",
            encoding="utf-8",
        ) as temp_file:
            temp_path = Path(temp_file.name)
            yaml.dump(
                state_dict,
                temp_file,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            )
            temp_file.flush()
            os.fsync(temp_file.fileno())

        shutil.move(str(temp_path), str(path))
        logger.debug(f"Saved ledger to {path}")

    except Exception as e:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        logger.error(f"Failed to save ledger: {e}")
        raise


class YamlBetStore(BetStore):
    """Durable store backed by a single YAML file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._state = load_ledger_state(self.path)

    @property
    def next_id(self) -> int:
        return self._state.next_id

    def get(self, bet_id: int) -> Bet | None:
        return self._state.bets.get(bet_id)

    def values(self) -> list[Bet]:
        return list(self._state.bets.values())

    def put(self, bet: Bet, next_id: int | None = None) -> None:
        bets = dict(self._state.bets)
        bets[bet.id] = bet
        new_state = LedgerState(
            last_updated=datetime.now(timezone.utc),
            next_id=self._state.next_id if next_id is None else next_id,
            bets=bets,
        )
        # Swap the in-memory view only once the file is committed
        save_ledger_state(new_state, self.path)
        self._state = new_state
