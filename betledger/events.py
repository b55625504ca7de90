"""Observable ledger events and the sinks that receive them."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

from betledger.models import BetStatus

logger = logging.getLogger(__name__)


class BetCreated(BaseModel):
    """Emitted once per successful create."""

    event: Literal["bet_created"] = "bet_created"
    bet_id: int
    timestamp: int

    @property
    def message(self) -> str:
        return f"New bet created with id {self.bet_id}"


class BetStatusChanged(BaseModel):
    """Emitted once per recorded status transition."""

    event: Literal["bet_status_changed"] = "bet_status_changed"
    bet_id: int
    new_status: BetStatus
    timestamp: int

    @property
    def message(self) -> str:
        return f"Bet {self.bet_id} updated to status {self.new_status.value}"


LedgerEvent = BetCreated | BetStatusChanged


class EventSink(ABC):
    """Receives ledger events after the corresponding write has committed."""

    @abstractmethod
    def emit(self, event: LedgerEvent) -> None: ...


class LoggingEventSink(EventSink):
    """Write each event's message to the log at INFO."""

    def emit(self, event: LedgerEvent) -> None:
        logger.info(event.message)


class JsonlEventSink(LoggingEventSink):
    """Log each event and append it as one JSON line to ``path``."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def emit(self, event: LedgerEvent) -> None:
        super().emit(event)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(event.model_dump_json() + "\n")
        except Exception as e:
            logger.error(f"Failed to record event for bet {event.bet_id}: {e}")
            raise
