"""Shared fixtures for ledger tests."""

import pytest

from betledger.clock import ManualClock
from betledger.config import get_settings
from betledger.events import EventSink, LedgerEvent
from betledger.ledger import BetLedger
from betledger.storage import InMemoryBetStore

START_NS = 1_700_000_000_000_000_000


class RecordingSink(EventSink):
    def __init__(self) -> None:
        self.events: list[LedgerEvent] = []

    def emit(self, event: LedgerEvent) -> None:
        self.events.append(event)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(start=START_NS)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def ledger(clock: ManualClock, sink: RecordingSink) -> BetLedger:
    return BetLedger(InMemoryBetStore(), clock=clock, sink=sink)


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a fresh data directory and clear the settings cache."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("LOGFIRE_TOKEN", raising=False)
    get_settings.cache_clear()
    yield tmp_path / "data"
    get_settings.cache_clear()
