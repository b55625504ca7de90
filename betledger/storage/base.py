"""Durable map interface the ledger persists through."""

from abc import ABC, abstractmethod

from betledger.models import Bet


class BetStore(ABC):
    """Map from bet id to ``Bet`` plus the id allocation counter.

    ``put`` commits the record and, when given, the counter as one write:
    after a crash either both are visible or neither is.
    """

    @property
    @abstractmethod
    def next_id(self) -> int: ...

    @abstractmethod
    def get(self, bet_id: int) -> Bet | None: ...

    @abstractmethod
    def values(self) -> list[Bet]:
        """All stored bets in insertion order (ascending id)."""

    @abstractmethod
    def put(self, bet: Bet, next_id: int | None = None) -> None: ...
