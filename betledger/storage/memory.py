"""Non-durable store for tests and embedding."""

from betledger.models import Bet
from betledger.storage.base import BetStore


class InMemoryBetStore(BetStore):
    def __init__(self) -> None:
        self._bets: dict[int, Bet] = {}
        self._next_id = 0

    @property
    def next_id(self) -> int:
        return self._next_id

    def get(self, bet_id: int) -> Bet | None:
        return self._bets.get(bet_id)

    def values(self) -> list[Bet]:
        return list(self._bets.values())

    def put(self, bet: Bet, next_id: int | None = None) -> None:
        self._bets[bet.id] = bet
        if next_id is not None:
            self._next_id = next_id
