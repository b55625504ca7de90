"""The bet ledger: identity-keyed bet records with audited status changes.

A ``BetLedger`` is constructed once by the hosting service and passed to
whatever needs it. Mutations (``create``, ``transition``) are serialized by a
lock owned by the ledger; each reads the clock once and commits exactly one
replacement record to the store. Reads never take the lock and never touch
the clock except ``list_by_status_age``, which needs the current instant.
"""

import logging
import threading

from betledger.clock import Clock, SystemClock
from betledger.events import BetCreated, BetStatusChanged, EventSink, LedgerEvent, LoggingEventSink
from betledger.exceptions import BetNotFoundError
from betledger.models import U128_MAX, Bet, BetStatus, StatusChange
from betledger.policy import accepts_transition
from betledger.storage.base import BetStore

logger = logging.getLogger(__name__)


class BetLedger:
    """Store of bet records plus the id allocator.

    Example:
        ledger = BetLedger(InMemoryBetStore(), clock=ManualClock())
        bet_id = ledger.create("base_a1", "base_b2", 100, "coin flip")
        ledger.transition(bet_id, BetStatus.LIVE)
        ledger.history(bet_id)  # [Unfunded@0, Live@0]
    """

    def __init__(
        self,
        store: BetStore,
        clock: Clock | None = None,
        sink: EventSink | None = None,
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.sink = sink or LoggingEventSink()
        self._write_lock = threading.Lock()
        # Clock readings never fall behind the newest persisted timestamp
        self._floor_ns = max((bet.last_status_change for bet in store.values()), default=0)

    def _now(self) -> int:
        self._floor_ns = max(self._floor_ns, self.clock.now())
        return self._floor_ns

    def _emit(self, event: LedgerEvent) -> None:
        """Deliver an event for a committed write; sink failures are logged, not raised."""
        try:
            self.sink.emit(event)
        except Exception as e:
            logger.error(f"Failed to emit event for bet {event.bet_id}: {e}")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(
        self,
        participant1_deposit_path: str,
        participant2_deposit_path: str,
        amount: int,
        resolution_criteria: str,
    ) -> int:
        """Create an unfunded bet and return its id.

        No business validation is applied: empty paths, empty criteria and a
        zero amount are all accepted. ``amount`` must fit in an unsigned
        128-bit integer.
        """
        if not 0 <= amount <= U128_MAX:
            raise ValueError(f"amount must be between 0 and 2**128 - 1, got {amount}")

        with self._write_lock:
            bet_id = self.store.next_id
            now = self._now()
            bet = Bet.new(
                bet_id=bet_id,
                participant1_deposit_path=participant1_deposit_path,
                participant2_deposit_path=participant2_deposit_path,
                amount=amount,
                resolution_criteria=resolution_criteria,
                created_at=now,
            )
            self.store.put(bet, next_id=bet_id + 1)

        self._emit(BetCreated(bet_id=bet_id, timestamp=now))
        return bet_id

    def transition(self, bet_id: int, new_status: BetStatus | str) -> None:
        """Move a bet to ``new_status``.

        Raises:
            BetNotFoundError: ``bet_id`` is not in the ledger.

        Re-assigning the current status records nothing and emits no event.
        """
        new_status = BetStatus.parse(new_status)

        with self._write_lock:
            bet = self.store.get(bet_id)
            if bet is None:
                raise BetNotFoundError(bet_id)

            if not accepts_transition(bet.status, new_status):
                logger.debug(f"Bet {bet_id} already {new_status.value}, nothing to record")
                return

            now = self._now()
            self.store.put(bet.with_status(new_status, now))

        self._emit(BetStatusChanged(bet_id=bet_id, new_status=new_status, timestamp=now))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, bet_id: int) -> Bet | None:
        return self.store.get(bet_id)

    def list_bets(self) -> list[Bet]:
        """All bets, in ascending id order."""
        return self.store.values()

    def list_by_status(self, status: BetStatus | str) -> list[Bet]:
        status = BetStatus.parse(status)
        return [bet for bet in self.store.values() if bet.status == status]

    def list_by_status_age(self, status: BetStatus | str, min_age_ns: int) -> list[Bet]:
        """Bets in ``status`` that have been there for at least ``min_age_ns``.

        Dwell time is measured against the clock at call time and floored at
        zero, so a clock reading behind ``last_status_change`` counts as zero.
        """
        if min_age_ns < 0:
            raise ValueError(f"min_age_ns must be non-negative, got {min_age_ns}")

        status = BetStatus.parse(status)
        now = max(self._floor_ns, self.clock.now())
        return [
            bet
            for bet in self.store.values()
            if bet.status == status and bet.dwell_time_ns(now) >= min_age_ns
        ]

    def history(self, bet_id: int) -> list[StatusChange] | None:
        bet = self.store.get(bet_id)
        if bet is None:
            return None
        return list(bet.status_history)

    def count_by_status(self) -> dict[BetStatus, int]:
        counts = {status: 0 for status in BetStatus}
        for bet in self.store.values():
            counts[bet.status] += 1
        return counts
