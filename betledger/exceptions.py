"""Custom exceptions for the bet ledger."""


class BetLedgerError(Exception):
    """Base exception for bet ledger errors."""

    pass


class BetNotFoundError(BetLedgerError):
    """Operation referenced a bet id absent from the ledger."""

    def __init__(self, bet_id: int):
        super().__init__(f"Bet not found: {bet_id}")
        self.bet_id = bet_id


class LedgerStateError(BetLedgerError):
    """Persisted ledger state violates ledger invariants."""

    pass
