"""betledger: wager record ledger with an auditable status history."""

__version__ = "0.1.0"

from betledger.exceptions import BetLedgerError, BetNotFoundError, LedgerStateError
from betledger.ledger import BetLedger
from betledger.models import Bet, BetStatus, StatusChange

__all__ = [
    "__version__",
    "Bet",
    "BetStatus",
    "StatusChange",
    "BetLedger",
    "BetLedgerError",
    "BetNotFoundError",
    "LedgerStateError",
]
