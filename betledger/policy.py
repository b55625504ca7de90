"""Status transition acceptance.

Every status may follow every other status. Assigning a bet its current status
is not a transition and is dropped without recording anything.
"""

from betledger.models import BetStatus


def accepts_transition(current: BetStatus, new: BetStatus) -> bool:
    """Return True if moving from ``current`` to ``new`` should be recorded."""
    return new != current
