"""Bet records and their status history.

Records are immutable pydantic models. A status change never edits a record in
place; it produces a replacement with one more history entry, so a reader holding
a ``Bet`` always sees a status, timestamp and history that agree with each other.
"""

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1

Timestamp = Annotated[int, Field(ge=0, le=U64_MAX, description="Nanoseconds from the ledger clock")]
BetId = Annotated[int, Field(ge=0, le=U64_MAX)]


class BetStatus(str, Enum):
    """Lifecycle status of a bet. No ordering or transition graph is implied."""

    UNFUNDED = "Unfunded"
    LIVE = "Live"
    RESOLVED = "Resolved"
    INCONCLUSIVE = "Inconclusive"

    @classmethod
    def parse(cls, value: "BetStatus | str") -> "BetStatus":
        """Accept an enum member or its name, case-insensitively ("live", "Live")."""
        if isinstance(value, cls):
            return value
        for status in cls:
            if status.value.lower() == str(value).strip().lower():
                return status
        raise ValueError(
            f"Invalid bet status: {value!r} "
            f"(expected one of {', '.join(s.value for s in cls)})"
        )


class StatusChange(BaseModel):
    """One audit entry: the status a bet entered and when."""

    model_config = ConfigDict(frozen=True)

    status: BetStatus
    timestamp: Timestamp


class Bet(BaseModel):
    """A tracked wager record."""

    model_config = ConfigDict(frozen=True)

    id: BetId
    participant1_deposit_path: str
    participant2_deposit_path: str
    amount: int = Field(ge=0, le=U128_MAX, description="Opaque amount in base units")
    status: BetStatus
    created_at: Timestamp
    last_status_change: Timestamp
    status_history: tuple[StatusChange, ...]
    resolution_criteria: str

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        # u128 travels as a decimal string in JSON/YAML
        if isinstance(v, str):
            text = v.strip()
            if not (text.isascii() and text.isdigit()):
                raise ValueError(f"amount must be a non-negative integer, got {v!r}")
            return int(text)
        return v

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: int) -> str:
        return str(amount)

    @model_validator(mode="after")
    def check_history(self) -> "Bet":
        history = self.status_history
        if not history:
            raise ValueError("status_history must not be empty")

        first = history[0]
        if first.status != BetStatus.UNFUNDED or first.timestamp != self.created_at:
            raise ValueError(
                "status_history must start with Unfunded at created_at "
                f"(got {first.status.value} at {first.timestamp}, created_at={self.created_at})"
            )

        for previous, current in zip(history, history[1:]):
            if current.timestamp < previous.timestamp:
                raise ValueError(
                    f"status_history timestamps must be non-decreasing "
                    f"({current.timestamp} follows {previous.timestamp})"
                )

        last = history[-1]
        if self.status != last.status:
            raise ValueError(
                f"status {self.status.value} does not match last history entry {last.status.value}"
            )
        if self.last_status_change != last.timestamp:
            raise ValueError(
                f"last_status_change {self.last_status_change} does not match "
                f"last history entry {last.timestamp}"
            )
        return self

    @classmethod
    def new(
        cls,
        bet_id: int,
        participant1_deposit_path: str,
        participant2_deposit_path: str,
        amount: int,
        resolution_criteria: str,
        created_at: int,
    ) -> "Bet":
        """Build a freshly created, unfunded bet."""
        return cls(
            id=bet_id,
            participant1_deposit_path=participant1_deposit_path,
            participant2_deposit_path=participant2_deposit_path,
            amount=amount,
            status=BetStatus.UNFUNDED,
            created_at=created_at,
            last_status_change=created_at,
            status_history=(StatusChange(status=BetStatus.UNFUNDED, timestamp=created_at),),
            resolution_criteria=resolution_criteria,
        )

    def with_status(self, status: BetStatus, timestamp: int) -> "Bet":
        """Return a copy of this bet moved to ``status`` at ``timestamp``.

        The result is re-validated, so a timestamp earlier than the last
        history entry raises ``ValidationError`` instead of corrupting the history.
        """
        data = self.model_dump()
        data.update(
            status=status,
            last_status_change=timestamp,
            status_history=[
                *data["status_history"],
                {"status": status, "timestamp": timestamp},
            ],
        )
        return Bet.model_validate(data)

    def dwell_time_ns(self, now: int) -> int:
        """Time spent in the current status, floored at zero."""
        return max(0, now - self.last_status_change)
