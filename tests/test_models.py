"""Unit tests for bet records and their history invariants."""

import pytest
from pydantic import ValidationError

from betledger.models import U128_MAX, Bet, BetStatus, StatusChange


def _bet(**overrides) -> Bet:
    bet = Bet.new(
        bet_id=0,
        participant1_deposit_path="base_p1",
        participant2_deposit_path="base_p2",
        amount=100,
        resolution_criteria="coin flip",
        created_at=1_000,
    )
    if not overrides:
        return bet
    data = bet.model_dump()
    data.update(overrides)
    return Bet.model_validate(data)


def test_new_bet_starts_unfunded_with_one_history_entry() -> None:
    bet = _bet()

    assert bet.status == BetStatus.UNFUNDED
    assert bet.created_at == bet.last_status_change == 1_000
    assert bet.status_history == (StatusChange(status=BetStatus.UNFUNDED, timestamp=1_000),)


def test_with_status_appends_and_leaves_original_untouched() -> None:
    bet = _bet()

    live = bet.with_status(BetStatus.LIVE, 2_000)

    assert live.status == BetStatus.LIVE
    assert live.last_status_change == 2_000
    assert [c.status for c in live.status_history] == [BetStatus.UNFUNDED, BetStatus.LIVE]
    assert live.created_at == 1_000
    assert bet.status == BetStatus.UNFUNDED
    assert len(bet.status_history) == 1


def test_with_status_rejects_timestamp_before_last_change() -> None:
    live = _bet().with_status(BetStatus.LIVE, 2_000)

    with pytest.raises(ValidationError):
        live.with_status(BetStatus.RESOLVED, 1_999)


def test_with_status_accepts_equal_timestamp() -> None:
    bet = _bet().with_status(BetStatus.LIVE, 1_000)

    assert bet.status_history[-1].timestamp == bet.status_history[0].timestamp


def test_bets_are_immutable() -> None:
    bet = _bet()

    with pytest.raises(ValidationError):
        bet.status = BetStatus.LIVE


@pytest.mark.parametrize(
    "overrides",
    [
        {"status_history": []},
        {"status": BetStatus.LIVE},
        {"last_status_change": 1_001},
        {"created_at": 999},
        {"status_history": [{"status": BetStatus.LIVE, "timestamp": 1_000}], "status": BetStatus.LIVE},
        {
            "status_history": [
                {"status": BetStatus.UNFUNDED, "timestamp": 1_000},
                {"status": BetStatus.LIVE, "timestamp": 3_000},
                {"status": BetStatus.RESOLVED, "timestamp": 2_000},
            ],
            "status": BetStatus.RESOLVED,
            "last_status_change": 2_000,
        },
    ],
)
def test_inconsistent_history_is_rejected(overrides) -> None:
    with pytest.raises(ValidationError):
        _bet(**overrides)


def test_amount_bounds() -> None:
    assert _bet(amount=0).amount == 0
    assert _bet(amount=U128_MAX).amount == U128_MAX

    with pytest.raises(ValidationError):
        _bet(amount=-1)
    with pytest.raises(ValidationError):
        _bet(amount=U128_MAX + 1)


def test_amount_serializes_as_string_in_json_and_parses_back() -> None:
    bet = _bet(amount=U128_MAX)

    data = bet.model_dump(mode="json")
    assert data["amount"] == str(U128_MAX)
    assert bet.model_dump()["amount"] == U128_MAX

    assert Bet.model_validate_json(bet.model_dump_json()) == bet


def test_amount_rejects_non_integer_strings() -> None:
    with pytest.raises(ValidationError):
        _bet(amount="12.5")


def test_status_serializes_as_variant_name() -> None:
    data = _bet().model_dump(mode="json")

    assert data["status"] == "Unfunded"
    assert data["status_history"] == [{"status": "Unfunded", "timestamp": 1_000}]


def test_status_parse_is_case_insensitive() -> None:
    assert BetStatus.parse("live") == BetStatus.LIVE
    assert BetStatus.parse(" Inconclusive ") == BetStatus.INCONCLUSIVE
    assert BetStatus.parse(BetStatus.RESOLVED) is BetStatus.RESOLVED

    with pytest.raises(ValueError):
        BetStatus.parse("Settled")


def test_dwell_time_is_floored_at_zero() -> None:
    bet = _bet()

    assert bet.dwell_time_ns(1_500) == 500
    assert bet.dwell_time_ns(1_000) == 0
    assert bet.dwell_time_ns(10) == 0


@pytest.mark.parametrize("amount", ["١٢", "²", "１２"])
def test_amount_rejects_non_ascii_digit_strings(amount: str) -> None:
    with pytest.raises(ValidationError):
        _bet(amount=amount)
