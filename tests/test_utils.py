"""Tests for amount, path and duration helpers."""

from decimal import Decimal

import pytest

from betledger.models import U128_MAX
from betledger.utils import (
    NS_PER_HOUR,
    format_base_units,
    generate_deposit_path,
    ns_from_hours,
    to_base_units,
)


def test_generate_deposit_path() -> None:
    path = generate_deposit_path()

    assert path.startswith("base_")
    assert len(path) == len("base_") + 32
    assert generate_deposit_path() != path
    assert generate_deposit_path("eth").startswith("eth_")


@pytest.mark.parametrize(
    "amount, decimals, expected",
    [
        ("12.5", 6, 12_500_000),
        ("100", 6, 100_000_000),
        (Decimal("0.000001"), 6, 1),
        (7, 0, 7),
        ("0", 6, 0),
    ],
)
def test_to_base_units(amount, decimals, expected) -> None:
    assert to_base_units(amount, decimals) == expected


def test_to_base_units_is_exact_for_u128_amounts() -> None:
    assert to_base_units("340282366920938463463374607431.768211455", 9) == U128_MAX


@pytest.mark.parametrize("amount", ["1.0000001", "-1", "abc", "nan", "inf"])
def test_to_base_units_rejects(amount) -> None:
    with pytest.raises(ValueError):
        to_base_units(amount, 6)


def test_format_base_units() -> None:
    assert format_base_units(12_500_000, 6) == "12.500000"
    assert format_base_units(1, 6) == "0.000001"
    assert format_base_units(5, 0) == "5"
    assert format_base_units(U128_MAX, 9) == "340282366920938463463374607431.768211455"


def test_ns_from_hours() -> None:
    assert ns_from_hours(1) == NS_PER_HOUR
    assert ns_from_hours(1.5) == 5_400_000_000_000
    with pytest.raises(ValueError):
        ns_from_hours(-1)


@pytest.mark.parametrize("hours", [float("inf"), float("-inf"), float("nan")])
def test_ns_from_hours_rejects_non_finite(hours: float) -> None:
    with pytest.raises(ValueError):
        ns_from_hours(hours)
