"""Helpers for the values recorded on a bet: deposit paths, amounts, durations."""

import math
from decimal import Decimal, InvalidOperation, localcontext
from uuid import uuid4

NS_PER_SECOND = 1_000_000_000
NS_PER_HOUR = 3600 * NS_PER_SECOND


def generate_deposit_path(prefix: str = "base") -> str:
    """Generate a unique deposit derivation path (e.g. 'base_3f9c...', 32 hex chars)."""
    return f"{prefix}_{uuid4().hex}"


def to_base_units(amount: Decimal | str | int, decimals: int) -> int:
    """Convert a whole-unit amount to integer base units.

    ``to_base_units("12.5", 6) == 12_500_000``. The conversion is exact:
    more fractional digits than ``decimals`` is an error, not a rounding.
    """
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}") from None

    if not value.is_finite() or value < 0:
        raise ValueError(f"Amount must be a finite non-negative number, got {amount!r}")

    # u128 amounts need more digits than the default 28
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = value.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise ValueError(f"Amount {amount} has more than {decimals} decimal places")
        return int(scaled)


def format_base_units(amount: int, decimals: int) -> str:
    """Render integer base units as a whole-unit decimal string."""
    if decimals == 0:
        return str(amount)
    whole, fraction = divmod(amount, 10**decimals)
    return f"{whole}.{fraction:0{decimals}d}"


def ns_from_hours(hours: float) -> int:
    if not math.isfinite(hours) or hours < 0:
        raise ValueError(f"hours must be a finite non-negative number, got {hours}")
    return int(Decimal(str(hours)) * NS_PER_HOUR)
