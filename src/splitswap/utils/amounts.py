"""Decimal amount helpers.

All arithmetic is done with ``Decimal`` under a wide local context so that
base-unit amounts (up to uint256) never lose digits.
"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext
from typing import Optional, Sequence, Union

from splitswap.errors import ValidationError

# uint256 has 78 decimal digits; leave headroom for fractional parts
AMOUNT_PRECISION = 100

DISTRIBUTION_TOTAL = 100

Number = Union[str, int, Decimal]


def to_decimal(value: Number) -> Decimal:
    """Convert to Decimal, raising ValidationError on junk."""
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}", {"amount": str(value)})
    if not result.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}", {"amount": str(value)})
    return result


def parse_amount(value: Optional[Number]) -> Decimal:
    """Parse a positive swap amount."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Amount is required")
    amount = to_decimal(value)
    if amount <= 0:
        raise ValidationError(f"Amount must be positive: {value}", {"amount": str(value)})
    return amount


def is_integral(amount: Decimal) -> bool:
    return amount == amount.to_integral_value()


def from_token_amount(amount: Optional[Number], decimals: int) -> Decimal:
    """Convert a human readable amount (e.g. "1.5") to base units.

    Non-numeric input yields 0.
    """
    try:
        value = to_decimal(amount) if amount not in (None, "") else Decimal(0)
    except ValidationError:
        return Decimal(0)
    with localcontext() as ctx:
        ctx.prec = AMOUNT_PRECISION
        return value.scaleb(decimals)


def to_token_amount(amount: Number, decimals: int) -> str:
    """Convert a base-unit amount to a human readable string."""
    with localcontext() as ctx:
        ctx.prec = AMOUNT_PRECISION
        value = to_decimal(amount).scaleb(-decimals).normalize()
    return format(value, "f")


def split_amount(
    amount: Decimal,
    distribution: Sequence[int],
    quantum: Optional[Decimal] = None,
) -> list[Decimal]:
    """Split ``amount`` into per-part amounts by percentage weights.

    Each part is ``amount * weight / 100``; when ``quantum`` is given, parts
    are rounded down to it. The last part takes the residual, so the parts
    always sum back to ``amount`` exactly.

    Args:
        amount: Total input amount
        distribution: Integer weights summing to 100
        quantum: Optional rounding step (``Decimal(1)`` for base units)

    Returns:
        One amount per weight
    """
    if not distribution:
        return []
    if any(weight < 0 for weight in distribution):
        raise ValueError(f"Negative distribution weight: {list(distribution)}")
    if sum(distribution) != DISTRIBUTION_TOTAL:
        raise ValueError(
            f"Distribution must sum to {DISTRIBUTION_TOTAL}, got {sum(distribution)}"
        )

    parts: list[Decimal] = []
    with localcontext() as ctx:
        ctx.prec = AMOUNT_PRECISION
        for weight in distribution[:-1]:
            part = amount * weight / DISTRIBUTION_TOTAL
            if quantum is not None:
                part = part.quantize(quantum, rounding=ROUND_DOWN)
            parts.append(part)
        parts.append(amount - sum(parts, Decimal(0)))
    return parts
