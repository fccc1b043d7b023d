"""Integer minor-unit money helpers"""

from typing import List

from billing_engine.domain.exceptions import InvalidAmountError, InvalidPercentageValue

BASIS_POINTS_SCALE = 10_000  # 10,000 bp = 100%


def validate_basis_points(bp: int) -> int:
    """Reject basis points outside [0, 10000]"""
    if isinstance(bp, bool) or not isinstance(bp, int) or not 0 <= bp <= BASIS_POINTS_SCALE:
        raise InvalidPercentageValue(bp)
    return bp


def validate_minor(value: int, field: str = "amount_minor") -> int:
    """Reject negative or non-integer minor-unit amounts"""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidAmountError(field, value)
    return value


def apply_basis_points(amount_minor: int, bp: int) -> int:
    """
    Apply a basis-point rate to a minor-unit amount, rounding half-up.

    Example:
        apply_basis_points(90_000, 1_800) → 16_200  (18% of 900.00)
        apply_basis_points(5, 5_000) → 3            (2.5 rounds up)
    """
    validate_minor(amount_minor)
    validate_basis_points(bp)
    return (amount_minor * bp + BASIS_POINTS_SCALE // 2) // BASIS_POINTS_SCALE


def split_evenly(amount_minor: int, parts: int) -> List[int]:
    """
    Split an amount into `parts` integers that sum exactly to the amount.

    The first `amount % parts` shares carry one extra minor unit.

    Example:
        split_evenly(10, 3) → [4, 3, 3]
    """
    validate_minor(amount_minor)
    base_amount = amount_minor // parts
    remainder = amount_minor % parts
    return [base_amount + (1 if i < remainder else 0) for i in range(parts)]
