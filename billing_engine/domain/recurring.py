"""Recurring revenue schedule generation for subscription products"""

import logging
from datetime import datetime
from typing import List, Optional

from billing_engine.domain.exceptions import InvalidIntervalError
from billing_engine.domain.models import Product, RecurringScheduleEntry
from billing_engine.domain.money import validate_minor
from billing_engine.utils.date_utils import advance_by_interval, to_utc, validate_interval

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30  # horizon approximation for day-based intervals


def cycles_for_horizon(interval: str, horizon_months: int, interval_days: Optional[int] = None) -> int:
    """
    Number of whole billing cycles that fit in a projection horizon.

    Example:
        cycles_for_horizon("quarterly", 12) → 4
        cycles_for_horizon("weekly", 12) → 51   (360 days / 7)
    """
    if interval == "weekly":
        return (horizon_months * DAYS_PER_MONTH) // 7
    if interval == "monthly":
        return horizon_months
    if interval == "quarterly":
        return horizon_months // 3
    if interval == "semiannual":
        return horizon_months // 6
    if interval == "annual":
        return horizon_months // 12
    if interval == "custom_days":
        if isinstance(interval_days, bool) or not isinstance(interval_days, int) or interval_days <= 0:
            raise InvalidIntervalError(interval, interval_days)
        return (horizon_months * DAYS_PER_MONTH) // interval_days

    raise InvalidIntervalError(interval, interval_days)


def generate_recurring_schedule(
    product: Product,
    per_cycle_amount_minor: int,
    start_at: datetime,
    requested_cycles: int,
    max_cycles_cap: int,
) -> List[RecurringScheduleEntry]:
    """
    Materialize the next billing cycles of a recurring product.

    Requirements:
    - Length is min(requested_cycles, max_cycles_cap)
    - Cycle k is billed k product intervals after `start_at`
    - Amount is constant across cycles

    Returns an empty list for products without a recurring interval.
    The interval is validated even when no cycles are produced.

    Example:
        monthly, 5,000 from 2025-04-01, requested 6, cap 4
        → cycles 1..4 billed 05-01, 06-01, 07-01, 08-01
    """
    if not product.recurring_interval:
        logger.debug("Product is not recurring", extra={"product_id": product.id})
        return []

    validate_interval(product.recurring_interval, product.recurring_interval_days)
    validate_minor(per_cycle_amount_minor, "per_cycle_amount_minor")
    start_at = to_utc(start_at)
    cycle_count = max(0, min(requested_cycles, max_cycles_cap))
    label = f" - {product.name}" if product.name else ""

    return [
        RecurringScheduleEntry(
            cycle_num=cycle,
            billing_at=advance_by_interval(
                start_at,
                cycle,
                product.recurring_interval,
                product.recurring_interval_days,
            ),
            amount_minor=per_cycle_amount_minor,
            description=f"Cycle {cycle}{label}",
        )
        for cycle in range(1, cycle_count + 1)
    ]
