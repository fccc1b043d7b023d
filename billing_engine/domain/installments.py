"""Installment schedule generation for product payment plans"""

from datetime import datetime
from typing import List

from billing_engine.domain.exceptions import DownPaymentExceedsTotal, InvalidInstallmentCount
from billing_engine.domain.models import PaymentScheduleEntry, ProductPaymentPlan
from billing_engine.domain.money import split_evenly, validate_minor
from billing_engine.utils.date_utils import advance_by_interval, to_utc


def generate_payment_schedule(
    plan: ProductPaymentPlan,
    total_amount_minor: int,
    start_at: datetime,
) -> List[PaymentScheduleEntry]:
    """
    Expand a payment plan into dated obligations that sum exactly to the total.

    Requirements:
    - Down payment (when > 0) is installment 0, due at `start_at`
    - Remaining amount split across `num_installments` as evenly as integers allow
    - First installments absorb the remainder, one minor unit each
    - Installment i is due `i` plan intervals after `start_at`

    Args:
        plan: Payment plan definition
        total_amount_minor: Amount to schedule (usually the line total)
        start_at: Invoice date; due dates are computed in UTC

    Returns:
        List of PaymentScheduleEntry ordered by installment number

    Example:
        100,000 with 20,000 down over 3 monthly installments from 2025-01-15
        → [20,000 @ 01-15, 26,667 @ 02-15, 26,667 @ 03-15, 26,666 @ 04-15]

    Raises:
        InvalidInstallmentCount: num_installments < 1
        DownPaymentExceedsTotal: down payment larger than total_amount_minor
    """
    num_installments = plan.num_installments
    if isinstance(num_installments, bool) or not isinstance(num_installments, int) or num_installments < 1:
        raise InvalidInstallmentCount(num_installments)

    validate_minor(total_amount_minor, "total_amount_minor")
    down_payment = validate_minor(plan.down_payment_minor or 0, "down_payment_minor")
    if down_payment > total_amount_minor:
        raise DownPaymentExceedsTotal(down_payment, total_amount_minor)

    start_at = to_utc(start_at)
    schedule: List[PaymentScheduleEntry] = []

    if down_payment > 0:
        schedule.append(
            PaymentScheduleEntry(
                installment_num=0,
                due_at=start_at,
                amount_minor=down_payment,
                description="Down payment",
            )
        )

    amounts = split_evenly(total_amount_minor - down_payment, num_installments)
    for i, amount in enumerate(amounts, start=1):
        schedule.append(
            PaymentScheduleEntry(
                installment_num=i,
                due_at=advance_by_interval(start_at, i, plan.interval_type, plan.interval_days),
                amount_minor=amount,
                description=f"Installment {i} of {num_installments}",
            )
        )

    return schedule
