"""POST /v1/schedules/{payment,recurring} - Expand plans and subscriptions into dated obligations"""

import time
import logging
from dataclasses import asdict
from typing import Optional
from fastapi import APIRouter, Depends, Header, Request

from billing_engine.api.v1.schemas import (
    PaymentScheduleRequest,
    PaymentScheduleResponse,
    RecurringScheduleRequest,
    RecurringScheduleResponse,
)
from billing_engine.api.dependencies import billing_http_error, get_keyed_store, get_request_id
from billing_engine.config import settings
from billing_engine.domain.exceptions import BillingError
from billing_engine.domain.installments import generate_payment_schedule
from billing_engine.domain.recurring import cycles_for_horizon, generate_recurring_schedule
from billing_engine.infrastructure.keyed_store import KeyedStore, with_idempotency
from billing_engine.infrastructure.observability.metrics import record_schedule
from billing_engine.infrastructure.observability.logging import log_schedule_generated

router = APIRouter()


@router.post("/schedules/payment", response_model=PaymentScheduleResponse)
def create_payment_schedule(
    request_body: PaymentScheduleRequest,
    request: Request,
    store: KeyedStore = Depends(get_keyed_store),
    idempotency_key: Optional[str] = Header(None),
):
    """
    Generate an installment schedule for a payment plan.

    A repeated Idempotency-Key replays the first response.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    def generate() -> PaymentScheduleResponse:
        entries = generate_payment_schedule(
            request_body.plan.to_domain(),
            request_body.total_amount_minor,
            request_body.start_at,
        )
        return PaymentScheduleResponse(
            plan_id=request_body.plan.id,
            total_amount_minor=request_body.total_amount_minor,
            entries=[asdict(entry) for entry in entries],
        )

    try:
        response, replayed = with_idempotency(
            store,
            f"payment:{idempotency_key}" if idempotency_key else None,
            generate,
        )
    except BillingError as e:
        logging.warning(f"Payment schedule rejected: {e}", extra={"request_id": request_id, "code": e.code})
        raise billing_http_error(e)

    duration_ms = (time.time() - start_time) * 1000
    record_schedule("payment", len(response.entries), replayed)
    log_schedule_generated(
        request_id,
        "payment",
        len(response.entries),
        sum(entry.amount_minor for entry in response.entries),
        duration_ms,
        replayed,
    )

    return response


@router.post("/schedules/recurring", response_model=RecurringScheduleResponse)
def create_recurring_schedule(
    request_body: RecurringScheduleRequest,
    request: Request,
    store: KeyedStore = Depends(get_keyed_store),
    idempotency_key: Optional[str] = Header(None),
):
    """
    Project the upcoming billing cycles of a recurring product.

    Cycle count: requested_cycles if given, else derived from horizon_months
    (default from settings), always bounded by the cycle cap.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    product = request_body.product.to_domain()

    def generate() -> RecurringScheduleResponse:
        cap = settings.max_recurring_cycles
        if request_body.max_cycles_cap is not None:
            cap = min(cap, request_body.max_cycles_cap)

        requested = request_body.requested_cycles
        if requested is None and product.recurring_interval:
            horizon = request_body.horizon_months
            if horizon is None:
                horizon = settings.default_horizon_months
            requested = cycles_for_horizon(
                product.recurring_interval,
                horizon,
                product.recurring_interval_days,
            )

        entries = generate_recurring_schedule(
            product,
            request_body.per_cycle_amount_minor,
            request_body.start_at,
            requested or 0,
            cap,
        )
        return RecurringScheduleResponse(
            product_id=product.id,
            entries=[asdict(entry) for entry in entries],
        )

    try:
        response, replayed = with_idempotency(
            store,
            f"recurring:{idempotency_key}" if idempotency_key else None,
            generate,
        )
    except BillingError as e:
        logging.warning(f"Recurring schedule rejected: {e}", extra={"request_id": request_id, "code": e.code})
        raise billing_http_error(e)

    duration_ms = (time.time() - start_time) * 1000
    record_schedule("recurring", len(response.entries), replayed)
    log_schedule_generated(
        request_id,
        "recurring",
        len(response.entries),
        sum(entry.amount_minor for entry in response.entries),
        duration_ms,
        replayed,
    )

    return response
