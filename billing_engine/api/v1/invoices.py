"""POST /v1/invoices/calculate - Price line items against a catalog snapshot"""

import time
import logging
from dataclasses import asdict
from fastapi import APIRouter, Request

from billing_engine.api.v1.schemas import InvoiceCalculationRequest, InvoiceCalculationResponse
from billing_engine.api.dependencies import billing_http_error, get_request_id
from billing_engine.domain.exceptions import BillingError
from billing_engine.domain.pricing import calculate_invoice
from billing_engine.infrastructure.observability.metrics import record_invoice
from billing_engine.infrastructure.observability.logging import log_invoice_calculated

router = APIRouter()


@router.post("/invoices/calculate", response_model=InvoiceCalculationResponse)
def calculate(request_body: InvoiceCalculationRequest, request: Request):
    """
    Calculate invoice totals.

    Flow:
    1. Convert the catalog snapshot and line items to domain types
    2. Price each line (discount, tax, COGS)
    3. Roll up invoice totals
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        calculation = calculate_invoice(
            [product.to_domain() for product in request_body.products],
            [line.to_domain() for line in request_body.line_items],
        )
    except BillingError as e:
        logging.warning(f"Invoice calculation rejected: {e}", extra={"request_id": request_id, "code": e.code})
        raise billing_http_error(e)

    duration_ms = (time.time() - start_time) * 1000
    record_invoice(calculation.currency)
    log_invoice_calculated(
        request_id,
        calculation.currency,
        len(calculation.lines),
        calculation.total_minor,
        duration_ms,
    )

    return InvoiceCalculationResponse(**asdict(calculation))
