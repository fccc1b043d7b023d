"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from billing_engine.domain.models import (
    LineItemInput,
    Product,
    ProductPaymentPlan,
)

IntervalLiteral = Literal["weekly", "monthly", "quarterly", "semiannual", "annual", "custom_days"]
AdjustmentLiteral = Literal["percent", "amount"]


class ProductSchema(BaseModel):
    """Catalog product snapshot supplied by the caller"""

    id: str = Field(..., min_length=1)
    name: str = ""
    currency: str = Field(..., min_length=3, max_length=3, description="ISO 4217 code")
    price_minor: int = Field(..., ge=0)
    tax_rate_bp: int = Field(0, ge=0, le=10_000)
    cogs_type: Optional[AdjustmentLiteral] = None
    cogs_value: Optional[int] = Field(None, ge=0)
    discount_type: Optional[AdjustmentLiteral] = None
    discount_value: Optional[int] = Field(None, ge=0)
    recurring_interval: Optional[IntervalLiteral] = None
    recurring_interval_days: Optional[int] = Field(None, gt=0)

    @model_validator(mode="after")
    def check_percentages(self) -> "ProductSchema":
        for kind, value in ((self.cogs_type, self.cogs_value), (self.discount_type, self.discount_value)):
            if kind == "percent" and value is not None and value > 10_000:
                raise ValueError("percent values are basis points and must be <= 10000")
        if self.recurring_interval == "custom_days" and not self.recurring_interval_days:
            raise ValueError("recurring_interval_days is required for custom_days")
        return self

    def to_domain(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            currency=self.currency.upper(),
            price_minor=self.price_minor,
            tax_rate_bp=self.tax_rate_bp,
            cogs_type=self.cogs_type,
            cogs_value=self.cogs_value,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            recurring_interval=self.recurring_interval,
            recurring_interval_days=self.recurring_interval_days,
        )


class LineItemSchema(BaseModel):
    """Requested invoice line"""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    unit_price_override_minor: Optional[int] = Field(None, ge=0)
    discount_type: Optional[AdjustmentLiteral] = None
    discount_value: Optional[int] = Field(None, ge=0)
    payment_plan_id: Optional[str] = None

    def to_domain(self) -> LineItemInput:
        return LineItemInput(
            product_id=self.product_id,
            quantity=self.quantity,
            unit_price_override_minor=self.unit_price_override_minor,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            payment_plan_id=self.payment_plan_id,
        )


class PaymentPlanSchema(BaseModel):
    """Installment plan definition"""

    id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    name: str = ""
    num_installments: int = Field(..., ge=1)
    interval_type: IntervalLiteral = "monthly"
    interval_days: Optional[int] = Field(None, gt=0)
    down_payment_minor: int = Field(0, ge=0)

    def to_domain(self) -> ProductPaymentPlan:
        return ProductPaymentPlan(
            id=self.id,
            product_id=self.product_id,
            name=self.name,
            num_installments=self.num_installments,
            interval_type=self.interval_type,
            interval_days=self.interval_days,
            down_payment_minor=self.down_payment_minor,
        )


class InvoiceCalculationRequest(BaseModel):
    """Request body for POST /v1/invoices/calculate"""

    products: List[ProductSchema]
    line_items: List[LineItemSchema] = Field(..., min_length=1)


class CalculatedLineSchema(BaseModel):
    product_id: str
    quantity: int
    unit_price_minor: int
    subtotal_minor: int
    discount_minor: int
    taxable_base_minor: int
    tax_minor: int
    cogs_minor: int
    total_minor: int
    margin_minor: int
    payment_plan_id: Optional[str] = None


class InvoiceCalculationResponse(BaseModel):
    """Response for POST /v1/invoices/calculate"""

    currency: Optional[str]
    lines: List[CalculatedLineSchema]
    subtotal_minor: int
    total_discount_minor: int
    total_tax_minor: int
    total_minor: int
    total_cogs_minor: int
    total_margin_minor: int


class PaymentScheduleRequest(BaseModel):
    """Request body for POST /v1/schedules/payment"""

    plan: PaymentPlanSchema
    total_amount_minor: int = Field(..., ge=0)
    start_at: datetime


class PaymentScheduleEntrySchema(BaseModel):
    installment_num: int
    due_at: datetime
    amount_minor: int
    description: str


class PaymentScheduleResponse(BaseModel):
    """Response for POST /v1/schedules/payment"""

    plan_id: str
    total_amount_minor: int
    entries: List[PaymentScheduleEntrySchema]


class RecurringScheduleRequest(BaseModel):
    """Request body for POST /v1/schedules/recurring

    Either `requested_cycles` or `horizon_months` bounds the schedule; with
    neither, the configured default horizon applies.
    """

    product: ProductSchema
    per_cycle_amount_minor: int = Field(..., ge=0)
    start_at: datetime
    requested_cycles: Optional[int] = Field(None, ge=0)
    horizon_months: Optional[int] = Field(None, ge=0)
    max_cycles_cap: Optional[int] = Field(None, ge=0)


class RecurringScheduleEntrySchema(BaseModel):
    cycle_num: int
    billing_at: datetime
    amount_minor: int
    description: str


class RecurringScheduleResponse(BaseModel):
    """Response for POST /v1/schedules/recurring"""

    product_id: str
    entries: List[RecurringScheduleEntrySchema]
