"""Domain models - pure Python dataclasses representing billing entities"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Literal, Optional

IntervalType = Literal["weekly", "monthly", "quarterly", "semiannual", "annual", "custom_days"]
AdjustmentType = Literal["percent", "amount"]  # percent values are basis points


@dataclass(frozen=True)
class Product:
    """Catalog product snapshot at calculation time"""

    id: str
    currency: str
    price_minor: int
    tax_rate_bp: int = 0
    name: str = ""
    cogs_type: Optional[AdjustmentType] = None
    cogs_value: Optional[int] = None
    discount_type: Optional[AdjustmentType] = None
    discount_value: Optional[int] = None
    recurring_interval: Optional[IntervalType] = None
    recurring_interval_days: Optional[int] = None


@dataclass(frozen=True)
class LineItemInput:
    """Requested invoice line"""

    product_id: str
    quantity: int = 1
    unit_price_override_minor: Optional[int] = None
    # Line-level discount replaces the product's own discount when set
    discount_type: Optional[AdjustmentType] = None
    discount_value: Optional[int] = None
    payment_plan_id: Optional[str] = None


@dataclass(frozen=True)
class CalculatedLine:
    """Priced invoice line, all amounts in minor units"""

    product_id: str
    quantity: int
    unit_price_minor: int
    subtotal_minor: int  # unit price * quantity, before discount
    discount_minor: int
    taxable_base_minor: int
    tax_minor: int
    cogs_minor: int
    total_minor: int
    margin_minor: int  # taxable base - cogs, can be negative
    payment_plan_id: Optional[str] = None


@dataclass(frozen=True)
class InvoiceCalculation:
    """Invoice-level rollup of calculated lines"""

    currency: Optional[str]
    lines: List[CalculatedLine] = field(default_factory=list)
    subtotal_minor: int = 0
    total_discount_minor: int = 0
    total_tax_minor: int = 0
    total_minor: int = 0
    total_cogs_minor: int = 0
    total_margin_minor: int = 0


@dataclass(frozen=True)
class ProductPaymentPlan:
    """Installment plan offered for a product"""

    id: str
    product_id: str
    num_installments: int
    interval_type: IntervalType = "monthly"
    interval_days: Optional[int] = None
    down_payment_minor: int = 0
    name: str = ""


@dataclass(frozen=True)
class PaymentScheduleEntry:
    """Single obligation in an installment plan (installment_num 0 is the down payment)"""

    installment_num: int
    due_at: datetime
    amount_minor: int
    description: str


@dataclass(frozen=True)
class RecurringScheduleEntry:
    """Single billing cycle of a recurring product"""

    cycle_num: int
    billing_at: datetime
    amount_minor: int
    description: str
