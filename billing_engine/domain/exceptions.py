"""Domain-specific exceptions for pricing and schedule generation"""


class BillingError(Exception):
    """Base exception for the billing engine"""

    code = "billing_error"


class ProductNotFound(BillingError):
    """Line item references a product missing from the catalog snapshot"""

    code = "product_not_found"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class InvalidPercentageValue(BillingError):
    """Basis points outside [0, 10000]"""

    code = "invalid_percentage_value"

    def __init__(self, bp: int):
        self.bp = bp
        super().__init__(f"Basis points must be within [0, 10000], got {bp}")


class InvalidAmountError(BillingError):
    """Negative or non-integer minor-unit amount"""

    code = "invalid_amount"

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"{field} must be a non-negative integer, got {value!r}")


class InvalidQuantityError(BillingError):
    """Line quantity below 1"""

    code = "invalid_quantity"

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")


class CurrencyMismatch(BillingError):
    """Lines in one calculation reference products priced in different currencies"""

    code = "currency_mismatch"

    def __init__(self, expected: str, found: str, product_id: str):
        self.expected = expected
        self.found = found
        self.product_id = product_id
        super().__init__(
            f"Product {product_id} is priced in {found}, invoice currency is {expected}"
        )


class DownPaymentExceedsTotal(BillingError):
    """Payment plan down payment is larger than the scheduled amount"""

    code = "down_payment_exceeds_total"

    def __init__(self, down_payment_minor: int, total_amount_minor: int):
        self.down_payment_minor = down_payment_minor
        self.total_amount_minor = total_amount_minor
        super().__init__(
            f"Down payment {down_payment_minor} exceeds total amount {total_amount_minor}"
        )


class InvalidInstallmentCount(BillingError):
    """Payment plan has fewer than one installment"""

    code = "invalid_installment_count"

    def __init__(self, num_installments):
        self.num_installments = num_installments
        super().__init__(f"num_installments must be >= 1, got {num_installments!r}")


class InvalidIntervalError(BillingError):
    """Unknown interval kind, or custom_days without a positive day count"""

    code = "invalid_interval"

    def __init__(self, interval, interval_days=None):
        self.interval = interval
        self.interval_days = interval_days
        if interval == "custom_days":
            message = f"custom_days interval requires interval_days > 0, got {interval_days!r}"
        else:
            message = f"Unknown interval type: {interval!r}"
        super().__init__(message)


class InvalidAdjustmentType(BillingError):
    """Discount or COGS type other than percent or amount"""

    code = "invalid_adjustment_type"

    def __init__(self, field: str, adjustment_type):
        self.field = field
        self.adjustment_type = adjustment_type
        super().__init__(f"{field} must be 'percent' or 'amount', got {adjustment_type!r}")
