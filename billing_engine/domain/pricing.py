"""Invoice pricing - line calculation and invoice rollup in integer minor units"""

import logging
from typing import Dict, List, Optional, Sequence

from billing_engine.domain.exceptions import (
    CurrencyMismatch,
    InvalidAdjustmentType,
    InvalidQuantityError,
    ProductNotFound,
)
from billing_engine.domain.models import (
    CalculatedLine,
    InvoiceCalculation,
    LineItemInput,
    Product,
)
from billing_engine.domain.money import apply_basis_points, validate_minor

logger = logging.getLogger(__name__)

ADJUSTMENT_TYPES = ("percent", "amount")


def _check_adjustment_type(field: str, adjustment_type: Optional[str]) -> None:
    if adjustment_type is not None and adjustment_type not in ADJUSTMENT_TYPES:
        raise InvalidAdjustmentType(field, adjustment_type)


def _discount_for(gross_minor: int, discount_type: Optional[str], discount_value: Optional[int]) -> int:
    """Discount in minor units; fixed amounts are clamped to the gross"""
    _check_adjustment_type("discount_type", discount_type)
    if not discount_type or not discount_value:
        return 0
    if discount_type == "percent":
        return apply_basis_points(gross_minor, discount_value)
    return min(validate_minor(discount_value, "discount_value"), gross_minor)


def _cogs_for(taxable_base_minor: int, quantity: int, product: Product) -> int:
    """COGS in minor units; fixed amounts are per unit"""
    _check_adjustment_type("cogs_type", product.cogs_type)
    if not product.cogs_type or not product.cogs_value:
        return 0
    if product.cogs_type == "percent":
        return apply_basis_points(taxable_base_minor, product.cogs_value)
    return validate_minor(product.cogs_value, "cogs_value") * quantity


def calculate_line_item(product: Product, line: LineItemInput) -> CalculatedLine:
    """
    Price one invoice line.

    Steps:
    1. Unit price: line override if supplied, else catalog price
    2. Gross = unit price * quantity
    3. Discount: line-level discount if supplied, else product discount
    4. Taxable base = gross - discount
    5. Tax on the taxable base
    6. COGS: percent of taxable base, or per-unit amount * quantity
    7. Total = taxable base + tax

    Example:
        50,000 x 2 at 18% tax with 10% discount
        gross 100,000 → discount 10,000 → base 90,000 → tax 16,200 → total 106,200
    """
    quantity = line.quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantityError(quantity)

    if line.unit_price_override_minor is not None:
        unit_price = validate_minor(line.unit_price_override_minor, "unit_price_override_minor")
    else:
        unit_price = validate_minor(product.price_minor, "price_minor")

    gross = unit_price * quantity

    _check_adjustment_type("discount_type", line.discount_type)
    if line.discount_type and line.discount_value is not None:
        discount = _discount_for(gross, line.discount_type, line.discount_value)
    else:
        discount = _discount_for(gross, product.discount_type, product.discount_value)

    taxable_base = gross - discount
    tax = apply_basis_points(taxable_base, product.tax_rate_bp)
    cogs = _cogs_for(taxable_base, quantity, product)

    return CalculatedLine(
        product_id=product.id,
        quantity=quantity,
        unit_price_minor=unit_price,
        subtotal_minor=gross,
        discount_minor=discount,
        taxable_base_minor=taxable_base,
        tax_minor=tax,
        cogs_minor=cogs,
        total_minor=taxable_base + tax,
        margin_minor=taxable_base - cogs,
        payment_plan_id=line.payment_plan_id,
    )


def aggregate_lines(lines: Sequence[CalculatedLine], currency: Optional[str]) -> InvoiceCalculation:
    """Fold calculated lines into invoice totals, preserving line order"""
    return InvoiceCalculation(
        currency=currency,
        lines=list(lines),
        subtotal_minor=sum(line.subtotal_minor for line in lines),
        total_discount_minor=sum(line.discount_minor for line in lines),
        total_tax_minor=sum(line.tax_minor for line in lines),
        total_minor=sum(line.total_minor for line in lines),
        total_cogs_minor=sum(line.cogs_minor for line in lines),
        total_margin_minor=sum(line.margin_minor for line in lines),
    )


def calculate_invoice(products: Sequence[Product], line_items: Sequence[LineItemInput]) -> InvoiceCalculation:
    """
    Main entry point: price every requested line against the catalog snapshot.

    Raises:
        ProductNotFound: a line references a product not in `products`
        CurrencyMismatch: lines reference products in different currencies
        InvalidAdjustmentType: discount or COGS type is not percent or amount
    """
    catalog: Dict[str, Product] = {product.id: product for product in products}
    currency: Optional[str] = None
    lines: List[CalculatedLine] = []

    for line in line_items:
        product = catalog.get(line.product_id)
        if product is None:
            raise ProductNotFound(line.product_id)

        if currency is None:
            currency = product.currency
        elif product.currency != currency:
            raise CurrencyMismatch(currency, product.currency, product.id)

        lines.append(calculate_line_item(product, line))

    calculation = aggregate_lines(lines, currency)
    logger.debug(
        "Invoice calculated",
        extra={"line_count": len(lines), "total_minor": calculation.total_minor, "currency": currency},
    )
    return calculation
