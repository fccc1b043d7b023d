"""Unit tests for invoice line calculation and rollup"""

import pytest
from billing_engine.domain.models import LineItemInput
from billing_engine.domain.pricing import calculate_invoice, calculate_line_item
from billing_engine.domain.exceptions import (
    CurrencyMismatch,
    InvalidAdjustmentType,
    InvalidPercentageValue,
    InvalidQuantityError,
    ProductNotFound,
)


def test_calculate_invoice_with_discount_and_tax(product_factory):
    """50,000 x 2 with 10% discount and 18% tax"""
    product = product_factory(
        id="prod_flat",
        price_minor=50_000,
        tax_rate_bp=1_800,
        discount_type="percent",
        discount_value=1_000,  # 10%
    )

    calc = calculate_invoice([product], [LineItemInput(product_id="prod_flat", quantity=2)])

    line = calc.lines[0]
    assert line.subtotal_minor == 100_000
    assert line.discount_minor == 10_000
    assert line.taxable_base_minor == 90_000
    assert line.tax_minor == 16_200
    assert line.total_minor == 106_200
    assert calc.total_discount_minor == 10_000
    assert calc.total_tax_minor == 16_200
    assert calc.total_minor == 106_200
    assert calc.currency == "INR"


def test_quantity_defaults_to_one(product_factory):
    line = calculate_line_item(product_factory(), LineItemInput(product_id="prod_1"))
    assert line.quantity == 1
    assert line.subtotal_minor == 10_000
    assert line.tax_minor == 1_800
    assert line.total_minor == 11_800


def test_amount_discount_is_clamped_to_gross(product_factory):
    product = product_factory(price_minor=1_000, discount_type="amount", discount_value=5_000)
    line = calculate_line_item(product, LineItemInput(product_id="prod_1", quantity=2))

    assert line.discount_minor == 2_000
    assert line.taxable_base_minor == 0
    assert line.tax_minor == 0
    assert line.total_minor == 0


def test_line_discount_overrides_product_discount(product_factory):
    product = product_factory(price_minor=10_000, tax_rate_bp=0, discount_type="percent", discount_value=5_000)
    line = calculate_line_item(
        product,
        LineItemInput(product_id="prod_1", discount_type="amount", discount_value=1_500),
    )
    assert line.discount_minor == 1_500
    assert line.total_minor == 8_500


def test_unit_price_override(product_factory):
    line = calculate_line_item(
        product_factory(price_minor=10_000, tax_rate_bp=0),
        LineItemInput(product_id="prod_1", quantity=3, unit_price_override_minor=7_500),
    )
    assert line.unit_price_minor == 7_500
    assert line.subtotal_minor == 22_500
    assert line.total_minor == 22_500


def test_percent_cogs_applies_to_taxable_base(product_factory):
    product = product_factory(
        price_minor=10_000,
        discount_type="percent",
        discount_value=2_000,  # 20%
        cogs_type="percent",
        cogs_value=2_500,  # 25%
    )
    line = calculate_line_item(product, LineItemInput(product_id="prod_1", quantity=2))

    assert line.taxable_base_minor == 16_000
    assert line.cogs_minor == 4_000
    assert line.margin_minor == 12_000


def test_amount_cogs_is_per_unit(product_factory):
    product = product_factory(cogs_type="amount", cogs_value=3_000)
    line = calculate_line_item(product, LineItemInput(product_id="prod_1", quantity=4))
    assert line.cogs_minor == 12_000


def test_margin_can_go_negative(product_factory):
    product = product_factory(price_minor=1_000, cogs_type="amount", cogs_value=1_500)
    line = calculate_line_item(product, LineItemInput(product_id="prod_1"))
    assert line.margin_minor == -500


def test_tax_rounds_half_up(product_factory):
    """999 at 18% = 179.82 → 180"""
    line = calculate_line_item(product_factory(price_minor=999), LineItemInput(product_id="prod_1"))
    assert line.tax_minor == 180
    assert line.total_minor == 1_179


def test_payment_plan_id_is_carried_through(product_factory):
    line = calculate_line_item(product_factory(), LineItemInput(product_id="prod_1", payment_plan_id="plan_9"))
    assert line.payment_plan_id == "plan_9"


def test_line_additivity(product_factory):
    """total = base + tax and base = unit price * quantity - discount, for every line"""
    products = [
        product_factory(id="a", price_minor=12_345, tax_rate_bp=1_250, discount_type="percent", discount_value=333),
        product_factory(id="b", price_minor=999, tax_rate_bp=500, discount_type="amount", discount_value=250),
        product_factory(id="c", price_minor=0, tax_rate_bp=10_000),
        product_factory(id="d", price_minor=77_777, tax_rate_bp=0, cogs_type="percent", cogs_value=4_000),
    ]
    lines = [LineItemInput(product_id=p.id, quantity=q) for p, q in zip(products, [3, 7, 1, 2])]

    calc = calculate_invoice(products, lines)

    for line in calc.lines:
        assert line.total_minor == line.taxable_base_minor + line.tax_minor
        assert line.taxable_base_minor == line.unit_price_minor * line.quantity - line.discount_minor
        assert min(line.discount_minor, line.taxable_base_minor, line.tax_minor, line.cogs_minor) >= 0


def test_aggregate_totals_equal_line_sums(product_factory):
    products = [
        product_factory(id="a", price_minor=50_000, discount_type="percent", discount_value=1_000),
        product_factory(id="b", price_minor=1_999, cogs_type="amount", cogs_value=500),
        product_factory(id="c", price_minor=3_333, tax_rate_bp=700, cogs_type="percent", cogs_value=1_000),
    ]
    lines = [
        LineItemInput(product_id="a", quantity=2),
        LineItemInput(product_id="b", quantity=5),
        LineItemInput(product_id="c", quantity=3),
        LineItemInput(product_id="a", quantity=1),
    ]

    calc = calculate_invoice(products, lines)

    assert [line.product_id for line in calc.lines] == ["a", "b", "c", "a"]
    assert calc.subtotal_minor == sum(line.subtotal_minor for line in calc.lines)
    assert calc.total_discount_minor == sum(line.discount_minor for line in calc.lines)
    assert calc.total_tax_minor == sum(line.tax_minor for line in calc.lines)
    assert calc.total_minor == sum(line.total_minor for line in calc.lines)
    assert calc.total_cogs_minor == sum(line.cogs_minor for line in calc.lines)
    assert calc.total_margin_minor == sum(line.margin_minor for line in calc.lines)


def test_empty_invoice(product_factory):
    calc = calculate_invoice([product_factory()], [])
    assert calc.lines == []
    assert calc.total_minor == 0
    assert calc.currency is None


def test_calculation_is_deterministic(product_factory):
    products = [product_factory(discount_type="percent", discount_value=1_234)]
    lines = [LineItemInput(product_id="prod_1", quantity=9)]
    assert calculate_invoice(products, lines) == calculate_invoice(products, lines)


def test_missing_product_fails(product_factory):
    with pytest.raises(ProductNotFound) as exc_info:
        calculate_invoice(
            [product_factory()],
            [LineItemInput(product_id="prod_1"), LineItemInput(product_id="ghost")],
        )
    assert exc_info.value.product_id == "ghost"


def test_mixed_currencies_fail(product_factory):
    products = [product_factory(id="inr"), product_factory(id="usd", currency="USD")]
    with pytest.raises(CurrencyMismatch) as exc_info:
        calculate_invoice(products, [LineItemInput(product_id="inr"), LineItemInput(product_id="usd")])
    assert exc_info.value.expected == "INR"
    assert exc_info.value.found == "USD"


def test_unreferenced_products_do_not_affect_currency(product_factory):
    products = [product_factory(id="inr"), product_factory(id="usd", currency="USD")]
    calc = calculate_invoice(products, [LineItemInput(product_id="usd")])
    assert calc.currency == "USD"


@pytest.mark.parametrize("quantity", [0, -2])
def test_invalid_quantity(product_factory, quantity):
    with pytest.raises(InvalidQuantityError):
        calculate_line_item(product_factory(), LineItemInput(product_id="prod_1", quantity=quantity))


def test_invalid_tax_rate(product_factory):
    with pytest.raises(InvalidPercentageValue):
        calculate_line_item(product_factory(tax_rate_bp=12_000), LineItemInput(product_id="prod_1"))


def test_invalid_percent_discount(product_factory):
    product = product_factory(discount_type="percent", discount_value=10_001)
    with pytest.raises(InvalidPercentageValue):
        calculate_line_item(product, LineItemInput(product_id="prod_1"))


@pytest.mark.parametrize("discount_type", ["percentage", "pct", "Percent", ""])
def test_unknown_discount_type_is_rejected(product_factory, discount_type):
    """A drifted type name must not be read as a fixed amount"""
    product = product_factory(price_minor=50_000, discount_type=discount_type, discount_value=1_000)
    with pytest.raises(InvalidAdjustmentType) as exc_info:
        calculate_line_item(product, LineItemInput(product_id="prod_1", quantity=2))
    assert exc_info.value.field == "discount_type"
    assert exc_info.value.adjustment_type == discount_type
    assert exc_info.value.code == "invalid_adjustment_type"


def test_unknown_line_discount_type_is_rejected(product_factory):
    with pytest.raises(InvalidAdjustmentType):
        calculate_line_item(
            product_factory(),
            LineItemInput(product_id="prod_1", discount_type="percentage", discount_value=1_000),
        )


def test_unknown_line_discount_type_without_value_is_rejected(product_factory):
    with pytest.raises(InvalidAdjustmentType):
        calculate_line_item(product_factory(), LineItemInput(product_id="prod_1", discount_type="flat"))


@pytest.mark.parametrize("cogs_type", ["pct", "fixed"])
def test_unknown_cogs_type_is_rejected(product_factory, cogs_type):
    product = product_factory(price_minor=50_000, cogs_type=cogs_type, cogs_value=2_500)
    with pytest.raises(InvalidAdjustmentType) as exc_info:
        calculate_line_item(product, LineItemInput(product_id="prod_1", quantity=2))
    assert exc_info.value.field == "cogs_type"


def test_unknown_adjustment_type_fails_whole_invoice(product_factory):
    products = [product_factory(id="ok"), product_factory(id="bad", cogs_type="pct", cogs_value=100)]
    with pytest.raises(InvalidAdjustmentType):
        calculate_invoice(products, [LineItemInput(product_id="ok"), LineItemInput(product_id="bad")])
