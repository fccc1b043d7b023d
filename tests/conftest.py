"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient
from billing_engine.api.main import create_app
from billing_engine.domain.models import Product, ProductPaymentPlan


def make_product(**overrides) -> Product:
    """Catalog product with sensible defaults: 100.00 INR at 18% tax"""
    fields = dict(
        id="prod_1",
        name="Test Product",
        currency="INR",
        price_minor=10_000,
        tax_rate_bp=1_800,
    )
    fields.update(overrides)
    return Product(**fields)


def make_plan(**overrides) -> ProductPaymentPlan:
    fields = dict(
        id="plan_1",
        product_id="prod_1",
        name="3 Part Plan",
        num_installments=3,
        interval_type="monthly",
        down_payment_minor=0,
    )
    fields.update(overrides)
    return ProductPaymentPlan(**fields)


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client with its own idempotency store"""
    return TestClient(create_app())


@pytest.fixture
def invoice_date() -> datetime:
    return datetime(2025, 1, 15, tzinfo=timezone.utc)


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def plan_factory():
    return make_plan
