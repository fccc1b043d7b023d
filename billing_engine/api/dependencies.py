"""Dependency injection for FastAPI endpoints"""

from fastapi import HTTPException, Request

from billing_engine.domain.exceptions import BillingError, ProductNotFound
from billing_engine.infrastructure.keyed_store import KeyedStore
from billing_engine.infrastructure.observability.metrics import record_billing_error


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_keyed_store(request: Request) -> KeyedStore:
    """Provide the app-scoped idempotency store"""
    return request.app.state.keyed_store


def billing_http_error(error: BillingError) -> HTTPException:
    """Map a domain error to an HTTP error, counting it by code"""
    record_billing_error(error.code)
    status_code = 404 if isinstance(error, ProductNotFound) else 422
    return HTTPException(status_code=status_code, detail={"code": error.code, "message": str(error)})
