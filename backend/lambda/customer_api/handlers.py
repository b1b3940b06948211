"""handlers.py — HTTP route handlers for the customer API.

Each handler receives the already-resolved tenant id and the service, and
either returns an API Gateway response dict or raises a CustomerServiceError
for the entry point to map. Reads and writes of a single customer follow the
same protocol: fetch, compare `tenantId` with the caller (404 when absent, 403
when owned by another tenant), then act.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from config import COMPONENT, DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from customer_service import Customer, CustomerService
from errors import ForbiddenError, NotFoundError
from fieldsmart_shared.http_utils import _response
from fieldsmart_shared.serialization import _emit_structured_log
from normalizer import normalize_customer_input
from validation import validate_create, validate_update

__all__ = [
    "_authorize",
    "_handle_create",
    "_handle_delete",
    "_handle_get",
    "_handle_list",
    "_handle_update",
    "_parse_limit",
]


def _parse_limit(raw: Optional[str]) -> int:
    """Parse the `limit` query parameter; ValueError on anything but a positive int."""
    if raw is None or str(raw).strip() == "":
        return DEFAULT_LIST_LIMIT
    try:
        limit = int(str(raw).strip())
    except ValueError as exc:
        raise ValueError("limit must be a positive integer") from exc
    if limit < 1:
        raise ValueError("limit must be a positive integer")
    return min(limit, MAX_LIST_LIMIT)


def _authorize(
    service: CustomerService, customer_id: str, tenant_id: str
) -> Customer:
    customer = service.get(customer_id)
    if customer is None:
        raise NotFoundError(customer_id)
    if customer.tenantId != tenant_id:
        _emit_structured_log(
            component=COMPONENT,
            event="tenant_mismatch",
            tenant_id=tenant_id,
            customer_id=customer_id,
            error_code="FORBIDDEN",
            level=logging.WARNING,
        )
        raise ForbiddenError()
    return customer


# ---------------------------------------------------------------------------
# POST /customers
# ---------------------------------------------------------------------------


def _handle_create(service: CustomerService, tenant_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
    fields = validate_create(normalize_customer_input(body))
    customer = service.create(tenant_id, fields)
    return _response(201, {
        "success": True,
        "message": "Customer created successfully",
        "customer": customer.model_dump(),
    })


# ---------------------------------------------------------------------------
# GET /customers
# ---------------------------------------------------------------------------


def _handle_list(
    service: CustomerService, tenant_id: str, search: str, limit: int = DEFAULT_LIST_LIMIT
) -> Dict[str, Any]:
    if search.strip():
        customers = service.search_by_tenant(tenant_id, search.strip())
    else:
        customers = service.list_by_tenant(tenant_id, limit)
    return _response(200, {
        "success": True,
        "customers": [c.model_dump() for c in customers],
        "count": len(customers),
    })


# ---------------------------------------------------------------------------
# GET /customers/{customerId}
# ---------------------------------------------------------------------------


def _handle_get(service: CustomerService, tenant_id: str, customer_id: str) -> Dict[str, Any]:
    customer = _authorize(service, customer_id, tenant_id)
    return _response(200, {"success": True, "customer": customer.model_dump()})


# ---------------------------------------------------------------------------
# PUT/PATCH /customers/{customerId}
# ---------------------------------------------------------------------------


def _handle_update(
    service: CustomerService, tenant_id: str, customer_id: str, body: Dict[str, Any]
) -> Dict[str, Any]:
    current = _authorize(service, customer_id, tenant_id)
    fields = validate_update(normalize_customer_input(body, partial=True))
    updated = service.update(customer_id, fields, current=current)
    if updated is None:
        # Deleted between the ownership check and the write.
        raise NotFoundError(customer_id)
    return _response(200, {
        "success": True,
        "message": "Customer updated successfully",
        "customer": updated.model_dump(),
    })


# ---------------------------------------------------------------------------
# DELETE /customers/{customerId}
# ---------------------------------------------------------------------------


def _handle_delete(service: CustomerService, tenant_id: str, customer_id: str) -> Dict[str, Any]:
    _authorize(service, customer_id, tenant_id)
    service.delete(customer_id)
    return _response(200, {
        "success": True,
        "message": "Customer deleted successfully",
        "customerId": customer_id,
    })
