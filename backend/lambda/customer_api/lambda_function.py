"""customer_api/lambda_function.py

Lambda service for tenant-scoped customer records. All customer reads and
writes from the web, mobile and voice clients go through this function.

Routes (via API Gateway proxy, `/api/v1` prefix optional):
    POST    /customers                   Create a customer
    GET     /customers[?search=&limit=]  List (or search) the tenant's customers
    GET     /customers/{customerId}      Get one customer
    PUT     /customers/{customerId}      Partially update a customer (PATCH alias)
    DELETE  /customers/{customerId}      Delete a customer
    OPTIONS any                          CORS preflight

Tenant:
    The trusted `X-Tenant-Id` header set by the API Gateway authorizer.

Environment variables:
    DYNAMODB_CUSTOMERS_TABLE           default: fieldsmartpro-customers
    CUSTOMERS_TENANT_INDEX             default: tenantId-index
    DYNAMODB_REGION                    default: $AWS_REGION or us-east-1
    DYNAMODB_CONNECT_TIMEOUT_SECONDS   default: 2
    DYNAMODB_READ_TIMEOUT_SECONDS      default: 5
    DYNAMODB_MAX_ATTEMPTS              default: 3
    CUSTOMERS_DEFAULT_LIST_LIMIT       default: 50
    CUSTOMERS_MAX_LIST_LIMIT           default: 1000
    CORS_ORIGIN                        default: *
    LOG_LEVEL                          default: INFO
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

from config import (
    COMPONENT,
    CUSTOMERS_TABLE,
    CUSTOMERS_TENANT_INDEX,
    DEFAULT_LIST_LIMIT,
    DYNAMODB_REGION,
    logger,
)
from customer_service import CustomerService
from errors import CustomerServiceError, StoreError, ValidationError
from fieldsmart_shared.auth import _require_tenant
from fieldsmart_shared.aws_clients import _get_ddb
from fieldsmart_shared.http_utils import _error, _json_body, _path_method, _preflight
from fieldsmart_shared.serialization import _emit_structured_log
from handlers import (
    _handle_create,
    _handle_delete,
    _handle_get,
    _handle_list,
    _handle_update,
    _parse_limit,
)
from persistence import CustomerStore

# ---------------------------------------------------------------------------
# Service (module-level for container reuse)
# ---------------------------------------------------------------------------

_service: Optional[CustomerService] = None


def _get_service() -> CustomerService:
    global _service
    if _service is None:
        store = CustomerStore(_get_ddb(DYNAMODB_REGION), CUSTOMERS_TABLE, CUSTOMERS_TENANT_INDEX)
        _service = CustomerService(store)
    return _service


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

_FAILURE_MESSAGES = {
    "create": "Failed to create customer",
    "list": "Failed to list customers",
    "get": "Failed to get customer",
    "update": "Failed to update customer",
    "delete": "Failed to delete customer",
}


def _error_from(exc: CustomerServiceError, action: str, tenant_id: str, customer_id: Optional[str]) -> Dict[str, Any]:
    if isinstance(exc, ValidationError):
        return _error(exc.status_code, exc.message, details=exc.details)
    if exc.status_code < 500:
        return _error(exc.status_code, exc.message)

    diagnostic = exc.code if isinstance(exc, StoreError) else type(exc).__name__
    _emit_structured_log(
        component=COMPONENT,
        event=f"customer_{action}_failed",
        tenant_id=tenant_id,
        customer_id=customer_id,
        error_code=diagnostic,
        level=logging.ERROR,
    )
    return _error(
        exc.status_code,
        _FAILURE_MESSAGES.get(action, "Internal server error"),
        retryable=exc.retryable,
        diagnostic=diagnostic,
    )


# ---------------------------------------------------------------------------
# Path parsing
# ---------------------------------------------------------------------------

_CUSTOMERS_PATH = re.compile(
    r"^(?:/api/v1)?/customers(?:/(?P<customerId>[^/]+))?/?$"
)


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    method, path = _path_method(event)

    # CORS preflight
    if method == "OPTIONS":
        return _preflight()

    tenant_id, tenant_err = _require_tenant(event, error_fn=_error)
    if tenant_err:
        logger.warning("tenant missing: method=%s path=%s", method, path)
        return tenant_err

    match = _CUSTOMERS_PATH.match(path)
    path_params = event.get("pathParameters") or {}
    customer_id = path_params.get("customerId") or (match.group("customerId") if match else None)
    if match is None and not path_params.get("customerId"):
        return _error(404, f"Unsupported route: {method} {path}")

    logger.info("route method=%s path=%s tenant=%s", method, path, tenant_id)

    if customer_id is None:
        if method == "POST":
            action = "create"
        elif method == "GET":
            action = "list"
        else:
            return _error(405, "Method not allowed.")
    else:
        if method == "GET":
            action = "get"
        elif method in ("PUT", "PATCH"):
            action = "update"
        elif method == "DELETE":
            action = "delete"
        else:
            return _error(405, "Method not allowed.")
        if not customer_id.strip():
            return _error(400, "Customer ID is required in the path")

    body: Dict[str, Any] = {}
    if action in ("create", "update"):
        try:
            body = _json_body(event)
        except ValueError as exc:
            return _error(400, str(exc))

    qs = event.get("queryStringParameters") or {}
    search = str(qs.get("search") or "")
    limit = DEFAULT_LIST_LIMIT
    if action == "list" and not search.strip():
        try:
            limit = _parse_limit(qs.get("limit"))
        except ValueError as exc:
            return _error(400, str(exc))

    service = _get_service()
    try:
        if action == "create":
            return _handle_create(service, tenant_id, body)
        if action == "list":
            return _handle_list(service, tenant_id, search, limit)
        if action == "get":
            return _handle_get(service, tenant_id, customer_id)
        if action == "update":
            return _handle_update(service, tenant_id, customer_id, body)
        return _handle_delete(service, tenant_id, customer_id)
    except CustomerServiceError as exc:
        return _error_from(exc, action, tenant_id, customer_id)
    except Exception as exc:
        logger.exception("customer %s failed: %s", action, exc)
        return _error(500, _FAILURE_MESSAGES[action], retryable=True, diagnostic=type(exc).__name__)
