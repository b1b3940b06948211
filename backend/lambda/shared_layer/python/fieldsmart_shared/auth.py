"""fieldsmart_shared.auth — Trusted tenant context for FieldSmart Lambdas.

The API Gateway authorizer in front of every FieldSmart function resolves the
caller's tenant and forwards it as the `X-Tenant-Id` header. Functions treat
that value as trusted and never re-derive it; a request without it is an
authorization failure, reported before any business logic runs.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

TENANT_HEADER = "x-tenant-id"


def _extract_tenant_id(event: Dict[str, Any]) -> Optional[str]:
    """Return the trusted tenant id from the event headers, or None.

    Header names are matched case-insensitively. Proxies that merge repeated
    headers produce a comma-separated value; only the first entry is used.
    """
    headers = event.get("headers") or {}
    raw = None
    for name, value in headers.items():
        if isinstance(name, str) and name.lower() == TENANT_HEADER:
            raw = value
            break
    if not isinstance(raw, str):
        return None
    tenant_id = raw.split(",")[0].strip()
    return tenant_id or None


def _require_tenant(
    event: Dict[str, Any],
    *,
    error_fn=None,
) -> Tuple[Optional[str], Optional[Dict[str, Any]]]:
    """Resolve the calling tenant.

    Returns (tenant_id, None) on success or (None, error_response) when the
    header is missing.

    Args:
        event: API Gateway event dict.
        error_fn: Optional callable(status_code, message) -> response dict.
                  If not provided, returns a plain dict with statusCode/body.
    """
    if error_fn is None:
        error_fn = _default_error

    tenant_id = _extract_tenant_id(event)
    if not tenant_id:
        return None, error_fn(401, "Missing tenant ID. Please provide X-Tenant-Id header.")
    return tenant_id, None


def _default_error(status_code: int, message: str) -> Dict[str, Any]:
    """Fallback error response builder."""
    import json as _json

    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": _json.dumps({"success": False, "error": message}),
    }
