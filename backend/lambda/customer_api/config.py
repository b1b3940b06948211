"""config.py — Central configuration — environment variables, constants, logging.

Part of the customer_api Lambda.
"""
from __future__ import annotations

import logging
import os


def _env_int(name: str, default: int) -> int:
    """Read an integer env var, falling back to the default on malformed input."""
    try:
        return int(os.environ.get(name, str(default)).strip())
    except (TypeError, ValueError):
        return default


__all__ = [
    "COMPONENT",
    "CUSTOMERS_TABLE",
    "CUSTOMERS_TENANT_INDEX",
    "DEFAULT_LIST_LIMIT",
    "DYNAMODB_REGION",
    "LOG_LEVEL",
    "MAX_LIST_LIMIT",
    "PROTECTED_FIELDS",
    "logger",
]

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

COMPONENT = "customer_api"

CUSTOMERS_TABLE = os.environ.get("DYNAMODB_CUSTOMERS_TABLE", "fieldsmartpro-customers")
CUSTOMERS_TENANT_INDEX = os.environ.get("CUSTOMERS_TENANT_INDEX", "tenantId-index")
DYNAMODB_REGION = os.environ.get("DYNAMODB_REGION", os.environ.get("AWS_REGION", "us-east-1"))

DEFAULT_LIST_LIMIT = _env_int("CUSTOMERS_DEFAULT_LIST_LIMIT", 50)
MAX_LIST_LIMIT = _env_int("CUSTOMERS_MAX_LIST_LIMIT", 1000)

# Attributes a partial update may never touch.
PROTECTED_FIELDS = frozenset({"customerId", "tenantId", "createdAt", "updatedAt"})

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

logger = logging.getLogger()
logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
