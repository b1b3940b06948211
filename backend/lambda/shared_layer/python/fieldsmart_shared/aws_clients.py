"""fieldsmart_shared.aws_clients — Lazy-singleton AWS service clients.

The DynamoDB client is created on first call and cached for the lifetime of
the Lambda container, so warm invocations reuse the same connection pool.
Every call is bounded by connect/read timeouts; a timeout surfaces as a
botocore exception for the caller to translate.
"""

from __future__ import annotations

import os
from typing import Optional

import boto3
from botocore.config import Config


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, str(default)).strip())
    except (TypeError, ValueError):
        return default


# ---------------------------------------------------------------------------
# Defaults (overridable via env)
# ---------------------------------------------------------------------------

DYNAMODB_REGION: str = os.environ.get(
    "DYNAMODB_REGION", os.environ.get("AWS_REGION", "us-east-1")
)
DYNAMODB_CONNECT_TIMEOUT_SECONDS: int = _env_int("DYNAMODB_CONNECT_TIMEOUT_SECONDS", 2)
DYNAMODB_READ_TIMEOUT_SECONDS: int = _env_int("DYNAMODB_READ_TIMEOUT_SECONDS", 5)
DYNAMODB_MAX_ATTEMPTS: int = _env_int("DYNAMODB_MAX_ATTEMPTS", 3)

# ---------------------------------------------------------------------------
# Client singletons
# ---------------------------------------------------------------------------

_ddb = None


def _get_ddb(region: Optional[str] = None):
    """Get (or create) the DynamoDB client singleton."""
    global _ddb
    if _ddb is None:
        _ddb = boto3.client(
            "dynamodb",
            region_name=region or DYNAMODB_REGION,
            config=Config(
                connect_timeout=DYNAMODB_CONNECT_TIMEOUT_SECONDS,
                read_timeout=DYNAMODB_READ_TIMEOUT_SECONDS,
                retries={"max_attempts": DYNAMODB_MAX_ATTEMPTS, "mode": "standard"},
            ),
        )
    return _ddb
