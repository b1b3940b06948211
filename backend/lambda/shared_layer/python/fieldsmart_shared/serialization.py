"""fieldsmart_shared.serialization — DynamoDB serialization, timestamps, structured logs.

Provides TypeSerializer/TypeDeserializer wrappers, the epoch-millisecond clock
used for record timestamps, and the one-line JSON observability emitter.
"""

from __future__ import annotations

import json
import logging
import time
from decimal import Decimal
from typing import Any, Dict, Optional

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

logger = logging.getLogger(__name__)

_SER = TypeSerializer()
_DESER = TypeDeserializer()


def _serialize(value: Any) -> Any:
    """Serialize a Python value for DynamoDB."""
    if isinstance(value, float):
        value = Decimal(str(value))
    return _SER.serialize(value)


def _serialize_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Serialize every attribute of a plain dict, skipping None values."""
    return {k: _serialize(v) for k, v in item.items() if v is not None}


def _deserialize(item: Dict[str, Any]) -> Dict[str, Any]:
    """Deserialize a DynamoDB item to a plain Python dict."""
    out: Dict[str, Any] = {}
    for k, v in item.items():
        val = _DESER.deserialize(v)
        if isinstance(val, Decimal):
            val = int(val) if val == int(val) else float(val)
        out[k] = val
    return out


def _now_ms() -> int:
    """Current Unix epoch in milliseconds."""
    return int(time.time() * 1000)


def _emit_structured_log(
    *,
    component: str,
    event: str,
    tenant_id: Optional[str] = None,
    customer_id: Optional[str] = None,
    latency_ms: Optional[int] = None,
    error_code: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
    level: int = logging.INFO,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "timestamp": _now_ms(),
        "component": component,
        "event": event,
        "tenant_id": str(tenant_id or ""),
        "customer_id": str(customer_id or ""),
        "latency_ms": int(max(0, latency_ms or 0)),
        "error_code": str(error_code or ""),
    }
    if extra:
        payload.update(extra)
    logger.log(level, "[OBSERVABILITY] %s", json.dumps(payload, sort_keys=True, default=str))
    return payload
