"""persistence.py — Customer record store over DynamoDB.

Table layout: partition key `customerId` (S); global secondary index
`tenantId-index` keyed by `tenantId` for tenant-scoped queries. The store
knows nothing about tenants beyond that attribute; ownership checks happen
above it.

Every boto failure (ClientError, BotoCoreError, timeouts) leaves this module as
`errors.StoreError`.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional

from botocore.exceptions import BotoCoreError, ClientError

from errors import StoreError
from fieldsmart_shared.serialization import _deserialize, _serialize, _serialize_item

__all__ = [
    "CustomerStore",
    "_build_update_expression",
    "_is_conditional_check_failed",
]


def _is_conditional_check_failed(exc: Exception) -> bool:
    if not isinstance(exc, ClientError):
        return False
    return exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


def _store_error(operation: str, exc: Exception) -> StoreError:
    if isinstance(exc, ClientError):
        code = exc.response.get("Error", {}).get("Code") or "ClientError"
    else:
        code = type(exc).__name__
    return StoreError(f"{operation} failed: {code}", code=code)


def _build_update_expression(attributes: Mapping[str, Any]) -> Dict[str, Any]:
    """Build UpdateItem kwargs that SET exactly the given attributes.

    Attribute names always go through placeholders so reserved words
    (`state`, `notes`, ...) never collide with DynamoDB keywords.
    """
    clauses: List[str] = []
    names: Dict[str, str] = {}
    values: Dict[str, Any] = {}
    for idx, (name, value) in enumerate(attributes.items()):
        clauses.append(f"#f{idx} = :v{idx}")
        names[f"#f{idx}"] = name
        values[f":v{idx}"] = _serialize(value)
    return {
        "UpdateExpression": "SET " + ", ".join(clauses),
        "ExpressionAttributeNames": names,
        "ExpressionAttributeValues": values,
    }


class CustomerStore:
    def __init__(self, client: Any, table_name: str, tenant_index: str):
        self._ddb = client
        self.table_name = table_name
        self.tenant_index = tenant_index

    @staticmethod
    def _key(customer_id: str) -> Dict[str, Any]:
        return {"customerId": _serialize(customer_id)}

    def put_if_absent(self, item: Mapping[str, Any]) -> bool:
        """Write a new record; False when `customerId` already exists."""
        try:
            self._ddb.put_item(
                TableName=self.table_name,
                Item=_serialize_item(dict(item)),
                ConditionExpression="attribute_not_exists(customerId)",
            )
        except ClientError as exc:
            if _is_conditional_check_failed(exc):
                return False
            raise _store_error("put_item", exc) from exc
        except BotoCoreError as exc:
            raise _store_error("put_item", exc) from exc
        return True

    def get(self, customer_id: str) -> Optional[Dict[str, Any]]:
        try:
            resp = self._ddb.get_item(TableName=self.table_name, Key=self._key(customer_id))
        except (BotoCoreError, ClientError) as exc:
            raise _store_error("get_item", exc) from exc
        raw = resp.get("Item")
        if not raw:
            return None
        return _deserialize(raw)

    def query_by_tenant(self, tenant_id: str, limit: int) -> List[Dict[str, Any]]:
        """One page of the tenant index, at most `limit` records, index order."""
        try:
            resp = self._ddb.query(
                TableName=self.table_name,
                IndexName=self.tenant_index,
                KeyConditionExpression="tenantId = :tenantId",
                ExpressionAttributeValues={":tenantId": _serialize(tenant_id)},
                Limit=limit,
            )
        except (BotoCoreError, ClientError) as exc:
            raise _store_error("query", exc) from exc
        return [_deserialize(raw) for raw in resp.get("Items", [])]

    def scan_by_tenant(self, tenant_id: str) -> Iterator[Dict[str, Any]]:
        """Every record of the tenant via a filtered full-table scan."""
        kwargs: Dict[str, Any] = {
            "TableName": self.table_name,
            "FilterExpression": "tenantId = :tenantId",
            "ExpressionAttributeValues": {":tenantId": _serialize(tenant_id)},
        }
        while True:
            try:
                resp = self._ddb.scan(**kwargs)
            except (BotoCoreError, ClientError) as exc:
                raise _store_error("scan", exc) from exc
            for raw in resp.get("Items", []):
                yield _deserialize(raw)
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                return
            kwargs["ExclusiveStartKey"] = last_key

    def update_attributes(
        self, customer_id: str, attributes: Mapping[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """SET the given attributes on an existing record.

        Returns the full record after the write, or None when the record no
        longer exists (the write is conditional on `customerId`).
        """
        if not attributes:
            raise ValueError("update_attributes requires at least one attribute")
        try:
            resp = self._ddb.update_item(
                TableName=self.table_name,
                Key=self._key(customer_id),
                ConditionExpression="attribute_exists(customerId)",
                ReturnValues="ALL_NEW",
                **_build_update_expression(attributes),
            )
        except ClientError as exc:
            if _is_conditional_check_failed(exc):
                return None
            raise _store_error("update_item", exc) from exc
        except BotoCoreError as exc:
            raise _store_error("update_item", exc) from exc
        raw = resp.get("Attributes")
        if not raw:
            return None
        return _deserialize(raw)

    def delete(self, customer_id: str) -> None:
        try:
            self._ddb.delete_item(TableName=self.table_name, Key=self._key(customer_id))
        except (BotoCoreError, ClientError) as exc:
            raise _store_error("delete_item", exc) from exc
