"""In-memory stand-in for persistence.CustomerStore used by the unit tests.

Honours the same contract as the DynamoDB store: conditional put, conditional
update returning the full record, insertion-ordered tenant query, tenant scan.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, Iterator, List, Mapping, Optional


class InMemoryCustomerStore:
    def __init__(self) -> None:
        self.items: Dict[str, Dict[str, Any]] = {}
        self.calls: List[str] = []

    def put_if_absent(self, item: Mapping[str, Any]) -> bool:
        self.calls.append("put_if_absent")
        customer_id = item["customerId"]
        if customer_id in self.items:
            return False
        self.items[customer_id] = copy.deepcopy(dict(item))
        return True

    def get(self, customer_id: str) -> Optional[Dict[str, Any]]:
        self.calls.append("get")
        item = self.items.get(customer_id)
        return copy.deepcopy(item) if item is not None else None

    def query_by_tenant(self, tenant_id: str, limit: int) -> List[Dict[str, Any]]:
        self.calls.append("query_by_tenant")
        matches = [i for i in self.items.values() if i.get("tenantId") == tenant_id]
        return copy.deepcopy(matches[:limit])

    def scan_by_tenant(self, tenant_id: str) -> Iterator[Dict[str, Any]]:
        self.calls.append("scan_by_tenant")
        for item in list(self.items.values()):
            if item.get("tenantId") == tenant_id:
                yield copy.deepcopy(item)

    def update_attributes(self, customer_id: str, attributes: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        self.calls.append("update_attributes")
        item = self.items.get(customer_id)
        if item is None:
            return None
        item.update(copy.deepcopy(dict(attributes)))
        return copy.deepcopy(item)

    def delete(self, customer_id: str) -> None:
        self.calls.append("delete")
        self.items.pop(customer_id, None)
