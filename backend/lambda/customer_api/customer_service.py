"""customer_service.py — Customer record lifecycle over the record store.

The service is the only code that reads or writes customer records. It
generates identifiers, stamps the owning tenant and timestamps, and turns
partial updates into attribute writes. It does NOT check tenant ownership on
get/update/delete: callers fetch the record, compare `tenantId` with their
trusted context and only then mutate. `tenantId` is immutable after creation,
so the gap between that check and the write cannot be used to reach another
tenant's record.

Store failures are not caught here; they arrive as `errors.StoreError`.
"""
from __future__ import annotations

import time
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from config import COMPONENT, DEFAULT_LIST_LIMIT, PROTECTED_FIELDS
from errors import ConflictError
from fieldsmart_shared.serialization import _emit_structured_log, _now_ms
from normalizer import CANONICAL_FIELDS

__all__ = [
    "Customer",
    "CustomerService",
]

_SEARCH_FIELDS = ("firstName", "lastName", "email")


class Customer(BaseModel):
    model_config = ConfigDict(extra="ignore")

    customerId: str
    tenantId: str
    firstName: str
    lastName: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zipCode: str = ""
    notes: str = ""
    createdAt: int
    updatedAt: int

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "Customer":
        return cls.model_validate(dict(item))

    def to_item(self) -> Dict[str, Any]:
        return self.model_dump()


def _new_customer_id() -> str:
    return str(uuid.uuid4())


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class CustomerService:
    def __init__(
        self,
        store: Any,
        *,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], str] = _new_customer_id,
    ):
        self.store = store
        self._clock = clock
        self._id_factory = id_factory

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, tenant_id: str, fields: Mapping[str, Any]) -> Customer:
        """Materialize and persist a new customer owned by `tenant_id`.

        Only canonical fields are taken from `fields`; identity, tenant and
        timestamps always come from the service. Raises ConflictError if the
        generated id is already taken.
        """
        started = time.monotonic()
        now = self._clock()
        customer = Customer(
            **{name: fields[name] for name in CANONICAL_FIELDS if name in fields},
            customerId=self._id_factory(),
            tenantId=tenant_id,
            createdAt=now,
            updatedAt=now,
        )
        if not self.store.put_if_absent(customer.to_item()):
            _emit_structured_log(
                component=COMPONENT,
                event="customer_create_conflict",
                tenant_id=tenant_id,
                customer_id=customer.customerId,
                latency_ms=_elapsed_ms(started),
                error_code="CONFLICT",
            )
            raise ConflictError(customer.customerId)

        _emit_structured_log(
            component=COMPONENT,
            event="customer_created",
            tenant_id=tenant_id,
            customer_id=customer.customerId,
            latency_ms=_elapsed_ms(started),
        )
        return customer

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, customer_id: str) -> Optional[Customer]:
        item = self.store.get(customer_id)
        if item is None:
            return None
        return Customer.from_item(item)

    def list_by_tenant(self, tenant_id: str, limit: int = DEFAULT_LIST_LIMIT) -> List[Customer]:
        # Index order, single page: records past `limit` are not reachable here.
        return [Customer.from_item(item) for item in self.store.query_by_tenant(tenant_id, limit)]

    def search_by_tenant(self, tenant_id: str, term: str) -> List[Customer]:
        """Tenant records whose first name, last name or email contains `term`.

        Matching is case-insensitive. Cost is linear in the size of the whole
        table (filtered scan), not in the tenant's record count.
        """
        needle = (term or "").casefold()
        if not needle.strip():
            return []
        matches: List[Customer] = []
        for item in self.store.scan_by_tenant(tenant_id):
            haystacks = (str(item.get(name) or "").casefold() for name in _SEARCH_FIELDS)
            if any(needle in text for text in haystacks):
                matches.append(Customer.from_item(item))
        return matches

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    def update(
        self,
        customer_id: str,
        fields: Mapping[str, Any],
        current: Optional[Customer] = None,
    ) -> Optional[Customer]:
        """Apply a partial update; None when the customer does not exist.

        `current` may carry the record a caller just fetched for its ownership
        check. With no updatable fields the current record is returned as is
        and nothing is written.

        The new `updatedAt` is strictly greater than the one on `current`. If
        `current` is older than the stored record (a concurrent update landed
        after it was read), monotonicity holds only relative to that snapshot.
        """
        started = time.monotonic()
        if current is None:
            current = self.get(customer_id)
            if current is None:
                return None

        changes = {
            name: value
            for name, value in fields.items()
            if name in CANONICAL_FIELDS and name not in PROTECTED_FIELDS
        }
        if not changes:
            return current

        changes["updatedAt"] = max(self._clock(), current.updatedAt + 1)
        item = self.store.update_attributes(customer_id, changes)
        if item is None:
            return None

        _emit_structured_log(
            component=COMPONENT,
            event="customer_updated",
            tenant_id=current.tenantId,
            customer_id=customer_id,
            latency_ms=_elapsed_ms(started),
            extra={"fields": sorted(changes)},
        )
        return Customer.from_item(item)

    def delete(self, customer_id: str) -> None:
        """Hard delete; deleting a missing customer is a no-op."""
        self.store.delete(customer_id)
        _emit_structured_log(component=COMPONENT, event="customer_deleted", customer_id=customer_id)
