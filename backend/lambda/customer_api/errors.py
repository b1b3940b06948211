"""errors.py — Customer service error taxonomy.

Each error carries the HTTP status the entry point maps it to.
"""
from __future__ import annotations

from typing import Dict, List, Optional

__all__ = [
    "ConflictError",
    "CustomerServiceError",
    "ForbiddenError",
    "NotFoundError",
    "StoreError",
    "ValidationError",
]


class CustomerServiceError(Exception):
    status_code = 500
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CustomerServiceError):
    """Client input failed schema validation; `details` lists every violation."""

    status_code = 400

    def __init__(self, details: List[Dict[str, str]], message: str = "Invalid customer data"):
        super().__init__(message)
        self.details = list(details)

    def fields(self) -> List[str]:
        return [d["field"] for d in self.details]


class NotFoundError(CustomerServiceError):
    status_code = 404

    def __init__(self, customer_id: str):
        super().__init__(f"Customer with ID {customer_id} not found")
        self.customer_id = customer_id


class ForbiddenError(CustomerServiceError):
    status_code = 403

    def __init__(self, message: str = "You do not have access to this customer"):
        super().__init__(message)


class ConflictError(CustomerServiceError):
    """The generated customer id already exists in the store."""

    status_code = 500
    retryable = True

    def __init__(self, customer_id: str):
        super().__init__(f"Customer with ID {customer_id} already exists")
        self.customer_id = customer_id


class StoreError(CustomerServiceError):
    """Any failure talking to the record store, timeouts included."""

    status_code = 500
    retryable = True

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code or "StoreError"
