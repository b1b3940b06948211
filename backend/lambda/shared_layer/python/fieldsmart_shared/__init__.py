"""fieldsmart_shared — Shared utilities for FieldSmart Lambda functions.

Provides:
    - Trusted tenant-context extraction (X-Tenant-Id header)
    - DynamoDB client singleton
    - HTTP response helpers with CORS
    - DynamoDB serialization/deserialization and structured logging
"""

__version__ = "1.0.0"
