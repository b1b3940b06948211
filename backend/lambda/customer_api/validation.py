"""validation.py — Schema validation for normalized customer payloads.

Two schemas share the same per-field constraints:

* `CustomerCreate` — `firstName` required (min length 1); every other field
  is an optional string defaulting to ''.
* `CustomerUpdate` — every field optional; when present, the same
  constraints as creation apply.

`email` must be a syntactically valid address whenever it is non-empty.
Violations are collected in one pass and raised together as
`errors.ValidationError` with one `{"field", "message"}` entry per problem.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import email_validator
import pydantic
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from errors import ValidationError

__all__ = [
    "CustomerCreate",
    "CustomerUpdate",
    "validate_create",
    "validate_update",
]

_FIELD_LABELS = {
    "firstName": "First name",
    "lastName": "Last name",
    "email": "Email",
    "phone": "Phone",
    "address": "Address",
    "city": "City",
    "state": "State",
    "zipCode": "Zip code",
    "notes": "Notes",
}


# Format check only: reserved names (.test, .local, localhost) are valid syntax.
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()


def _check_email(value: Optional[str]) -> Optional[str]:
    if value:
        try:
            validate_email(value, check_deliverability=False, globally_deliverable=False)
        except EmailNotValidError as exc:
            raise ValueError(str(exc)) from exc
    return value


class CustomerCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    firstName: str = Field(..., min_length=1)
    lastName: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zipCode: str = ""
    notes: str = ""

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        return _check_email(v)


class CustomerUpdate(BaseModel):
    # Defaults are never validated; only supplied fields reach the dump.
    model_config = ConfigDict(extra="ignore")

    firstName: Optional[str] = Field(None, min_length=1)
    lastName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def not_null(cls, v: Any) -> Any:
        # Optional only so unset fields can default; an explicit null is not a string.
        if v is None:
            raise PydanticCustomError("string_type", "Input should be a valid string")
        return v

    @field_validator("email")
    @classmethod
    def email_format(cls, v: Optional[str]) -> Optional[str]:
        return _check_email(v)


def _message_for(field: str, error: Dict[str, Any]) -> str:
    label = _FIELD_LABELS.get(field, field)
    kind = error.get("type", "")
    if kind == "missing" or (kind == "string_too_short" and field == "firstName"):
        return f"{label} is required"
    if kind == "string_type":
        return f"{label} must be a string"
    if kind == "value_error" and field == "email":
        return "Valid email is required"
    return error.get("msg") or f"{label} is invalid"


def _details(exc: pydantic.ValidationError) -> List[Dict[str, str]]:
    details: List[Dict[str, str]] = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = ".".join(str(part) for part in loc) or "body"
        details.append({"field": field, "message": _message_for(field, error)})
    return details


def _as_mapping(fields: Any) -> Mapping[str, Any]:
    return fields if isinstance(fields, Mapping) else {}


def validate_create(fields: Any) -> Dict[str, str]:
    """Validate a create payload; returns every canonical field with defaults applied."""
    try:
        model = CustomerCreate.model_validate(_as_mapping(fields))
    except pydantic.ValidationError as exc:
        raise ValidationError(_details(exc)) from exc
    return model.model_dump()


def validate_update(fields: Any) -> Dict[str, str]:
    """Validate a partial payload; returns only the fields that were supplied."""
    try:
        model = CustomerUpdate.model_validate(_as_mapping(fields))
    except pydantic.ValidationError as exc:
        raise ValidationError(_details(exc)) from exc
    return model.model_dump(exclude_unset=True)
