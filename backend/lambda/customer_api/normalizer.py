"""normalizer.py — Map heterogeneous client payloads onto canonical customer fields.

Web, mobile and voice clients disagree on field names: some send
`firstName`, some `first_name`, some only a combined `display_name`; phone
numbers arrive under four different keys. `normalize_customer_input` folds all
of them into the canonical camelCase field set consumed by validation.

Resolution is per field, first non-empty source wins:

    firstName  firstName -> first_name -> first token of display_name -> ''
    lastName   lastName  -> last_name  -> remaining display_name tokens -> ''
    email      email -> ''
    phone      phone -> mobile_number -> home_number -> work_number -> ''
    address    address -> ''
    city       city -> ''
    state      state -> ''
    zipCode    zipCode -> zip_code -> ''
    notes      notes -> ''

In create mode every canonical field is returned. In partial (update) mode a
field is returned only when at least one of its source keys is present in the
payload, even with an empty or null value, so that "clear lastName" stays
distinguishable from "leave lastName alone". `display_name` counts as a source
only when it is a non-blank string, and in partial mode a supplied
`lastName`/`last_name` wins over it even when empty.

The function never raises: non-dict input normalizes like an empty payload,
and type problems in values are left for the validator to report.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple, TypedDict

__all__ = [
    "CANONICAL_FIELDS",
    "CustomerFields",
    "normalize_customer_input",
]


class CustomerFields(TypedDict, total=False):
    firstName: str
    lastName: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    zipCode: str
    notes: str


# canonical field -> source keys, in precedence order
_FIELD_SOURCES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("firstName", ("firstName", "first_name")),
    ("lastName", ("lastName", "last_name")),
    ("email", ("email",)),
    ("phone", ("phone", "mobile_number", "home_number", "work_number")),
    ("address", ("address",)),
    ("city", ("city",)),
    ("state", ("state",)),
    ("zipCode", ("zipCode", "zip_code")),
    ("notes", ("notes",)),
)

CANONICAL_FIELDS: Tuple[str, ...] = tuple(name for name, _ in _FIELD_SOURCES)

_DISPLAY_NAME_KEY = "display_name"


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _split_display_name(value: Any) -> Dict[str, str]:
    """Split a usable display name; {} for non-strings and blank strings."""
    if not isinstance(value, str):
        return {}
    parts: List[str] = value.split()
    if not parts:
        return {}
    return {
        "firstName": parts[0],
        "lastName": " ".join(parts[1:]),
    }


def normalize_customer_input(body: Any, *, partial: bool = False) -> CustomerFields:
    """Return the canonical customer fields for a raw client payload.

    Args:
        body: Decoded JSON payload; anything that is not a mapping is treated
              as an empty payload.
        partial: Update mode. Only fields with a present source key are
                 returned.
    """
    payload: Mapping[str, Any] = body if isinstance(body, Mapping) else {}
    from_display = _split_display_name(payload.get(_DISPLAY_NAME_KEY))

    out: Dict[str, Any] = {}
    for field, sources in _FIELD_SOURCES:
        present = any(key in payload for key in sources)

        value: Any = ""
        for key in sources:
            candidate = payload.get(key)
            if not _is_empty(candidate):
                value = candidate
                break

        if field in from_display and _is_empty(value):
            # A supplied lastName, even empty, beats display_name in updates.
            if not (partial and present and field == "lastName"):
                value = from_display[field]
                present = True

        if partial and not present:
            continue
        out[field] = value

    return out  # type: ignore[return-value]
