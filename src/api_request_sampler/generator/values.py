"""Sample value provider: plausible placeholder values for a field.

The field name is consulted first (``userEmail`` looks like an email
whatever its declared type), then the declared type.
"""

import random
from typing import Any

from .typenames import strip_nullable

SAMPLE_STRING = "sample_string"
SAMPLE_INTEGER = 42
SAMPLE_FLOAT = 3.14
SAMPLE_GUID = "550e8400-e29b-41d4-a716-446655440000"
SAMPLE_TIMESTAMP = "2024-01-01T00:00:00Z"
SAMPLE_EMAIL = "test@example.com"
SAMPLE_URL = "https://example.com"

ID_RANGE = (1, 1000)

INTEGER_TYPES = {"int", "int32", "int64", "long", "short", "byte", "sbyte", "uint", "ulong", "ushort"}
FLOAT_TYPES = {"double", "float", "decimal"}
BOOLEAN_TYPES = {"bool", "boolean"}

_ID = object()  # drawn from the random generator

# Order matters: the first trigger contained in the field name wins.
NAME_RULES: list[tuple[tuple[str, ...], Any]] = [
    (("id", "identifier"), _ID),
    (("email", "mail"), SAMPLE_EMAIL),
    (("password", "pwd"), "Sample@Password123"),
    (("phone", "telephone", "mobile"), "+1-555-0123"),
    (("address",), "123 Main Street"),
    (("city",), "New York"),
    (("country",), "USA"),
    (("zip", "postal"), "10001"),
    (("price", "amount", "cost"), 99.99),
    (("quantity", "count"), 1),
    (("category",), "General"),
    (("url", "link"), SAMPLE_URL),
    (("date", "time"), SAMPLE_TIMESTAMP),
    (("name", "title"), "Sample Name"),
    (("description", "comment"), "This is a sample description"),
    (("status",), "active"),
    (("is", "has", "can"), True),
]


class SampleValueProvider:
    """Maps a field name and declared type to a JSON scalar."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def value_for(self, type_name: str, field_name: str) -> Any:
        by_name = self.value_by_name(field_name)
        if by_name is not None:
            return by_name
        return self.value_by_type(type_name)

    def value_by_name(self, field_name: str) -> Any | None:
        lower_name = (field_name or "").lower()
        for triggers, value in NAME_RULES:
            if any(trigger in lower_name for trigger in triggers):
                if value is _ID:
                    return self.rng.randint(*ID_RANGE)
                return value
        return None

    def value_by_type(self, type_name: str) -> Any:
        cleaned = strip_nullable(type_name or "").lower()

        if cleaned == "string":
            return SAMPLE_STRING
        if cleaned in INTEGER_TYPES:
            return SAMPLE_INTEGER
        if cleaned in FLOAT_TYPES:
            return SAMPLE_FLOAT
        if cleaned in BOOLEAN_TYPES:
            return True
        if cleaned == "guid":
            return SAMPLE_GUID
        if "datetime" in cleaned:
            return SAMPLE_TIMESTAMP

        # Unknown types still get something the user can edit.
        return SAMPLE_STRING
