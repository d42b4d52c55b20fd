"""Classification helpers for declared type names."""

import re

SIMPLE_TYPES = {
    "string", "int", "int32", "int64", "long", "short", "byte",
    "uint", "ulong", "ushort", "sbyte",
    "double", "float", "decimal",
    "bool", "boolean", "datetime", "datetimeoffset",
    "guid", "char", "object",
}

GENERIC_COLLECTIONS = ("list<", "ienumerable<", "icollection<", "ilist<")

COLLECTION_MARKERS = GENERIC_COLLECTIONS + ("[]", "array<")

FILE_TYPES = ("IFormFile", "IFormFileCollection", "Stream", "byte[]")

_NULLABLE_WRAPPER = re.compile(r"^Nullable<\s*(.+?)\s*>$", re.IGNORECASE)
_INNER_TYPE = re.compile(r"<([^<>]+)>")


def strip_nullable(type_name: str) -> str:
    """Drop a trailing ``?`` or a ``Nullable<T>`` wrapper."""
    cleaned = type_name.strip()
    match = _NULLABLE_WRAPPER.match(cleaned)
    if match:
        return match.group(1)
    if cleaned.endswith("?"):
        return cleaned[:-1]
    return cleaned


def is_collection_type(type_name: str) -> bool:
    cleaned = strip_nullable(type_name).lower()
    return any(marker in cleaned for marker in COLLECTION_MARKERS)


def is_simple_type(type_name: str) -> bool:
    cleaned = strip_nullable(type_name).lower()
    if cleaned.endswith("[]"):
        cleaned = cleaned[:-2]
    if cleaned.startswith(GENERIC_COLLECTIONS):
        return False
    return cleaned in SIMPLE_TYPES


def extract_inner_type(type_name: str) -> str:
    """List<User> -> User, User[] -> User; anything else is returned as is."""
    match = _INNER_TYPE.search(type_name)
    if match:
        return match.group(1).strip()
    cleaned = strip_nullable(type_name)
    if cleaned.endswith("[]"):
        return cleaned[:-2].strip()
    return type_name


def is_file_type(type_name: str) -> bool:
    return any(file_type in type_name for file_type in FILE_TYPES)
