"""Endpoint descriptor documents.

A descriptor document is YAML or JSON, written by the endpoint detector.
It is either a plain list of endpoints, or a mapping::

    endpoints:
      - method: POST
        route: /api/users
        parameters:
          - {name: user, type: CreateUserDto, source: body, properties: [...]}
    unresolved_types:
      CreateUserDto: ["Class 'CreateUserDto' not found in workspace"]
"""

import fnmatch
from pathlib import Path
from typing import Annotated

import yaml
from pydantic import BeforeValidator, TypeAdapter

from .base import EndpointDescriptor


def _as_error_list(value):
    # A lone message may be written without list brackets.
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return value


_UNRESOLVED_TYPES = TypeAdapter(dict[str, Annotated[list[str], BeforeValidator(_as_error_list)]])


def _read_document(file_path: Path) -> dict:
    text = file_path.read_text(encoding="utf-8")
    # JSON is a subset of YAML, so one loader covers both.
    doc = yaml.safe_load(text)

    if doc is None:
        return {}
    if isinstance(doc, list):
        return {"endpoints": doc}
    if not isinstance(doc, dict):
        raise ValueError(f"{file_path} must contain a list or a mapping of endpoints")
    return doc


def load_endpoints(file_path: Path) -> list[EndpointDescriptor]:
    """Parse a descriptor document into a list of EndpointDescriptor."""
    doc = _read_document(file_path)
    return [EndpointDescriptor.model_validate(item) for item in doc.get("endpoints") or []]


def load_unresolved_types(file_path: Path) -> dict[str, list[str]]:
    """Parse errors the class parser recorded per type name."""
    doc = _read_document(file_path)
    return _UNRESOLVED_TYPES.validate_python(doc.get("unresolved_types") or {})


def filter_endpoints(endpoints: list[EndpointDescriptor], patterns: tuple[str, ...]) -> list[EndpointDescriptor]:
    """Keep endpoints matching any pattern.

    A pattern is either ``"METHOD /route"`` or a route glob like ``/users/*``.
    """
    result = []
    for ep in endpoints:
        for pattern in patterns:
            method, _, route = pattern.strip().rpartition(" ")
            if method and ep.method.upper() != method.strip().upper():
                continue
            if fnmatch.fnmatchcase(ep.route, route):
                result.append(ep)
                break
    return result
