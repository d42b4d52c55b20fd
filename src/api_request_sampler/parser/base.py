"""Descriptor models for detected endpoints and resolved class properties.

The endpoint detector and the class parser hand their results over in
these shapes; everything downstream works on them only.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag


class ParameterSource(str, Enum):
    """Where a parameter's value travels in the request."""

    PATH = "path"
    QUERY = "query"
    BODY = "body"
    FORM = "form"


class FieldProperty(BaseModel):
    """A regular field of a body/form class, possibly with its own nested fields."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["field"] = "field"
    name: str
    type: str
    properties: list["PropertyDescriptor"] | None = None
    base_class_warning: str | None = None  # unresolved base class note


class EnumProperty(BaseModel):
    """A property standing for an enum value rather than a nested object."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["enum"] = "enum"
    name: str
    type: str = ""
    values: list[str] = Field(min_length=1)

    @property
    def first_value(self) -> str:
        return self.values[0]


def _property_kind(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("kind", "field")
    return getattr(value, "kind", "field")


PropertyDescriptor = Annotated[
    Union[
        Annotated[FieldProperty, Tag("field")],
        Annotated[EnumProperty, Tag("enum")],
    ],
    Discriminator(_property_kind),
]

FieldProperty.model_rebuild()


class ParameterDescriptor(BaseModel):
    """One formal parameter of an endpoint."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    source: ParameterSource
    properties: list[PropertyDescriptor] | None = None


class EndpointDescriptor(BaseModel):
    """A single API route with its parameters."""

    model_config = ConfigDict(frozen=True)

    method: str  # GET / POST / PUT / DELETE / PATCH
    route: str  # /api/users/{id}
    parameters: list[ParameterDescriptor] = []

    def parameters_from(self, source: ParameterSource) -> list[ParameterDescriptor]:
        return [p for p in self.parameters if p.source == source]


class EnvironmentDescriptor(BaseModel):
    """Target environment: where requests go and which headers they carry."""

    name: str = ""
    base_url: str
    base_path: str = ""
    headers: dict[str, str] = {}
    custom_variables: dict[str, str] = {}
