"""Result models produced by request generation."""

from typing import Any

from pydantic import BaseModel

GLOBAL_FIELD = "_GLOBAL_"
SEPARATOR = "|"


class SynthesisWarning(BaseModel):
    """Why a field (or the whole body, when ``field`` is None) could not be synthesized."""

    field: str | None = None
    message: str
    remediation: str

    @property
    def is_global(self) -> bool:
        return self.field is None

    def serialize(self) -> str:
        """Render as ``field|message|remediation`` for display layers.

        Separators and backslashes inside the parts are backslash-escaped.
        """
        location = GLOBAL_FIELD if self.field is None else self.field
        return SEPARATOR.join(_escape(part) for part in (location, self.message, self.remediation))

    @classmethod
    def parse(cls, text: str) -> "SynthesisWarning":
        parts = _split(text)
        if len(parts) != 3:
            raise ValueError(f"Expected 3 '{SEPARATOR}'-separated parts, got {len(parts)}: {text!r}")
        location, message, remediation = parts
        return cls(
            field=None if location == GLOBAL_FIELD else location,
            message=message,
            remediation=remediation,
        )


def _escape(part: str) -> str:
    return part.replace("\\", "\\\\").replace(SEPARATOR, "\\" + SEPARATOR)


def _split(text: str) -> list[str]:
    parts: list[str] = []
    current: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch == "\\":
            current.append(next(chars, ""))
        elif ch == SEPARATOR:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return parts


class SynthesisResult(BaseModel):
    body: Any = None
    errors: list[SynthesisWarning] = []


class GeneratedRequest(BaseModel):
    """A fully assembled sample request."""

    url: str
    method: str
    headers: dict[str, str] = {}
    query_params: dict[str, Any] = {}
    path_params: dict[str, Any] = {}
    body: Any = None
    form_data: dict[str, Any] | None = None
    errors: list[SynthesisWarning] = []

    def to_display(self) -> dict[str, Any]:
        """Plain dict with warnings flattened to their string form."""
        data = self.model_dump(mode="json")
        data["errors"] = [w.serialize() for w in self.errors]
        return data
