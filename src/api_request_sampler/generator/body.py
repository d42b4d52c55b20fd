"""Request body synthesizer: builds a JSON-shaped sample body.

Works from the property trees the class parser resolved for body
parameters. Anything it cannot resolve becomes a ``None``/empty
placeholder plus a SynthesisWarning; one unresolved field never stops
its siblings from being filled in.
"""

import logging
from typing import Any

from api_request_sampler.cache import ClassDefinitionCache
from api_request_sampler.parser.base import (
    EnumProperty,
    ParameterDescriptor,
    ParameterSource,
    PropertyDescriptor,
)

from .result import SynthesisResult, SynthesisWarning
from .typenames import extract_inner_type, is_collection_type, is_file_type, is_simple_type
from .values import SampleValueProvider

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 32
FILE_PLACEHOLDER = "[FILE]"

NOT_FOUND_MARKER = "not found in workspace"
DEFINE_TYPE_HINT = "Define this type in the workspace, or fill in the complete request body manually"
CHECK_TYPE_HINT = "Check the type definition"


class RequestBodySynthesizer:
    """Synthesizes request bodies from parameter descriptors."""

    def __init__(
        self,
        provider: SampleValueProvider | None = None,
        cache: ClassDefinitionCache | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.provider = provider or SampleValueProvider()
        self.cache = cache
        self.max_depth = max_depth

    def synthesize(
        self,
        parameters: list[ParameterDescriptor],
        suppress_unresolved_warnings: bool = False,
    ) -> SynthesisResult:
        """Build the body for an endpoint's parameters.

        ``suppress_unresolved_warnings`` is for preview renders that happen
        before class parsing has finished: an unresolved body type then
        yields a ``None`` body without a warning.
        """
        body_params = [p for p in parameters if p.source == ParameterSource.BODY]
        form_params = [p for p in parameters if p.source == ParameterSource.FORM]

        if len(body_params) == 1:
            param = body_params[0]
            if param.properties:
                return self._from_properties(param)
            return self._unresolved(param, suppress_unresolved_warnings)

        if len(body_params) > 1:
            return SynthesisResult(body=self._flat_object(body_params))

        if form_params:
            return SynthesisResult(body=self._flat_object(form_params))

        return SynthesisResult()

    def synthesize_object(self, properties: list[PropertyDescriptor]) -> SynthesisResult:
        """Build one object from a property list."""
        errors: list[SynthesisWarning] = []
        body = self._build_object(properties, errors, depth=0, ancestry={id(properties)})
        return SynthesisResult(body=body, errors=errors)

    # -- body parameter dispatch ----------------------------------------------

    def _from_properties(self, param: ParameterDescriptor) -> SynthesisResult:
        first = param.properties[0]
        if isinstance(first, EnumProperty):
            logger.debug("Body %s is an enum, using first value %s", param.type, first.first_value)
            return SynthesisResult(body=first.first_value)

        errors: list[SynthesisWarning] = []
        if first.base_class_warning:
            errors.append(SynthesisWarning(
                message=f"Warning: class '{param.type}' {first.base_class_warning}",
                remediation=(
                    "Check that the base class definition is in the workspace, or add the "
                    "inherited properties manually. The current body only contains the "
                    "class's own properties and may be incomplete"
                ),
            ))

        logger.debug("Generating body from %d properties of %s", len(param.properties), param.type)
        result = self.synthesize_object(param.properties)
        return SynthesisResult(body=result.body, errors=errors + result.errors)

    def _unresolved(self, param: ParameterDescriptor, suppress: bool) -> SynthesisResult:
        cached = self.cache.cached_errors(param.type) if self.cache else None
        if cached:
            logger.debug("Using cached errors for %s: %s", param.type, cached)
            return SynthesisResult(errors=[_from_cached_error(err) for err in cached])

        if suppress:
            logger.debug("No properties for %s, skipping warning (preview)", param.type)
            return SynthesisResult()

        logger.warning("No properties found for body type %s", param.type)
        return SynthesisResult(errors=[SynthesisWarning(
            message=f"Warning: class '{param.type}' {NOT_FOUND_MARKER}",
            remediation=DEFINE_TYPE_HINT,
        )])

    def _flat_object(self, params: list[ParameterDescriptor]) -> dict[str, Any]:
        return {p.name: self.provider.value_for(p.type, p.name) for p in params}

    # -- recursive object synthesis -------------------------------------------

    def _build_object(
        self,
        properties: list[PropertyDescriptor],
        errors: list[SynthesisWarning],
        depth: int,
        ancestry: set[int],
    ) -> dict[str, Any]:
        obj: dict[str, Any] = {}

        for prop in properties:
            if isinstance(prop, EnumProperty):
                obj[prop.name] = prop.first_value
                continue

            if is_file_type(prop.type):
                obj[prop.name] = FILE_PLACEHOLDER
                continue

            if is_collection_type(prop.type):
                inner_type = extract_inner_type(prop.type)
                if prop.properties:
                    nested = self._descend(prop, errors, depth, ancestry)
                    obj[prop.name] = [] if nested is None else [nested]
                elif not is_simple_type(inner_type):
                    logger.warning("Collection element type %s not resolved for %s", inner_type, prop.name)
                    errors.append(SynthesisWarning(
                        field=prop.name,
                        message=f"Warning: cannot resolve collection element type '{inner_type}'",
                        remediation=f"Define this type in the workspace, or add {inner_type} objects to this array manually",
                    ))
                    obj[prop.name] = []
                else:
                    obj[prop.name] = [self.provider.value_for(inner_type, prop.name)]

            elif not is_simple_type(prop.type):
                if prop.properties:
                    obj[prop.name] = self._descend(prop, errors, depth, ancestry)
                else:
                    logger.warning("Complex type %s not resolved for %s", prop.type, prop.name)
                    errors.append(SynthesisWarning(
                        field=prop.name,
                        message=f"Warning: cannot resolve complex type '{prop.type}'",
                        remediation=f"Define this type in the workspace, or fill in the {prop.type} object manually",
                    ))
                    obj[prop.name] = None

            else:
                obj[prop.name] = self.provider.value_for(prop.type, prop.name)

        return obj

    def _descend(self, prop, errors, depth, ancestry) -> dict[str, Any] | None:
        """Recurse into a nested tree; None when the cycle/depth guard trips."""
        key = id(prop.properties)
        if depth + 1 > self.max_depth or key in ancestry:
            logger.warning("Stopped at recursive type %s for %s", prop.type, prop.name)
            errors.append(SynthesisWarning(
                field=prop.name,
                message=f"Warning: type '{prop.type}' is recursive or nested too deeply",
                remediation=f"Fill in the {prop.type} object manually",
            ))
            return None
        return self._build_object(prop.properties, errors, depth + 1, ancestry | {key})


def _from_cached_error(text: str) -> SynthesisWarning:
    if NOT_FOUND_MARKER in text:
        return SynthesisWarning(message=text, remediation=DEFINE_TYPE_HINT)
    return SynthesisWarning(message=text, remediation=CHECK_TYPE_HINT)
