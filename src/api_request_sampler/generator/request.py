"""Request assembler: combines URL, parameters, headers and body."""

from typing import Any
from urllib.parse import quote

from api_request_sampler.cache import ClassDefinitionCache
from api_request_sampler.parser.base import (
    EndpointDescriptor,
    EnvironmentDescriptor,
    ParameterDescriptor,
    ParameterSource,
)

from .body import FILE_PLACEHOLDER, RequestBodySynthesizer
from .result import GeneratedRequest
from .typenames import is_file_type
from .values import SampleValueProvider

BODY_METHODS = ("POST", "PUT", "PATCH")
JSON_CONTENT_TYPE = "application/json"
MULTIPART_FORM_DATA = "multipart/form-data"

# Same unreserved set as JavaScript's encodeURIComponent.
_URI_SAFE = "-_.!~*'()"


class RequestAssembler:
    """Builds a GeneratedRequest for an endpoint.

    Two URL policies: a flat base URL, or an environment's base URL plus
    base path.
    """

    def __init__(
        self,
        provider: SampleValueProvider | None = None,
        cache: ClassDefinitionCache | None = None,
        synthesizer: RequestBodySynthesizer | None = None,
    ):
        self.provider = provider or SampleValueProvider()
        self.synthesizer = synthesizer or RequestBodySynthesizer(provider=self.provider, cache=cache)

    def assemble_with_base_url(self, endpoint: EndpointDescriptor, base_url: str) -> GeneratedRequest:
        url = base_url[:-1] if base_url.endswith("/") else base_url
        url += _with_leading_slash(endpoint.route)
        return self._assemble(
            endpoint,
            url,
            headers={"Content-Type": JSON_CONTENT_TYPE, "Accept": JSON_CONTENT_TYPE},
            form_mode=False,
            suppress_unresolved_warnings=False,
        )

    def assemble_with_environment(
        self,
        endpoint: EndpointDescriptor,
        environment: EnvironmentDescriptor,
        suppress_unresolved_warnings: bool = False,
    ) -> GeneratedRequest:
        headers = {
            **environment.headers,
            "Content-Type": JSON_CONTENT_TYPE,
            "Accept": JSON_CONTENT_TYPE,
        }
        return self._assemble(
            endpoint,
            environment_url(environment, endpoint.route),
            headers=headers,
            form_mode=bool(endpoint.parameters_from(ParameterSource.FORM)),
            suppress_unresolved_warnings=suppress_unresolved_warnings,
        )

    # -- shared ---------------------------------------------------------------

    def _assemble(
        self,
        endpoint: EndpointDescriptor,
        url: str,
        headers: dict[str, str],
        form_mode: bool,
        suppress_unresolved_warnings: bool,
    ) -> GeneratedRequest:
        method = endpoint.method.upper()
        url, path_params = self._fill_path_parameters(url, endpoint.parameters_from(ParameterSource.PATH))
        query_params = self._query_parameters(endpoint.parameters_from(ParameterSource.QUERY))

        query_string = build_query_string(query_params)
        request = GeneratedRequest(
            url=f"{url}?{query_string}" if query_string else url,
            method=method,
            headers=headers,
            query_params=query_params,
            path_params=path_params,
        )

        if form_mode:
            request.form_data = self._form_data(endpoint.parameters_from(ParameterSource.FORM))
            request.headers["Content-Type"] = MULTIPART_FORM_DATA
        elif method in BODY_METHODS:
            result = self.synthesizer.synthesize(
                endpoint.parameters,
                suppress_unresolved_warnings=suppress_unresolved_warnings,
            )
            request.body = result.body
            request.errors = result.errors

        return request

    def _fill_path_parameters(
        self, url: str, params: list[ParameterDescriptor]
    ) -> tuple[str, dict[str, Any]]:
        values: dict[str, Any] = {}
        for param in params:
            value = self.provider.value_for(param.type, param.name)
            values[param.name] = value
            url = url.replace(f"{{{param.name}}}", _encode(value), 1)
        return url, values

    def _query_parameters(self, params: list[ParameterDescriptor]) -> dict[str, Any]:
        return {p.name: self.provider.value_for(p.type, p.name) for p in params}

    def _form_data(self, params: list[ParameterDescriptor]) -> dict[str, Any]:
        form_data: dict[str, Any] = {}
        for param in params:
            if is_file_type(param.type):
                form_data[param.name] = FILE_PLACEHOLDER
            else:
                form_data[param.name] = self.provider.value_for(param.type, param.name)
        return form_data


def environment_url(environment: EnvironmentDescriptor, route: str) -> str:
    """Join the environment's base URL, base path and an endpoint route.

    A leading ``api/`` on the route is dropped when a base path is set,
    since the base path already names the API root.
    """
    base = environment.base_url
    base = base[:-1] if base.endswith("/") else base

    base_path = environment.base_path
    if not base_path:
        return base + _with_leading_slash(route)

    base_path = base_path if base_path.endswith("/") else base_path + "/"
    base_path = base_path[1:] if base_path.startswith("/") else base_path

    route = route[1:] if route.startswith("/") else route
    route = route[4:] if route.startswith("api/") else route
    route = route[1:] if route.startswith("/") else route

    return f"{base}/{base_path}{route}"


def build_query_string(params: dict[str, Any]) -> str:
    return "&".join(f"{_encode(key)}={_encode(value)}" for key, value in params.items())


def _with_leading_slash(route: str) -> str:
    return route if route.startswith("/") else f"/{route}"


def _encode(value: Any) -> str:
    if isinstance(value, bool):
        value = "true" if value else "false"
    return quote(str(value), safe=_URI_SAFE)
