"""Environment configuration: named targets with base URL, base path and headers.

Stored as YAML::

    current_environment: Development
    environments:
      - name: Development
        base_url: http://localhost:5000
        base_path: /api
        headers: {Authorization: Bearer dev-token}
        custom_variables: {}
"""

import logging
from pathlib import Path

import yaml

from api_request_sampler.parser.base import EnvironmentDescriptor

logger = logging.getLogger(__name__)


def default_environments() -> list[EnvironmentDescriptor]:
    return [
        EnvironmentDescriptor(
            name="Development",
            base_url="http://localhost:5000",
            base_path="/api",
        ),
        EnvironmentDescriptor(
            name="Staging",
            base_url="https://staging.example.com",
            base_path="/api",
            custom_variables={"API_VERSION": "v1", "DEBUG_MODE": "true"},
        ),
    ]


class EnvironmentConfig:
    """The configured environments and which one is current."""

    def __init__(
        self,
        environments: list[EnvironmentDescriptor] | None = None,
        current_environment: str = "Development",
    ):
        self.environments = list(environments) if environments else default_environments()
        self.current_environment = current_environment
        if self.get(current_environment) is None:
            self.current_environment = self.environments[0].name

    @classmethod
    def load(cls, file_path: Path) -> "EnvironmentConfig":
        """Load from YAML; a missing or empty file gives the defaults."""
        if not file_path.exists():
            logger.info("No environment file at %s, using defaults", file_path)
            return cls()

        data = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Environment file {file_path} must contain a mapping")

        environments = [EnvironmentDescriptor.model_validate(env) for env in data.get("environments") or []]
        config = cls(environments, data.get("current_environment", "Development"))
        logger.debug("Loaded %d environments from %s", len(config.environments), file_path)
        return config

    def save(self, file_path: Path) -> None:
        data = {
            "current_environment": self.current_environment,
            "environments": [env.model_dump() for env in self.environments],
        }
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), encoding="utf-8")

    def get(self, name: str) -> EnvironmentDescriptor | None:
        return next((env for env in self.environments if env.name == name), None)

    def current(self) -> EnvironmentDescriptor | None:
        return self.get(self.current_environment)

    def set_current(self, name: str) -> bool:
        if self.get(name) is None:
            return False
        self.current_environment = name
        logger.info("Environment switched to: %s", name)
        return True

    def add(self, environment: EnvironmentDescriptor) -> None:
        if self.get(environment.name) is not None:
            raise ValueError(f"Environment '{environment.name}' already exists")
        self.environments.append(environment)

    def update(self, name: str, /, **changes) -> EnvironmentDescriptor:
        index = self._index_of(name)
        new_name = changes.get("name")
        if new_name and new_name != name:
            if self.get(new_name) is not None:
                raise ValueError(f"Environment '{new_name}' already exists")
            if self.current_environment == name:
                self.current_environment = new_name

        updated = self.environments[index].model_copy(update=changes)
        self.environments[index] = updated
        return updated

    def delete(self, name: str) -> None:
        if len(self.environments) <= 1:
            raise ValueError("Cannot delete the last environment")
        index = self._index_of(name)

        if name == self.current_environment:
            self.current_environment = next(env.name for env in self.environments if env.name != name)
        del self.environments[index]

    def custom_variable(self, name: str) -> str | None:
        env = self.current()
        return env.custom_variables.get(name) if env else None

    def custom_variables(self) -> dict[str, str]:
        env = self.current()
        return dict(env.custom_variables) if env else {}

    def _index_of(self, name: str) -> int:
        for index, env in enumerate(self.environments):
            if env.name == name:
                return index
        raise ValueError(f"Environment '{name}' not found")


def describe(environment: EnvironmentDescriptor) -> str:
    """One-line summary of headers and custom variables."""
    parts = [", ".join(f"{k}: {v}" for k, v in environment.headers.items())]
    variables = ", ".join(f"{k}={v}" for k, v in environment.custom_variables.items())
    if variables:
        parts.append(f"Vars: {variables}")
    return " | ".join(part for part in parts if part)
