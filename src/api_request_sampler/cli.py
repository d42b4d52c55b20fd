"""CLI entry point for api-request-sampler."""

import json
import logging
from pathlib import Path

import click
from pydantic import ValidationError

from api_request_sampler.cache import ClassDefinitionCache
from api_request_sampler.environments import EnvironmentConfig, describe
from api_request_sampler.generator.request import RequestAssembler
from api_request_sampler.parser.endpoints import filter_endpoints, load_endpoints, load_unresolved_types

DEFAULT_BASE_URL = "http://localhost:5000"


def _seed_cache(doc_path: Path) -> ClassDefinitionCache:
    """Record the document's unresolved types so their errors surface in warnings."""
    cache = ClassDefinitionCache()
    for type_name, errors in load_unresolved_types(doc_path).items():
        cache.put(type_name, [], None, str(doc_path), errors=errors)
    return cache


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log cache and synthesis details.")
def main(verbose: bool):
    """API Request Sampler: build sample requests from endpoint descriptors."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("--base-url", envvar="API_SAMPLER_BASE_URL", default=None, help="Flat base URL (ignored when an environment file is given).")
@click.option("--env-file", envvar="API_SAMPLER_ENV_FILE", default=None, type=click.Path(path_type=Path), help="Environment YAML file.")
@click.option("--env", "env_name", envvar="API_SAMPLER_ENV", default=None, help="Environment name (defaults to the file's current one).")
@click.option("--preview", is_flag=True, help="Skip warnings for body types that are not resolved yet.")
@click.option("--endpoint", "patterns", multiple=True, help="Only endpoints matching 'METHOD /route' or a route glob.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write JSON here instead of stdout.")
def generate(doc_path: Path, base_url: str | None, env_file: Path | None, env_name: str | None,
             preview: bool, patterns: tuple[str, ...], output: Path | None):
    """Generate sample requests for every endpoint in DOC_PATH."""
    try:
        endpoints = load_endpoints(doc_path)
        cache = _seed_cache(doc_path)
    except (ValueError, ValidationError) as e:
        raise click.ClickException(f"Invalid descriptor document {doc_path}: {e}")

    if patterns:
        endpoints = filter_endpoints(endpoints, patterns)
    click.echo(f"Found {len(endpoints)} endpoints.", err=True)

    assembler = RequestAssembler(cache=cache)

    if env_file is not None:
        try:
            config = EnvironmentConfig.load(env_file)
        except (ValueError, ValidationError) as e:
            raise click.ClickException(f"Invalid environment file {env_file}: {e}")
        if env_name and not config.set_current(env_name):
            raise click.ClickException(f"Environment '{env_name}' not found")
        environment = config.current()
        click.echo(f"Using environment {environment.name} ({environment.base_url.rstrip('/')}{environment.base_path})", err=True)
        generated = [
            assembler.assemble_with_environment(ep, environment, suppress_unresolved_warnings=preview)
            for ep in endpoints
        ]
    else:
        generated = [assembler.assemble_with_base_url(ep, base_url or DEFAULT_BASE_URL) for ep in endpoints]

    warning_count = sum(len(r.errors) for r in generated)
    if warning_count:
        click.echo(f"{warning_count} warnings, see the 'errors' fields.", err=True)

    result = json.dumps([r.to_display() for r in generated], indent=2, ensure_ascii=False)
    if output is None:
        click.echo(result)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result + "\n", encoding="utf-8")
    click.echo(f"Requests saved to {output}", err=True)


@main.command()
@click.option("--env-file", envvar="API_SAMPLER_ENV_FILE", required=True, type=click.Path(path_type=Path), help="Environment YAML file.")
def envs(env_file: Path):
    """List configured environments."""
    try:
        config = EnvironmentConfig.load(env_file)
    except (ValueError, ValidationError) as e:
        raise click.ClickException(f"Invalid environment file {env_file}: {e}")

    for env in config.environments:
        marker = "*" if env.name == config.current_environment else " "
        click.echo(f"{marker} {env.name}: {env.base_url.rstrip('/')}{env.base_path}")
        detail = describe(env)
        if detail:
            click.echo(f"    {detail}")
