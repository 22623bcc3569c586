"""CLI entry point for rede."""

import json
from pathlib import Path

import click
import yaml

from rede.config import get_settings
from rede.errors import RedeError
from rede.logging import configure_logging, get_logger
from rede.placeholders import Placeholders, Renderer
from rede.request import Request
from rede.schema import Schema

logger = get_logger(__name__)

FORMATS = click.Choice(["yaml", "json"])


def _load_request(file_path: Path) -> Request:
    """Parse a request file, turning parse errors into CLI errors."""
    logger.debug("loading_request", path=str(file_path))
    try:
        request = Schema.from_path(file_path).to_request()
    except RedeError as e:
        raise click.ClickException(f"{file_path}: {e}") from e
    logger.info("request_loaded", path=str(file_path), method=request.method, url=request.url)
    return request


def _dump(request: Request, fmt: str | None) -> str:
    data = request.model_dump(mode="json")
    if (fmt or get_settings().output_format) == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip("\n")


def _parse_vars(ctx, param, values: tuple[str, ...]) -> list[tuple[str, str]]:
    pairs = []
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got {item!r}")
        pairs.append((name, value))
    return pairs


@click.group()
@click.option("--log-level", default=None, help="Log level (defaults to REDE_LOG_LEVEL or WARNING).")
def main(log_level: str | None):
    """rede — inspect and render TOML HTTP request files."""
    configure_logging(log_level or get_settings().log_level)


@main.command()
@click.argument("request_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", default=None, type=FORMATS, help="Output format.")
def parse(request_path: Path, fmt: str | None):
    """Parse and validate a request file, then print it."""
    click.echo(_dump(_load_request(request_path), fmt))


@main.command()
@click.argument("request_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def placeholders(request_path: Path):
    """List the placeholders found in a request file and where they occur."""
    catalog = Placeholders.from_request(_load_request(request_path))
    if not catalog:
        click.echo("No placeholders found.")
        return
    for name, locations in catalog.items():
        click.echo(f"{name}: {', '.join(str(location) for location in locations)}")


@main.command()
@click.argument("request_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-v", "--var", "values", multiple=True, callback=_parse_vars, metavar="NAME=VALUE", help="Placeholder value; repeatable, last one wins.")
@click.option("--format", "fmt", default=None, type=FORMATS, help="Output format.")
def render(request_path: Path, values: list[tuple[str, str]], fmt: str | None):
    """Substitute placeholder values into a request file and print the result."""
    request = _load_request(request_path)
    catalog = Placeholders.from_request(request)
    missing = [name for name in catalog if name not in dict(values)]
    if missing:
        logger.warning("placeholders_unresolved", names=missing)

    try:
        rendered = Renderer(catalog, values).render(request)
    except RedeError as e:
        raise click.ClickException(str(e)) from e
    logger.info("request_rendered", placeholders=len(catalog), values=len(values))
    click.echo(_dump(rendered, fmt))
