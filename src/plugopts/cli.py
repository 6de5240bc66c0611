# src/plugopts/cli.py
"""plugopts Command Line Interface.

Entry point for the plugopts CLI tool.
"""

import importlib
from pathlib import Path
from typing import Any

import typer
import yaml
from pydantic import ValidationError

from plugopts import __version__
from plugopts.contracts import ConfigError
from plugopts.core.config import EngineSettings, load_settings
from plugopts.core.logging import configure_logging
from plugopts.core.schema import ObjectSchema, SchemaBuilder
from plugopts.engine.validator import validate_sync

app = typer.Typer(
    name="plugopts",
    help="plugopts: declare and validate plugin options.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"plugopts version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """plugopts: declare and validate plugin options."""
    pass


def _load_schema(reference: str) -> ObjectSchema:
    """Resolve 'package.module:attribute' to an ObjectSchema.

    The attribute may be an ObjectSchema or a factory taking a SchemaBuilder.

    Raises:
        typer.Exit: If the reference cannot be resolved or builds a bad schema
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        typer.echo(
            f"Error: Schema reference must look like 'module:factory', got '{reference}'",
            err=True,
        )
        raise typer.Exit(1)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        typer.echo(f"Error: Cannot import schema module '{module_name}': {e}", err=True)
        raise typer.Exit(1) from None

    try:
        target = getattr(module, attr)
    except AttributeError:
        typer.echo(f"Error: Module '{module_name}' has no attribute '{attr}'", err=True)
        raise typer.Exit(1) from None

    if isinstance(target, ObjectSchema):
        return target

    try:
        schema = target(SchemaBuilder())
    except ConfigError as e:
        typer.echo(f"Schema error: {e}", err=True)
        raise typer.Exit(1) from None

    if not isinstance(schema, ObjectSchema):
        typer.echo(
            f"Error: '{reference}' returned {type(schema).__name__}, expected an ObjectSchema",
            err=True,
        )
        raise typer.Exit(1)
    return schema


def _load_options(path: Path) -> Any:
    """Load plugin options from a YAML (or JSON) file."""
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        typer.echo(f"Error: Options file not found: {path}", err=True)
        raise typer.Exit(1) from None

    try:
        options = yaml.safe_load(content)
    except yaml.YAMLError as e:
        typer.echo(f"Error: Invalid YAML in {path}: {e}", err=True)
        raise typer.Exit(1) from None

    # An empty file means "no options"
    return {} if options is None else options


def _load_engine_settings(settings: str | None) -> EngineSettings:
    if settings is None:
        return EngineSettings()
    try:
        return load_settings(Path(settings))
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Settings errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None


@app.command()
def check(
    schema: str = typer.Option(
        ...,
        "--schema",
        "-s",
        help="Schema reference as 'module:factory' (factory receives a SchemaBuilder).",
    ),
    options: str = typer.Option(
        ...,
        "--options",
        "-o",
        help="Path to plugin options YAML file.",
    ),
    settings: str | None = typer.Option(
        None,
        "--settings",
        help="Path to engine settings YAML file.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging and the resolved options.",
    ),
) -> None:
    """Validate a plugin options file against its schema."""
    configure_logging(level="DEBUG" if verbose else "WARNING")

    object_schema = _load_schema(schema)
    engine_settings = _load_engine_settings(settings)
    raw_options = _load_options(Path(options))

    result = validate_sync(object_schema, raw_options, settings=engine_settings)

    for warning in result.warnings:
        typer.echo(f"Warning: {warning}", err=True)

    if not result.is_valid:
        typer.echo("Option errors:", err=True)
        for error in result.errors:
            typer.echo(f"  - {error}", err=True)
        raise typer.Exit(1)

    typer.echo("Plugin options valid.")
    if verbose:
        typer.echo(yaml.safe_dump(result.value, sort_keys=False).rstrip())


@app.command()
def describe(
    schema: str = typer.Option(
        ...,
        "--schema",
        "-s",
        help="Schema reference as 'module:factory' (factory receives a SchemaBuilder).",
    ),
) -> None:
    """Print a schema's fields, defaults and flags as YAML."""
    object_schema = _load_schema(schema)
    description = object_schema.describe()
    description["fingerprint"] = object_schema.fingerprint
    typer.echo(yaml.safe_dump(description, sort_keys=False).rstrip())


if __name__ == "__main__":
    app()
