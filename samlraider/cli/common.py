"""Helpers shared by the CLI commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from samlraider.core.config import AppConfig
from samlraider.core.saml.service import OperationResult, SAMLRaiderService

# Common option for JSON output
json_option = click.option(
    "--json",
    "output_json",
    is_flag=True,
    help="Output results as JSON for scripting",
)

# Common input argument; "-" or nothing reads stdin
input_argument = click.argument(
    "input_path",
    required=False,
    default="-",
    type=click.Path(allow_dash=True, dir_okay=False, path_type=Path),  # type: ignore[type-var]
)

# Common option for writing the result to a file
output_option = click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Write the result to this file instead of stdout",
)


def output_result(data: dict[str, Any], as_json: bool = False) -> None:
    """Output result as JSON.

    Args:
        data: Data to output
        as_json: If True, output as JSON
    """
    if as_json:
        click.echo(json.dumps(data, indent=2, default=str))


def error_result(message: str, as_json: bool = False, code: str | None = None) -> NoReturn:
    """Output error message and exit.

    This function never returns - it either raises ClickException or calls sys.exit.

    Args:
        message: Error message
        as_json: If True, output as JSON
        code: Error code to include in the message
    """
    if as_json:
        click.echo(json.dumps({"error": message, "code": code}, indent=2), err=True)
        sys.exit(1)
    raise click.ClickException(f"[{code}] {message}" if code else message)


def read_input(input_path: Path) -> str:
    """Read the command input from a file, or stdin for "-"."""
    if str(input_path) == "-":
        return click.get_text_stream("stdin").read()
    try:
        return input_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Cannot read {input_path}: {e}") from None


def write_output(text: str, output_path: Path | None) -> None:
    """Write the command result to a file, or stdout."""
    if output_path is None:
        click.echo(text)
        return
    output_path.write_text(text, encoding="utf-8")
    click.echo(f"Written to {output_path}", err=True)


def get_service(ctx: click.Context) -> SAMLRaiderService:
    """Get the service created by the command group."""
    ctx.ensure_object(dict)
    if "service" not in ctx.obj:
        ctx.obj["service"] = SAMLRaiderService()
    return ctx.obj["service"]


def get_config(ctx: click.Context) -> AppConfig:
    """Get the configuration loaded by the command group."""
    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        ctx.obj["config"] = AppConfig()
    return ctx.obj["config"]


def unwrap(result: OperationResult, as_json: bool = False) -> Any:
    """Return the result data, or exit with the result's error."""
    if result.success or result.error is None:
        return result.data
    error_result(result.error.message, as_json=as_json, code=str(result.error.code))
