"""Configuration management CLI commands."""

from __future__ import annotations

from pathlib import Path

import click

from samlraider.cli.common import get_config, json_option, output_result
from samlraider.core import config as core_config


@click.group()
def config() -> None:
    """Manage SAML Raider configuration."""
    pass


@config.command("init")
@click.option(
    "--path",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Where to write the file (default: ~/.samlraider/config.yaml)",
)
@click.option(
    "--force",
    is_flag=True,
    help="Overwrite an existing configuration file.",
)
def config_init(config_path: Path | None, force: bool) -> None:
    """Write a commented default configuration file.

    Examples:

        samlraider config init

        samlraider config init --path ./samlraider.yaml --force
    """
    path = config_path or core_config.DEFAULT_CONFIG_FILE

    if path.exists() and not force:
        click.echo(f"Configuration already exists: {path}")
        click.echo("Use --force to overwrite it")
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(core_config.get_default_config_yaml(), encoding="utf-8")
    click.echo(f"Configuration written to: {path}")


@config.command("show")
@json_option
@click.pass_context
def config_show(ctx: click.Context, output_json: bool) -> None:
    """Show the effective configuration (file plus environment overrides)."""
    app_config = get_config(ctx)

    if output_json:
        output_result(app_config.to_dict(), as_json=True)
        return

    click.echo(f"Config file: {app_config.config_path or '(defaults)'}")
    for section, values in app_config.to_dict().items():
        click.echo(f"{section}:")
        for key, value in values.items():
            click.echo(f"  {key}: {value}")
