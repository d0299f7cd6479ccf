"""CLI entry point for SAML Raider."""

from pathlib import Path

import click

from samlraider import __version__
from samlraider.cli import attack as attack_commands
from samlraider.cli import codec as codec_commands
from samlraider.cli import config as config_commands
from samlraider.cli import inspection as inspection_commands
from samlraider.cli import signatures as signature_commands
from samlraider.core.config import load_config
from samlraider.core.logging import configure_logging
from samlraider.core.saml.service import SAMLRaiderService


@click.group()
@click.version_option(version=__version__, prog_name="samlraider")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Configuration file (default: ~/.samlraider/config.yaml)",
)
@click.option(
    "--log-level",
    type=click.Choice(["ERROR", "INFO", "DEBUG", "TRACE"], case_sensitive=False),
    help="Operation log level (overrides configuration)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str | None) -> None:
    """SAML Raider - SAML message manipulation for authorized security testing.

    Decode intercepted SAML messages, apply XML Signature Wrapping, XXE and
    XSLT attacks, strip signatures and re-encode the result.
    """
    ctx.ensure_object(dict)

    app_config = load_config(config_path)
    log_settings = app_config.logging
    operation_logger = configure_logging(
        level=log_level or log_settings.level,
        trace_enabled=log_settings.trace_enabled,
        log_file=str(log_settings.log_file) if log_settings.log_file else None,
    )

    ctx.obj["config"] = app_config
    ctx.obj["service"] = SAMLRaiderService(operation_logger=operation_logger)


cli.add_command(codec_commands.decode)
cli.add_command(codec_commands.encode)
cli.add_command(codec_commands.params)
cli.add_command(attack_commands.xsw)
cli.add_command(attack_commands.xxe)
cli.add_command(attack_commands.xslt)
cli.add_command(signature_commands.strip)
cli.add_command(signature_commands.sign)
cli.add_command(inspection_commands.info)
cli.add_command(inspection_commands.validate)
cli.add_command(config_commands.config)
