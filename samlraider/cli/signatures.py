"""Signature CLI commands."""

from __future__ import annotations

from pathlib import Path

import click

from samlraider.cli.common import (
    get_service,
    input_argument,
    output_option,
    read_input,
    unwrap,
    write_output,
)
from samlraider.core.saml.signature import SignatureScope


@click.command()
@input_argument
@click.option(
    "--scope",
    type=click.Choice([s.value for s in SignatureScope]),
    default=SignatureScope.ALL.value,
    show_default=True,
    help="all: every signature; document: keep assertion signatures; "
    "assertion: keep the document signature",
)
@output_option
@click.pass_context
def strip(ctx: click.Context, input_path: Path, scope: str, output_path: Path | None) -> None:
    """Remove XML signatures from a SAML message.

    Everything outside the removed Signature elements is left as it was.

    Examples:

        # Remove everything
        samlraider strip response.xml

        # Keep assertion signatures, remove the Response signature
        samlraider strip response.xml --scope document
    """
    xml = read_input(input_path)
    service = get_service(ctx)
    operations = {
        SignatureScope.ALL: service.strip_all_signatures,
        SignatureScope.DOCUMENT: service.strip_document_signature,
        SignatureScope.ASSERTION: service.strip_assertion_signatures,
    }
    write_output(unwrap(operations[SignatureScope(scope)](xml)), output_path)


@click.command()
@input_argument
@click.option(
    "--cert",
    "cert_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Signing certificate (PEM format)",
)
@click.option(
    "--key",
    "-k",
    "key_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Private key path (PEM format)",
)
@output_option
@click.pass_context
def sign(
    ctx: click.Context,
    input_path: Path,
    cert_path: Path,
    key_path: Path | None,
    output_path: Path | None,
) -> None:
    """Sign a SAML message with a certificate and private key.

    Signing is not available in this environment: the command reports why
    and exits with status 1 instead of writing an unsigned document.
    """
    service = get_service(ctx)
    pem = cert_path.read_text(encoding="utf-8")
    private_key = key_path.read_text(encoding="utf-8") if key_path else None
    certificate = unwrap(service.import_certificate(pem, private_key))

    xml = read_input(input_path)
    write_output(unwrap(service.sign(xml, certificate.id)), output_path)
