"""SAML inspection CLI commands."""

from __future__ import annotations

from pathlib import Path

import click

from samlraider.cli.common import (
    error_result,
    get_service,
    input_argument,
    json_option,
    output_result,
    read_input,
    unwrap,
)
from samlraider.core.saml.info import SAMLInfo
from samlraider.core.saml.signature import describe_signatures
from samlraider.core.saml.utils import get_nameid_format_description
from samlraider.core.saml.validation import Severity, ValidationResult


def _print_info(info: SAMLInfo, xml: str) -> None:
    click.echo("SAML Message")
    click.echo(f"  Response issuer:  {info.issuer_response or '-'}")
    click.echo(f"  Assertion issuer: {info.issuer_assertion or '-'}")
    click.echo(f"  Assertion ID:     {info.assertion_id or '-'}")

    click.echo("")
    click.echo("Subject")
    click.echo(f"  NameID: {info.subject.name_id or '-'}")
    if info.subject.format:
        click.echo(f"  Format: {get_nameid_format_description(info.subject.format)}")

    conditions = info.conditions
    if conditions.not_before or conditions.not_on_or_after or conditions.audiences:
        click.echo("")
        click.echo("Conditions")
        click.echo(f"  NotBefore:    {conditions.not_before or '-'}")
        click.echo(f"  NotOnOrAfter: {conditions.not_on_or_after or '-'}")
        for audience in conditions.audiences:
            click.echo(f"  Audience:     {audience}")

    if info.attributes:
        click.echo("")
        click.echo("Attributes")
        for name, value in info.attributes:
            click.echo(f"  {name}: {value}")

    click.echo("")
    if not info.signature_present:
        click.echo("Signatures: none")
        return

    click.echo("Signatures")
    for sig in describe_signatures(xml):
        algorithm = sig.signature_algorithm_name or "unknown algorithm"
        digest = sig.digest_algorithm_name or "unknown digest"
        click.echo(f"  {sig.location}: {algorithm}, {digest}, reference {sig.reference_uri or '-'}")


@click.command()
@input_argument
@json_option
@click.pass_context
def info(ctx: click.Context, input_path: Path, output_json: bool) -> None:
    """Show issuers, subject, conditions, attributes and signatures.

    Examples:

        samlraider info response.xml

        samlraider info response.xml --json
    """
    xml = read_input(input_path)
    saml_info = unwrap(get_service(ctx).info(xml), as_json=output_json)

    if output_json:
        data = saml_info.to_dict()
        data["signatures"] = [
            {
                "location": str(sig.location),
                "signature_algorithm": sig.signature_algorithm_name,
                "digest_algorithm": sig.digest_algorithm_name,
                "reference_uri": sig.reference_uri,
                "certificate_embedded": sig.certificate_embedded,
            }
            for sig in describe_signatures(xml)
        ]
        output_result(data, as_json=True)
        return

    _print_info(saml_info, xml)


@click.command()
@input_argument
@json_option
@click.pass_context
def validate(ctx: click.Context, input_path: Path, output_json: bool) -> None:
    """Check that a document is well-formed XML and a usable SAML message.

    A missing Assertion is an error; a missing Issuer or Subject and
    content after the root element are warnings. Exits with status 1 when
    the document has errors.

    Examples:

        samlraider validate attacked.xml
    """
    xml = read_input(input_path)
    result: ValidationResult = unwrap(get_service(ctx).validate(xml), as_json=output_json)

    if output_json:
        output_result(result.to_dict(), as_json=True)
        if not result.valid:
            ctx.exit(1)
        return

    for finding in result.errors:
        label = "Error" if finding.severity == Severity.ERROR else "Warning"
        click.echo(f"{label} (line {finding.line}, column {finding.column}): {finding.message}")

    if not result.valid:
        error_result("Document is not a valid SAML message")
    click.echo("Document is a valid SAML message")
