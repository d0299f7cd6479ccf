"""Transport encoding CLI commands."""

from __future__ import annotations

from pathlib import Path

import click

from samlraider.cli.common import (
    get_config,
    get_service,
    input_argument,
    json_option,
    output_option,
    output_result,
    read_input,
    unwrap,
    write_output,
)
from samlraider.core.saml.codec import Binding
from samlraider.core.saml.params import find_saml_parameter, replace_saml_parameter
from samlraider.core.saml.utils import pretty_print_xml

binding_option = click.option(
    "--binding",
    "-b",
    type=click.Choice([b.value for b in Binding], case_sensitive=False),
    help="Transport binding (default from configuration, POST if unset)",
)


def _binding(ctx: click.Context, binding: str | None) -> Binding:
    if binding is None:
        return get_config(ctx).codec.default_binding
    return next(b for b in Binding if b.value.lower() == binding.lower())


@click.command()
@input_argument
@binding_option
@click.option("--pretty", is_flag=True, help="Indent the decoded XML")
@output_option
@click.pass_context
def decode(
    ctx: click.Context,
    input_path: Path,
    binding: str | None,
    pretty: bool,
    output_path: Path | None,
) -> None:
    """Decode a SAMLRequest/SAMLResponse value to XML.

    Redirect values are base64-decoded only; DEFLATE-compressed messages
    are not inflated.

    Examples:

        # Decode a value saved from an intercepted POST
        samlraider decode response.b64

        # Decode from stdin
        echo PHNhbWxwOlJlc3BvbnNlLz4= | samlraider decode
    """
    raw = read_input(input_path)
    xml = unwrap(get_service(ctx).decode(raw, _binding(ctx, binding)))
    write_output(pretty_print_xml(xml) if pretty else xml, output_path)


@click.command()
@input_argument
@binding_option
@output_option
@click.pass_context
def encode(
    ctx: click.Context,
    input_path: Path,
    binding: str | None,
    output_path: Path | None,
) -> None:
    """Encode XML for a SAMLRequest/SAMLResponse parameter.

    Examples:

        samlraider encode attacked.xml -o attacked.b64
    """
    xml = read_input(input_path)
    write_output(unwrap(get_service(ctx).encode(xml, _binding(ctx, binding))), output_path)


@click.command()
@input_argument
@click.option(
    "--set",
    "replacement_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),  # type: ignore[type-var]
    help="Encode this XML file and put it back into the request data",
)
@json_option
@output_option
@click.pass_context
def params(
    ctx: click.Context,
    input_path: Path,
    replacement_path: Path | None,
    output_json: bool,
    output_path: Path | None,
) -> None:
    """Find the SAML message in a URL, query string or form body.

    Without --set, prints the parameter name, its binding and the decoded
    XML. With --set, prints the request data with the SAML parameter
    replaced by the encoded contents of the given XML file.

    Examples:

        # Inspect an intercepted POST body
        samlraider params body.txt

        # Swap in an attacked response
        samlraider params body.txt --set attacked.xml
    """
    data = read_input(input_path).strip()
    parameter = find_saml_parameter(data)
    if parameter is None:
        raise click.ClickException("No SAMLRequest or SAMLResponse parameter found")

    service = get_service(ctx)

    if replacement_path is not None:
        xml = replacement_path.read_text(encoding="utf-8")
        encoded = unwrap(service.encode(xml, parameter.binding), as_json=output_json)
        write_output(replace_saml_parameter(data, parameter.parameter, encoded), output_path)
        return

    xml = unwrap(service.decode(parameter.raw, parameter.binding), as_json=output_json)

    if output_json:
        output_result({
            "parameter": parameter.parameter,
            "binding": str(parameter.binding),
            "xml": xml,
        }, as_json=True)
        return

    if output_path is not None:
        write_output(xml, output_path)
        return

    click.echo(f"Parameter: {parameter.parameter}")
    click.echo(f"Binding:   {parameter.binding}")
    click.echo("")
    click.echo(xml)
