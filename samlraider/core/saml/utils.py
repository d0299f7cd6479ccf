"""SAML utility functions."""

from __future__ import annotations

from xml.dom import minidom

from lxml import etree

from samlraider.core.errors import MalformedInputError

SAML_MARKERS = (
    "samlp:Response",
    "samlp:AuthnRequest",
    "saml:Assertion",
    "saml2p:Response",
    "saml2:Assertion",
    "SAMLRequest",
    "SAMLResponse",
)

# NameID format descriptions
NAMEID_FORMAT_DESCRIPTIONS: dict[str, str] = {
    "urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress": "Email Address",
    "urn:oasis:names:tc:SAML:1.1:nameid-format:unspecified": "Unspecified",
    "urn:oasis:names:tc:SAML:2.0:nameid-format:persistent": "Persistent",
    "urn:oasis:names:tc:SAML:2.0:nameid-format:transient": "Transient",
    "urn:oasis:names:tc:SAML:1.1:nameid-format:X509SubjectName": "X.509 Subject Name",
    "urn:oasis:names:tc:SAML:2.0:nameid-format:entity": "Entity",
}


def parse_xml(xml: str) -> etree._Element:
    """Parse XML text with entity expansion and network access disabled.

    Documents handled here routinely carry XXE payloads, so DTDs are
    never loaded and entities are never resolved.

    Raises:
        MalformedInputError: If the text is not well-formed XML.
    """
    parser = etree.XMLParser(
        resolve_entities=False,
        load_dtd=False,
        no_network=True,
        remove_blank_text=False,
    )
    try:
        return etree.fromstring(xml.encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as e:
        raise MalformedInputError(f"Invalid XML: {e}") from e


def is_saml(text: str) -> bool:
    """Heuristic check that text looks like a SAML message."""
    trimmed = text.strip()
    return trimmed.startswith("<") and any(marker in trimmed for marker in SAML_MARKERS)


def pretty_print_xml(xml_string: str, indent: str = "  ") -> str:
    """Pretty-print an XML string with proper indentation.

    Args:
        xml_string: Raw XML string.
        indent: Indentation string (default: 2 spaces).

    Returns:
        Formatted XML without the XML declaration, or the input unchanged
        if it cannot be parsed.
    """
    try:
        dom = minidom.parseString(xml_string.encode("utf-8"))
    except Exception:
        return xml_string

    lines = dom.toprettyxml(indent=indent).split("\n")
    # Skip the XML declaration and drop blank lines
    return "\n".join(line for line in lines[1:] if line.strip())


def get_nameid_format_description(format_uri: str) -> str:
    """Get human-readable description for a NameID format."""
    return NAMEID_FORMAT_DESCRIPTIONS.get(format_uri, f"Custom format: {format_uri}")
