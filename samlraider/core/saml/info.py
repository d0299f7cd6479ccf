"""Structured information extraction from SAML messages.

Elements are matched by local name, so SAML 2.0 documents with any
prefix (or none) are handled alike.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from lxml import etree

from samlraider.core.saml.utils import parse_xml


@dataclass
class SAMLSubject:
    """Subject NameID and its format."""

    name_id: str = ""
    format: str = ""


@dataclass
class SAMLConditions:
    """Validity window and audience restrictions."""

    not_before: str | None = None
    not_on_or_after: str | None = None
    audiences: list[str] = field(default_factory=list)


@dataclass
class SAMLInfo:
    """Summary of the interesting parts of a SAML message."""

    issuer_response: str = ""
    issuer_assertion: str = ""
    assertion_id: str = ""
    subject: SAMLSubject = field(default_factory=SAMLSubject)
    conditions: SAMLConditions = field(default_factory=SAMLConditions)
    attributes: list[tuple[str, str]] = field(default_factory=list)
    signature_present: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        data["attributes"] = [{"name": name, "value": value} for name, value in self.attributes]
        return data


def _find_all(node: etree._Element, local_name: str) -> list[etree._Element]:
    return node.xpath(f"descendant-or-self::*[local-name()='{local_name}']")


def _find_child(node: etree._Element, local_name: str) -> etree._Element | None:
    for child in node:
        if isinstance(child.tag, str) and etree.QName(child).localname == local_name:
            return child
    return None


def _text(node: etree._Element | None) -> str:
    if node is None:
        return ""
    return (node.text or "").strip()


def parse_saml_info(xml: str) -> SAMLInfo:
    """Extract issuers, subject, conditions and attributes from a SAML message.

    Args:
        xml: Decoded SAML XML.

    Returns:
        SAMLInfo describing the first Response and Assertion found.

    Raises:
        MalformedInputError: If the document is not well-formed XML.
    """
    doc = parse_xml(xml)
    info = SAMLInfo()

    responses = _find_all(doc, "Response")
    if responses:
        info.issuer_response = _text(_find_child(responses[0], "Issuer"))

    assertions = _find_all(doc, "Assertion")
    if assertions:
        assertion = assertions[0]
        info.assertion_id = assertion.get("ID", "")
        info.issuer_assertion = _text(_find_child(assertion, "Issuer"))

    if not info.issuer_response and not info.issuer_assertion:
        issuers = _find_all(doc, "Issuer")
        if issuers:
            info.issuer_assertion = _text(issuers[0])

    subjects = _find_all(doc, "Subject")
    if subjects:
        name_ids = _find_all(subjects[0], "NameID")
        if name_ids:
            info.subject = SAMLSubject(name_id=_text(name_ids[0]), format=name_ids[0].get("Format", ""))

    conditions = _find_all(doc, "Conditions")
    if conditions:
        condition = conditions[0]
        info.conditions = SAMLConditions(
            not_before=condition.get("NotBefore"),
            not_on_or_after=condition.get("NotOnOrAfter"),
            audiences=[_text(a) for a in _find_all(condition, "Audience") if _text(a)],
        )

    for statement in _find_all(doc, "AttributeStatement"):
        for attribute in _find_all(statement, "Attribute"):
            name = attribute.get("Name", "")
            for value in _find_all(attribute, "AttributeValue"):
                info.attributes.append((name, _text(value)))

    info.signature_present = bool(_find_all(doc, "Signature"))
    return info


def get_nameid(xml: str) -> tuple[str | None, str | None]:
    """Extract the first NameID and its format.

    Returns:
        Tuple of (nameid_value, nameid_format).
    """
    doc = parse_xml(xml)
    name_ids = _find_all(doc, "NameID")
    if not name_ids:
        return None, None
    return name_ids[0].text, name_ids[0].get("Format")
