"""SAML signature removal and inspection.

Signature removal works on raw text so that everything outside the
removed elements stays byte-identical. Three scopes are supported:

- all signatures in the document
- only the document-level signature (assertion signatures are kept)
- only assertion-level signatures (the document signature is kept)

Inspection (:func:`describe_signatures`) parses the document with lxml
and reports where each signature sits and which algorithms it declares.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from lxml import etree

from samlraider.core.errors import MalformedInputError
from samlraider.core.saml.editor import strip_signature
from samlraider.core.saml.locator import element_pattern
from samlraider.core.saml.utils import parse_xml


class SignatureLocation(StrEnum):
    """Where the signature was found in the SAML document."""

    RESPONSE = "response"
    ASSERTION = "assertion"
    OTHER = "other"


class SignatureScope(StrEnum):
    """Which signatures a removal pass targets."""

    ALL = "all"
    DOCUMENT = "document"
    ASSERTION = "assertion"


# Mapping of signature algorithm URIs to friendly names
SIGNATURE_ALGORITHMS: dict[str, str] = {
    "http://www.w3.org/2000/09/xmldsig#rsa-sha1": "RSA-SHA1",
    "http://www.w3.org/2001/04/xmldsig-more#rsa-sha256": "RSA-SHA256",
    "http://www.w3.org/2001/04/xmldsig-more#rsa-sha384": "RSA-SHA384",
    "http://www.w3.org/2001/04/xmldsig-more#rsa-sha512": "RSA-SHA512",
    "http://www.w3.org/2000/09/xmldsig#dsa-sha1": "DSA-SHA1",
    "http://www.w3.org/2009/xmldsig11#dsa-sha256": "DSA-SHA256",
    "http://www.w3.org/2001/04/xmldsig-more#ecdsa-sha256": "ECDSA-SHA256",
    "http://www.w3.org/2001/04/xmldsig-more#ecdsa-sha384": "ECDSA-SHA384",
    "http://www.w3.org/2001/04/xmldsig-more#ecdsa-sha512": "ECDSA-SHA512",
}

# Mapping of digest algorithm URIs to friendly names
DIGEST_ALGORITHMS: dict[str, str] = {
    "http://www.w3.org/2000/09/xmldsig#sha1": "SHA-1",
    "http://www.w3.org/2001/04/xmlenc#sha256": "SHA-256",
    "http://www.w3.org/2001/04/xmldsig-more#sha384": "SHA-384",
    "http://www.w3.org/2001/04/xmlenc#sha512": "SHA-512",
}

DSIG_NS = "http://www.w3.org/2000/09/xmldsig#"

ASSERTION_PATTERN = element_pattern("Assertion")

_ASSERTION_PARTS = re.compile(
    r"(<([a-zA-Z0-9]*:)?Assertion\b[^>]*>)([\s\S]*?)(</\2?Assertion>)",
    re.IGNORECASE,
)

_PLACEHOLDER = "__ASSERTION_PLACEHOLDER_{index}__"
_PLACEHOLDER_PATTERN = re.compile(r"__ASSERTION_PLACEHOLDER_(\d+)__")

_BLANK_LINES = re.compile(r"^\s*[\r\n]", re.MULTILINE)


@dataclass
class SignatureInfo:
    """Information about a signature in the SAML document."""

    location: SignatureLocation
    signature_algorithm: str | None = None
    signature_algorithm_name: str | None = None
    digest_algorithm: str | None = None
    digest_algorithm_name: str | None = None
    reference_uri: str | None = None
    certificate_embedded: bool = False


def _check_input(xml: object) -> None:
    if not xml or not isinstance(xml, str):
        raise MalformedInputError("Invalid XML input for signature removal")


def _remove_signatures(text: str) -> str:
    # Repeat until stable so a second pass never changes the result
    while True:
        stripped = strip_signature(text)
        if stripped == text:
            return stripped
        text = stripped


def collapse_blank_lines(text: str) -> str:
    """Drop lines that contain only whitespace."""
    return _BLANK_LINES.sub("", text)


def strip_all_signatures(xml: str) -> str:
    """Remove every Signature element in the document.

    Raises:
        MalformedInputError: If ``xml`` is empty or not a string.
    """
    _check_input(xml)
    return collapse_blank_lines(_remove_signatures(xml))


def strip_document_signature(xml: str) -> str:
    """Remove signatures outside assertions, keeping assertion signatures.

    Assertions are swapped for indexed placeholders while the removal
    runs, then restored exactly as they were.

    Raises:
        MalformedInputError: If ``xml`` is empty or not a string.
    """
    _check_input(xml)

    assertions: list[str] = []

    def hide(match: re.Match[str]) -> str:
        assertions.append(match.group(0))
        return _PLACEHOLDER.format(index=len(assertions) - 1)

    def restore(match: re.Match[str]) -> str:
        index = int(match.group(1))
        return assertions[index] if index < len(assertions) else match.group(0)

    hidden = ASSERTION_PATTERN.sub(hide, xml)
    stripped = collapse_blank_lines(_remove_signatures(hidden))
    return _PLACEHOLDER_PATTERN.sub(restore, stripped)


def strip_assertion_signatures(xml: str) -> str:
    """Remove signatures inside assertions, keeping the document signature.

    Raises:
        MalformedInputError: If ``xml`` is empty or not a string.
    """
    _check_input(xml)

    def clean(match: re.Match[str]) -> str:
        open_tag, _prefix, content, close_tag = match.groups()
        return collapse_blank_lines(open_tag + _remove_signatures(content) + close_tag)

    return _ASSERTION_PARTS.sub(clean, xml)


def strip_signatures(xml: str, scope: SignatureScope | str = SignatureScope.ALL) -> str:
    """Remove signatures in the given scope."""
    scope = SignatureScope(scope)
    if scope == SignatureScope.DOCUMENT:
        return strip_document_signature(xml)
    if scope == SignatureScope.ASSERTION:
        return strip_assertion_signatures(xml)
    return strip_all_signatures(xml)


def _location_of(sig_elem: etree._Element) -> SignatureLocation:
    parent = sig_elem.getparent()
    if parent is None:
        return SignatureLocation.OTHER
    local_name = etree.QName(parent).localname
    if local_name == "Assertion":
        return SignatureLocation.ASSERTION
    if local_name in ("Response", "AuthnRequest", "LogoutRequest", "LogoutResponse"):
        return SignatureLocation.RESPONSE
    return SignatureLocation.OTHER


def _extract_signature_info(sig_elem: etree._Element) -> SignatureInfo:
    """Extract information about a signature element."""
    info = SignatureInfo(location=_location_of(sig_elem))

    signed_info = sig_elem.find(f"{{{DSIG_NS}}}SignedInfo")
    if signed_info is not None:
        sig_method = signed_info.find(f"{{{DSIG_NS}}}SignatureMethod")
        if sig_method is not None:
            algo = sig_method.get("Algorithm")
            info.signature_algorithm = algo
            info.signature_algorithm_name = SIGNATURE_ALGORITHMS.get(algo or "", algo)

        reference = signed_info.find(f"{{{DSIG_NS}}}Reference")
        if reference is not None:
            info.reference_uri = reference.get("URI")

            digest_method = reference.find(f"{{{DSIG_NS}}}DigestMethod")
            if digest_method is not None:
                digest = digest_method.get("Algorithm")
                info.digest_algorithm = digest
                info.digest_algorithm_name = DIGEST_ALGORITHMS.get(digest or "", digest)

    # Check for embedded certificate
    key_info = sig_elem.find(f"{{{DSIG_NS}}}KeyInfo")
    if key_info is not None:
        x509_cert = key_info.find(f"{{{DSIG_NS}}}X509Data/{{{DSIG_NS}}}X509Certificate")
        info.certificate_embedded = x509_cert is not None and bool((x509_cert.text or "").strip())

    return info


def describe_signatures(xml: str) -> list[SignatureInfo]:
    """Describe every XML Signature in the document, in document order.

    Raises:
        MalformedInputError: If the document is not well-formed XML.
    """
    doc = parse_xml(xml)
    return [_extract_signature_info(sig) for sig in doc.iter(f"{{{DSIG_NS}}}Signature")]
