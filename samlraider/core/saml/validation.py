"""Well-formedness and SAML structure validation for edited SAML XML."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from lxml import etree

_ROOT_NAME = re.compile(r"<([a-zA-Z][a-zA-Z0-9:_.-]*)")
_LAST_CLOSE_TAG = re.compile(r"</[a-zA-Z0-9:_.-]+>\s*$")
_SELF_CLOSING_END = re.compile(r"/>\s*$")


class Severity(StrEnum):
    """Severity of a validation finding."""

    ERROR = "error"
    WARNING = "warning"


# Elements a SAML message is expected to carry, by local name
REQUIRED_ELEMENTS: list[tuple[str, Severity]] = [
    ("Assertion", Severity.ERROR),
    ("Issuer", Severity.WARNING),
    ("Subject", Severity.WARNING),
]


@dataclass
class ValidationError:
    """A single validation finding with its position."""

    line: int
    column: int
    message: str
    severity: Severity = Severity.ERROR


@dataclass
class ValidationResult:
    """Result of validating an XML document."""

    errors: list[ValidationError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not any(e.severity == Severity.ERROR for e in self.errors)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "valid": self.valid,
            "errors": [
                {
                    "line": e.line,
                    "column": e.column,
                    "message": e.message,
                    "severity": e.severity.value,
                }
                for e in self.errors
            ],
        }


def check_trailing_content(xml: str) -> ValidationError | None:
    """Report non-whitespace content after the root element closes.

    Comments and processing instructions are legal there, so findings
    are warnings.
    """
    if not _LAST_CLOSE_TAG.search(xml):
        if _SELF_CLOSING_END.search(xml):
            return None
        return ValidationError(1, 1, "XML document does not end with a valid closing tag", Severity.WARNING)

    root_match = _ROOT_NAME.search(xml)
    if root_match is None:
        return None
    root_name = root_match.group(1)

    closes = [m.end() for m in re.finditer(f"</{re.escape(root_name)}>", xml)]
    if not closes:
        return None

    trailing = re.search(r"\S", xml[closes[-1] :])
    if trailing is None:
        return None

    before = xml[: closes[-1] + trailing.start()]
    lines = before.split("\n")
    return ValidationError(
        line=len(lines),
        column=len(lines[-1]) + 1,
        message=f"Unexpected content after closing </{root_name}> tag",
        severity=Severity.WARNING,
    )


def check_saml_structure(doc: etree._Element) -> list[ValidationError]:
    """Report SAML elements missing from a parsed document.

    Elements are matched by local name, so any namespace prefix counts.
    A missing Assertion is an error; a missing Issuer or Subject is a
    warning.
    """
    findings = []
    for local_name, severity in REQUIRED_ELEMENTS:
        if not doc.xpath(f"descendant-or-self::*[local-name()='{local_name}']"):
            findings.append(
                ValidationError(1, 1, f"No SAML {local_name} element found", severity)
            )
    return findings


def validate_xml(xml: str) -> ValidationResult:
    """Check that a document is well-formed and looks like a SAML message.

    Entities are not resolved and no DTD is loaded, so documents carrying
    injected DOCTYPEs validate without side effects. Structure is only
    checked once the document parses.

    Args:
        xml: XML text to check.

    Returns:
        ValidationResult listing errors with line and column.
    """
    result = ValidationResult()

    if not xml or not xml.strip():
        result.errors.append(ValidationError(1, 1, "XML is empty"))
        return result

    parser = etree.XMLParser(resolve_entities=False, load_dtd=False, no_network=True)
    try:
        doc = etree.fromstring(xml.encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as e:
        line, column = e.position if e.position else (1, 1)
        result.errors.append(ValidationError(line or 1, column or 1, e.msg or str(e)))
        return result

    trailing = check_trailing_content(xml)
    if trailing is not None:
        result.errors.append(trailing)

    result.errors.extend(check_saml_structure(doc))
    return result
