"""Regex-based element locator for raw SAML XML text.

Elements are found by local name regardless of the namespace prefix
bound to them. The closing tag may repeat the opening tag's prefix or
omit it; any other prefix does not close the element. Content is matched
non-greedily, so an element binds to the first matching close tag.

No DOM is built: the spans returned here are offsets into the original
string so that callers can splice new content without disturbing the
bytes around it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

# Namespace prefix including the trailing colon, e.g. "samlp:"
PREFIX_PATTERN = r"([a-zA-Z0-9]*:)?"

ID_PATTERN = re.compile(r'\bID="([^"]+)"', re.IGNORECASE)


class ElementKind(StrEnum):
    """Element kinds the locator knows how to find."""

    RESPONSE = "Response"
    ASSERTION = "Assertion"
    SIGNATURE = "Signature"


def element_pattern(local_name: str) -> re.Pattern[str]:
    """Build the pattern matching a whole element with the given local name.

    Groups: 1 = prefix (with colon), 2 = attribute text, 3 = content.
    """
    return re.compile(
        rf"<{PREFIX_PATTERN}{local_name}\b([^>]*?)>([\s\S]*?)</\1?{local_name}>",
        re.IGNORECASE,
    )


_PATTERNS: dict[ElementKind, re.Pattern[str]] = {kind: element_pattern(kind.value) for kind in ElementKind}


@dataclass(frozen=True)
class ElementSpan:
    """A located element inside a source document."""

    raw: str
    start: int
    end: int
    prefix: str = ""
    id: str = ""

    @property
    def length(self) -> int:
        return self.end - self.start


def _span_from_match(match: re.Match[str]) -> ElementSpan:
    id_match = ID_PATTERN.search(match.group(2))
    return ElementSpan(
        raw=match.group(0),
        start=match.start(),
        end=match.end(),
        prefix=match.group(1) or "",
        id=id_match.group(1) if id_match else "",
    )


def locate(kind: ElementKind | str, xml: str) -> ElementSpan | None:
    """Find the first element of the given kind.

    Args:
        kind: Element kind (Response, Assertion or Signature).
        xml: Source XML text.

    Returns:
        ElementSpan for the first match, or None if there is none.
    """
    match = _PATTERNS[ElementKind(kind)].search(xml)
    if match is None:
        return None
    return _span_from_match(match)


def locate_all(kind: ElementKind | str, xml: str) -> list[ElementSpan]:
    """Find all non-overlapping elements of the given kind, in document order."""
    return [_span_from_match(m) for m in _PATTERNS[ElementKind(kind)].finditer(xml)]


def closing_tag_pattern(local_name: str, prefix: str) -> re.Pattern[str]:
    """Pattern for the closing tag at the very end of an element's text.

    The prefix is optional in the match, so an unprefixed element is
    still closed correctly when a fallback prefix is supplied.
    """
    optional_prefix = f"(?:{re.escape(prefix)})?" if prefix else ""
    return re.compile(rf"</{optional_prefix}{local_name}>\s*$", re.IGNORECASE)


def find_closing_tag(element: str, local_name: str, prefix: str) -> re.Match[str] | None:
    """Locate the closing tag at the end of an element's text."""
    return closing_tag_pattern(local_name, prefix).search(element)


def find_last_closing_tag(local_name: str, xml: str) -> re.Match[str] | None:
    """Find the last closing tag with the given local name anywhere in the text."""
    matches = list(re.finditer(rf"</{PREFIX_PATTERN}{local_name}>", xml, re.IGNORECASE))
    return matches[-1] if matches else None
