"""Text-surgery primitives applied to a single element's XML text.

Every function returns a new string; nothing here parses XML.
"""

from __future__ import annotations

import re

from samlraider.core.saml.locator import PREFIX_PATTERN, element_pattern, find_closing_tag

EVIL_PREFIX = "evil-"

SIGNATURE_PATTERN = element_pattern("Signature")

_ID_ATTRIBUTE = re.compile(r'\bID="[^"]*"', re.IGNORECASE)

_NAMEID_PATTERN = re.compile(
    rf"(<{PREFIX_PATTERN}NameID\b[^>]*>)([^<]*)(</\2?NameID>)",
    re.IGNORECASE,
)


def strip_signature(element: str) -> str:
    """Remove every Signature subtree from the given text."""
    return SIGNATURE_PATTERN.sub("", element)


def set_id(element: str, new_id: str) -> str:
    """Replace the first ID attribute value with ``new_id``.

    Only the first occurrence is rewritten, so callers pass text that
    starts with the element whose ID should change.
    """
    return _ID_ATTRIBUTE.sub(lambda _: f'ID="{new_id}"', element, count=1)


def mark_evil(element: str) -> str:
    """Prefix the text content of every NameID with the evil marker."""
    return _NAMEID_PATTERN.sub(lambda m: f"{m.group(1)}{EVIL_PREFIX}{m.group(3)}{m.group(4)}", element)


def insert_before_close(element: str, local_name: str, prefix: str, content: str) -> str | None:
    """Insert content just before the closing tag of an element.

    Args:
        element: Full element text, ending with its closing tag.
        local_name: Local name of the element (e.g. "Signature").
        prefix: Namespace prefix to expect on the closing tag, with colon.
        content: Text to insert.

    Returns:
        The element text with ``content`` inserted, or None if the
        closing tag does not match.
    """
    close = find_closing_tag(element, local_name, prefix)
    if close is None:
        return None
    return element[: close.start()] + content + element[close.start() :]


def splice(xml: str, start: int, end: int, replacement: str) -> str:
    """Replace ``xml[start:end]`` with ``replacement``."""
    return xml[:start] + replacement + xml[end:]
