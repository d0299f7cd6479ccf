"""Transport encoding for SAML protocol messages.

HTTP-POST carries the message base64-encoded. HTTP-Redirect is handled
the same way: the message is NOT deflated or inflated, so real-world
Redirect messages only decode when they were sent uncompressed. Values
produced by :func:`encode` always decode with :func:`decode`.
"""

from __future__ import annotations

import base64
import binascii
from enum import StrEnum

from samlraider.core.errors import MalformedInputError


class Binding(StrEnum):
    """SAML transport binding."""

    POST = "POST"
    REDIRECT = "Redirect"


def _coerce_binding(binding: Binding | str) -> Binding:
    # Accept "redirect"/"post" from CLI and query strings
    for candidate in Binding:
        if str(binding).lower() == candidate.value.lower():
            return candidate
    raise MalformedInputError(f"Unknown SAML binding: {binding}")


def decode(raw: str, binding: Binding | str = Binding.POST) -> str:
    """Decode a transport-encoded SAML message to XML text.

    Args:
        raw: Base64 value of a SAMLRequest/SAMLResponse parameter.
        binding: Transport binding the value was taken from.

    Returns:
        Decoded XML text.

    Raises:
        MalformedInputError: If the value is not valid base64 or UTF-8.
    """
    binding = _coerce_binding(binding)
    if not isinstance(raw, str):
        raise MalformedInputError(f"Error decoding SAML message: expected str, got {type(raw).__name__}")

    # Form fields are often wrapped at 76 columns
    compact = "".join(raw.split())
    try:
        xml_bytes = base64.b64decode(compact, validate=True)
        return xml_bytes.decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise MalformedInputError(f"Error decoding SAML message: {e}") from e


def encode(xml: str, binding: Binding | str = Binding.POST) -> str:
    """Encode XML text for transport.

    Args:
        xml: SAML XML text.
        binding: Transport binding the value is destined for.

    Returns:
        Base64 value for a SAMLRequest/SAMLResponse parameter.

    Raises:
        MalformedInputError: If ``xml`` is not a string.
    """
    _coerce_binding(binding)
    if not isinstance(xml, str):
        raise MalformedInputError(f"Error encoding SAML message: expected str, got {type(xml).__name__}")
    return base64.b64encode(xml.encode("utf-8")).decode("ascii")

