"""SAML message manipulation: wrapping attacks, injection, encoding and signatures."""

from samlraider.core.saml.attacks import (
    EVIL_ASSERTION_ID,
    EVIL_RESPONSE_ID,
    XSW_DESCRIPTIONS,
    AttackResult,
    XSWVariant,
    apply_xsw,
    get_variant_description,
)
from samlraider.core.saml.codec import Binding, decode, encode
from samlraider.core.saml.info import SAMLInfo, get_nameid, parse_saml_info
from samlraider.core.saml.injection import apply_xslt, apply_xxe
from samlraider.core.saml.params import (
    SAMLParameter,
    find_saml_parameter,
    replace_saml_parameter,
)
from samlraider.core.saml.signature import (
    SignatureInfo,
    SignatureLocation,
    SignatureScope,
    describe_signatures,
    strip_all_signatures,
    strip_assertion_signatures,
    strip_document_signature,
    strip_signatures,
)
from samlraider.core.saml.signer import sign_saml
from samlraider.core.saml.validation import ValidationError, ValidationResult, validate_xml

__all__ = [
    # Attacks
    "EVIL_ASSERTION_ID",
    "EVIL_RESPONSE_ID",
    "XSW_DESCRIPTIONS",
    "AttackResult",
    "XSWVariant",
    "apply_xslt",
    "apply_xsw",
    "apply_xxe",
    "get_variant_description",
    # Transport
    "Binding",
    "SAMLParameter",
    "decode",
    "encode",
    "find_saml_parameter",
    "replace_saml_parameter",
    # Inspection
    "SAMLInfo",
    "ValidationError",
    "ValidationResult",
    "get_nameid",
    "parse_saml_info",
    "validate_xml",
    # Signatures
    "SignatureInfo",
    "SignatureLocation",
    "SignatureScope",
    "describe_signatures",
    "sign_saml",
    "strip_all_signatures",
    "strip_assertion_signatures",
    "strip_document_signature",
    "strip_signatures",
]
