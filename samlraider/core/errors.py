"""Error taxonomy for SAML message manipulation.

Each exception maps to an ``ErrorCode`` so the service boundary can turn
it into a structured failure without string matching.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Error codes surfaced in structured operation results."""

    PARSE_ERROR = "PARSE_ERROR"
    NO_RESPONSE = "NO_RESPONSE"
    NO_ASSERTION = "NO_ASSERTION"
    NO_SIGNATURE = "NO_SIGNATURE"
    INVALID_VARIANT = "INVALID_VARIANT"
    MALFORMED_INPUT = "MALFORMED_INPUT"
    CERT_NOT_FOUND = "CERT_NOT_FOUND"
    CERT_NO_KEY = "CERT_NO_KEY"
    UNSUPPORTED = "UNSUPPORTED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class SAMLRaiderError(Exception):
    """Base exception for all SAML manipulation errors."""

    code: ErrorCode = ErrorCode.UNKNOWN_ERROR


class ElementNotFoundError(SAMLRaiderError):
    """A required element is not present in the document."""

    def __init__(self, kind: str, message: str, context: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.context = context

    @property
    def code(self) -> ErrorCode:  # type: ignore[override]
        return {
            "Response": ErrorCode.NO_RESPONSE,
            "Assertion": ErrorCode.NO_ASSERTION,
            "Signature": ErrorCode.NO_SIGNATURE,
        }.get(self.kind, ErrorCode.PARSE_ERROR)


class InvalidVariantError(SAMLRaiderError):
    """XSW variant outside the supported range."""

    code = ErrorCode.INVALID_VARIANT

    def __init__(self, variant: object) -> None:
        super().__init__(f"XSW variant {variant} is not supported. Valid variants are 1-8.")
        self.variant = variant


class MalformedInputError(SAMLRaiderError):
    """Input could not be decoded or is not usable XML text."""

    code = ErrorCode.MALFORMED_INPUT


class UnsupportedOperationError(SAMLRaiderError):
    """Operation is permanently unavailable in this environment."""

    code = ErrorCode.UNSUPPORTED


class CertificateNotFoundError(SAMLRaiderError):
    """No certificate with the requested ID is stored."""

    code = ErrorCode.CERT_NOT_FOUND

    def __init__(self, cert_id: str) -> None:
        super().__init__(f"Certificate not found: {cert_id}")
        self.cert_id = cert_id


class CertificateKeyMissingError(SAMLRaiderError):
    """Certificate has no private key, so it cannot be used for signing."""

    code = ErrorCode.CERT_NO_KEY

    def __init__(self, cert_id: str) -> None:
        super().__init__(f"Certificate {cert_id} has no private key for signing")
        self.cert_id = cert_id
