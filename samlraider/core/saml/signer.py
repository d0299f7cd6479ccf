"""SAML signing.

Signing needs RSA operations and exclusive canonicalization, which are
not available here. The capability is kept as a named operation that
fails loudly so that a document is never claimed to be signed when it
is not.
"""

from __future__ import annotations

from samlraider.core.crypto.certs import Certificate
from samlraider.core.errors import CertificateKeyMissingError, UnsupportedOperationError

SIGNING_UNSUPPORTED_MESSAGE = (
    "SAML signing is not available in this environment: "
    "the cryptographic primitives required for XML signatures are missing. "
    "Use an external tool to sign SAML messages."
)


def sign_saml(xml: str, certificate: Certificate) -> str:
    """Sign a SAML document with the certificate's private key.

    Raises:
        CertificateKeyMissingError: If the certificate has no private key.
        UnsupportedOperationError: Always, once the inputs are usable.
    """
    if not certificate.private_key_pem:
        raise CertificateKeyMissingError(certificate.id)
    raise UnsupportedOperationError(SIGNING_UNSUPPORTED_MESSAGE)
