"""Certificate handling for SAML signing material."""

from samlraider.core.crypto.certs import (
    Certificate,
    CertificateStore,
    clone_certificate,
    create_certificate,
)

__all__ = [
    "Certificate",
    "CertificateStore",
    "clone_certificate",
    "create_certificate",
]
