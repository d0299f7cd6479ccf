"""In-memory certificate store for SAML signing material.

Certificates are kept as opaque PEM blobs for the lifetime of the
process. X.509 parsing is not available, so subject and issuer names are
only read from textual "Subject:"/"Issuer:" dump lines when the imported
PEM carries them (as ``openssl x509 -text`` output does).

Creating and cloning certificates needs key generation and signing and
is reported as unsupported.
"""

from __future__ import annotations

import re
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from samlraider.core.errors import (
    CertificateNotFoundError,
    MalformedInputError,
    UnsupportedOperationError,
)

_SUBJECT_CN = re.compile(r"Subject:.*?CN\s*=\s*([^,\n]+)", re.IGNORECASE)
_ISSUER_CN = re.compile(r"Issuer:.*?CN\s*=\s*([^,\n]+)", re.IGNORECASE)


@dataclass(frozen=True)
class Certificate:
    """A stored certificate and its optional private key.

    Without X.509 parsing the validity window and serial number cannot be
    read from the PEM, so they stay None unless a caller supplies them.
    """

    id: str
    name: str
    pem: str
    subject: str
    issuer: str
    private_key_pem: str | None = None
    valid_from: datetime | None = None
    valid_to: datetime | None = None
    serial_number: str | None = None

    @property
    def has_private_key(self) -> bool:
        return bool(self.private_key_pem)

    def to_dict(self, include_private_key: bool = False) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = {
            "id": self.id,
            "name": self.name,
            "pem": self.pem,
            "subject": self.subject,
            "issuer": self.issuer,
            "valid_from": self.valid_from.isoformat() if self.valid_from else None,
            "valid_to": self.valid_to.isoformat() if self.valid_to else None,
            "serial_number": self.serial_number,
            "has_private_key": self.has_private_key,
        }
        if include_private_key:
            data["private_key_pem"] = self.private_key_pem
        return data


class CertificateStore:
    """Session-scoped store of imported certificates."""

    def __init__(self) -> None:
        self._certificates: dict[str, Certificate] = {}

    def __len__(self) -> int:
        return len(self._certificates)

    def get_all(self) -> list[Certificate]:
        return list(self._certificates.values())

    def get(self, cert_id: str) -> Certificate:
        """Get a certificate by ID.

        Raises:
            CertificateNotFoundError: If no certificate has that ID.
        """
        try:
            return self._certificates[cert_id]
        except KeyError:
            raise CertificateNotFoundError(cert_id) from None

    def delete(self, cert_id: str) -> None:
        """Delete a certificate by ID. Unknown IDs are ignored."""
        self._certificates.pop(cert_id, None)

    def import_certificate(self, pem: str, private_key_pem: str | None = None) -> Certificate:
        """Store a PEM certificate, with an optional private key.

        Raises:
            MalformedInputError: If ``pem`` is empty.
        """
        if not pem or not pem.strip():
            raise MalformedInputError("Certificate PEM is empty")

        cert_id = secrets.token_hex(4)
        subject_match = _SUBJECT_CN.search(pem)
        issuer_match = _ISSUER_CN.search(pem)
        subject = subject_match.group(1).strip() if subject_match else "Unknown"

        certificate = Certificate(
            id=cert_id,
            name=subject if subject_match else "Imported Certificate",
            pem=pem,
            private_key_pem=private_key_pem or None,
            subject=subject,
            issuer=issuer_match.group(1).strip() if issuer_match else "Unknown",
        )
        self._certificates[cert_id] = certificate
        return certificate


def create_certificate(subject: str, store: CertificateStore) -> Certificate:
    """Create a self-signed certificate.

    Raises:
        UnsupportedOperationError: Always.
    """
    raise UnsupportedOperationError(
        "Certificate creation is not available in this environment: "
        "RSA key generation and X.509 signing are unsupported. "
        "Import an existing certificate instead."
    )


def clone_certificate(original: Certificate, store: CertificateStore) -> Certificate:
    """Clone a certificate with a fresh key pair.

    Raises:
        UnsupportedOperationError: Always.
    """
    raise UnsupportedOperationError(
        "Certificate cloning is not available in this environment: "
        "RSA key generation and X.509 signing are unsupported. "
        "Import an existing certificate instead."
    )
