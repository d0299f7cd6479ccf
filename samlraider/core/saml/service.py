"""Boundary facade over the SAML manipulation primitives.

Every method returns an :class:`OperationResult` instead of raising, so
callers (the CLI, scripts, proxies embedding the tool) get a structured
failure with an error code for anything that goes wrong. Each call is
recorded through the operation logger.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from samlraider.core.crypto.certs import (
    CertificateStore,
    clone_certificate,
    create_certificate,
)
from samlraider.core.errors import ErrorCode, SAMLRaiderError
from samlraider.core.logging import OperationLogger, get_operation_logger
from samlraider.core.saml import codec, injection, signature
from samlraider.core.saml.attacks import apply_xsw
from samlraider.core.saml.codec import Binding
from samlraider.core.saml.info import parse_saml_info
from samlraider.core.saml.signer import sign_saml
from samlraider.core.saml.validation import validate_xml


@dataclass(frozen=True)
class OperationError:
    """Structured description of a failed operation."""

    code: ErrorCode
    message: str
    details: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"code": str(self.code), "message": self.message, "details": self.details}


@dataclass(frozen=True)
class OperationResult:
    """Result of a service call: data on success, an error otherwise."""

    success: bool
    data: Any = None
    error: OperationError | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = self.data
        if hasattr(data, "to_dict"):
            data = data.to_dict()
        elif isinstance(data, list):
            data = [item.to_dict() if hasattr(item, "to_dict") else item for item in data]
        return {
            "success": self.success,
            "data": data,
            "error": self.error.to_dict() if self.error else None,
        }


class SAMLRaiderService:
    """Runs SAML operations and converts failures into OperationResults.

    Example:
        service = SAMLRaiderService()
        decoded = service.decode(saml_response)
        if decoded.success:
            attacked = service.apply_xsw(decoded.data, 1)
    """

    def __init__(
        self,
        store: CertificateStore | None = None,
        operation_logger: OperationLogger | None = None,
    ) -> None:
        self.store = store if store is not None else CertificateStore()
        self._operation_logger = operation_logger

    @property
    def operation_logger(self) -> OperationLogger:
        return self._operation_logger or get_operation_logger()

    def _run(
        self,
        operation: str,
        func: Callable[[], Any],
        input_document: str | None = None,
        **parameters: Any,
    ) -> OperationResult:
        record = self.operation_logger.new_record(operation, **parameters)
        record.input_document = input_document if isinstance(input_document, str) else None
        started = time.perf_counter()

        try:
            data = func()
        except SAMLRaiderError as e:
            result = OperationResult(
                success=False,
                error=OperationError(code=e.code, message=str(e), details=_details(e)),
            )
        except Exception as e:
            result = OperationResult(
                success=False,
                error=OperationError(
                    code=ErrorCode.UNKNOWN_ERROR,
                    message=f"Unexpected error in {operation}: {e}",
                    details=repr(e),
                ),
            )
        else:
            result = OperationResult(success=True, data=data)
            if isinstance(data, str):
                record.output_document = data

        record.duration_ms = (time.perf_counter() - started) * 1000
        if result.error:
            record.error = f"[{result.error.code}] {result.error.message}"
        self.operation_logger.log_operation(record)
        return result

    # Transport encoding

    def decode(self, raw: str, binding: Binding | str = Binding.POST) -> OperationResult:
        """Decode a SAMLRequest/SAMLResponse value to XML text."""
        return self._run("decode", lambda: codec.decode(raw, binding), raw, binding=binding)

    def encode(self, xml: str, binding: Binding | str = Binding.POST) -> OperationResult:
        """Encode XML text for a SAMLRequest/SAMLResponse parameter."""
        return self._run("encode", lambda: codec.encode(xml, binding), xml, binding=binding)

    # Attacks

    def apply_xsw(self, xml: str, variant: int) -> OperationResult:
        """Apply an XSW variant, returning the attacked document as data."""

        def attack() -> str:
            result = apply_xsw(xml, variant)
            if not result.success:
                raise _AttackFailed(result.error or "Unknown error applying XSW attack", result.code)
            return result.xml or ""

        return self._run("apply_xsw", attack, xml, variant=variant)

    def apply_xxe(self, xml: str, server_url: str) -> OperationResult:
        return self._run(
            "apply_xxe", lambda: injection.apply_xxe(xml, server_url), xml, server_url=server_url
        )

    def apply_xslt(self, xml: str, payload: str) -> OperationResult:
        return self._run(
            "apply_xslt",
            lambda: injection.apply_xslt(xml, payload),
            xml,
            payload_size=len(payload) if isinstance(payload, str) else None,
        )

    # Signatures

    def strip_all_signatures(self, xml: str) -> OperationResult:
        return self._run("strip_all_signatures", lambda: signature.strip_all_signatures(xml), xml)

    def strip_document_signature(self, xml: str) -> OperationResult:
        return self._run(
            "strip_document_signature", lambda: signature.strip_document_signature(xml), xml
        )

    def strip_assertion_signatures(self, xml: str) -> OperationResult:
        return self._run(
            "strip_assertion_signatures", lambda: signature.strip_assertion_signatures(xml), xml
        )

    def sign(self, xml: str, cert_id: str) -> OperationResult:
        """Sign a document with a stored certificate. Always fails with UNSUPPORTED
        once the certificate is found and has a key."""
        return self._run("sign", lambda: sign_saml(xml, self.store.get(cert_id)), xml, cert_id=cert_id)

    # Inspection

    def info(self, xml: str) -> OperationResult:
        """Extract issuers, subject, conditions, attributes and signatures."""
        return self._run("info", lambda: parse_saml_info(xml), xml)

    def validate(self, xml: str) -> OperationResult:
        """Check well-formedness. Data is a ValidationResult even when invalid."""
        return self._run("validate", lambda: validate_xml(xml), xml)

    # Certificates

    def get_certificates(self) -> OperationResult:
        return self._run("get_certificates", self.store.get_all)

    def import_certificate(self, pem: str, private_key_pem: str | None = None) -> OperationResult:
        return self._run(
            "import_certificate",
            lambda: self.store.import_certificate(pem, private_key_pem),
            has_private_key=bool(private_key_pem),
        )

    def delete_certificate(self, cert_id: str) -> OperationResult:
        return self._run("delete_certificate", lambda: self.store.delete(cert_id), cert_id=cert_id)

    def clone_certificate(self, cert_id: str) -> OperationResult:
        return self._run(
            "clone_certificate",
            lambda: clone_certificate(self.store.get(cert_id), self.store),
            cert_id=cert_id,
        )

    def create_certificate(self, subject: str) -> OperationResult:
        return self._run(
            "create_certificate", lambda: create_certificate(subject, self.store), subject=subject
        )


class _AttackFailed(SAMLRaiderError):
    """Carries an AttackResult failure through the service boundary."""

    def __init__(self, message: str, code: ErrorCode | None) -> None:
        super().__init__(message)
        self.code = code or ErrorCode.UNKNOWN_ERROR


def _details(error: BaseException) -> str | None:
    cause = error.__cause__
    return str(cause) if cause is not None else None
