"""Core SAML manipulation, logging and configuration."""

from samlraider.core.logging import (
    LogLevel,
    OperationLog,
    OperationLogger,
    OperationRecord,
    configure_logging,
    get_operation_logger,
    redact_sensitive,
    set_operation_logger,
)

__all__ = [
    "LogLevel",
    "OperationLog",
    "OperationLogger",
    "OperationRecord",
    "configure_logging",
    "get_operation_logger",
    "redact_sensitive",
    "set_operation_logger",
]
