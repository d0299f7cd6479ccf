"""Operation logging for SAML manipulation.

Records every decode, encode, attack and signature operation with its
parameters, sizes and timing, with configurable log levels and
sensitive data protection.

Log levels:
- ERROR: Only log failed operations
- INFO: Log each operation with its outcome
- DEBUG: Log operation parameters and sizes
- TRACE: Log full input/output documents (requires explicit enable)
"""

from __future__ import annotations

import itertools
import logging
import re
import secrets
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import IntEnum
from typing import Any

# Custom log level for TRACE (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Module logger
logger = logging.getLogger("samlraider.operations")

# Longest document excerpt written at TRACE level
MAX_LOGGED_DOCUMENT = 2000


class LogLevel(IntEnum):
    """Operation logging levels."""

    ERROR = logging.ERROR  # 40
    INFO = logging.INFO  # 20
    DEBUG = logging.DEBUG  # 10
    TRACE = TRACE  # 5


# Patterns for sensitive data redaction
SENSITIVE_PATTERNS = [
    # PEM private keys
    (
        re.compile(r"(-----BEGIN [A-Z ]*PRIVATE KEY-----)[\s\S]*?(-----END [A-Z ]*PRIVATE KEY-----)"),
        r"\1[REDACTED]\2",
    ),
    # SAML transport parameters
    (re.compile(r"(SAMLRequest=)[^&\s]+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"(SAMLResponse=)[^&\s]+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"(RelayState=)[^&\s]+", re.IGNORECASE), r"\1[REDACTED]"),
    # XML Signature material
    (
        re.compile(r"(<([a-zA-Z0-9]*:)?SignatureValue[^>]*>)[^<]+(</\2?SignatureValue>)", re.IGNORECASE),
        r"\1[REDACTED]\3",
    ),
    (
        re.compile(r"(<([a-zA-Z0-9]*:)?X509Certificate[^>]*>)[^<]+(</\2?X509Certificate>)", re.IGNORECASE),
        r"\1[REDACTED]\3",
    ),
    # JSON fields
    (re.compile(r'"(private_key_pem)"\s*:\s*"[^"]+"', re.IGNORECASE), r'"\1": "[REDACTED]"'),
]


def redact_sensitive(text: str) -> str:
    """Redact sensitive information from text.

    Args:
        text: Text that may contain sensitive data.

    Returns:
        Text with sensitive data redacted.
    """
    result = text
    for pattern, replacement in SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def _excerpt(text: str) -> str:
    return f"{text[:MAX_LOGGED_DOCUMENT]}{'...' if len(text) > MAX_LOGGED_DOCUMENT else ''}"


@dataclass
class OperationRecord:
    """A single SAML operation and its outcome."""

    id: str
    timestamp: datetime
    operation: str
    parameters: dict[str, Any] = field(default_factory=dict)
    input_document: str | None = None
    output_document: str | None = None
    duration_ms: float | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self, include_sensitive: bool = False) -> dict[str, Any]:
        """Convert to dictionary for serialization.

        Args:
            include_sensitive: If True, include raw documents.
                               If False, redact sensitive information.

        Returns:
            Dictionary representation of the record.
        """
        def process(value: str | None) -> str | None:
            if value is None:
                return None
            return value if include_sensitive else redact_sensitive(value)

        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "operation": self.operation,
            "parameters": {k: process(str(v)) for k, v in self.parameters.items()},
            "input_size": len(self.input_document) if self.input_document is not None else None,
            "output_size": len(self.output_document) if self.output_document is not None else None,
            "input_document": process(self.input_document),
            "output_document": process(self.output_document),
            "duration_ms": self.duration_ms,
            "error": self.error,
        }

    def format_log(self, level: LogLevel, include_sensitive: bool = False) -> str:
        """Format the record for logging.

        Args:
            level: Log level determines how much detail to include.
            include_sensitive: If True, include raw sensitive data.

        Returns:
            Formatted log string.
        """
        lines = []

        outcome = "FAILED" if self.error else "OK"
        lines.append(f"{self.operation} -> {outcome}")

        if self.duration_ms is not None:
            lines.append(f"  Duration: {self.duration_ms:.1f}ms")

        if self.error:
            lines.append(f"  Error: {self.error}")

        if level <= LogLevel.DEBUG:
            if self.parameters:
                lines.append("  Parameters:")
                for name, value in self.parameters.items():
                    display_value = str(value) if include_sensitive else redact_sensitive(str(value))
                    lines.append(f"    {name}: {display_value}")

            if self.input_document is not None:
                lines.append(f"  Input size: {len(self.input_document)} chars")
            if self.output_document is not None:
                lines.append(f"  Output size: {len(self.output_document)} chars")

        if level <= LogLevel.TRACE:
            if self.input_document:
                doc = self.input_document if include_sensitive else redact_sensitive(self.input_document)
                lines.append("  Input Document:")
                lines.append(f"    {_excerpt(doc)}")

            if self.output_document:
                doc = self.output_document if include_sensitive else redact_sensitive(self.output_document)
                lines.append("  Output Document:")
                lines.append(f"    {_excerpt(doc)}")

        return "\n".join(lines)


@dataclass
class OperationLog:
    """Collects operation records for a testing session."""

    session_id: str
    records: list[OperationRecord] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None

    def add_record(self, record: OperationRecord) -> None:
        """Add an operation record to the log."""
        self.records.append(record)

    def complete(self) -> None:
        """Mark the log as complete."""
        self.completed_at = datetime.now(UTC)

    @property
    def failures(self) -> list[OperationRecord]:
        return [r for r in self.records if not r.succeeded]

    def to_dict(self, include_sensitive: bool = False) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "session_id": self.session_id,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "records": [r.to_dict(include_sensitive) for r in self.records],
            "record_count": len(self.records),
            "failure_count": len(self.failures),
        }


class OperationLogger:
    """Configurable logger for SAML operations.

    Manages log level settings and collects operation records into the
    active session log.
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        trace_enabled: bool = False,
    ) -> None:
        """Initialize the operation logger.

        Args:
            level: Minimum log level.
            trace_enabled: Whether TRACE level is enabled (for full documents).
        """
        self._level = level
        self._trace_enabled = trace_enabled
        self._current_log: OperationLog | None = None
        self._record_ids = itertools.count(1)

    @property
    def level(self) -> LogLevel:
        """Get current log level."""
        return self._level

    @level.setter
    def level(self, value: LogLevel) -> None:
        """Set log level."""
        self._level = value

    @property
    def trace_enabled(self) -> bool:
        """Whether TRACE level is enabled."""
        return self._trace_enabled

    @trace_enabled.setter
    def trace_enabled(self, value: bool) -> None:
        """Enable or disable TRACE level."""
        self._trace_enabled = value

    @property
    def effective_level(self) -> LogLevel:
        """Get effective log level (TRACE only if explicitly enabled)."""
        if self._level == LogLevel.TRACE and not self._trace_enabled:
            return LogLevel.DEBUG
        return self._level

    @property
    def current_log(self) -> OperationLog | None:
        return self._current_log

    def start_session(self, session_id: str | None = None) -> OperationLog:
        """Start collecting records for a new session.

        Args:
            session_id: Identifier for the session. Generated if not given.

        Returns:
            OperationLog for the session.
        """
        session_id = session_id or f"session_{secrets.token_hex(4)}"
        self._current_log = OperationLog(session_id=session_id)
        logger.info(f"Started operation logging for session: {session_id}")
        return self._current_log

    def end_session(self) -> OperationLog | None:
        """End the current session and return its log.

        Returns:
            The completed OperationLog, or None if no session was active.
        """
        if self._current_log:
            self._current_log.complete()
            log = self._current_log
            logger.info(
                f"Completed operation logging for session: {log.session_id} "
                f"({len(log.records)} operations)"
            )
            self._current_log = None
            return log
        return None

    def new_record(self, operation: str, **parameters: Any) -> OperationRecord:
        """Create a record for an operation that is about to run."""
        return OperationRecord(
            id=f"op_{next(self._record_ids):04d}",
            timestamp=datetime.now(UTC),
            operation=operation,
            parameters=parameters,
        )

    def log_operation(self, record: OperationRecord) -> None:
        """Log a finished operation.

        Args:
            record: The operation record to log.
        """
        if self._current_log:
            self._current_log.add_record(record)

        effective = self.effective_level
        include_sensitive = self._trace_enabled and self._level <= LogLevel.TRACE

        if effective <= LogLevel.DEBUG:
            logger.debug(record.format_log(effective, include_sensitive))
        elif effective <= LogLevel.INFO:
            logger.info(record.format_log(effective, include_sensitive))

        if record.error:
            logger.error(f"Operation failed: {record.operation}: {record.error}")


# Global operation logger instance
_global_logger: OperationLogger | None = None


def get_operation_logger() -> OperationLogger:
    """Get the global operation logger instance.

    Returns:
        The global OperationLogger.
    """
    global _global_logger
    if _global_logger is None:
        _global_logger = OperationLogger()
    return _global_logger


def set_operation_logger(logger_instance: OperationLogger) -> None:
    """Set the global operation logger instance.

    Args:
        logger_instance: OperationLogger to use globally.
    """
    global _global_logger
    _global_logger = logger_instance


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    trace_enabled: bool = False,
    log_file: str | None = None,
) -> OperationLogger:
    """Configure operation logging.

    Args:
        level: Log level (ERROR, INFO, DEBUG, TRACE) or string name.
        trace_enabled: Whether to enable TRACE level (includes full documents).
        log_file: Optional file path to write logs to.

    Returns:
        Configured OperationLogger.
    """
    if isinstance(level, str):
        level_map = {
            "ERROR": LogLevel.ERROR,
            "INFO": LogLevel.INFO,
            "DEBUG": LogLevel.DEBUG,
            "TRACE": LogLevel.TRACE,
        }
        level = level_map.get(level.upper(), LogLevel.INFO)

    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    operation_logger = OperationLogger(level=level, trace_enabled=trace_enabled)
    set_operation_logger(operation_logger)

    if trace_enabled:
        logger.warning(
            "TRACE logging enabled - full SAML documents and key material will be logged!"
        )

    return operation_logger
