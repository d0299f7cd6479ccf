"""Application configuration management.

Loads configuration from config.yaml files and environment variables.
Environment variables take precedence over config file settings.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from samlraider.core.saml.codec import Binding

logger = logging.getLogger(__name__)

# Default config locations
DEFAULT_CONFIG_DIR = Path.home() / ".samlraider"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"

# Environment variable prefix
ENV_PREFIX = "SAMLRAIDER_"

DEFAULT_XXE_SERVER_URL = "http://attacker.example.com/evil.dtd"
DEFAULT_XSLT_PAYLOAD = (
    '<xsl:stylesheet version="1.0" xmlns:xsl="http://www.w3.org/1999/XSL/Transform">'
    '<xsl:template match="/"><xsl:value-of select="system-property(\'xsl:vendor\')"/>'
    "</xsl:template></xsl:stylesheet>"
)


@dataclass
class CodecSettings:
    """Transport encoding settings."""

    default_binding: Binding = Binding.POST

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CodecSettings:
        """Create CodecSettings from a dictionary."""
        return cls(
            default_binding=_parse_binding(data.get("default_binding"), Binding.POST),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "default_binding": str(self.default_binding),
        }


@dataclass
class AttackSettings:
    """Default payloads for injection attacks."""

    xxe_server_url: str = DEFAULT_XXE_SERVER_URL
    xslt_payload: str = DEFAULT_XSLT_PAYLOAD

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AttackSettings:
        """Create AttackSettings from a dictionary."""
        return cls(
            xxe_server_url=data.get("xxe_server_url", DEFAULT_XXE_SERVER_URL),
            xslt_payload=data.get("xslt_payload", DEFAULT_XSLT_PAYLOAD),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "xxe_server_url": self.xxe_server_url,
            "xslt_payload": self.xslt_payload,
        }


@dataclass
class LoggingSettings:
    """Operation logging settings."""

    level: str = "ERROR"
    trace_enabled: bool = False
    log_file: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LoggingSettings:
        """Create LoggingSettings from a dictionary."""
        return cls(
            level=str(data.get("level", "ERROR")).upper(),
            trace_enabled=bool(data.get("trace_enabled", False)),
            log_file=Path(data["log_file"]) if data.get("log_file") else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "level": self.level,
            "trace_enabled": self.trace_enabled,
            "log_file": str(self.log_file) if self.log_file else None,
        }


@dataclass
class AppConfig:
    """Main application configuration."""

    codec: CodecSettings = field(default_factory=CodecSettings)
    attacks: AttackSettings = field(default_factory=AttackSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    config_path: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], config_path: Path | None = None) -> AppConfig:
        """Create AppConfig from a dictionary."""
        return cls(
            codec=CodecSettings.from_dict(data.get("codec") or {}),
            attacks=AttackSettings.from_dict(data.get("attacks") or {}),
            logging=LoggingSettings.from_dict(data.get("logging") or {}),
            config_path=config_path,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "codec": self.codec.to_dict(),
            "attacks": self.attacks.to_dict(),
            "logging": self.logging.to_dict(),
        }

    def save(self, path: Path | None = None) -> None:
        """Save configuration to a YAML file.

        Args:
            path: Path to save to. Uses config_path or default if not specified.
        """
        save_path = path or self.config_path or DEFAULT_CONFIG_FILE
        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, "w") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False)


def _parse_binding(value: Any, default: Binding) -> Binding:
    if not value:
        return default
    for binding in Binding:
        if binding.value.lower() == str(value).lower():
            return binding
    logger.warning(f"Unknown binding {value!r} in configuration, using {default}")
    return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Get a boolean from environment variable."""
    value = os.environ.get(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load application configuration.

    Configuration is loaded in this order (later values override earlier):
    1. Default values
    2. config.yaml file (if exists)
    3. Environment variables

    Args:
        config_path: Path to config file. Uses default if not specified.

    Returns:
        AppConfig with merged settings.
    """
    # Start with defaults
    config = AppConfig()

    # Try to load from config file
    file_path = config_path or DEFAULT_CONFIG_FILE
    if file_path.exists():
        try:
            with open(file_path) as f:
                data = yaml.safe_load(f) or {}
            config = AppConfig.from_dict(data, config_path=file_path)
        except (OSError, yaml.YAMLError, AttributeError) as e:
            # If config file is invalid, use defaults
            logger.warning(f"Ignoring invalid config file {file_path}: {e}")

    # Override with environment variables
    if os.environ.get(f"{ENV_PREFIX}DEFAULT_BINDING"):
        config.codec.default_binding = _parse_binding(
            os.environ[f"{ENV_PREFIX}DEFAULT_BINDING"], config.codec.default_binding
        )

    if os.environ.get(f"{ENV_PREFIX}XXE_SERVER_URL"):
        config.attacks.xxe_server_url = os.environ[f"{ENV_PREFIX}XXE_SERVER_URL"]

    if os.environ.get(f"{ENV_PREFIX}XSLT_PAYLOAD"):
        config.attacks.xslt_payload = os.environ[f"{ENV_PREFIX}XSLT_PAYLOAD"]

    # Logging settings
    log_settings = config.logging

    if os.environ.get(f"{ENV_PREFIX}LOG_LEVEL"):
        log_settings.level = os.environ[f"{ENV_PREFIX}LOG_LEVEL"].upper()

    log_settings.trace_enabled = _get_env_bool(
        f"{ENV_PREFIX}TRACE_ENABLED", log_settings.trace_enabled
    )

    if os.environ.get(f"{ENV_PREFIX}LOG_FILE"):
        log_settings.log_file = Path(os.environ[f"{ENV_PREFIX}LOG_FILE"])

    return config


def get_default_config_yaml() -> str:
    """Get the default config.yaml content as a string.

    Useful for generating example configuration files.
    """
    return """\
# SAML Raider Configuration File
# Environment variables override these settings (prefix: SAMLRAIDER_)

codec:
  # Binding used by decode/encode when none is given (POST or Redirect)
  default_binding: "POST"

attacks:
  # External DTD location used by the XXE injection
  xxe_server_url: "http://attacker.example.com/evil.dtd"

  # Stylesheet embedded by the XSLT injection
  # xslt_payload: "<xsl:stylesheet ...>"

logging:
  # ERROR, INFO, DEBUG or TRACE
  level: "ERROR"

  # TRACE logs full documents and key material
  trace_enabled: false

  # log_file: ~/.samlraider/samlraider.log
"""
