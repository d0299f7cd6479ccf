"""SAML Raider - SAML message manipulation for authorized security testing."""

__version__ = "0.1.0"
