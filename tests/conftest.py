"""Pytest configuration and fixtures."""

from collections.abc import Generator

import pytest
from click.testing import CliRunner

from samlraider.core.logging import LogLevel, OperationLogger, set_operation_logger

# Response signed at the Response level, assertion unsigned
SIGNED_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<samlp:Response xmlns:samlp="urn:oasis:names:tc:SAML:2.0:protocol" xmlns:saml="urn:oasis:names:tc:SAML:2.0:assertion" ID="_response_id_123" Version="2.0" IssueInstant="2023-01-01T00:00:00Z" Destination="http://sp.example.com/acs">
  <saml:Issuer>http://idp.example.com</saml:Issuer>
  <ds:Signature xmlns:ds="http://www.w3.org/2000/09/xmldsig#">
    <ds:SignedInfo>
      <ds:CanonicalizationMethod Algorithm="http://www.w3.org/2001/10/xml-exc-c14n#"/>
      <ds:SignatureMethod Algorithm="http://www.w3.org/2000/09/xmldsig#rsa-sha1"/>
      <ds:Reference URI="#_response_id_123">
        <ds:Transforms>
          <ds:Transform Algorithm="http://www.w3.org/2000/09/xmldsig#enveloped-signature"/>
        </ds:Transforms>
        <ds:DigestMethod Algorithm="http://www.w3.org/2000/09/xmldsig#sha1"/>
        <ds:DigestValue>digestvalue123</ds:DigestValue>
      </ds:Reference>
    </ds:SignedInfo>
    <ds:SignatureValue>signaturevalue123</ds:SignatureValue>
  </ds:Signature>
  <samlp:Status>
    <samlp:StatusCode Value="urn:oasis:names:tc:SAML:2.0:status:Success"/>
  </samlp:Status>
  <saml:Assertion ID="_assertion_id_456" Version="2.0" IssueInstant="2023-01-01T00:00:00Z">
    <saml:Issuer>http://idp.example.com</saml:Issuer>
    <saml:Subject>
      <saml:NameID Format="urn:oasis:names:tc:SAML:1.1:nameid-format:emailAddress">user@example.com</saml:NameID>
      <saml:SubjectConfirmation Method="urn:oasis:names:tc:SAML:2.0:cm:bearer">
        <saml:SubjectConfirmationData NotOnOrAfter="2023-01-01T01:00:00Z" Recipient="http://sp.example.com/acs"/>
      </saml:SubjectConfirmation>
    </saml:Subject>
    <saml:Conditions NotBefore="2023-01-01T00:00:00Z" NotOnOrAfter="2023-01-01T01:00:00Z">
      <saml:AudienceRestriction>
        <saml:Audience>http://sp.example.com</saml:Audience>
      </saml:AudienceRestriction>
    </saml:Conditions>
    <saml:AuthnStatement AuthnInstant="2023-01-01T00:00:00Z">
      <saml:AuthnContext>
        <saml:AuthnContextClassRef>urn:oasis:names:tc:SAML:2.0:ac:classes:Password</saml:AuthnContextClassRef>
      </saml:AuthnContext>
    </saml:AuthnStatement>
    <saml:AttributeStatement>
      <saml:Attribute Name="email">
        <saml:AttributeValue>user@example.com</saml:AttributeValue>
      </saml:Attribute>
    </saml:AttributeStatement>
  </saml:Assertion>
</samlp:Response>"""

# Assertion signed, Response unsigned
ASSERTION_SIGNED_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<samlp:Response xmlns:samlp="urn:oasis:names:tc:SAML:2.0:protocol" xmlns:saml="urn:oasis:names:tc:SAML:2.0:assertion" ID="_response_789" Version="2.0">
  <saml:Issuer>http://idp.example.com</saml:Issuer>
  <samlp:Status>
    <samlp:StatusCode Value="urn:oasis:names:tc:SAML:2.0:status:Success"/>
  </samlp:Status>
  <saml:Assertion ID="_assertion_abc" Version="2.0">
    <saml:Issuer>http://idp.example.com</saml:Issuer>
    <ds:Signature xmlns:ds="http://www.w3.org/2000/09/xmldsig#">
      <ds:SignedInfo>
        <ds:Reference URI="#_assertion_abc">
          <ds:DigestValue>digest</ds:DigestValue>
        </ds:Reference>
      </ds:SignedInfo>
      <ds:SignatureValue>sig</ds:SignatureValue>
    </ds:Signature>
    <saml:Subject>
      <saml:NameID>admin@example.com</saml:NameID>
    </saml:Subject>
  </saml:Assertion>
</samlp:Response>"""

# Both the Response and the Assertion carry a signature
DOUBLY_SIGNED_RESPONSE = """<samlp:Response xmlns:samlp="urn:oasis:names:tc:SAML:2.0:protocol" xmlns:saml="urn:oasis:names:tc:SAML:2.0:assertion" xmlns:ds="http://www.w3.org/2000/09/xmldsig#" ID="_r1">
  <ds:Signature>
    <ds:SignatureValue>response-sig</ds:SignatureValue>
  </ds:Signature>
  <saml:Assertion ID="_a1">
    <ds:Signature>
      <ds:SignatureValue>assertion-sig</ds:SignatureValue>
    </ds:Signature>
    <saml:Subject>
      <saml:NameID>alice@example.com</saml:NameID>
    </saml:Subject>
  </saml:Assertion>
</samlp:Response>"""


@pytest.fixture
def signed_response() -> str:
    """Response-level signed SAML Response."""
    return SIGNED_RESPONSE


@pytest.fixture
def assertion_signed_response() -> str:
    """SAML Response whose only signature is inside the Assertion."""
    return ASSERTION_SIGNED_RESPONSE


@pytest.fixture
def doubly_signed_response() -> str:
    """SAML Response signed at both Response and Assertion level."""
    return DOUBLY_SIGNED_RESPONSE


@pytest.fixture
def operation_logger() -> Generator[OperationLogger, None, None]:
    """Fresh global operation logger for each test."""
    logger = OperationLogger(level=LogLevel.DEBUG)
    set_operation_logger(logger)
    yield logger
    set_operation_logger(OperationLogger())


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the user's config file and environment."""
    monkeypatch.setattr("samlraider.core.config.DEFAULT_CONFIG_FILE", tmp_path / "config.yaml")
    for name in (
        "SAMLRAIDER_DEFAULT_BINDING",
        "SAMLRAIDER_XXE_SERVER_URL",
        "SAMLRAIDER_XSLT_PAYLOAD",
        "SAMLRAIDER_LOG_LEVEL",
        "SAMLRAIDER_TRACE_ENABLED",
        "SAMLRAIDER_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
