"""Locate and replace SAML parameters in query strings and form bodies.

The host delivers raw request data; these helpers pull the
``SAMLRequest``/``SAMLResponse`` value out of it and put a re-encoded
value back, leaving every other parameter as it was.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from samlraider.core.saml.codec import Binding

SAML_REQUEST_PARAM = "SAMLRequest"
SAML_RESPONSE_PARAM = "SAMLResponse"

# SAMLRequest is conventionally sent with HTTP-Redirect, SAMLResponse with HTTP-POST
PARAMETER_BINDINGS: dict[str, Binding] = {
    SAML_REQUEST_PARAM: Binding.REDIRECT,
    SAML_RESPONSE_PARAM: Binding.POST,
}


@dataclass(frozen=True)
class SAMLParameter:
    """A SAML message found in request data."""

    raw: str
    binding: Binding
    parameter: str

    @property
    def is_response(self) -> bool:
        return self.parameter == SAML_RESPONSE_PARAM


def _query_params(data: str) -> httpx.QueryParams:
    data = data.strip()
    if data.startswith(("http://", "https://")):
        return httpx.URL(data).params
    return httpx.QueryParams(data.lstrip("?"))


def find_saml_parameter(data: str) -> SAMLParameter | None:
    """Find a SAML message in a URL, query string or form body.

    ``SAMLRequest`` wins when both parameters are present.

    Args:
        data: Full URL, query string or urlencoded form body.

    Returns:
        SAMLParameter, or None if neither parameter is present.
    """
    params = _query_params(data)
    for name in (SAML_REQUEST_PARAM, SAML_RESPONSE_PARAM):
        value = params.get(name)
        if value:
            return SAMLParameter(raw=value, binding=PARAMETER_BINDINGS[name], parameter=name)
    return None


def replace_saml_parameter(data: str, parameter: str, value: str) -> str:
    """Replace a SAML parameter value, returning the re-encoded data.

    A full URL comes back as a URL; a query string or form body comes back
    as an urlencoded string without a leading ``?``.
    """
    stripped = data.strip()
    if stripped.startswith(("http://", "https://")):
        url = httpx.URL(stripped)
        return str(url.copy_with(params=url.params.set(parameter, value)))
    return str(httpx.QueryParams(stripped.lstrip("?")).set(parameter, value))
