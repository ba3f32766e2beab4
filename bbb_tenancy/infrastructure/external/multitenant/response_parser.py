"""Parser for the legacy XML responses of the multitenant lookup API.

Responses look like:

    <response>
      <returncode>SUCCESS</returncode>
      <user><apiURL>https://bbb.example/</apiURL><secret>s3cr3t</secret></user>
    </response>

or, on failure, carry messageKey and message elements.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

import httpx

from bbb_tenancy.core.constants import (
    LOOKUP_MESSAGE_KEY_NO_SUCH_USER,
    LOOKUP_RETURNCODE_SUCCESS,
)
from bbb_tenancy.domain.exceptions import LookupFailed, TenantNotFound, TransportError


def _element_to_value(element: ET.Element) -> Any:
    """Convert element to its text (leaf) or a dict of children and attributes."""
    children = list(element)
    if not children and not element.attrib:
        return (element.text or "").strip()
    value: dict[str, Any] = dict(element.attrib)
    for child in children:
        # Repeated elements collapse to the first occurrence.
        if child.tag not in value:
            value[child.tag] = _element_to_value(child)
    return value


def parse_xml(body: bytes | str) -> dict[str, Any]:
    """Parse an XML document into a mapping of the root element's children.

    Raises:
        ValueError: If body is not well-formed XML or the root is a bare value.
    """
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise ValueError(f"Invalid XML response: {e}") from e
    doc = _element_to_value(root)
    if not isinstance(doc, dict):
        raise ValueError("Invalid XML response: root element has no children")
    return doc


def parse_response(response: httpx.Response, tenant_id: str) -> dict[str, Any]:
    """Classify a getUser response and return the user record on SUCCESS.

    Args:
        response: HTTP response from the lookup service.
        tenant_id: Tenant that was looked up (for error details).

    Returns:
        The nested user mapping (apiURL, secret, ...).

    Raises:
        TransportError: Non-2xx status; carries the server message when present.
        TenantNotFound: messageKey is noSuchUser.
        LookupFailed: Any other non-SUCCESS returncode, or unparseable body.
    """
    try:
        doc = parse_xml(response.content)
    except ValueError as e:
        if not response.is_success:
            raise TransportError(response.status_code) from e
        raise LookupFailed("invalidResponse", str(e)) from e

    if not response.is_success:
        message = doc.get("message")
        raise TransportError(
            response.status_code, message if isinstance(message, str) and message else None
        )

    if doc.get("returncode") == LOOKUP_RETURNCODE_SUCCESS:
        user = doc.get("user")
        if not isinstance(user, dict):
            raise LookupFailed("invalidResponse", "SUCCESS response without user record")
        return user

    message_key = doc.get("messageKey")
    if message_key == LOOKUP_MESSAGE_KEY_NO_SUCH_USER:
        raise TenantNotFound(tenant_id)
    message = doc.get("message")
    raise LookupFailed(
        message_key if isinstance(message_key, str) else None,
        message if isinstance(message, str) and message else None,
    )
