"""Multitenant lookup: checksum-signed getUser calls to the legacy XML API."""

from bbb_tenancy.infrastructure.external.multitenant.checksum import (
    encode_params,
    sign,
)
from bbb_tenancy.infrastructure.external.multitenant.client import MultitenantLookupClient
from bbb_tenancy.infrastructure.external.multitenant.response_parser import (
    parse_response,
    parse_xml,
)

__all__ = [
    "MultitenantLookupClient",
    "encode_params",
    "parse_response",
    "parse_xml",
    "sign",
]
