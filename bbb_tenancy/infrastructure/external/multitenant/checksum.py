"""Checksum signing for the multitenant lookup API.

The remote side recomputes hex(digest(action + query + secret)) and
rejects mismatches, so the query encoding here must stay byte-for-byte
stable: keys sorted, form-urlencoded values (space as "+").
"""

import hashlib
from collections.abc import Mapping
from urllib.parse import urlencode

from bbb_tenancy.core.config import normalize_digest_name


def encode_params(params: Mapping[str, str]) -> str:
    """Return params as a query string with keys in sorted order."""
    return urlencode(sorted(params.items()))


def sign(
    action: str,
    params: Mapping[str, str],
    secret: str,
    algorithm: str = "sha256",
) -> str:
    """Return the lowercase hex checksum for an API call.

    Args:
        action: API call name (e.g. "getUser").
        params: Query parameters that will be sent with the call.
        secret: Shared secret of the lookup service.
        algorithm: hashlib digest name; "SHA-256" and "sha256" are equivalent.

    Returns:
        Hex digest of action + encoded params + secret.

    Raises:
        ValueError: If the digest algorithm is not supported.
    """
    payload = f"{action}{encode_params(params)}{secret}"
    digest = hashlib.new(normalize_digest_name(algorithm))
    digest.update(payload.encode("utf-8"))
    return digest.hexdigest()
