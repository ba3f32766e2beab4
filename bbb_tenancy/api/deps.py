"""FastAPI dependencies.

Request handlers obtain the process-wide CredentialResolver with
Depends(get_credential_resolver) and call resolve(tenant_id).
"""

from fastapi import Request

from bbb_tenancy.application.services.credential_resolver import CredentialResolver


def get_credential_resolver(request: Request) -> CredentialResolver:
    """Return the resolver built in the application lifespan."""
    resolver: CredentialResolver | None = getattr(
        request.app.state, "credential_resolver", None
    )
    if resolver is None:
        raise RuntimeError("CredentialResolver is not initialized (lifespan not run)")
    return resolver
