"""FastAPI application entry point.

Wiring only: lifespan and exception handlers. The host application
mounts its own routers and uses bbb_tenancy.api.deps.get_credential_resolver.

Settings are loaded inside create_app() so that tests can set env (and optionally
clear get_settings cache) before calling create_app().
"""

from fastapi import FastAPI

from bbb_tenancy.core.config import get_settings
from bbb_tenancy.core.exception_handlers import register_exception_handlers
from bbb_tenancy.core.lifespan import create_lifespan


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    register_exception_handlers(app)
    return app
