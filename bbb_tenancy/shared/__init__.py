"""Shared utilities: telemetry (logging) and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from bbb_tenancy.shared.utils import utc_now

__all__ = ["utc_now"]
