"""Shared utilities: datetime."""

from bbb_tenancy.shared.utils.datetime import utc_now

__all__ = ["utc_now"]
