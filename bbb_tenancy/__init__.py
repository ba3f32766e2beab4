"""bbb_tenancy: tenant credential resolution for multi-tenant BigBlueButton installs."""

__version__ = "1.0.0"
