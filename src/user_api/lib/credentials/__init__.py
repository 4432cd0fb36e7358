"""Credential helpers: deterministic fallback passwords for provisioned accounts."""

from user_api.lib.credentials.generator import derive_default_password

__all__ = ["derive_default_password"]
