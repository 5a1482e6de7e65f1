"""Runtime settings for the MechanicQ billing service.

Settings are read from the environment once, at the composition root, and
then passed explicitly to the adapters that need them (gateway, identity
provider). Domain and application code never reads ``os.environ`` directly.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass


def _read(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    """Immutable service configuration."""

    razorpay_key_id: str | None = None
    razorpay_key_secret: str | None = None
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None
    currency: str = "INR"
    default_tax_rate: float = 18.0
    http_timeout: float = 10.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables (empty values count as unset)."""
        env = os.environ if environ is None else environ

        tax_rate = _read(env, "BILLING_DEFAULT_TAX_RATE")
        timeout = _read(env, "HTTP_TIMEOUT_SECONDS")

        return cls(
            razorpay_key_id=_read(env, "RAZORPAY_KEY_ID"),
            razorpay_key_secret=_read(env, "RAZORPAY_KEY_SECRET"),
            supabase_url=_read(env, "SUPABASE_URL"),
            supabase_service_role_key=_read(env, "SUPABASE_SERVICE_ROLE_KEY"),
            currency=_read(env, "BILLING_CURRENCY") or "INR",
            default_tax_rate=float(tax_rate) if tax_rate else 18.0,
            http_timeout=float(timeout) if timeout else 10.0,
        )

    @property
    def razorpay_configured(self) -> bool:
        return bool(self.razorpay_key_secret)

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)


class ConfigurationError(Exception):
    """A required secret or credential is missing from the environment."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
