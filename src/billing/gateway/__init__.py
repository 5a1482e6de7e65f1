"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- RazorpayGateway for production, built from the environment
- FakeGateway for development and testing
"""

from billing.gateway.port import PaymentGateway
from billing.gateway.razorpay_adapter import RazorpayGateway
from shared.settings import ConfigurationError, Settings

_current_gateway: PaymentGateway | None = None


def build_gateway(settings: Settings) -> PaymentGateway:
    """Build the Razorpay gateway from explicit settings."""
    if not settings.razorpay_configured:
        raise ConfigurationError("Razorpay credentials not configured")
    return RazorpayGateway(
        key_id=settings.razorpay_key_id,
        key_secret=settings.razorpay_key_secret,
        timeout=settings.http_timeout,
    )


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, building it from the environment on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = build_gateway(Settings.from_env())
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to the environment-built default."""
    global _current_gateway
    _current_gateway = None
