"""Identity provider registry and the bearer-token FastAPI dependency.

Provides get_identity_provider() / set_identity_provider() to swap
implementations:
- SupabaseIdentityProvider in production (built from the environment)
- FakeIdentityProvider for development and testing
"""

from fastapi import Header, HTTPException

from shared.auth.port import AuthenticatedUser, IdentityProvider
from shared.auth.supabase_adapter import SupabaseIdentityProvider
from shared.settings import ConfigurationError, Settings

_current_provider: IdentityProvider | None = None

BEARER_PREFIX = "Bearer "


def get_identity_provider() -> IdentityProvider:
    """Return the active identity provider, building the Supabase one on first use."""
    global _current_provider
    if _current_provider is None:
        settings = Settings.from_env()
        if not settings.supabase_configured:
            raise ConfigurationError("Supabase credentials not configured")
        _current_provider = SupabaseIdentityProvider(
            url=settings.supabase_url,
            service_role_key=settings.supabase_service_role_key,
            timeout=settings.http_timeout,
        )
    return _current_provider


def set_identity_provider(provider: IdentityProvider) -> None:
    """Override the active identity provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_identity_provider() -> None:
    """Reset to the environment-built default."""
    global _current_provider
    _current_provider = None


def extract_bearer_token(authorization: str) -> str:
    """Strip the ``Bearer`` scheme from an Authorization header value."""
    return authorization.removeprefix(BEARER_PREFIX).strip()


def require_user(authorization: str | None = Header(default=None)) -> AuthenticatedUser:
    """FastAPI dependency: resolve the caller from the Authorization header."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    try:
        provider = get_identity_provider()
    except ConfigurationError as exc:
        raise HTTPException(status_code=500, detail=exc.message) from exc

    user = provider.get_user(extract_bearer_token(authorization))
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


__all__ = [
    "AuthenticatedUser",
    "IdentityProvider",
    "extract_bearer_token",
    "get_identity_provider",
    "require_user",
    "reset_identity_provider",
    "set_identity_provider",
]
