"""Supabase Auth identity provider.

Uses the GoTrue ``/auth/v1/user`` endpoint with the service-role key as
``apikey`` and the caller's access token as the bearer credential.
"""

import requests
import structlog

from shared.auth.port import AuthenticatedUser, IdentityProvider

logger = structlog.get_logger(__name__)


class SupabaseIdentityProvider(IdentityProvider):
    """Resolves access tokens against a Supabase project."""

    def __init__(self, url: str, service_role_key: str, timeout: float = 10.0) -> None:
        self.url = url.rstrip("/")
        self.service_role_key = service_role_key
        self.timeout = timeout

    def get_user(self, token: str) -> AuthenticatedUser | None:
        if not token:
            return None

        try:
            response = requests.get(
                f"{self.url}/auth/v1/user",
                headers={
                    "apikey": self.service_role_key,
                    "Authorization": f"Bearer {token}",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Identity lookup failed", error=type(exc).__name__)
            return None

        if response.status_code != 200:
            logger.info("Access token rejected", status_code=response.status_code)
            return None

        data = response.json()
        user_id = data.get("id")
        if not user_id:
            return None

        metadata = data.get("user_metadata") or {}
        return AuthenticatedUser(
            id=str(user_id),
            email=data.get("email"),
            role=metadata.get("role"),
        )
