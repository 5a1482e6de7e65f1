"""Identity provider port (abstract interface).

Resolves a bearer token issued by the auth service into the user it
belongs to. Adapters: SupabaseIdentityProvider (production) and
FakeIdentityProvider (dev/test).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class AuthenticatedUser:
    """The caller behind a bearer token."""

    id: str
    email: str | None = None
    role: str | None = None


class IdentityProvider(ABC):
    """Abstract identity provider interface."""

    @abstractmethod
    def get_user(self, token: str) -> AuthenticatedUser | None:
        """Return the user for ``token``, or None if it does not resolve."""
        ...
