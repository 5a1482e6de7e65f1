"""In-memory identity provider for development and testing."""

from shared.auth.port import AuthenticatedUser, IdentityProvider


class FakeIdentityProvider(IdentityProvider):
    """Identity provider backed by a token → user table."""

    def __init__(self) -> None:
        self.users: dict[str, AuthenticatedUser] = {}
        self.calls: list[str] = []

    def register(
        self,
        token: str,
        user_id: str,
        email: str | None = None,
        role: str | None = None,
    ) -> AuthenticatedUser:
        """Make ``token`` resolve to a user with ``user_id``."""
        user = AuthenticatedUser(id=user_id, email=email, role=role)
        self.users[token] = user
        return user

    def get_user(self, token: str) -> AuthenticatedUser | None:
        self.calls.append(token)
        return self.users.get(token)
