"""Session holding the current identity and bearer token.

A session is created when the application starts and closed on logout or
exit. It is passed explicitly to everything that talks to the backend.
"""

from typing import Optional

from erpcl.domain.entities import Identity, Role

# Login is disabled on the backend; every request uses this placeholder.
STUB_TOKEN = "test-token-temporary"

STUB_IDENTITY = Identity(
    id=1,
    email="admin@patolin.cl",
    name="Usuario Administrador",
    role=Role.ADMIN,
)


class Session:
    """Current user identity and bearer token."""

    def __init__(self, identity: Optional[Identity], token: Optional[str]):
        self._identity = identity
        self._token = token

    @classmethod
    def open(
        cls, token: Optional[str] = None, identity: Optional[Identity] = None
    ) -> "Session":
        """Open a session, falling back to the stub identity and token."""
        return cls(
            identity=identity if identity is not None else STUB_IDENTITY,
            token=token or STUB_TOKEN,
        )

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_active(self) -> bool:
        return self._token is not None

    def authorization_header(self) -> dict[str, str]:
        """Return the Authorization header, or an empty dict once closed."""
        if self._token is None:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def close(self) -> None:
        """Forget the identity and token (logout)."""
        self._identity = None
        self._token = None

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        who = self._identity.email if self._identity else None
        return f"Session(identity={who!r}, active={self.is_active})"
