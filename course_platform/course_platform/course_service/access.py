"""
Bearer token verification for protected routes.

Verification is stateless: the token is checked against the signing secret
only, without touching the database.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Header, Request

from .auth import TokenCodec
from .config import Settings
from .errors import MissingTokenError


@dataclass(frozen=True)
class AuthenticatedIdentity:
    id: int
    email: str


class AccessGuard:
    def __init__(self, settings: Settings):
        self.tokens = TokenCodec(settings)

    @staticmethod
    def extract_bearer(authorization: Optional[str]) -> str:
        if not authorization or not authorization.lower().startswith("bearer "):
            raise MissingTokenError()
        token = authorization.split(" ", 1)[1].strip()
        if not token:
            raise MissingTokenError()
        return token

    def authenticate(self, request: Request, authorization: Optional[str]) -> AuthenticatedIdentity:
        """
        Resolve the request's bearer token to an identity and attach it to
        ``request.state.identity``.

        Raises:
            MissingTokenError: If no bearer token was sent
            InvalidTokenError: If the token is malformed or wrongly signed
            ExpiredTokenError: If the token has expired
        """
        payload = self.tokens.decode(self.extract_bearer(authorization))
        identity = AuthenticatedIdentity(id=payload["id"], email=payload["email"])
        request.state.identity = identity
        return identity


def require_identity(
    request: Request,
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> AuthenticatedIdentity:
    """FastAPI dependency for routes that need a signed-in user."""
    guard: AccessGuard = request.app.state.access_guard
    return guard.authenticate(request, authorization)
