"""
Password hashing, session tokens and the register/login flow.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import store
from .config import Settings
from .errors import (
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    ValidationError,
)
from .models import User

logger = logging.getLogger(__name__)


def build_password_context(settings: Settings) -> CryptContext:
    # pbkdf2_sha256 by default to avoid external bcrypt backend issues in some environments
    kwargs = {}
    if settings.PASSWORD_HASH_ROUNDS:
        kwargs[f"{settings.PASSWORD_HASH_SCHEME}__default_rounds"] = settings.PASSWORD_HASH_ROUNDS
    return CryptContext(schemes=[settings.PASSWORD_HASH_SCHEME], deprecated="auto", **kwargs)


class TokenCodec:
    """Signs and verifies HS256 session tokens carrying ``{id, email}``."""

    def __init__(self, settings: Settings):
        self.algorithm = settings.JWT_ALGORITHM
        self.lifetime = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self._settings = settings

    def issue(self, user_id: int, email: str, issued_at: Optional[datetime] = None) -> str:
        issued_at = issued_at or datetime.now(timezone.utc)
        payload = {
            "id": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self._settings.require_signing_secret(), algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry and return the payload.

        Raises:
            ExpiredTokenError: If the token is past its expiry
            InvalidTokenError: On a bad signature, malformed token or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.require_signing_secret(),
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

        if not isinstance(payload.get("id"), int) or not payload.get("email"):
            raise InvalidTokenError()
        return payload


class AuthService:
    """Registers users and exchanges credentials for session tokens."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.pwd_context = build_password_context(settings)
        self.tokens = TokenCodec(settings)

    def hash_password(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, password_hash: str) -> bool:
        return self.pwd_context.verify(plain_password, password_hash)

    def register(self, db: Session, name: str, email: str, password: str) -> User:
        """
        Create a user with a salted password hash.

        Raises:
            ValidationError: If any field is missing or empty
            DuplicateUserError: If the email is already registered
        """
        if not name or not email or not password:
            raise ValidationError("All fields are required")

        user = store.insert_user(db, name=name, email=email, password_hash=self.hash_password(password))
        logger.info("Registered user id=%s", user.id)
        return user

    def login(self, db: Session, email: str, password: str) -> tuple[str, User]:
        """
        Authenticate and return ``(token, user)``.

        Unknown email and wrong password raise the same error so that the
        response does not reveal which accounts exist.

        Raises:
            ValidationError: If either field is missing or empty
            InvalidCredentialsError: On unknown email or wrong password
            ServerMisconfigurationError: If no signing secret is configured
        """
        if not email or not password:
            raise ValidationError("Both fields are required")

        user = store.find_user_by_email(db, email)
        if not user:
            # Spend the same hashing time as a real check
            self.pwd_context.dummy_verify()
            raise InvalidCredentialsError()
        if not self.verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        token = self.tokens.issue(user.id, user.email)
        return token, user
