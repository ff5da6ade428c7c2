"""
Credential Primitives
=====================

bcrypt password hashing and HS256 JWT bearer tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from helpdesk.auth.application import IPasswordHasher, ITokenService
from helpdesk.auth.domain import User, Principal
from helpdesk.config import Settings, VALID_ROLES
from helpdesk.core import ConfigurationException, InvalidTokenException


class BcryptPasswordHasher(IPasswordHasher):
    """Salted bcrypt hashes; the salt and cost are embedded in the hash string."""

    def __init__(self, rounds: int = 12):
        self._rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash or password over 72 bytes
            return False


class JWTTokenService(ITokenService):
    """
    Issues and verifies signed bearer tokens.

    Without a secret every token operation fails with a configuration error.
    """

    def __init__(
        self,
        secret: Optional[str],
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(days=7)
    ):
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in

    @classmethod
    def from_settings(cls, settings: Settings) -> "JWTTokenService":
        return cls(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expires_in=timedelta(days=settings.jwt_expires_days),
        )

    def _require_secret(self) -> str:
        if not self._secret:
            raise ConfigurationException("JWT_SECRET is not configured")
        return self._secret

    def issue(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "id": user.id,
            "email": user.email,
            "role": user.role,
            "iat": now,
            "exp": now + self._expires_in,
        }
        return jwt.encode(claims, self._require_secret(), algorithm=self._algorithm)

    def verify(self, token: str) -> Principal:
        secret = self._require_secret()
        try:
            payload = jwt.decode(token, secret, algorithms=[self._algorithm])
        except JWTError:
            raise InvalidTokenException()

        user_id = payload.get("id")
        email = payload.get("email")
        role = payload.get("role")
        if not user_id or not email or role not in VALID_ROLES:
            raise InvalidTokenException()

        return Principal(id=str(user_id), email=email, role=role)
