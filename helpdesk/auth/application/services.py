"""
Auth Application Services
=========================

Signup, login, profile lookup and bearer-token authentication.

Following SOLID principles:
- Dependency Inversion: the service talks to repository, hasher and token
  abstractions; bcrypt, JWT and SQLAlchemy live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

from helpdesk.auth.domain import User, Principal, normalize_email
from helpdesk.config import Role
from helpdesk.core import (
    AuthenticationException,
    ConflictException,
    ResourceNotFoundException,
)
from helpdesk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


# ========== Interfaces (Dependency Inversion) ==========

class IUserRepository(ABC):
    """Interface for user data access."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID; None when absent or malformed."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by (normalized) email."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user and return it with its ID."""


class IPasswordHasher(ABC):
    """One-way salted password hashing."""

    @abstractmethod
    def hash(self, password: str) -> str:
        """Hash a plain text password."""

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """Check a plain text password against a stored hash."""


class ITokenService(ABC):
    """Bearer token issuance and verification."""

    @abstractmethod
    def issue(self, user: User) -> str:
        """Sign a time-boxed token carrying id, email and role."""

    @abstractmethod
    def verify(self, token: str) -> Principal:
        """Decode a token; raises InvalidTokenException when it does not check out."""


# ========== Application Services ==========

class AuthService:
    """
    Service for account creation and authentication.

    Coordinates user storage, password hashing and token issuance.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        token_service: ITokenService
    ):
        self._users = user_repository
        self._hasher = password_hasher
        self._tokens = token_service

    async def signup(
        self,
        name: str,
        email: str,
        password: str,
        role: Optional[str] = None
    ) -> Tuple[str, User]:
        """
        Create an account and sign the caller in.

        Raises:
            ConflictException: the email is already registered (any case)
        """
        email = normalize_email(email)
        if await self._users.get_by_email(email) is not None:
            raise ConflictException("User already exists with this email")

        user = await self._users.create(User(
            id=None,
            name=name,
            email=email,
            role=role or Role.AGENT,
            password_hash=self._hasher.hash(password),
        ))

        logger.info("User created", extra={"user_id": user.id, "role": user.role})
        return self._tokens.issue(user), user

    async def login(self, email: str, password: str) -> Tuple[str, User]:
        """
        Exchange credentials for a token.

        Unknown email and wrong password produce the same error so the
        response does not reveal which accounts exist.
        """
        user = await self._users.get_by_email(normalize_email(email))
        if user is None or not self._hasher.verify(password, user.password_hash):
            raise AuthenticationException(INVALID_CREDENTIALS)

        logger.info("User logged in", extra={"user_id": user.id})
        return self._tokens.issue(user), user

    async def profile(self, principal: Principal) -> User:
        user = await self._users.get_by_id(principal.id)
        if user is None:
            raise ResourceNotFoundException("User", principal.id)
        return user

    async def authenticate(self, token: Optional[str]) -> Principal:
        """
        Resolve a bearer token to the calling principal.

        Raises:
            AuthenticationException: no token, or the user no longer exists
            InvalidTokenException: signature, expiry or claims are bad
        """
        if not token:
            raise AuthenticationException("Access token required")

        principal = self._tokens.verify(token)

        if await self._users.get_by_id(principal.id) is None:
            raise AuthenticationException("User not found")

        return principal
