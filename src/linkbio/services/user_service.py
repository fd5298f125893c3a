"""User service — registration and credential checks.

Service layer: API routes call services, services call the database.
Uniqueness is left to the database: the insert is attempted and a unique
constraint violation becomes a ConflictError. A read-then-insert check
would race with concurrent registrations.
"""

import re

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from linkbio.auth.password import burn_dummy_check, hash_password, verify_password
from linkbio.db.models import User
from linkbio.errors import AuthenticationError, BadRequestError, ConflictError

logger = structlog.get_logger()

USERNAME_RE = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.-]{0,49}")

# Top-level paths that a profile URL (/{username}) would otherwise shadow.
# The OpenAPI docs live under /api, so "api" covers them too.
RESERVED_USERNAMES = frozenset({"api", "auth", "click", "health"})


class InvalidLoginError(AuthenticationError):
    """Unknown email or wrong password. Both cases look identical."""

    message = "Invalid credentials"


class UserService:
    """Business logic for accounts."""

    def __init__(self, db: AsyncSession, bcrypt_rounds: int = 12):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    async def register(
        self, username: str | None, email: str | None, password: str | None
    ) -> User:
        """Create an account. The plaintext password is not kept."""
        if not username or not email or not password:
            raise BadRequestError("Username, email and password are required")
        if not USERNAME_RE.fullmatch(username):
            raise BadRequestError(
                "Username may only contain letters, digits, '.', '_' and '-'"
            )
        if username.lower() in RESERVED_USERNAMES:
            raise BadRequestError("Username is not available")

        password_hash = await run_in_threadpool(
            hash_password, password, self.bcrypt_rounds
        )
        user = User(username=username, email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            logger.info("auth.register_conflict", username=username)
            raise ConflictError("Username or email already exists")

        await self.db.commit()
        await self.db.refresh(user)
        logger.info("auth.registered", user_id=user.id, username=user.username)
        return user

    async def authenticate(self, email: str | None, password: str | None) -> User:
        """Return the user for a correct email/password pair.

        Raises InvalidLoginError for an unknown email and for a wrong
        password alike.
        """
        if not email or not password:
            raise BadRequestError("Email and password are required")

        user = await self.get_by_email(email)
        if user is None:
            await run_in_threadpool(burn_dummy_check, password, self.bcrypt_rounds)
            logger.info("auth.login_failed")
            raise InvalidLoginError()

        if not await run_in_threadpool(verify_password, password, user.password_hash):
            logger.info("auth.login_failed", user_id=user.id)
            raise InvalidLoginError()

        logger.info("auth.login", user_id=user.id)
        return user

    async def get(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalars().first()
