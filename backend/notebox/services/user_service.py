"""
Notebox Backend — User Service
===============================

What:  Signup, login and authenticated-user lookup.
How:   Validates input, performs the user query/insert, delegates password
       hashing to services/password.py. Session handling stays in the route
       layer; this service only returns the User.
Who:   Called by notebox/routes/users.py.

Login Flow:
    ┌──────────┐   ┌──────────────────┐   ┌────────────────┐
    │ Validate │──▶│ Lookup username  │──▶│ bcrypt compare │──▶ User
    └──────────┘   │ (+password_hash) │   └────────────────┘
                   └──────────────────┘
    Unknown user and wrong password both end in
    UnauthorizedError("Invalid credentials").
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from notebox.exceptions import BadInputError, ConflictError, InternalError, UnauthorizedError
from notebox.models.user import User
from notebox.services.password import burn_verification, hash_password, verify_password

logger = logging.getLogger(__name__)

MISSING_USER_DATA = "missing user data"
USERNAME_TAKEN = "username already exists. Please choose a different one or login instead."
EMAIL_TAKEN = "email already exists. Please choose a different one or login instead"
MISSING_CREDENTIALS = "Parameters missing"
INVALID_CREDENTIALS = "Invalid credentials"


class UserService:
    """Business logic layer for accounts."""

    async def _conflict_message(
        self, db: AsyncSession, username: str, email: str
    ) -> Optional[str]:
        """The conflict message for a taken username or email, username first."""
        try:
            existing_username = (
                await db.execute(select(User.id).where(User.username == username))
            ).scalar_one_or_none()
            if existing_username is not None:
                return USERNAME_TAKEN

            existing_email = (
                await db.execute(select(User.id).where(User.email == email))
            ).scalar_one_or_none()
            if existing_email is not None:
                return EMAIL_TAKEN
        except SQLAlchemyError as e:
            logger.error("Database error checking user uniqueness: %s", str(e), exc_info=True)
            raise InternalError(context={"error_type": type(e).__name__})
        return None

    async def sign_up(
        self,
        db: AsyncSession,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> User:
        """
        Create a new account.

        Raises:
            BadInputError: a field is missing or empty (→ 400)
            ConflictError: username or email already registered (→ 409)
            InternalError: database failure (→ 500)
        """
        if not username or not email or not password:
            raise BadInputError(MISSING_USER_DATA)

        conflict = await self._conflict_message(db, username, email)
        if conflict is not None:
            raise ConflictError(conflict)

        password_hash = await hash_password(password)
        user = User(username=username, email=email, password_hash=password_hash)
        try:
            db.add(user)
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent signup; find out which field collided
            await db.rollback()
            conflict = await self._conflict_message(db, username, email)
            raise ConflictError(conflict or USERNAME_TAKEN, context={"username": username})
        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise InternalError(context={"error_type": type(e).__name__})

        logger.info("User signed up: %s", user.id)
        return user

    async def log_in(
        self,
        db: AsyncSession,
        username: Optional[str],
        password: Optional[str],
    ) -> User:
        """
        Check credentials and return the matching user.

        Raises:
            BadInputError:     username or password missing (→ 400)
            UnauthorizedError: unknown username or wrong password (→ 401)
        """
        if not username or not password:
            raise BadInputError(MISSING_CREDENTIALS)

        try:
            user = (
                await db.execute(
                    select(User)
                    .where(User.username == username)
                    .options(undefer(User.email), undefer(User.password_hash))
                )
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise InternalError(context={"error_type": type(e).__name__})

        if user is None:
            await burn_verification(password)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not await verify_password(password, user.password_hash):
            logger.info("Failed login for user %s", user.id)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        logger.info("User logged in: %s", user.id)
        return user

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> Optional[User]:
        """The user (email included) for a session's user id, or None."""
        try:
            return (
                await db.execute(
                    select(User).where(User.id == user_id).options(undefer(User.email))
                )
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise InternalError(context={"user_id": str(user_id)})


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
