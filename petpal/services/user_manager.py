"""User manager for fastapi-users authentication system."""
import logging
import re
import secrets
from typing import Optional, Union

import jwt
from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from fastapi.security import OAuth2PasswordRequestForm
from fastapi_users import BaseUserManager, IntegerIDMixin, exceptions, schemas
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users.jwt import decode_jwt
from fastapi_users.password import PasswordHelper
from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from petpal.config import Settings
from petpal.models.user import User
from petpal.services.mailer import build_temp_password_email, send_email


logger = logging.getLogger(__name__)


PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 7 characters and include a lowercase letter, "
    "an uppercase letter, a digit and a special character"
)

_STRONG_PASSWORD = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])(?=.*[^A-Za-z0-9]).{7,}$", re.DOTALL)

TEMP_PASSWORD_PREFIX = "temp"
TEMP_PASSWORD_SUFFIX = "A!"


def is_strong_password(password: Optional[str]) -> bool:
    """Return True if the password satisfies the strength policy."""
    return password is not None and _STRONG_PASSWORD.match(password) is not None


def generate_temp_password() -> str:
    """
    Build a temporary password such as ``temp483920A!``.

    The fixed prefix and suffix guarantee lowercase, uppercase and special
    characters, and the six-digit code supplies the digit.
    """
    code = 100000 + secrets.randbelow(900000)
    return f"{TEMP_PASSWORD_PREFIX}{code}{TEMP_PASSWORD_SUFFIX}"


def build_password_helper(rounds: int) -> PasswordHelper:
    """Password helper hashing with bcrypt at the given work factor."""
    return PasswordHelper(PasswordHash((BcryptHasher(rounds=rounds),)))


class UserDatabase(SQLAlchemyUserDatabase):
    """SQLAlchemy user adapter with username lookups."""

    async def get_by_username(self, username: str) -> Optional[User]:
        statement = select(self.user_table).where(self.user_table.username == username)
        results = await self.session.execute(statement)
        return results.unique().scalar_one_or_none()


class UserManager(IntegerIDMixin, BaseUserManager[User, int]):
    """
    Custom user manager for handling credentials.

    Extends fastapi-users BaseUserManager with:
    - username-based authentication
    - the password strength policy
    - temporary passwords, mailed as a one-time code and issued on redemption
    - direct password updates
    """

    user_db: UserDatabase

    def __init__(self, user_db: UserDatabase, settings: Settings):
        """
        Initialize UserManager with user database and settings.

        Args:
            user_db: Database adapter for user operations
            settings: Application settings containing secrets and hash cost
        """
        super().__init__(user_db, build_password_helper(settings.bcrypt_rounds))
        self.settings = settings
        self.reset_password_token_secret = settings.secret_key
        self.verification_token_secret = settings.secret_key
        self.reset_password_token_lifetime_seconds = settings.jwt_lifetime_seconds
        self.verification_token_lifetime_seconds = settings.jwt_lifetime_seconds

    async def validate_password(
        self,
        password: str,
        user: Union[schemas.UC, User, None] = None,
    ) -> None:
        """
        Validate password meets the strength policy.

        Raises:
            InvalidPasswordException: If password doesn't meet requirements
        """
        if not is_strong_password(password):
            raise exceptions.InvalidPasswordException(reason=PASSWORD_POLICY_MESSAGE)

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self.user_db.get_by_username(username)

    async def authenticate(
        self, credentials: OAuth2PasswordRequestForm
    ) -> Optional[User]:
        """
        Authenticate a user by exact username and password.

        Unknown usernames and wrong passwords both return None, and the
        unknown-user path still pays for a hash.
        """
        username = (credentials.username or "").strip()
        user = await self.get_by_username(username) if username else None

        if user is None:
            self.password_helper.hash(credentials.password)
            return None

        verified, updated_password_hash = self.password_helper.verify_and_update(
            credentials.password, user.hashed_password
        )
        if not verified:
            return None

        if updated_password_hash is not None:
            await self.user_db.update(user, {"hashed_password": updated_password_hash})

        return user

    async def create(
        self,
        user_create: schemas.UC,
        safe: bool = False,
        request: Optional[Request] = None,
    ) -> User:
        """
        Create a user after checking password strength and uniqueness.

        The password is hashed before any query runs. The username and
        email checks give a clean error for the common case; the unique
        constraints decide concurrent registrations.

        Raises:
            InvalidPasswordException: weak password
            UserAlreadyExists: username or email taken
        """
        await self.validate_password(user_create.password, user_create)

        user_dict = (
            user_create.create_update_dict()
            if safe
            else user_create.create_update_dict_superuser()
        )
        password = user_dict.pop("password")
        user_dict["hashed_password"] = self.password_helper.hash(password)

        if await self.user_db.get_by_username(user_dict["username"]) is not None:
            raise exceptions.UserAlreadyExists()
        if await self.user_db.get_by_email(user_dict["email"]) is not None:
            raise exceptions.UserAlreadyExists()

        try:
            created_user = await self.user_db.create(user_dict)
        except IntegrityError:
            await self.user_db.session.rollback()
            raise exceptions.UserAlreadyExists()

        await self.on_after_register(created_user, request)
        return created_user

    async def update_password(self, user_id: int, new_password: str) -> User:
        """
        Replace a user's password.

        Raises:
            InvalidPasswordException: weak password
            UserNotExists: unknown user id
        """
        await self.validate_password(new_password)
        hashed_password = self.password_helper.hash(new_password)

        user = await self.get(user_id)
        updated_user = await self.user_db.update(user, {"hashed_password": hashed_password})
        logger.info(f"Password updated for user {user_id}")
        return updated_user

    async def issue_temp_password(self, email: str) -> Optional[str]:
        """
        Set a fresh temporary password for the account with this email.

        Returns the plaintext exactly once, or None when no account uses the
        email. The hash is computed in both cases so the two outcomes cost
        the same.
        """
        temp_password = generate_temp_password()
        hashed_password = self.password_helper.hash(temp_password)

        user = await self.user_db.get_by_email(email)
        if user is None:
            return None

        await self.user_db.update(user, {"hashed_password": hashed_password})
        await self.on_after_temp_password(user, temp_password)
        return temp_password

    async def request_temp_password(
        self, email: str, request: Optional[Request] = None
    ) -> None:
        """
        Mail a one-time code for a temporary password to the account owner.

        The current password stays valid until the code is redeemed with
        ``redeem_temp_password``. Unknown and inactive accounts are ignored.
        """
        user = await self.user_db.get_by_email(email)
        if user is None or not user.is_active:
            return

        await self.forgot_password(user, request)

    async def redeem_temp_password(self, token: str) -> str:
        """
        Exchange a mailed code for a freshly issued temporary password.

        A code works once: issuing the password changes the fingerprint the
        code was signed against.

        Raises:
            InvalidResetPasswordToken: bad, expired or already used code
            UserInactive: the account was deactivated
        """
        try:
            data = decode_jwt(
                token,
                self.reset_password_token_secret,
                [self.reset_password_token_audience],
            )
            user_id = self.parse_id(data["sub"])
            password_fingerprint = data["password_fgpt"]
            user = await self.get(user_id)
        except (jwt.PyJWTError, KeyError, exceptions.InvalidID, exceptions.UserNotExists):
            raise exceptions.InvalidResetPasswordToken()

        valid_fingerprint, _ = self.password_helper.verify_and_update(
            user.hashed_password, password_fingerprint
        )
        if not valid_fingerprint:
            raise exceptions.InvalidResetPasswordToken()
        if not user.is_active:
            raise exceptions.UserInactive()

        return await self.issue_temp_password(user.email)

    async def on_after_register(
        self,
        user: User,
        request: Optional[Request] = None
    ) -> None:
        """
        Hook called after successful user registration.

        Args:
            user: The newly registered user
            request: Optional request object
        """
        logger.info(f"User {user.id} has registered as {user.username}")

    async def on_after_forgot_password(
        self,
        user: User,
        token: str,
        request: Optional[Request] = None
    ) -> None:
        """
        Hook called after a temporary password code was generated.

        Mails the code to the account's address. The code is never logged.
        """
        message = build_temp_password_email(self.settings, user.email, token)
        if await run_in_threadpool(send_email, self.settings, message):
            logger.info(f"Temporary password code mailed to user {user.id}")

    async def on_after_temp_password(self, user: User, temp_password: str) -> None:
        """
        Hook called after a temporary password was stored.

        The plaintext is never logged.
        """
        logger.info(f"Temporary password issued for user {user.id}")
