# src/backend/store_ratings/services/auth_service.py
import logging
import re
from typing import Dict

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from store_ratings.core.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from store_ratings.core.security import (
    create_access_token,
    ensure_signing_secret,
    hash_password,
    verify_password,
)
from store_ratings.models.user import User
from store_ratings.repositories.user_repo import UserRepo
from store_ratings.schemas.user import LoginIn, ProfileUpdate, RegisterIn, UserPublic

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_MIN, USERNAME_MAX = 3, 30
PASSWORD_MIN = 8

USER_EXISTS = "User already exists with this email or username"
USERNAME_TAKEN = "Username is already taken"
BAD_CREDENTIALS = "Invalid email or password"


def _username_error(username: str) -> str | None:
    if not USERNAME_MIN <= len(username) <= USERNAME_MAX:
        return f"Username must be between {USERNAME_MIN} and {USERNAME_MAX} characters"
    return None


def validate_registration(payload: RegisterIn) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not payload.username:
        errors["username"] = "Username is required"
    elif (msg := _username_error(payload.username)) is not None:
        errors["username"] = msg
    if not payload.email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(payload.email):
        errors["email"] = "Invalid email format"
    if not payload.password:
        errors["password"] = "Password is required"
    elif len(payload.password) < PASSWORD_MIN:
        errors["password"] = f"Password must be at least {PASSWORD_MIN} characters long"
    return errors


def validate_login(payload: LoginIn) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not payload.email:
        errors["email"] = "Email is required"
    elif not EMAIL_RE.match(payload.email):
        errors["email"] = "Invalid email format"
    if not payload.password:
        errors["password"] = "Password is required"
    return errors


class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = UserRepo(session)

    async def register(self, payload: RegisterIn) -> tuple[User, str]:
        errors = validate_registration(payload)
        if errors:
            raise ValidationError(errors=errors)
        ensure_signing_secret()

        # email and username must both be unique
        if await self.repo.find_by_email_or_username(email=payload.email, username=payload.username):
            raise ConflictError(USER_EXISTS)

        pwd_hash = hash_password(payload.password)
        try:
            user = await self.repo.create(
                username=payload.username,
                email=payload.email,
                password_hash=pwd_hash,
            )
        except IntegrityError:
            # lost a race with a concurrent registration
            await self.session.rollback()
            raise ConflictError(USER_EXISTS)

        token = create_access_token(user.id, user.username)
        logger.info("New user registered: id=%s username=%s", user.id, user.username)
        return user, token

    async def login(self, payload: LoginIn) -> tuple[UserPublic, str]:
        errors = validate_login(payload)
        if errors:
            raise ValidationError(errors=errors)
        ensure_signing_secret()

        user = await self.repo.get_by_email(payload.email)
        # same message for unknown email and wrong password
        if not user or not verify_password(payload.password, user.password_hash):
            raise AuthenticationError(BAD_CREDENTIALS)

        # read before the update: a rollback expires every loaded instance
        public = UserPublic.model_validate(user)
        token = create_access_token(public.id, public.username)
        try:
            await self.repo.touch_last_login(public.id)
        except SQLAlchemyError:
            logger.warning("Could not update last_login for user %s", public.id, exc_info=True)
            await self.session.rollback()

        logger.info("User logged in: id=%s", public.id)
        return public, token

    async def get_profile(self, user_id: int) -> User:
        user = await self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def update_profile(self, user_id: int, payload: ProfileUpdate) -> User:
        if not payload.username:
            raise ValidationError("Username is required", errors={"username": "Username is required"})
        msg = _username_error(payload.username)
        if msg:
            raise ValidationError(msg, errors={"username": msg})

        user = await self.get_profile(user_id)
        clash = await self.repo.get_by_username(payload.username)
        if clash and clash.id != user.id:
            raise ConflictError(USERNAME_TAKEN)

        try:
            updated = await self.repo.update_username(user, payload.username)
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError(USERNAME_TAKEN)
        logger.info("User %s changed username to %s", user_id, updated.username)
        return updated
