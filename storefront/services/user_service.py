# storefront/services/user_service.py
from datetime import datetime, timezone, timedelta
from typing import Any, Dict

from storefront.data.store import StoreSession
from storefront.domain.schemas import Identity, Profile, ResetToken, User
from storefront.errors import (
    EmailInUse,
    InvalidCredentials,
    TokenExpired,
    UserNotFound,
    ValidationError,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.identity_service import IdentityService
from storefront.utils.ids import next_sequential_id
from storefront.utils.settings import RESET_TOKEN_TTL_SECONDS
from storefront.utils.text import generate_token, hash_password, is_valid_email, sanitize
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def _check_password(password: str, message: str = "Password must have at least 6 characters"):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(message)


def _to_identity(user: User) -> Identity:
    return Identity(
        id=user.id,
        email=user.email,
        role=user.role,
        first_name=user.first_name,
        last_name=user.last_name,
    )


class UserService:
    def __init__(self, db: StoreSession, identity: IdentityService):
        self.repo = UserRepo(db)
        self.cart_repo = CartRepo(db)
        self.identity = identity

    #auth
    def register(self, email: str, password: str, first_name: str = "", last_name: str = "") -> Identity:
        email = sanitize(email).lower()
        password = sanitize(password)

        if not email or not password:
            raise ValidationError("Email and password are required")
        if not is_valid_email(email):
            raise ValidationError("Invalid email")
        _check_password(password)
        if self.repo.find_by_email(email):
            raise EmailInUse(email)

        user = User(
            id=next_sequential_id(u.id for u in self.repo.list_users()),
            email=email,
            password_hash=hash_password(password),
            first_name=sanitize(first_name),
            last_name=sanitize(last_name),
            role="member",
            created_at=datetime.now(timezone.utc),
            settings={"emailNotifications": True},
        )
        self.repo.save_user(user)
        self.cart_repo.get_or_create(str(user.id))

        logger.info(f"Registered user {user.id} ({email})")
        return _to_identity(user)

    def login(self, email: str, password: str) -> Identity:
        email = sanitize(email).lower()
        password = sanitize(password)
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.repo.find_by_email(email)
        if not user or user.password_hash != hash_password(password):
            logger.warning(f"Failed login for {email}")
            raise InvalidCredentials()

        identity = _to_identity(user)
        self.repo.set_current(identity)
        self.cart_repo.get_or_create(str(user.id))
        logger.info(f"User {user.id} logged in")
        return identity

    def logout(self) -> None:
        self.repo.set_current(None)

    def is_logged_in(self) -> bool:
        return self.identity.current() is not None

    #reset hasla
    def request_password_reset(self, email: str) -> Dict[str, Any]:
        email = sanitize(email).lower()
        user = self.repo.find_by_email(email)
        #nie zdradzamy czy email istnieje
        if not user:
            return {"message": "If the email exists, a reset link was sent"}

        token = ResetToken(
            token=generate_token(),
            user_id=user.id,
            email=user.email,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=RESET_TOKEN_TTL_SECONDS),
        )
        tokens = self.repo.list_reset_tokens()
        tokens.append(token)
        self.repo.save_reset_tokens(tokens)

        logger.info(f"Password reset requested for user {user.id}")
        return {"message": "Reset link sent", "token": token.token}

    def reset_password(self, token: str, new_password: str) -> Dict[str, Any]:
        token = sanitize(token)
        new_password = sanitize(new_password)
        _check_password(new_password)

        tokens = self.repo.list_reset_tokens()
        match = next((t for t in tokens if t.token == token and not t.used), None)
        if not match or match.expires_at < datetime.now(timezone.utc):
            raise TokenExpired()

        user = self.repo.get_user(match.user_id)
        if not user:
            raise UserNotFound(match.user_id)

        user.password_hash = hash_password(new_password)
        self.repo.save_user(user)
        match.used = True
        self.repo.save_reset_tokens(tokens)
        return {"message": "Password updated"}

    #profil
    def _current_user(self) -> User:
        identity = self.identity.require_user()
        user = self.repo.get_user(identity.id)
        if not user:
            raise UserNotFound(identity.id)
        return user

    def get_profile(self) -> Profile:
        user = self._current_user()
        return Profile(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            settings=user.settings,
            created_at=user.created_at,
        )

    def update_profile(self, first_name: str, last_name: str, email: str) -> Identity:
        user = self._current_user()
        email = sanitize(email).lower()
        if not is_valid_email(email):
            raise ValidationError("Invalid email")

        other = self.repo.find_by_email(email)
        if other and other.id != user.id:
            raise EmailInUse(email)

        user.first_name = sanitize(first_name)
        user.last_name = sanitize(last_name)
        user.email = email
        self.repo.save_user(user)

        identity = _to_identity(user)
        self.repo.set_current(identity)
        return identity

    def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        user = self._current_user()
        current_password = sanitize(current_password)
        new_password = sanitize(new_password)
        _check_password(new_password, "New password must have at least 6 characters")

        if user.password_hash != hash_password(current_password):
            raise InvalidCredentials("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        self.repo.save_user(user)
        return {"message": "Password updated"}

    def update_settings(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        user = self._current_user()
        user.settings = {**user.settings, **settings}
        self.repo.save_user(user)
        return user.settings
