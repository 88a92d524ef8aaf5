# storefront/repos/user_repo.py
from typing import List

from storefront.data.store import StoreSession
from storefront.domain.schemas import Identity, ResetToken, User

USERS_KEY = "users"
CURRENT_USER_KEY = "currentUser"
RESET_TOKENS_KEY = "resetTokens"


class UserRepo:
    def __init__(self, db: StoreSession):
        self.db = db

    def list_users(self) -> List[User]:
        return [User.model_validate(u) for u in self.db.get(USERS_KEY, [])]

    def get_user(self, user_id: int) -> User | None:
        return next((u for u in self.list_users() if u.id == user_id), None)

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self.list_users() if u.email == email), None)

    def save_user(self, user: User) -> User:
        users = self.list_users()
        for idx, existing in enumerate(users):
            if existing.id == user.id:
                users[idx] = user
                break
        else:
            users.append(user)
        self.db.set(USERS_KEY, [u.to_store() for u in users])
        return user

    #sesja
    def get_current(self) -> Identity | None:
        raw = self.db.get(CURRENT_USER_KEY, None)
        return Identity.model_validate(raw) if raw else None

    def set_current(self, identity: Identity | None) -> None:
        self.db.set(CURRENT_USER_KEY, identity.to_store() if identity else None)

    #tokeny resetu hasla
    def list_reset_tokens(self) -> List[ResetToken]:
        return [ResetToken.model_validate(t) for t in self.db.get(RESET_TOKENS_KEY, [])]

    def save_reset_tokens(self, tokens: List[ResetToken]) -> None:
        self.db.set(RESET_TOKENS_KEY, [t.to_store() for t in tokens])
