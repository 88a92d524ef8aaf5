# storefront/api/users.py
from typing import Any, Dict

from storefront.api.base import StorefrontBase
from storefront.domain.schemas import Identity, Profile, PurchaseHistory
from storefront.services.catalog_service import CatalogService
from storefront.services.identity_service import IdentityService
from storefront.services.member_service import MemberService
from storefront.services.user_service import UserService


class UsersAPI(StorefrontBase):
    def get_user_service(self, db) -> UserService:
        return UserService(db, IdentityService(db))

    async def register(self, email: str, password: str, first_name: str = "", last_name: str = "") -> Identity:
        with self.session() as db:
            return self.get_user_service(db).register(email, password, first_name, last_name)

    async def login(self, email: str, password: str) -> Identity:
        with self.session() as db:
            return self.get_user_service(db).login(email, password)

    async def logout(self) -> bool:
        with self.session() as db:
            self.get_user_service(db).logout()
        return True

    def is_logged_in(self) -> bool:
        with self.session() as db:
            return self.get_user_service(db).is_logged_in()

    async def request_password_reset(self, email: str) -> Dict[str, Any]:
        with self.session() as db:
            return self.get_user_service(db).request_password_reset(email)

    async def reset_password(self, token: str, new_password: str) -> Dict[str, Any]:
        with self.session() as db:
            return self.get_user_service(db).reset_password(token, new_password)

    async def get_profile(self) -> Profile:
        with self.session() as db:
            return self.get_user_service(db).get_profile()

    async def update_profile(self, first_name: str, last_name: str, email: str) -> Identity:
        with self.session() as db:
            return self.get_user_service(db).update_profile(first_name, last_name, email)

    async def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        with self.session() as db:
            return self.get_user_service(db).change_password(current_password, new_password)

    async def update_user_settings(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        with self.session() as db:
            return self.get_user_service(db).update_settings(settings)

    async def get_my_purchased_courses(self) -> PurchaseHistory:
        with self.session() as db:
            identity = IdentityService(db).require_user()
            return MemberService(db, CatalogService(db)).get_purchase_history(identity)
