# storefront/api/admin.py
from typing import Any, Dict, List, Mapping

from storefront.api.base import StorefrontBase
from storefront.domain.schemas import Coupon, CouponIn, DashboardStats, Member, StoreSettings
from storefront.errors import CouponNotFound
from storefront.services.admin_service import AdminService
from storefront.services.catalog_service import CatalogService
from storefront.services.identity_service import IdentityService
from storefront.services.member_service import MemberService
from storefront.utils.ids import parse_id


class AdminAPI(StorefrontBase):
    """Operacje tylko dla roli admin."""

    async def create_coupon(self, data: CouponIn | Mapping[str, Any]) -> Coupon:
        payload = data if isinstance(data, CouponIn) else CouponIn.model_validate(data)
        with self.session() as db:
            IdentityService(db).require_admin()
            return self.get_coupon_service(db).create_coupon(payload)

    async def delete_coupon(self, coupon_id: int) -> bool:
        with self.session() as db:
            IdentityService(db).require_admin()
            self.get_coupon_service(db).delete_coupon(parse_id(coupon_id, CouponNotFound))
        return True

    async def get_members(self) -> List[Member]:
        with self.session() as db:
            IdentityService(db).require_admin()
            return MemberService(db, CatalogService(db)).list_members()

    async def update_member_status(self, email: str, status: str) -> Member:
        with self.session() as db:
            IdentityService(db).require_admin()
            return MemberService(db, CatalogService(db)).update_status(email, status)

    async def get_dashboard_stats(self) -> DashboardStats:
        with self.session() as db:
            IdentityService(db).require_admin()
            return AdminService(db).dashboard_stats()

    async def get_store_settings(self) -> StoreSettings:
        with self.session() as db:
            IdentityService(db).require_admin()
            return AdminService(db).get_store_settings()

    async def update_store_settings(self, changes: Dict[str, Any]) -> StoreSettings:
        with self.session() as db:
            IdentityService(db).require_admin()
            return AdminService(db).update_store_settings(changes)
