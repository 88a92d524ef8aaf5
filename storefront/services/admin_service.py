# storefront/services/admin_service.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict

from pydantic.alias_generators import to_camel

from storefront.data.store import StoreSession
from storefront.domain.schemas import DashboardStats, StoreSettings
from storefront.repos.course_repo import CourseRepo
from storefront.repos.member_repo import MemberRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.settings_repo import SettingsRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AdminService:
    def __init__(self, db: StoreSession):
        self.orders = OrderRepo(db)
        self.members = MemberRepo(db)
        self.courses = CourseRepo(db)
        self.settings = SettingsRepo(db)

    def dashboard_stats(self) -> DashboardStats:
        orders = self.orders.list_orders()
        revenue = sum((o.total for o in orders), Decimal("0"))
        return DashboardStats(
            total_revenue=revenue.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
            total_orders=len(orders),
            total_members=len(self.members.list_members()),
            total_products=len([c for c in self.courses.list_courses() if c.status != "inactive"]),
        )

    def get_store_settings(self) -> StoreSettings:
        return self.settings.get_store_settings()

    def update_store_settings(self, changes: Dict[str, Any]) -> StoreSettings:
        current = self.settings.get_store_settings().to_store()
        #klucze snake_case i camelCase traktujemy tak samo
        changes = {to_camel(k) if "_" in k else k: v for k, v in changes.items()}
        merged = StoreSettings.model_validate({**current, **changes})
        self.settings.save_store_settings(merged)
        logger.info(f"Store settings updated: {sorted(changes)}")
        return merged
