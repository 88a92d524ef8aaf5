# storefront/services/member_service.py
from datetime import datetime
from decimal import Decimal
from typing import List

from storefront.data.store import StoreSession
from storefront.domain.schemas import Identity, Member, PurchaseHistory, PurchasedCourse
from storefront.errors import MemberNotFound
from storefront.repos.member_repo import MemberRepo
from storefront.services.catalog_service import CatalogService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class MemberService:
    def __init__(self, db: StoreSession, catalog: CatalogService):
        self.repo = MemberRepo(db)
        self.catalog = catalog

    def record_purchase(
        self,
        identity: Identity,
        titles: List[str],
        amount: Decimal,
        purchased_at: datetime,
    ) -> Member:
        """Upsert po emailu: dopisz tytuly, zwieksz spent."""
        member = self.repo.find_by_email(identity.email)

        if member:
            member.courses = member.courses + titles
            member.spent = (member.spent or Decimal("0")) + amount
            member.last_purchase = purchased_at
        else:
            member = Member(
                id=identity.id,
                name=identity.full_name,
                email=identity.email,
                status="active",
                courses=list(titles),
                spent=amount,
                last_purchase=purchased_at,
            )
            logger.info(f"New member {identity.email}")

        return self.repo.save_member(member)

    def get_purchase_history(self, identity: Identity) -> PurchaseHistory:
        member = self.repo.find_by_email(identity.email)
        if not member:
            return PurchaseHistory()

        courses = {c.title: c for c in self.catalog.get_all_courses()}
        purchased = []
        for title in member.courses:
            info = courses.get(title)
            purchased.append(
                PurchasedCourse(
                    name=title,
                    id=info.id if info else None,
                    description=info.description if info else None,
                    image=info.image if info else None,
                )
            )

        return PurchaseHistory(
            courses=purchased,
            spent=member.spent,
            last_purchase=member.last_purchase,
            total_courses=len(purchased),
        )

    def list_members(self) -> List[Member]:
        return self.repo.list_members()

    def update_status(self, email: str, status: str) -> Member:
        member = self.repo.find_by_email(email)
        if not member:
            raise MemberNotFound(email)
        member.status = status
        self.repo.save_member(member)
        logger.info(f"Member {email} status -> {status}")
        return member
