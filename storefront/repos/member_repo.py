# storefront/repos/member_repo.py
from typing import List

from storefront.data.store import StoreSession
from storefront.domain.schemas import Member

MEMBERS_KEY = "members"


class MemberRepo:
    def __init__(self, db: StoreSession):
        self.db = db

    def list_members(self) -> List[Member]:
        return [Member.model_validate(m) for m in self.db.get(MEMBERS_KEY, [])]

    def find_by_email(self, email: str) -> Member | None:
        return next((m for m in self.list_members() if m.email == email), None)

    def save_member(self, member: Member) -> Member:
        members = self.list_members()
        for idx, existing in enumerate(members):
            if existing.email == member.email:
                members[idx] = member
                break
        else:
            members.append(member)
        self.db.set(MEMBERS_KEY, [m.to_store() for m in members])
        return member
