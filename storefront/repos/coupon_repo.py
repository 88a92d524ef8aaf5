# storefront/repos/coupon_repo.py
from typing import List

from storefront.data.store import StoreSession
from storefront.domain.schemas import Coupon

COUPONS_KEY = "coupons"


class CouponRepo:
    def __init__(self, db: StoreSession):
        self.db = db

    def list_coupons(self) -> List[Coupon]:
        return [Coupon.model_validate(c) for c in self.db.get(COUPONS_KEY, [])]

    def find_by_code(self, code: str) -> Coupon | None:
        return next((c for c in self.list_coupons() if c.code.upper() == code), None)

    def save_coupon(self, coupon: Coupon) -> Coupon:
        coupons = self.list_coupons()
        for idx, existing in enumerate(coupons):
            if existing.id == coupon.id:
                coupons[idx] = coupon
                break
        else:
            coupons.append(coupon)
        self.db.set(COUPONS_KEY, [c.to_store() for c in coupons])
        return coupon

    def delete_coupon(self, coupon_id: int) -> None:
        coupons = [c for c in self.list_coupons() if c.id != coupon_id]
        self.db.set(COUPONS_KEY, [c.to_store() for c in coupons])
