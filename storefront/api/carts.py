# storefront/api/carts.py
from typing import List

from storefront.api.base import StorefrontBase
from storefront.domain.schemas import CartView, Coupon, CouponApplied
from storefront.errors import ProductNotFound
from storefront.utils.ids import parse_id


class CartsAPI(StorefrontBase):
    """Koszyk i kupony; kazda mutacja pod lockiem klucza koszyka."""

    async def get_cart(self) -> CartView:
        async with self.lock_service.cart_lock(self.current_cart_key()):
            with self.session() as db:
                return self.get_cart_service(db).view()

    async def add_to_cart(self, product_id: int, qty: int = 1) -> CartView:
        async with self.lock_service.cart_lock(self.current_cart_key()):
            with self.session() as db:
                return self.get_cart_service(db).add_item(parse_id(product_id, ProductNotFound), qty)

    async def update_cart_item(self, item_id: int, qty: int) -> CartView:
        async with self.lock_service.cart_lock(self.current_cart_key()):
            with self.session() as db:
                return self.get_cart_service(db).update_quantity(item_id, qty)

    async def remove_from_cart(self, item_id: int) -> CartView:
        async with self.lock_service.cart_lock(self.current_cart_key()):
            with self.session() as db:
                return self.get_cart_service(db).remove_item(item_id)

    async def clear_cart(self) -> CartView:
        async with self.lock_service.cart_lock(self.current_cart_key()):
            with self.session() as db:
                svc = self.get_cart_service(db)
                svc.clear()
                return svc.view()

    async def get_coupons(self) -> List[Coupon]:
        with self.session() as db:
            return self.get_coupon_service(db).get_coupons()

    async def apply_coupon(self, code: str) -> CouponApplied:
        async with self.lock_service.cart_lock(self.current_cart_key()):
            with self.session() as db:
                return self.get_coupon_service(db).apply_coupon(code)

    async def remove_coupon(self) -> None:
        async with self.lock_service.cart_lock(self.current_cart_key()):
            with self.session() as db:
                self.get_coupon_service(db).remove_coupon()
