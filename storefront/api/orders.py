# storefront/api/orders.py
from typing import Any, List, Mapping

from storefront.api.base import StorefrontBase
from storefront.domain.schemas import Order, ShippingInfo


class OrdersAPI(StorefrontBase):
    async def create_order(self, shipping_info: ShippingInfo | Mapping[str, Any] | None = None) -> Order:
        """
        Tworzy zamowienie z koszyka zalogowanego usera.
        Zamowienie, czlonkowie i wyczyszczony koszyk ida jednym commitem.
        """
        if shipping_info is not None and not isinstance(shipping_info, ShippingInfo):
            shipping_info = ShippingInfo.model_validate(shipping_info)

        async with self.lock_service.cart_lock(self.current_cart_key()):
            with self.session() as db:
                return self.get_order_service(db).create_order(shipping_info)

    async def get_orders(self) -> List[Order]:
        with self.session() as db:
            return self.get_order_service(db).list_orders()

    async def get_order_detail(self, order_id: int) -> Order:
        with self.session() as db:
            return self.get_order_service(db).get_order(order_id)
