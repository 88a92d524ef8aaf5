# storefront/repos/order_repo.py
from typing import List

from storefront.data.store import StoreSession
from storefront.domain.schemas import Order

ORDERS_KEY = "orders"


class OrderRepo:
    """Ledger zamowien, najnowsze pierwsze."""

    def __init__(self, db: StoreSession):
        self.db = db

    def list_orders(self) -> List[Order]:
        return [Order.model_validate(o) for o in self.db.get(ORDERS_KEY, [])]

    def get_order(self, order_id: int) -> Order | None:
        return next((o for o in self.list_orders() if o.id == order_id), None)

    def create_order(self, order: Order) -> Order:
        orders = self.db.get(ORDERS_KEY, [])
        orders.insert(0, order.to_store())
        self.db.set(ORDERS_KEY, orders)
        return order
