# storefront/api/base.py
from contextlib import contextmanager
from typing import Iterator

from storefront.data.seed import ensure_defaults
from storefront.data.store import Store, StoreSession, create_store
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.coupon_service import CouponService
from storefront.services.identity_service import IdentityService
from storefront.services.lock_service import LockService
from storefront.services.member_service import MemberService
from storefront.services.order_service import OrderService
from storefront.utils.settings import DECREMENT_STOCK_ON_CHECKOUT


class StorefrontBase:
    """
    Wspolna czesc publicznego api: store, locki, sesja na operacje
    i budowanie serwisow (jak get_service w routerach).
    """

    def __init__(
        self,
        store: Store | None = None,
        lock_service: LockService | None = None,
        seed: bool = True,
        decrement_stock: bool | None = None,
    ):
        self.store = store if store is not None else create_store()
        self.lock_service = lock_service or LockService()
        self.decrement_stock = (
            DECREMENT_STOCK_ON_CHECKOUT if decrement_stock is None else decrement_stock
        )
        if seed:
            ensure_defaults(self.store)

    @contextmanager
    def session(self) -> Iterator[StoreSession]:
        """Commit gdy operacja przejdzie, inaczej nic nie zostaje zapisane."""
        db = StoreSession(self.store)
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise

    def current_cart_key(self) -> str:
        with self.session() as db:
            return IdentityService(db).cart_key()

    #fabryki serwisow
    def get_cart_service(self, db: StoreSession) -> CartService:
        return CartService(
            db=db,
            catalog=CatalogService(db),
            identity=IdentityService(db),
        )

    def get_coupon_service(self, db: StoreSession) -> CouponService:
        return CouponService(db, carts=self.get_cart_service(db))

    def get_order_service(self, db: StoreSession) -> OrderService:
        return OrderService(
            db,
            carts=self.get_cart_service(db),
            members=MemberService(db, CatalogService(db)),
            decrement_stock=self.decrement_stock,
        )
