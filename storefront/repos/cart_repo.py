# storefront/repos/cart_repo.py
from storefront.data.store import StoreSession
from storefront.domain.schemas import Cart

CARTS_KEY = "carts"


class CartRepo:
    """Mapa identity key -> Cart trzymana pod jednym kluczem."""

    def __init__(self, db: StoreSession):
        self.db = db

    def get_cart(self, key: str) -> Cart | None:
        raw = (self.db.get(CARTS_KEY, {}) or {}).get(key)
        return Cart.model_validate(raw) if raw is not None else None

    def save_cart(self, key: str, cart: Cart) -> Cart:
        raw = self.db.get(CARTS_KEY, {}) or {}
        raw[key] = cart.to_store()
        self.db.set(CARTS_KEY, raw)
        return cart

    def get_or_create(self, key: str) -> Cart:
        cart = self.get_cart(key)
        if cart is None:
            cart = self.save_cart(key, Cart())
        return cart
