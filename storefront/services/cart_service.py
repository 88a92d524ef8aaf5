# storefront/services/cart_service.py
from decimal import Decimal
from typing import List

from storefront.data.store import StoreSession
from storefront.domain.schemas import Cart, CartItem, CartLineView, CartView, CouponBadge, ProductView
from storefront.errors import CartItemNotFound, InsufficientStock, ProductNotFound
from storefront.repos.cart_repo import CartRepo
from storefront.services.catalog_service import CatalogService
from storefront.services.identity_service import IdentityService
from storefront.utils.ids import monotonic_id
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")
MIN_TOTAL = Decimal("1")


class CartService:
    """
    Use case'y dla domeny cart, jeden koszyk na identity key
    commands (add, update, remove, clear) modyfikuja stan
    query (view) tylko odczyt + leniwe utworzenie koszyka
    """

    def __init__(
        self,
        db: StoreSession,
        catalog: CatalogService,
        identity: IdentityService,
    ):
        self.repo = CartRepo(db)
        self.catalog = catalog
        self.identity = identity

    def resolve_cart_key(self) -> str:
        return self.identity.cart_key()

    def get_or_create_cart(self, cart_key: str | None = None) -> Cart:
        return self.repo.get_or_create(cart_key or self.resolve_cart_key())

    def subtotal(self, cart: Cart) -> Decimal:
        """Suma po efektywnej cenie, brakujace produkty licza sie jako 0."""
        total = ZERO
        for item in cart.items:
            product = self.catalog.find_product(item.product_id)
            if product:
                total += product.effective_price * item.quantity
        return total

    #query - odczyt
    def view(self) -> CartView:
        cart_key = self.resolve_cart_key()
        cart = self.get_or_create_cart(cart_key)

        lines: List[CartLineView] = []
        for item in cart.items:
            course = self.catalog.find_product(item.product_id)
            #nieistniejace produkty po cichu pomijamy
            if not course:
                continue
            lines.append(
                CartLineView(
                    id=item.id,
                    quantity=item.quantity,
                    product=ProductView.from_course(course),
                )
            )

        subtotal = sum((line.product.effective_price * line.quantity for line in lines), ZERO)
        discount = cart.applied_coupon.amount if cart.applied_coupon else ZERO
        total = max(MIN_TOTAL, subtotal - discount) if lines else ZERO

        return CartView(
            items=lines,
            subtotal=subtotal,
            discount=discount,
            applied_coupon=(
                CouponBadge(
                    code=cart.applied_coupon.code,
                    discount=cart.applied_coupon.discount,
                )
                if cart.applied_coupon
                else None
            ),
            total=total,
            count=sum(line.quantity for line in lines),
            is_anonymous=self.identity.current() is None,
        )

    #commands
    def add_item(self, product_id: int, quantity: int = 1) -> CartView:
        quantity = max(1, int(quantity))

        course = self.catalog.find_product(product_id)
        if not course:
            raise ProductNotFound(product_id)

        # liczy sie tylko ilosc z tego wywolania, suma z istniejaca linia nie jest sprawdzana
        if not course.has_stock_for(quantity):
            logger.warning(
                f"Rejected add of product {product_id}: stock {course.stock}, requested {quantity}"
            )
            raise InsufficientStock(product_id, course.stock, quantity, course.title)

        cart_key = self.resolve_cart_key()
        cart = self.get_or_create_cart(cart_key)

        existing = cart.find_by_product(product_id)
        if existing:
            logger.info(
                f"Product {product_id} already in cart {cart_key}, quantity "
                f"{existing.quantity} -> {existing.quantity + quantity}"
            )
            existing.quantity += quantity
        else:
            item = CartItem(
                id=monotonic_id(i.id for i in cart.items),
                product_id=product_id,
                quantity=quantity,
            )
            cart.items.append(item)
            logger.info(f"Added product {product_id} to cart {cart_key} as item {item.id}")

        self.repo.save_cart(cart_key, cart)
        return self.view()

    def update_quantity(self, item_id: int, quantity: int) -> CartView:
        quantity = int(quantity)
        if quantity <= 0:
            return self.remove_item(item_id)

        cart_key = self.resolve_cart_key()
        cart = self.get_or_create_cart(cart_key)

        item = cart.find_item(item_id)
        if not item:
            raise CartItemNotFound(item_id)

        course = self.catalog.find_product(item.product_id)
        if course and not course.has_stock_for(quantity):
            raise InsufficientStock(item.product_id, course.stock, quantity, course.title)

        item.quantity = quantity
        self.repo.save_cart(cart_key, cart)
        logger.info(f"Item {item_id} in cart {cart_key} set to quantity {quantity}")
        return self.view()

    def remove_item(self, item_id: int) -> CartView:
        cart_key = self.resolve_cart_key()
        cart = self.get_or_create_cart(cart_key)

        cart.items = [i for i in cart.items if i.id != item_id]
        self.repo.save_cart(cart_key, cart)
        logger.info(f"Item {item_id} removed from cart {cart_key}")
        return self.view()

    def clear(self, cart_key: str | None = None) -> Cart:
        cart_key = cart_key or self.resolve_cart_key()
        cart = self.repo.save_cart(cart_key, Cart())
        logger.info(f"Cart {cart_key} cleared")
        return cart
