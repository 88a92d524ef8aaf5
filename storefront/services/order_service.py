# storefront/services/order_service.py
from datetime import datetime, timezone, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from storefront.data.store import StoreSession
from storefront.domain.schemas import Course, Order, OrderCoupon, OrderLine, ShippingInfo
from storefront.errors import EmptyCart, Forbidden, InsufficientStock, OrderNotFound, ProductNotFound
from storefront.repos.course_repo import CourseRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.settings_repo import SettingsRepo
from storefront.services.cart_service import CartService
from storefront.services.member_service import MemberService
from storefront.utils.ids import monotonic_id, parse_id
from storefront.utils.settings import (
    DECREMENT_STOCK_ON_CHECKOUT,
    DEFAULT_SHIPPING_COST,
    DEFAULT_TAX_RATE,
    ESTIMATED_DELIVERY_DAYS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Checkout czyta koszyk i katalog, zapisuje ledger zamowien i czlonkow,
    na koniec czysci koszyk. Wszystko w jednej sesji (jeden commit).
    """

    def __init__(
        self,
        db: StoreSession,
        carts: CartService,
        members: MemberService,
        decrement_stock: bool = DECREMENT_STOCK_ON_CHECKOUT,
    ):
        self.repo = OrderRepo(db)
        self.course_repo = CourseRepo(db)
        self.settings_repo = SettingsRepo(db)
        self.carts = carts
        self.members = members
        self.decrement_stock = decrement_stock

    def create_order(self, shipping_info: ShippingInfo | None = None) -> Order:
        """
        Use Case: tworzenie zamowienia z koszyka zalogowanego usera.

        1. Wymaga zalogowania, koszyk nie moze byc pusty
        2. Ponowna walidacja produktow i stanow magazynowych
        3. Subtotal, podatek, wysylka, rabat z kuponu, total
        4. Zamowienie na poczatek ledgera, upsert czlonka, czyszczenie koszyka
        """
        identity = self.carts.identity.require_user()
        cart_key = str(identity.id)

        cart = self.carts.repo.get_cart(cart_key)
        if cart is None or not cart.items:
            raise EmptyCart()

        lines: List[OrderLine] = []
        purchased: List[tuple[Course, int]] = []
        subtotal = ZERO

        for item in cart.items:
            course = self.carts.catalog.find_product(item.product_id)
            if not course:
                raise ProductNotFound(item.product_id)
            if not course.has_stock_for(item.quantity):
                logger.warning(
                    f"Checkout rejected for user {identity.id}: product {course.id} "
                    f"stock {course.stock}, requested {item.quantity}"
                )
                raise InsufficientStock(item.product_id, course.stock, item.quantity, course.title)

            unit_price = course.effective_price
            line_total = unit_price * item.quantity
            subtotal += line_total
            purchased.append((course, item.quantity))
            lines.append(
                OrderLine(
                    product_id=course.id,
                    product_name=course.title,
                    quantity=item.quantity,
                    unit_price=unit_price,
                    total=line_total,
                )
            )

        store = self.settings_repo.get_store_settings()
        tax_rate = store.tax_rate if store.tax_rate is not None else DEFAULT_TAX_RATE
        shipping = store.shipping_cost if store.shipping_cost is not None else DEFAULT_SHIPPING_COST

        tax = _money(subtotal * tax_rate)
        discount = cart.applied_coupon.amount if cart.applied_coupon else ZERO
        total = _money(max(ZERO, subtotal + tax + shipping - discount))

        now = datetime.now(timezone.utc)
        order = Order(
            id=monotonic_id(o.id for o in self.repo.list_orders()),
            user_id=identity.id,
            user_email=identity.email,
            items=lines,
            subtotal=_money(subtotal),
            tax=tax,
            shipping=_money(shipping),
            discount=_money(discount),
            applied_coupon=(
                OrderCoupon(code=cart.applied_coupon.code, amount=discount)
                if cart.applied_coupon
                else None
            ),
            total=total,
            status="completed",
            shipping_info=shipping_info or ShippingInfo(),
            created_at=now,
            estimated_delivery=now + timedelta(days=ESTIMATED_DELIVERY_DAYS),
        )

        self.repo.create_order(order)
        self.members.record_purchase(
            identity,
            [line.product_name for line in lines],
            total,
            now,
        )
        if self.decrement_stock:
            self._decrement_stock(purchased)
        self.carts.clear(cart_key)

        logger.info(
            f"Order {order.id} created for user {identity.id}: "
            f"{len(lines)} lines, total {order.total}"
        )
        return order

    def _decrement_stock(self, purchased: List[tuple[Course, int]]) -> None:
        sold = {}
        for course, quantity in purchased:
            sold[course.id] = sold.get(course.id, 0) + quantity

        courses = self.course_repo.list_courses()
        for course in courses:
            if course.id in sold and not course.unlimited_stock:
                course.stock = max(0, course.stock - sold[course.id])
        self.course_repo.save_all(courses)

    #query
    def list_orders(self) -> List[Order]:
        identity = self.carts.identity.require_user()
        orders = self.repo.list_orders()
        if identity.is_admin:
            return orders
        return [o for o in orders if o.user_id == identity.id]

    def get_order(self, order_id: int) -> Order:
        identity = self.carts.identity.require_user()

        order = self.repo.get_order(parse_id(order_id, OrderNotFound))
        if not order:
            raise OrderNotFound(order_id)

        if not identity.is_admin and order.user_id != identity.id:
            raise Forbidden()

        return order
