# storefront/services/coupon_service.py
from datetime import datetime, timezone, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from storefront.data.store import StoreSession
from storefront.domain.schemas import AppliedCoupon, Cart, Coupon, CouponApplied, CouponIn
from storefront.errors import (
    CouponError,
    Exhausted,
    Expired,
    InactiveCoupon,
    InvalidCoupon,
    MinimumNotMet,
    NotApplicable,
    NotYetValid,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.coupon_repo import CouponRepo
from storefront.services.cart_service import CartService
from storefront.utils.ids import monotonic_id
from storefront.utils.settings import COUPON_VALIDITY_DAYS
from storefront.utils.text import sanitize
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")
MIN_TOTAL = Decimal("1")


def _aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def compute_discount(coupon: Coupon, subtotal: Decimal) -> Decimal:
    """
    Rabat ograniczony tak, zeby po rabacie zostala co najmniej 1 jednostka waluty.
    """
    if coupon.type == "percentage":
        raw = subtotal * coupon.discount / Decimal(100)
    elif coupon.type == "fixed":
        raw = coupon.discount
    else:
        raw = ZERO

    ceiling = max(ZERO, subtotal - MIN_TOTAL)
    return min(raw, ceiling).quantize(CENT, rounding=ROUND_HALF_UP)


class CouponService:
    """
    Walidacja i naliczanie kuponow na koszyku biezacej tozsamosci.
    """

    def __init__(self, db: StoreSession, carts: CartService):
        self.repo = CouponRepo(db)
        self.cart_repo = CartRepo(db)
        self.carts = carts

    #query
    def get_coupons(self) -> List[Coupon]:
        return self.repo.list_coupons()

    #commands
    def apply_coupon(self, code: str, now: datetime | None = None) -> CouponApplied:
        code = sanitize(code).upper()
        now = now or datetime.now(timezone.utc)

        cart_key = self.carts.resolve_cart_key()
        cart = self.carts.get_or_create_cart(cart_key)
        subtotal = self.carts.subtotal(cart)

        try:
            coupon = self._validate(code, cart, subtotal, now)
        except CouponError as e:
            logger.warning(f"Coupon {code} rejected for cart {cart_key}: {e.code}")
            raise

        amount = compute_discount(coupon, subtotal)

        cart.applied_coupon = AppliedCoupon(
            code=coupon.code,
            discount=coupon.discount,
            type=coupon.type,
            amount=amount,
            coupon_id=coupon.id,
        )
        self.cart_repo.save_cart(cart_key, cart)

        # kazde udane zastosowanie podbija licznik, takze ponowne na tym samym koszyku
        coupon.used_count += 1
        self.repo.save_coupon(coupon)

        logger.info(
            f"Coupon {coupon.code} applied to cart {cart_key}: -{amount} "
            f"(used {coupon.used_count}/{coupon.max_uses or 'unlimited'})"
        )
        return CouponApplied(
            code=coupon.code,
            discount_amount=amount,
            message=f"Discount: -${amount:.2f}",
        )

    def _validate(self, code: str, cart: Cart, subtotal: Decimal, now: datetime) -> Coupon:
        """Kolejnosc sprawdzen: kod, status, daty, limit uzyc, kategorie, minimum."""
        coupon = self.repo.find_by_code(code)
        if not coupon:
            raise InvalidCoupon(code)
        if coupon.status != "active":
            raise InactiveCoupon(code)

        valid_from = _aware(coupon.valid_from)
        valid_until = _aware(coupon.valid_until)
        if valid_from and valid_from > now:
            raise NotYetValid(code)
        if valid_until and valid_until < now:
            raise Expired(code)

        if coupon.exhausted:
            raise Exhausted(code)

        if coupon.applicable_categories:
            categories = set(coupon.applicable_categories)
            matches = False
            for item in cart.items:
                product = self.carts.catalog.find_product(item.product_id)
                if product and product.category in categories:
                    matches = True
                    break
            if not matches:
                raise NotApplicable(code)

        if coupon.min_purchase and subtotal < coupon.min_purchase:
            raise MinimumNotMet(code, coupon.min_purchase, subtotal)

        return coupon

    def remove_coupon(self) -> None:
        # koszyk anonimowy nie moze zdjac kuponu, tylko zalogowany user
        identity = self.carts.identity.require_user()
        cart_key = str(identity.id)
        cart = self.cart_repo.get_cart(cart_key)
        if cart is not None:
            cart.applied_coupon = None
            self.cart_repo.save_cart(cart_key, cart)
            logger.info(f"Coupon removed from cart {cart_key}")

    #admin
    def create_coupon(self, payload: CouponIn) -> Coupon:
        now = datetime.now(timezone.utc)
        coupons = self.repo.list_coupons()
        coupon = Coupon(
            id=monotonic_id(c.id for c in coupons),
            code=payload.code.upper(),
            discount=payload.discount,
            type=payload.type,
            max_uses=payload.max_uses,
            used_count=0,
            min_purchase=payload.min_purchase,
            applicable_categories=payload.applicable_categories,
            valid_from=_aware(payload.valid_from) or now,
            valid_until=_aware(payload.valid_until) or now + timedelta(days=COUPON_VALIDITY_DAYS),
            status=payload.status,
        )
        self.repo.save_coupon(coupon)
        logger.info(f"Coupon {coupon.code} created with id {coupon.id}")
        return coupon

    def delete_coupon(self, coupon_id: int) -> None:
        self.repo.delete_coupon(coupon_id)
        logger.info(f"Coupon {coupon_id} deleted")
