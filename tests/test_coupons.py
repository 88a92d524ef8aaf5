"""Tests for coupon validation and application."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.domain.schemas import Coupon
from storefront.errors import (
    AuthRequired,
    CouponError,
    Exhausted,
    Expired,
    InactiveCoupon,
    InvalidCoupon,
    MinimumNotMet,
    NotApplicable,
    NotYetValid,
)
from storefront.services.coupon_service import compute_discount


def _coupon(**fields):
    return Coupon(id=1, code="X", **fields)


class TestComputeDiscount:
    def test_percentage(self):
        assert compute_discount(_coupon(discount=10), Decimal("200")) == Decimal("20")

    def test_fixed(self):
        assert compute_discount(_coupon(discount=15, type="fixed"), Decimal("200")) == Decimal("15")

    def test_clamped_so_total_stays_at_one(self):
        coupon = _coupon(discount=100)
        assert compute_discount(coupon, Decimal("50")) == Decimal("49")

    def test_zero_subtotal_gives_zero(self):
        assert compute_discount(_coupon(discount=50, type="fixed"), Decimal("0")) == Decimal("0")

    def test_subtotal_below_one_gives_zero(self):
        assert compute_discount(_coupon(discount=50), Decimal("0.50")) == Decimal("0")

    def test_half_cent_rounds_up(self):
        assert compute_discount(_coupon(discount=10), Decimal("100.25")) == Decimal("10.03")


class TestApplyCoupon:
    def test_code_is_trimmed_and_uppercased(self, shop, add_course, add_coupon, run):
        add_course(5, price=100)
        add_coupon("SAVE10", 10)
        run(shop.add_to_cart(5, 2))

        result = run(shop.apply_coupon("  save10 "))

        assert result.code == "SAVE10"
        assert result.discount_amount == Decimal("20")
        view = run(shop.get_cart())
        assert view.discount == Decimal("20")
        assert view.total == Decimal("180")

    def test_unknown_code(self, shop, run):
        with pytest.raises(InvalidCoupon) as exc:
            run(shop.apply_coupon("NOPE"))
        assert isinstance(exc.value, CouponError)
        assert isinstance(exc.value, ValueError)

    def test_inactive(self, shop, add_coupon, run):
        add_coupon("OFF", 10, status="inactive")
        with pytest.raises(InactiveCoupon):
            run(shop.apply_coupon("OFF"))

    def test_not_yet_valid(self, shop, add_coupon, run):
        add_coupon("SOON", 10, valid_from=datetime.now(timezone.utc) + timedelta(days=2))
        with pytest.raises(NotYetValid):
            run(shop.apply_coupon("SOON"))

    def test_expired(self, shop, add_coupon, run):
        add_coupon(
            "OLD",
            10,
            valid_from=datetime.now(timezone.utc) - timedelta(days=10),
            valid_until=datetime.now(timezone.utc) - timedelta(days=1),
        )
        with pytest.raises(Expired):
            run(shop.apply_coupon("OLD"))

    def test_exhausted(self, shop, add_coupon, run):
        add_coupon("USED", 10, max_uses=2, used_count=2)
        with pytest.raises(Exhausted):
            run(shop.apply_coupon("USED"))

    def test_zero_max_uses_is_unlimited(self, shop, add_course, add_coupon, run):
        add_course(5, price=100)
        add_coupon("FREE", 10, max_uses=0, used_count=500)
        run(shop.add_to_cart(5))

        assert run(shop.apply_coupon("FREE")).discount_amount == Decimal("10")

    def test_category_restriction(self, shop, add_course, add_coupon, run):
        add_course(5, price=100, category="Marketing")
        add_coupon("FISCAL", 10, applicable_categories=["Fiscal"])
        run(shop.add_to_cart(5))

        with pytest.raises(NotApplicable):
            run(shop.apply_coupon("FISCAL"))

        run(shop.add_to_cart(1002))
        result = run(shop.apply_coupon("FISCAL"))
        # discount computed on the whole cart: 100 + 199
        assert result.discount_amount == Decimal("29.90")

    def test_minimum_purchase_not_met(self, shop, add_course, add_coupon, run):
        add_course(5, price=100)
        add_coupon("MIN500", 10, min_purchase=500)
        run(shop.add_to_cart(5))

        with pytest.raises(MinimumNotMet) as exc:
            run(shop.apply_coupon("MIN500"))
        assert exc.value.minimum == Decimal("500")
        assert exc.value.subtotal == Decimal("100")

    def test_failed_application_writes_nothing(self, shop, store, add_course, add_coupon, run):
        add_course(5, price=100)
        add_coupon("MIN500", 10, min_purchase=500)
        run(shop.add_to_cart(5))
        before = store.get("coupons")

        with pytest.raises(MinimumNotMet):
            run(shop.apply_coupon("MIN500"))

        assert store.get("coupons") == before
        assert store.get("carts")["__anonymous__"]["appliedCoupon"] is None

    def test_reapplying_keeps_incrementing_used_count(self, shop, run):
        run(shop.add_to_cart(1001))

        run(shop.apply_coupon("WELCOME10"))
        run(shop.apply_coupon("WELCOME10"))

        welcome = next(c for c in run(shop.get_coupons()) if c.code == "WELCOME10")
        assert welcome.used_count == 2

    def test_percentage_never_drops_total_below_one(self, shop, add_course, add_coupon, run):
        add_course(5, price=Decimal("1.50"))
        add_coupon("ALL", 100)
        run(shop.add_to_cart(5))

        run(shop.apply_coupon("ALL"))

        assert run(shop.get_cart()).total == Decimal("1")

    def test_empty_cart_total_stays_zero(self, shop, add_coupon, run):
        add_coupon("ALL", 100)

        result = run(shop.apply_coupon("ALL"))

        assert result.discount_amount == Decimal("0")
        assert run(shop.get_cart()).total == 0


class TestRemoveCoupon:
    def test_member_can_remove(self, shop, member, run):
        run(shop.add_to_cart(1001))
        run(shop.apply_coupon("WELCOME10"))

        run(shop.remove_coupon())

        view = run(shop.get_cart())
        assert view.applied_coupon is None
        assert view.discount == 0

    def test_anonymous_cannot_remove(self, shop, run):
        run(shop.add_to_cart(1001))
        run(shop.apply_coupon("WELCOME10"))

        with pytest.raises(AuthRequired):
            run(shop.remove_coupon())

        assert run(shop.get_cart()).applied_coupon.code == "WELCOME10"


class TestCouponAdmin:
    def test_create_coupon_uppercases_code(self, shop, admin, run):
        coupon = run(shop.create_coupon({"code": " summer ", "discount": 5, "type": "fixed"}))

        assert coupon.code == "SUMMER"
        assert coupon.used_count == 0
        assert coupon.valid_until > coupon.valid_from
        assert any(c.code == "SUMMER" for c in run(shop.get_coupons()))

    def test_delete_coupon(self, shop, admin, run):
        run(shop.delete_coupon(1))
        assert all(c.id != 1 for c in run(shop.get_coupons()))

    def test_create_coupon_accepts_camel_case(self, shop, admin, run):
        coupon = run(
            shop.create_coupon(
                {
                    "code": "vip",
                    "discount": 50,
                    "maxUses": 1,
                    "minPurchase": 500,
                    "applicableCategories": ["Fiscal"],
                    "validUntil": "2030-01-01T00:00:00Z",
                }
            )
        )

        assert coupon.max_uses == 1
        assert coupon.min_purchase == Decimal("500")
        assert coupon.applicable_categories == ["Fiscal"]
        assert coupon.valid_until == datetime(2030, 1, 1, tzinfo=timezone.utc)

    def test_camel_case_rules_are_enforced(self, shop, admin, run):
        run(shop.create_coupon({"code": "VIP", "discount": 50, "minPurchase": 500}))
        run(shop.add_to_cart(1002))

        with pytest.raises(MinimumNotMet):
            run(shop.apply_coupon("VIP"))
