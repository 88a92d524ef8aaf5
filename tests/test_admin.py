"""Tests for catalog browsing and admin-only operations."""

from decimal import Decimal

import pytest

from storefront.errors import (
    AuthRequired,
    CouponNotFound,
    MemberNotFound,
    NotAuthorized,
    ProductNotFound,
    ResourceNotFound,
)


class TestCatalog:
    def test_products_hide_inactive(self, shop, add_course, run):
        add_course(5, price=10, status="inactive")

        ids = [p.id for p in run(shop.get_products())]

        assert ids == [1001, 1002]

    def test_product_view_is_normalized(self, shop, add_course, run):
        add_course(5, price=10, price_offer=0, stock=0)

        product = run(shop.get_product(5))

        assert product.name == "Course 5"
        assert product.price_offer is None
        assert product.stock == 999
        assert product.effective_price == Decimal("10")

    def test_unknown_product(self, shop, run):
        with pytest.raises(ProductNotFound):
            run(shop.get_product(1))

    def test_categories_are_public(self, shop, run):
        assert "Fiscal" in run(shop.get_categories())


class TestPermissions:
    def test_anonymous_is_asked_to_log_in(self, shop, run):
        with pytest.raises(AuthRequired):
            run(shop.get_dashboard_stats())

    def test_member_is_not_authorized(self, shop, member, run):
        with pytest.raises(NotAuthorized):
            run(shop.get_all_courses())
        with pytest.raises(PermissionError):
            run(shop.create_coupon({"code": "X"}))


class TestCourseAdmin:
    def test_create_course_gets_next_id(self, shop, admin, run):
        course = run(shop.create_course({"title": "  Excel Pro ", "price": 80, "category": "Marketing"}))

        assert course.id == 1003
        assert course.title == "Excel Pro"
        assert course.stock == 999
        assert run(shop.get_product(1003)).name == "Excel Pro"

    def test_update_course_keeps_unset_fields(self, shop, admin, run):
        updated = run(shop.update_course(1001, {"price": 150, "title": ""}))

        assert updated.price == Decimal("150")
        assert updated.title == "Introducción a Contabilidad"
        assert updated.price_offer == Decimal("99")

    def test_update_unknown_course(self, shop, admin, run):
        with pytest.raises(ProductNotFound):
            run(shop.update_course(9, {"price": 1}))

    def test_delete_course(self, shop, admin, run):
        assert run(shop.delete_course(1002)) is True
        assert [c.id for c in run(shop.get_all_courses())] == [1001]

    def test_categories(self, shop, admin, run):
        assert run(shop.add_category("Diseño")).count("Diseño") == 1
        assert run(shop.add_category("Diseño")).count("Diseño") == 1
        assert "Fiscal" not in run(shop.delete_category("Fiscal"))

    def test_resources(self, shop, admin, run):
        resource = run(shop.create_resource("Logo", "image", "data:image/png;base64,AAAA"))

        assert [r.id for r in run(shop.get_resources())] == [resource.id]
        run(shop.delete_resource(resource.id))
        assert run(shop.get_resources()) == []


class TestMembersAndStats:
    def test_members_and_dashboard(self, shop, member, run):
        run(shop.add_to_cart(1002))
        order = run(shop.create_order())
        run(shop.logout())
        run(shop.login("admin@julg.com", "admin"))

        members = run(shop.get_members())
        stats = run(shop.get_dashboard_stats())

        assert [m.email for m in members] == ["ana@julg.com"]
        assert members[0].name == "Ana Diaz"
        assert members[0].courses == ["Impuestos Avanzados"]
        assert stats.total_revenue == order.total
        assert stats.total_orders == 1
        assert stats.total_members == 1
        assert stats.total_products == 2

    def test_update_member_status(self, shop, member, run):
        run(shop.add_to_cart(1001))
        run(shop.create_order())
        run(shop.logout())
        run(shop.login("admin@julg.com", "admin"))

        assert run(shop.update_member_status("ana@julg.com", "suspended")).status == "suspended"
        with pytest.raises(MemberNotFound):
            run(shop.update_member_status("ghost@julg.com", "active"))

    def test_store_settings_merge(self, shop, admin, run):
        updated = run(shop.update_store_settings({"tax_rate": "0.10", "currency": "USD", "banner": "Sale"}))

        assert updated.tax_rate == Decimal("0.10")
        assert updated.currency == "USD"
        assert updated.store_name == "JULG"
        assert run(shop.get_store_settings()).to_store()["banner"] == "Sale"


class TestCamelCasePayloads:
    def test_create_course_accepts_camel_case(self, shop, admin, run):
        course = run(shop.create_course({"title": "Excel", "price": 100, "priceOffer": 80}))

        assert course.price_offer == Decimal("80")
        assert run(shop.get_product(course.id)).effective_price == Decimal("80")

    def test_update_course_accepts_camel_case(self, shop, admin, run):
        updated = run(shop.update_course(1001, {"priceOffer": 50}))

        assert updated.price_offer == Decimal("50")
        assert updated.price == Decimal("120")


class TestMalformedIds:
    def test_non_numeric_product_id(self, shop, run):
        with pytest.raises(ProductNotFound):
            run(shop.get_product("abc"))
        with pytest.raises(ProductNotFound):
            run(shop.add_to_cart("abc"))

    def test_non_numeric_admin_ids(self, shop, admin, run):
        with pytest.raises(ProductNotFound):
            run(shop.update_course("abc", {"price": 1}))
        with pytest.raises(ProductNotFound):
            run(shop.delete_course(None))
        with pytest.raises(CouponNotFound):
            run(shop.delete_coupon("abc"))
        with pytest.raises(ResourceNotFound) as exc:
            run(shop.delete_resource("abc"))
        assert exc.value.code == "resource_not_found"
