"""Pytest fixtures for storefront tests."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from storefront import Storefront
from storefront.data.store import MemoryStore
from storefront.domain.schemas import Coupon, Course


@pytest.fixture
def run():
    """Run a coroutine to completion on a per-test event loop."""
    loop = asyncio.new_event_loop()
    yield loop.run_until_complete
    loop.close()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def shop(store):
    """A seeded storefront over an in-memory store."""
    return Storefront(store=store, decrement_stock=False)


@pytest.fixture
def member(shop, run):
    """Register and log in a regular member."""
    run(shop.register("ana@julg.com", "secret1", "Ana", "Diaz"))
    return run(shop.login("ana@julg.com", "secret1"))


@pytest.fixture
def admin(shop, run):
    return run(shop.login("admin@julg.com", "admin"))


@pytest.fixture
def add_course(store):
    """Write a course straight into the catalog."""

    def _add(course_id, price, stock=999, price_offer=None, category="General", title=None, status="active"):
        courses = store.get("courses", [])
        course = Course(
            id=course_id,
            title=title or f"Course {course_id}",
            price=price,
            price_offer=price_offer,
            category=category,
            stock=stock,
            status=status,
        )
        courses.append(course.to_store())
        store.set("courses", courses)
        return course

    return _add


@pytest.fixture
def add_coupon(store):
    """Write a coupon straight into the coupon list."""

    def _add(code, discount, type="percentage", **fields):
        now = datetime.now(timezone.utc)
        coupons = store.get("coupons", [])
        coupon = Coupon(
            id=len(coupons) + 100,
            code=code,
            discount=discount,
            type=type,
            valid_from=fields.pop("valid_from", now - timedelta(days=1)),
            valid_until=fields.pop("valid_until", now + timedelta(days=1)),
            **fields,
        )
        coupons.append(coupon.to_store())
        store.set("coupons", coupons)
        return coupon

    return _add


@pytest.fixture
def set_stock(store):
    def _set(course_id, stock):
        courses = store.get("courses", [])
        for c in courses:
            if c["id"] == course_id:
                c["stock"] = stock
        store.set("courses", courses)

    return _set


@pytest.fixture
def remove_course(store):
    def _remove(course_id):
        store.set("courses", [c for c in store.get("courses", []) if c["id"] != course_id])

    return _remove
