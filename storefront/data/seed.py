# storefront/data/seed.py
from datetime import datetime, timezone, timedelta

from storefront.data.store import Store
from storefront.domain.schemas import Coupon, Course, StoreSettings, User
from storefront.utils.settings import (
    COUPON_VALIDITY_DAYS,
    DEFAULT_CURRENCY,
    DEFAULT_SHIPPING_COST,
    DEFAULT_STORE_NAME,
    DEFAULT_TAX_RATE,
)
from storefront.utils.text import hash_password
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CATEGORIES = ["Contabilidad", "Fiscal", "Programación", "Marketing"]


def _defaults(now: datetime) -> dict:
    admin = User(
        id=1,
        email="admin@julg.com",
        password_hash=hash_password("admin"),
        first_name="Admin",
        last_name="JULG",
        role="admin",
        created_at=now,
        settings={"emailNotifications": True, "twoFactorEnabled": False},
    )
    courses = [
        Course(
            id=1001,
            title="Introducción a Contabilidad",
            description="Curso básico para empezar",
            price=120,
            price_offer=99,
            category="Contabilidad",
            image="https://placehold.co/600x400?text=Contabilidad",
            stock=999,
            rating=4.5,
            reviews=12,
            created_at=now,
        ),
        Course(
            id=1002,
            title="Impuestos Avanzados",
            description="Domina estrategias fiscales",
            price=250,
            price_offer=199,
            category="Fiscal",
            image="https://placehold.co/600x400?text=Impuestos",
            stock=999,
            rating=4.8,
            reviews=25,
            created_at=now,
        ),
    ]
    welcome = Coupon(
        id=1,
        code="WELCOME10",
        discount=10,
        type="percentage",
        max_uses=100,
        valid_from=now,
        valid_until=now + timedelta(days=COUPON_VALIDITY_DAYS),
    )
    settings = StoreSettings(
        store_name=DEFAULT_STORE_NAME,
        tax_rate=DEFAULT_TAX_RATE,
        shipping_cost=DEFAULT_SHIPPING_COST,
        currency=DEFAULT_CURRENCY,
    )

    return {
        "users": [admin.to_store()],
        "courses": [c.to_store() for c in courses],
        "orders": [],
        "carts": {},
        "members": [],
        "coupons": [welcome.to_store()],
        "resources": [],
        "categories": list(DEFAULT_CATEGORIES),
        "storeSettings": settings.to_store(),
        "resetTokens": [],
    }


def ensure_defaults(store: Store) -> list[str]:
    """Seed every missing collection; existing keys are never overwritten."""
    now = datetime.now(timezone.utc)
    missing = {
        key: value
        for key, value in _defaults(now).items()
        if store.get(key, None) is None
    }
    if missing:
        store.set_many(missing)
        logger.info(f"Seeded default keys: {sorted(missing)}")
    return sorted(missing)
