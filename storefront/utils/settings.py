# storefront/utils/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
REDIS_KEY_PREFIX = os.getenv("REDIS_KEY_PREFIX", "storefront:")

ANONYMOUS_CART_KEY = os.getenv("ANONYMOUS_CART_KEY", "__anonymous__")

DEFAULT_STORE_NAME = os.getenv("DEFAULT_STORE_NAME", "JULG")
DEFAULT_TAX_RATE = Decimal(os.getenv("DEFAULT_TAX_RATE", "0.21"))
DEFAULT_SHIPPING_COST = Decimal(os.getenv("DEFAULT_SHIPPING_COST", "0"))
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "ARS")

ESTIMATED_DELIVERY_DAYS = int(os.getenv("ESTIMATED_DELIVERY_DAYS", 7))
COUPON_VALIDITY_DAYS = int(os.getenv("COUPON_VALIDITY_DAYS", 30))
RESET_TOKEN_TTL_SECONDS = int(os.getenv("RESET_TOKEN_TTL_SECONDS", 60 * 60))
DECREMENT_STOCK_ON_CHECKOUT = _flag("DECREMENT_STOCK_ON_CHECKOUT")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
