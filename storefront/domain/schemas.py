# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from storefront.utils.text import sanitize

Clean = Annotated[str, BeforeValidator(sanitize)]


def _money_json(value: Decimal) -> int | float:
    # w store kwoty jako liczby JSON, nie stringi
    return int(value) if value == value.to_integral_value() else float(value)


def _money_in(value: Any) -> Any:
    if isinstance(value, float):
        return Decimal(str(value))
    return value


Money = Annotated[
    Decimal,
    BeforeValidator(_money_in),
    PlainSerializer(_money_json, when_used="json"),
]

ZERO = Decimal("0")


class StoredModel(BaseModel):
    """
    Base dla rekordow zapisywanych w store.
    Na zewnatrz camelCase (priceOffer, usedCount ...), w pythonie snake_case.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_store(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class InputModel(BaseModel):
    """Payload od admina, klucze camelCase albo snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Users / identity

class User(StoredModel):
    id: int
    email: str
    password_hash: str
    first_name: str = ""
    last_name: str = ""
    role: Literal["admin", "member"] = "member"
    created_at: Optional[datetime] = None
    settings: Dict[str, Any] = Field(default_factory=dict)


class Identity(StoredModel):
    """Session pointer kept under ``currentUser``."""

    id: int
    email: str
    role: Literal["admin", "member"] = "member"
    first_name: str = ""
    last_name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Profile(StoredModel):
    id: int
    email: str
    first_name: str = ""
    last_name: str = ""
    role: str
    settings: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None


class ResetToken(StoredModel):
    token: str
    user_id: int
    email: str
    expires_at: datetime
    used: bool = False


# Catalog

class Course(StoredModel):
    id: int
    title: str = "Sin título"
    description: str = ""
    price: Money = ZERO
    price_offer: Optional[Money] = None
    category: str = "General"
    status: Literal["active", "inactive"] = "active"
    image: str = "https://placehold.co/600x400?text=Curso"
    stock: int = 999
    rating: float = 0
    reviews: int = 0
    modules: List[Any] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @property
    def effective_price(self) -> Money:
        return self.price_offer if self.price_offer else self.price

    @property
    def unlimited_stock(self) -> bool:
        return self.stock < 0

    def has_stock_for(self, quantity: int) -> bool:
        return self.unlimited_stock or quantity <= self.stock


class ProductView(StoredModel):
    """Normalized, read-only view of a course."""

    id: int
    name: str
    description: str = ""
    price: Money
    price_offer: Optional[Money] = None
    image: str
    category: str
    stock: int
    status: str
    modules: List[Any] = Field(default_factory=list)
    rating: float = 0
    reviews: int = 0
    created_at: Optional[datetime] = None

    @classmethod
    def from_course(cls, course: Course) -> "ProductView":
        return cls(
            id=course.id,
            name=course.title or "Sin título",
            description=course.description or "",
            price=course.price or ZERO,
            price_offer=course.price_offer or None,
            image=course.image or "https://placehold.co/600x400?text=Curso",
            category=course.category or "General",
            stock=course.stock or 999,
            status=course.status or "active",
            modules=course.modules,
            rating=course.rating or 0,
            reviews=course.reviews or 0,
            created_at=course.created_at,
        )

    @property
    def effective_price(self) -> Money:
        return self.price_offer or self.price


class CourseIn(InputModel):
    """Schema dla tworzenia kursu (admin)."""

    title: Clean = "Sin título"
    description: Clean = ""
    price: Money = Field(ZERO, ge=0)
    price_offer: Optional[Money] = Field(None, ge=0)
    category: str = "General"
    stock: int = 999
    status: Literal["active", "inactive"] = "active"
    modules: List[Any] = Field(default_factory=list)
    image: str = "https://placehold.co/600x400?text=Curso"


class CourseUpdate(InputModel):
    """Partial update; unset fields keep their stored value."""

    title: Optional[Clean] = None
    description: Optional[Clean] = None
    price: Optional[Money] = Field(None, ge=0)
    price_offer: Optional[Money] = Field(None, ge=0)
    category: Optional[str] = None
    stock: Optional[int] = None
    status: Optional[Literal["active", "inactive"]] = None
    image: Optional[str] = None


class Resource(StoredModel):
    id: int
    name: str = "Recurso"
    type: str = "image"
    data_url: Optional[str] = None
    created_at: Optional[datetime] = None


# Cart

class CartItem(StoredModel):
    id: int
    product_id: int
    quantity: int = Field(..., ge=1)


class AppliedCoupon(StoredModel):
    code: str
    discount: Money
    type: Literal["percentage", "fixed"]
    amount: Money = Field(..., ge=0)
    coupon_id: int


class Cart(StoredModel):
    items: List[CartItem] = Field(default_factory=list)
    applied_coupon: Optional[AppliedCoupon] = None

    def find_item(self, item_id: int) -> CartItem | None:
        return next((i for i in self.items if i.id == item_id), None)

    def find_by_product(self, product_id: int) -> CartItem | None:
        return next((i for i in self.items if i.product_id == product_id), None)


class CartLineView(StoredModel):
    id: int
    quantity: int
    product: ProductView


class CouponBadge(StoredModel):
    code: str
    discount: Money


class CartView(StoredModel):
    """Schema dla koszyka (response)."""

    items: List[CartLineView]
    subtotal: Money
    tax: Money = ZERO
    shipping: Money = ZERO
    discount: Money = ZERO
    applied_coupon: Optional[CouponBadge] = None
    total: Money
    count: int
    is_anonymous: bool


# Coupons

class Coupon(StoredModel):
    id: int
    code: str
    discount: Money = ZERO
    type: Literal["percentage", "fixed"] = "percentage"
    max_uses: int = 0
    used_count: int = 0
    min_purchase: Money = ZERO
    applicable_categories: List[str] = Field(default_factory=list)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    status: Literal["active", "inactive"] = "active"

    @property
    def exhausted(self) -> bool:
        return self.max_uses > 0 and self.used_count >= self.max_uses


class CouponIn(InputModel):
    """Schema dla tworzenia kuponu (admin)."""

    code: Clean
    discount: Money = Field(ZERO, ge=0)
    type: Literal["percentage", "fixed"] = "percentage"
    max_uses: int = Field(0, ge=0)
    min_purchase: Money = Field(ZERO, ge=0)
    applicable_categories: List[str] = Field(default_factory=list)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    status: Literal["active", "inactive"] = "active"


class CouponApplied(StoredModel):
    code: str
    discount_amount: Money
    message: str


# Orders

class ShippingInfo(StoredModel):
    address: Clean = ""
    city: Clean = ""
    postal_code: Clean = ""
    country: Clean = "Argentina"


class OrderLine(StoredModel):
    product_id: int
    product_name: str
    quantity: int
    unit_price: Money
    total: Money


class OrderCoupon(StoredModel):
    code: str
    amount: Money


class Order(StoredModel):
    """Zamowienie - niezmienne po utworzeniu."""

    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    user_email: Optional[str] = None
    items: List[OrderLine]
    subtotal: Money
    tax: Money
    shipping: Money
    discount: Money
    applied_coupon: Optional[OrderCoupon] = None
    total: Money = Field(..., ge=0)
    status: str = "completed"
    shipping_info: ShippingInfo = Field(default_factory=ShippingInfo)
    created_at: datetime
    estimated_delivery: datetime


# Members

class Member(StoredModel):
    id: int
    name: str = ""
    email: str
    status: str = "active"
    courses: List[str] = Field(default_factory=list)
    spent: Money = ZERO
    last_purchase: Optional[datetime] = None


class PurchasedCourse(StoredModel):
    name: str
    id: Optional[int] = None
    description: Optional[str] = None
    image: Optional[str] = None
    progress: int = 0


class PurchaseHistory(StoredModel):
    courses: List[PurchasedCourse] = Field(default_factory=list)
    spent: Money = ZERO
    last_purchase: Optional[datetime] = None
    total_courses: int = 0


# Store / admin

class StoreSettings(StoredModel):
    model_config = ConfigDict(extra="allow")

    store_name: str = "JULG"
    tax_rate: Optional[Money] = None
    shipping_cost: Optional[Money] = None
    currency: str = "ARS"


class DashboardStats(StoredModel):
    total_revenue: Money
    total_orders: int
    total_members: int
    total_products: int
