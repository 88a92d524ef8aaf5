"""Error taxonomy for the storefront data layer.

Every error carries a stable ``code`` and also derives from the builtin that
matches its meaning (``PermissionError``, ``LookupError``, ``ValueError``).
"""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    code = "storefront_error"


# Identity / permissions

class AuthRequired(StorefrontError, PermissionError):
    """Raised when an operation needs a logged-in user."""

    code = "auth_required"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class InvalidCredentials(StorefrontError, PermissionError):
    code = "invalid_credentials"

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class NotAuthorized(StorefrontError, PermissionError):
    """Raised when the current user's role does not allow the operation."""

    code = "not_authorized"

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class Forbidden(NotAuthorized):
    """Raised when a user touches a record owned by someone else."""

    code = "forbidden"

    def __init__(self, message: str = "You do not have access to this resource"):
        super().__init__(message)


# Lookups

class NotFound(StorefrontError, LookupError):
    code = "not_found"
    entity = "Record"

    def __init__(self, ident=None):
        self.ident = ident
        msg = f"{self.entity} not found"
        if ident is not None:
            msg = f"{self.entity} {ident} not found"
        super().__init__(msg)


class ProductNotFound(NotFound):
    code = "product_not_found"
    entity = "Product"


class CartItemNotFound(NotFound):
    code = "cart_item_not_found"
    entity = "Cart item"


class OrderNotFound(NotFound):
    code = "order_not_found"
    entity = "Order"


class CouponNotFound(NotFound):
    code = "coupon_not_found"
    entity = "Coupon"


class MemberNotFound(NotFound):
    code = "member_not_found"
    entity = "Member"


class UserNotFound(NotFound):
    code = "user_not_found"
    entity = "User"


class ResourceNotFound(NotFound):
    code = "resource_not_found"
    entity = "Resource"


# Cart / checkout

class InsufficientStock(StorefrontError, ValueError):
    code = "insufficient_stock"

    def __init__(self, product_id: int, available: int, requested: int, title: str | None = None):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        name = title or f"product {product_id}"
        super().__init__(
            f"Insufficient stock for {name}: {available} available, {requested} requested"
        )


class EmptyCart(StorefrontError, ValueError):
    code = "empty_cart"

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


# Coupons

class CouponError(StorefrontError, ValueError):
    """Base class for every coupon rejection."""

    code = "coupon_error"

    def __init__(self, coupon_code: str, message: str):
        self.coupon_code = coupon_code
        super().__init__(message)


class InvalidCoupon(CouponError):
    code = "invalid_coupon"

    def __init__(self, coupon_code: str):
        super().__init__(coupon_code, f"Coupon {coupon_code!r} is not valid")


class InactiveCoupon(CouponError):
    code = "inactive_coupon"

    def __init__(self, coupon_code: str):
        super().__init__(coupon_code, f"Coupon {coupon_code} is inactive")


class NotYetValid(CouponError):
    code = "coupon_not_yet_valid"

    def __init__(self, coupon_code: str):
        super().__init__(coupon_code, f"Coupon {coupon_code} is not valid yet")


class Expired(CouponError):
    code = "coupon_expired"

    def __init__(self, coupon_code: str):
        super().__init__(coupon_code, f"Coupon {coupon_code} has expired")


class Exhausted(CouponError):
    code = "coupon_exhausted"

    def __init__(self, coupon_code: str):
        super().__init__(coupon_code, f"Coupon {coupon_code} has no uses left")


class NotApplicable(CouponError):
    code = "coupon_not_applicable"

    def __init__(self, coupon_code: str):
        super().__init__(coupon_code, f"Coupon {coupon_code} does not apply to your products")


class MinimumNotMet(CouponError):
    code = "coupon_minimum_not_met"

    def __init__(self, coupon_code: str, minimum, subtotal):
        self.minimum = minimum
        self.subtotal = subtotal
        super().__init__(
            coupon_code, f"Coupon {coupon_code} needs a minimum purchase of {minimum}"
        )


# Input validation

class ValidationError(StorefrontError, ValueError):
    code = "validation_error"


class EmailInUse(ValidationError):
    code = "email_in_use"

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already registered: {email}")


class TokenExpired(ValidationError):
    code = "token_expired"

    def __init__(self, message: str = "Reset token is invalid or expired"):
        super().__init__(message)
