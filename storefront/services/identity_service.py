# storefront/services/identity_service.py
from storefront.data.store import StoreSession
from storefront.domain.schemas import Identity
from storefront.errors import AuthRequired, NotAuthorized
from storefront.repos.user_repo import UserRepo
from storefront.utils.settings import ANONYMOUS_CART_KEY


class IdentityService:
    """Czysty odczyt sesji (currentUser), bez zapisow."""

    def __init__(self, db: StoreSession):
        self.repo = UserRepo(db)

    def current(self) -> Identity | None:
        return self.repo.get_current()

    def cart_key(self) -> str:
        identity = self.current()
        return str(identity.id) if identity else ANONYMOUS_CART_KEY

    def require_user(self) -> Identity:
        identity = self.current()
        if identity is None:
            raise AuthRequired()
        return identity

    def require_admin(self) -> Identity:
        identity = self.require_user()
        if not identity.is_admin:
            raise NotAuthorized()
        return identity
