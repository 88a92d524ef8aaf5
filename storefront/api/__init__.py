# storefront/api/__init__.py
from storefront.api.admin import AdminAPI
from storefront.api.carts import CartsAPI
from storefront.api.catalog import CatalogAPI
from storefront.api.orders import OrdersAPI
from storefront.api.users import UsersAPI
from storefront.data.store import Store, create_store


class Storefront(CartsAPI, OrdersAPI, UsersAPI, CatalogAPI, AdminAPI):
    """Publiczne api sklepu: wszystkie operacje jako async."""


def create_storefront(store: Store | None = None, backend: str | None = None, **kwargs) -> Storefront:
    return Storefront(store=store if store is not None else create_store(backend), **kwargs)
