from storefront.api import Storefront, create_storefront

__all__ = ["Storefront", "create_storefront"]
