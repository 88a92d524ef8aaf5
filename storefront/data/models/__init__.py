#import modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.kv_entry import KeyValueModel

__all__ = ["KeyValueModel"]
