# storefront/repos/settings_repo.py
from typing import List

from storefront.data.store import StoreSession
from storefront.domain.schemas import Resource, StoreSettings

STORE_SETTINGS_KEY = "storeSettings"
CATEGORIES_KEY = "categories"
RESOURCES_KEY = "resources"


class SettingsRepo:
    """Ustawienia sklepu, kategorie i zasoby (mniejsze klucze administracyjne)."""

    def __init__(self, db: StoreSession):
        self.db = db

    def get_store_settings(self) -> StoreSettings:
        return StoreSettings.model_validate(self.db.get(STORE_SETTINGS_KEY, {}) or {})

    def save_store_settings(self, settings: StoreSettings) -> StoreSettings:
        self.db.set(STORE_SETTINGS_KEY, settings.to_store())
        return settings

    def list_categories(self) -> List[str]:
        return list(self.db.get(CATEGORIES_KEY, []))

    def save_categories(self, categories: List[str]) -> None:
        self.db.set(CATEGORIES_KEY, categories)

    def list_resources(self) -> List[Resource]:
        return [Resource.model_validate(r) for r in self.db.get(RESOURCES_KEY, [])]

    def save_resources(self, resources: List[Resource]) -> None:
        self.db.set(RESOURCES_KEY, [r.to_store() for r in resources])
