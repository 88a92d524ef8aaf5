# storefront/services/catalog_service.py
from datetime import datetime, timezone
from typing import List

from storefront.data.store import StoreSession
from storefront.domain.schemas import Course, CourseIn, CourseUpdate, ProductView, Resource
from storefront.errors import ProductNotFound
from storefront.repos.course_repo import CourseRepo
from storefront.repos.settings_repo import SettingsRepo
from storefront.utils.ids import monotonic_id, next_sequential_id
from storefront.utils.text import sanitize
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

COURSE_ID_FLOOR = 1000


class CatalogService:
    """
    Katalog produktow (kursow).
    find_product dla koszyka i checkoutu, reszta to odczyt publiczny i CRUD admina.
    Uprawnienia sprawdza warstwa api.
    """

    def __init__(self, db: StoreSession):
        self.repo = CourseRepo(db)
        self.settings_repo = SettingsRepo(db)

    #query
    def find_product(self, product_id: int) -> Course | None:
        return self.repo.get_course(product_id)

    def get_products(self) -> List[ProductView]:
        return [
            ProductView.from_course(c)
            for c in self.repo.list_courses()
            if c.status != "inactive"
        ]

    def get_product(self, product_id: int) -> ProductView:
        course = self.find_product(product_id)
        if not course:
            raise ProductNotFound(product_id)
        return ProductView.from_course(course)

    def get_all_courses(self) -> List[Course]:
        return self.repo.list_courses()

    #commands
    def create_course(self, payload: CourseIn) -> Course:
        courses = self.repo.list_courses()
        course = Course(
            id=next_sequential_id((c.id for c in courses), start=COURSE_ID_FLOOR),
            title=payload.title or "Sin título",
            description=payload.description,
            price=payload.price,
            price_offer=payload.price_offer or None,
            category=payload.category or "General",
            stock=payload.stock,
            status=payload.status,
            modules=payload.modules,
            image=payload.image,
            created_at=datetime.now(timezone.utc),
        )
        self.repo.save_course(course)
        logger.info(f"Course {course.id} created: {course.title}")
        return course

    def update_course(self, course_id: int, changes: CourseUpdate) -> Course:
        course = self.find_product(course_id)
        if not course:
            raise ProductNotFound(course_id)

        updates = changes.model_dump(exclude_unset=True, exclude_none=True)
        # puste teksty nie nadpisuja istniejacych wartosci
        for field in ("title", "description", "category", "image"):
            if updates.get(field) == "":
                updates.pop(field)

        updated = course.model_copy(update=updates)
        self.repo.save_course(updated)
        logger.info(f"Course {course_id} updated: {sorted(updates)}")
        return updated

    def delete_course(self, course_id: int) -> None:
        self.repo.delete_course(course_id)
        logger.info(f"Course {course_id} deleted")

    #kategorie
    def get_categories(self) -> List[str]:
        return self.settings_repo.list_categories()

    def add_category(self, name: str) -> List[str]:
        name = sanitize(name)
        categories = self.settings_repo.list_categories()
        if name and name not in categories:
            categories.append(name)
            self.settings_repo.save_categories(categories)
        return categories

    def delete_category(self, name: str) -> List[str]:
        categories = [c for c in self.settings_repo.list_categories() if c != name]
        self.settings_repo.save_categories(categories)
        return categories

    #zasoby
    def get_resources(self) -> List[Resource]:
        return self.settings_repo.list_resources()

    def create_resource(self, name: str | None, type: str | None, data_url: str | None) -> Resource:
        resources = self.settings_repo.list_resources()
        resource = Resource(
            id=monotonic_id(r.id for r in resources),
            name=sanitize(name) or "Recurso",
            type=sanitize(type) or "image",
            data_url=data_url,
            created_at=datetime.now(timezone.utc),
        )
        resources.append(resource)
        self.settings_repo.save_resources(resources)
        return resource

    def delete_resource(self, resource_id: int) -> None:
        resources = [r for r in self.settings_repo.list_resources() if r.id != resource_id]
        self.settings_repo.save_resources(resources)
