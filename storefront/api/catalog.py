# storefront/api/catalog.py
from typing import Any, List, Mapping

from storefront.api.base import StorefrontBase
from storefront.domain.schemas import Course, CourseIn, CourseUpdate, ProductView, Resource
from storefront.errors import ProductNotFound, ResourceNotFound
from storefront.services.catalog_service import CatalogService
from storefront.services.identity_service import IdentityService
from storefront.utils.ids import parse_id


class CatalogAPI(StorefrontBase):
    #publiczne
    async def get_products(self) -> List[ProductView]:
        with self.session() as db:
            return CatalogService(db).get_products()

    async def get_product(self, product_id: int) -> ProductView:
        with self.session() as db:
            return CatalogService(db).get_product(parse_id(product_id, ProductNotFound))

    async def get_categories(self) -> List[str]:
        with self.session() as db:
            return CatalogService(db).get_categories()

    async def get_resources(self) -> List[Resource]:
        with self.session() as db:
            return CatalogService(db).get_resources()

    #admin
    async def get_all_courses(self) -> List[Course]:
        with self.session() as db:
            IdentityService(db).require_admin()
            return CatalogService(db).get_all_courses()

    async def create_course(self, data: CourseIn | Mapping[str, Any]) -> Course:
        payload = data if isinstance(data, CourseIn) else CourseIn.model_validate(data)
        with self.session() as db:
            IdentityService(db).require_admin()
            return CatalogService(db).create_course(payload)

    async def update_course(self, course_id: int, changes: CourseUpdate | Mapping[str, Any]) -> Course:
        payload = changes if isinstance(changes, CourseUpdate) else CourseUpdate.model_validate(changes)
        with self.session() as db:
            IdentityService(db).require_admin()
            return CatalogService(db).update_course(parse_id(course_id, ProductNotFound), payload)

    async def delete_course(self, course_id: int) -> bool:
        with self.session() as db:
            IdentityService(db).require_admin()
            CatalogService(db).delete_course(parse_id(course_id, ProductNotFound))
        return True

    async def add_category(self, name: str) -> List[str]:
        with self.session() as db:
            IdentityService(db).require_admin()
            return CatalogService(db).add_category(name)

    async def delete_category(self, name: str) -> List[str]:
        with self.session() as db:
            IdentityService(db).require_admin()
            return CatalogService(db).delete_category(name)

    async def create_resource(self, name: str | None = None, type: str | None = None, data_url: str | None = None) -> Resource:
        with self.session() as db:
            IdentityService(db).require_admin()
            return CatalogService(db).create_resource(name, type, data_url)

    async def delete_resource(self, resource_id: int) -> bool:
        with self.session() as db:
            IdentityService(db).require_admin()
            CatalogService(db).delete_resource(parse_id(resource_id, ResourceNotFound))
        return True
