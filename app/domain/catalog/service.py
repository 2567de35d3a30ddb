"""Catalog service - public reads, admin-only writes"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...access import check_access
from ...models import Category, Unit, User
from .repository import CatalogRepository
from .schemas import CategoryCreate, UnitCreate

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepository()

    def get_categories(self) -> list[Category]:
        return self.repo.get_categories(self.db)

    def get_category(self, category_id: int) -> Category:
        category = self.repo.get_category_by_id(self.db, category_id)
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        return category

    def create_category(self, data: CategoryCreate, user: User) -> Category:
        check_access(user, "admin")
        category = self.repo.create_category(self.db, **data.model_dump())
        logger.info(f"📂 Category #{category.id} created by admin #{user.id}")
        return category

    def get_units(self) -> list[Unit]:
        return self.repo.get_units(self.db)

    def get_unit(self, unit_id: int) -> Unit:
        unit = self.repo.get_unit_by_id(self.db, unit_id)
        if not unit:
            raise HTTPException(status_code=404, detail="Unit not found")
        return unit

    def create_unit(self, data: UnitCreate, user: User) -> Unit:
        check_access(user, "admin")
        unit = self.repo.create_unit(self.db, **data.model_dump())
        logger.info(f"📏 Unit #{unit.id} created by admin #{user.id}")
        return unit
