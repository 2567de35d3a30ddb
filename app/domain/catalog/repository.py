"""Catalog repository - Database operations for categories and units"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Category, Unit


class CatalogRepository:
    """Repository for catalog database operations"""

    @staticmethod
    def get_categories(db: Session) -> list[Category]:
        return db.query(Category).order_by(Category.id).all()

    @staticmethod
    def get_category_by_id(db: Session, category_id: int) -> Optional[Category]:
        return db.get(Category, category_id)

    @staticmethod
    def create_category(db: Session, **category_data) -> Category:
        category = Category(**category_data)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    @staticmethod
    def get_units(db: Session) -> list[Unit]:
        return db.query(Unit).order_by(Unit.id).all()

    @staticmethod
    def get_unit_by_id(db: Session, unit_id: int) -> Optional[Unit]:
        return db.get(Unit, unit_id)

    @staticmethod
    def create_unit(db: Session, **unit_data) -> Unit:
        unit = Unit(**unit_data)
        db.add(unit)
        db.commit()
        db.refresh(unit)
        return unit
