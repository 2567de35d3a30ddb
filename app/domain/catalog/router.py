"""Catalog router - categories and units"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import CategoryCreate, CategoryResponse, UnitCreate, UnitResponse
from .service import CatalogService

categories_router = APIRouter(prefix="/api/categories", tags=["Catalog"])
units_router = APIRouter(prefix="/api/units", tags=["Catalog"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


@categories_router.get("", response_model=list[CategoryResponse])
async def get_categories(service: CatalogService = Depends(get_catalog_service)):
    return service.get_categories()


@categories_router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, service: CatalogService = Depends(get_catalog_service)):
    return service.get_category(category_id)


@categories_router.post("", response_model=CategoryResponse, status_code=201)
async def create_category(
    data: CategoryCreate,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.create_category(data, current_user)


@units_router.get("", response_model=list[UnitResponse])
async def get_units(service: CatalogService = Depends(get_catalog_service)):
    return service.get_units()


@units_router.get("/{unit_id}", response_model=UnitResponse)
async def get_unit(unit_id: int, service: CatalogService = Depends(get_catalog_service)):
    return service.get_unit(unit_id)


@units_router.post("", response_model=UnitResponse, status_code=201)
async def create_unit(
    data: UnitCreate,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.create_unit(data, current_user)
