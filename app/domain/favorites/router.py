"""Favorite and black list routers - FastAPI endpoints for per-user lists"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import BlackListResponse, FavoriteResponse, UserListsInput
from .service import BlackListService, FavoriteService

favorites_router = APIRouter(prefix="/api/favorites", tags=["Favorites"])
black_lists_router = APIRouter(prefix="/api/black-lists", tags=["Black Lists"])


def get_favorite_service(db: Session = Depends(get_db)) -> FavoriteService:
    """Dependency injection for FavoriteService"""
    return FavoriteService(db)


def get_black_list_service(db: Session = Depends(get_db)) -> BlackListService:
    """Dependency injection for BlackListService"""
    return BlackListService(db)


# ============================================================================
# FAVORITES
# ============================================================================


@favorites_router.get("/me", response_model=FavoriteResponse)
async def get_my_favorite(
    current_user: User = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    return FavoriteResponse.from_favorite(service.get_my_favorite(current_user))


@favorites_router.post("", response_model=FavoriteResponse, status_code=201)
async def create_favorite(
    data: UserListsInput,
    current_user: User = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    return FavoriteResponse.from_favorite(service.create_favorite(data, current_user))


@favorites_router.patch("/{favorite_id}", response_model=FavoriteResponse)
async def update_favorite(
    favorite_id: int,
    data: UserListsInput,
    current_user: User = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    return FavoriteResponse.from_favorite(service.update_favorite(favorite_id, data, current_user))


@favorites_router.delete("/{favorite_id}", status_code=204)
async def delete_favorite(
    favorite_id: int,
    current_user: User = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    service.delete_favorite(favorite_id, current_user)
    return Response(status_code=204)


# ============================================================================
# BLACK LISTS
# ============================================================================


@black_lists_router.get("/me", response_model=BlackListResponse)
async def get_my_black_list(
    current_user: User = Depends(get_current_user),
    service: BlackListService = Depends(get_black_list_service),
):
    return BlackListResponse.from_black_list(service.get_my_black_list(current_user))


@black_lists_router.post("", response_model=BlackListResponse, status_code=201)
async def create_black_list(
    data: UserListsInput,
    current_user: User = Depends(get_current_user),
    service: BlackListService = Depends(get_black_list_service),
):
    """Unknown entries and the caller themself are skipped and listed in `messages`"""
    black_list, messages = service.create_black_list(data, current_user)
    return BlackListResponse.from_black_list(black_list, messages)


@black_lists_router.patch("/{black_list_id}", response_model=BlackListResponse)
async def update_black_list(
    black_list_id: int,
    data: UserListsInput,
    current_user: User = Depends(get_current_user),
    service: BlackListService = Depends(get_black_list_service),
):
    black_list, messages = service.update_black_list(black_list_id, data, current_user)
    return BlackListResponse.from_black_list(black_list, messages)


@black_lists_router.delete("/{black_list_id}", status_code=204)
async def delete_black_list(
    black_list_id: int,
    current_user: User = Depends(get_current_user),
    service: BlackListService = Depends(get_black_list_service),
):
    service.delete_black_list(black_list_id, current_user)
    return Response(status_code=204)
