"""Appeal router - FastAPI endpoints for appeals"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import AppealCreate, AppealResponse, ComplaintReason
from .service import AppealService

router = APIRouter(prefix="/api/appeals", tags=["Appeals"])


def get_appeal_service(db: Session = Depends(get_db)) -> AppealService:
    """Dependency injection for AppealService"""
    return AppealService(db)


@router.get("/reasons", response_model=list[ComplaintReason])
async def get_reasons():
    return AppealService.get_reasons()


@router.get("", response_model=list[AppealResponse])
async def get_appeals(
    type: Optional[str] = Query(None, description="ticket or chat"),
    current_user: User = Depends(get_current_user),
    service: AppealService = Depends(get_appeal_service),
):
    """All appeals, admins only"""
    return [AppealResponse.from_appeal(a) for a in service.get_appeals(current_user, type)]


@router.get("/{appeal_id}", response_model=AppealResponse)
async def get_appeal(
    appeal_id: int,
    current_user: User = Depends(get_current_user),
    service: AppealService = Depends(get_appeal_service),
):
    return AppealResponse.from_appeal(service.get_appeal(appeal_id, current_user))


@router.post("", response_model=AppealResponse, status_code=201)
async def create_appeal(
    data: AppealCreate,
    current_user: User = Depends(get_current_user),
    service: AppealService = Depends(get_appeal_service),
):
    return AppealResponse.from_appeal(service.create_appeal(data, current_user))
