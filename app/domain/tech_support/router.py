"""Tech support router - FastAPI endpoints for support tickets and their messages"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import (
    SupportReason,
    TechSupportCreate,
    TechSupportMessageCreate,
    TechSupportMessageResponse,
    TechSupportMessageUpdate,
    TechSupportResponse,
    TechSupportStatusUpdate,
)
from .service import TechSupportMessageService, TechSupportService

router = APIRouter(prefix="/api/tech-support", tags=["Tech Support"])
messages_router = APIRouter(prefix="/api/tech-support-messages", tags=["Tech Support"])


def get_tech_support_service(db: Session = Depends(get_db)) -> TechSupportService:
    """Dependency injection for TechSupportService"""
    return TechSupportService(db)


def get_tech_support_message_service(db: Session = Depends(get_db)) -> TechSupportMessageService:
    """Dependency injection for TechSupportMessageService"""
    return TechSupportMessageService(db)


# ============================================================================
# TECH SUPPORT
# ============================================================================


@router.get("/reasons", response_model=list[SupportReason])
async def get_reasons():
    return TechSupportService.get_reasons()


@router.get("/me", response_model=list[TechSupportResponse])
async def get_my_tech_supports(
    current_user: User = Depends(get_current_user),
    service: TechSupportService = Depends(get_tech_support_service),
):
    """Tickets opened by the current user, or assigned to them when they are an admin"""
    return [TechSupportResponse.from_tech_support(t) for t in service.get_my_tech_supports(current_user)]


@router.get("/admin/{admin_id}", response_model=list[TechSupportResponse])
async def get_admin_tech_supports(
    admin_id: int,
    current_user: User = Depends(get_current_user),
    service: TechSupportService = Depends(get_tech_support_service),
):
    tickets = service.get_admin_tech_supports(admin_id, current_user)
    return [TechSupportResponse.from_tech_support(t) for t in tickets]


@router.get("/{tech_support_id}", response_model=TechSupportResponse)
async def get_tech_support(
    tech_support_id: int,
    current_user: User = Depends(get_current_user),
    service: TechSupportService = Depends(get_tech_support_service),
):
    return TechSupportResponse.from_tech_support(service.get_tech_support(tech_support_id, current_user))


@router.post("", response_model=TechSupportResponse, status_code=201)
async def create_tech_support(
    data: TechSupportCreate,
    current_user: User = Depends(get_current_user),
    service: TechSupportService = Depends(get_tech_support_service),
):
    return TechSupportResponse.from_tech_support(service.create_tech_support(data, current_user))


@router.patch("/{tech_support_id}", response_model=TechSupportResponse)
async def update_tech_support_status(
    tech_support_id: int,
    data: TechSupportStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: TechSupportService = Depends(get_tech_support_service),
):
    return TechSupportResponse.from_tech_support(service.update_status(tech_support_id, data, current_user))


# ============================================================================
# MESSAGES
# ============================================================================


@messages_router.post("", response_model=TechSupportMessageResponse, status_code=201)
async def create_tech_support_message(
    data: TechSupportMessageCreate,
    current_user: User = Depends(get_current_user),
    service: TechSupportMessageService = Depends(get_tech_support_message_service),
):
    return TechSupportMessageResponse.from_message(service.create_message(data, current_user))


@messages_router.patch("/{message_id}", response_model=TechSupportMessageResponse)
async def update_tech_support_message(
    message_id: int,
    data: TechSupportMessageUpdate,
    current_user: User = Depends(get_current_user),
    service: TechSupportMessageService = Depends(get_tech_support_message_service),
):
    return TechSupportMessageResponse.from_message(service.update_message(message_id, data, current_user))


@messages_router.delete("/{message_id}", status_code=204)
async def delete_tech_support_message(
    message_id: int,
    current_user: User = Depends(get_current_user),
    service: TechSupportMessageService = Depends(get_tech_support_message_service),
):
    service.delete_message(message_id, current_user)
    return Response(status_code=204)
