"""User router - registration, login, profiles, roles and presence"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ... import mercure
from ...auth import get_current_user
from ...database import get_db
from ...models import ROLE_CLIENT, ROLE_MASTER, User
from ...rate_limiter import create_rate_limiter
from ...services.account_confirmation import dispatch_confirmation_email
from .schemas import (
    ConfirmAccountRequest,
    ConfirmAccountResponse,
    GrantRoleRequest,
    LoginRequest,
    MessageResponse,
    PresenceResponse,
    TokenResponse,
    UserRegister,
    UserResponse,
    UserUpdate,
)
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])
auth_router = APIRouter(prefix="/api", tags=["Authentication"])

rate_limit_login = create_rate_limiter(limit=10, window_seconds=60, key_prefix="login")
rate_limit_register = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="register")


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


# ============================================================================
# AUTHENTICATION
# ============================================================================


@auth_router.post("/authentication_token", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    service: UserService = Depends(get_user_service),
    _: None = Depends(rate_limit_login),
):
    """Exchange e-mail and password for a bearer token"""
    return {"token": service.authenticate(data)}


@auth_router.post("/confirm-account", response_model=ConfirmAccountResponse)
async def confirm_account(
    data: ConfirmAccountRequest,
    service: UserService = Depends(get_user_service),
):
    """Activate and approve the account owning the e-mailed token"""
    return service.confirm_account(data.token)


# ============================================================================
# USERS
# ============================================================================


@router.post("", response_model=UserResponse, status_code=201)
async def register(
    data: UserRegister,
    service: UserService = Depends(get_user_service),
    _: None = Depends(rate_limit_register),
):
    user, token = service.register(data)
    await dispatch_confirmation_email(user.email, user.name, token)
    return UserResponse.from_user(user)


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_user(service.get_me(current_user))


@router.patch("/me", response_model=UserResponse)
async def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_user(service.update_me(data, current_user))


@router.get("/masters", response_model=list[UserResponse])
async def get_masters(service: UserService = Depends(get_user_service)):
    """Active, approved masters"""
    return [UserResponse.from_user(u) for u in service.get_masters()]


@router.get("/masters/{user_id}", response_model=UserResponse)
async def get_master(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_user(service.get_user_with_role(ROLE_MASTER, user_id, current_user))


@router.get("/clients", response_model=list[UserResponse])
async def get_clients(service: UserService = Depends(get_user_service)):
    """Active, approved clients"""
    return [UserResponse.from_user(u) for u in service.get_clients()]


@router.get("/clients/{user_id}", response_model=UserResponse)
async def get_client(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_user(service.get_user_with_role(ROLE_CLIENT, user_id, current_user))


@router.post("/grant-role", response_model=MessageResponse)
async def grant_role(
    data: GrantRoleRequest,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    user, token = service.grant_role(data, current_user)
    await dispatch_confirmation_email(user.email, user.name, token)
    return {"message": f"Granted {data.role} role"}


# ============================================================================
# PRESENCE
# ============================================================================


@router.post("/ping", response_model=PresenceResponse)
async def ping(
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Heartbeat sent by the frontend every 30 seconds while a tab is open"""
    result = service.ping(current_user)
    mercure.publish_after_response(background_tasks, service.db)
    return result


@router.post("/offline", response_model=PresenceResponse)
async def go_offline(
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Sent with navigator.sendBeacon when the tab closes"""
    result = service.go_offline(current_user)
    mercure.publish_after_response(background_tasks, service.db)
    return result


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return UserResponse.from_user(service.get_user(user_id))
