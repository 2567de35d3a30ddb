"""User service - Registration, login, profiles, roles and presence"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...access import check_access
from ...config import FRONTEND_URL
from ...models import ROLE_ADMIN, ROLE_CLIENT, ROLE_MASTER, User
from ...security_utils import create_access_token, verify_password_bcrypt
from ...services.account_confirmation import confirm_account, issue_confirmation_token
from ...services.presence_service import UserPresenceService
from .repository import UserRepository
from .schemas import GrantRoleRequest, LoginRequest, UserRegister, UserUpdate

logger = logging.getLogger(__name__)

ROLE_BY_NAME = {"client": ROLE_CLIENT, "master": ROLE_MASTER}


class UserService:
    """Service layer for user business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    # ------------------------------------------------------------------
    # Registration & authentication
    # ------------------------------------------------------------------

    def register(self, data: UserRegister) -> tuple[User, str]:
        """
        Create an inactive, unapproved account and its confirmation token.

        Returns:
            (user, confirmation token)
        """
        logger.info(f"📥 Registration attempt for {data.email}")

        if self.repo.get_user_by_email(self.db, data.email):
            logger.warning(f"⚠️ Registration refused, e-mail already used: {data.email}")
            raise HTTPException(status_code=409, detail="Email already registered")

        user_data = data.model_dump(exclude={"role"})
        user_data["roles"] = [ROLE_BY_NAME[data.role]] if data.role else []
        user_data["active"] = False
        user_data["approved"] = False

        try:
            user = self.repo.create_user(self.db, **user_data)
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="Email already registered") from e

        token = issue_confirmation_token(self.db, user)
        logger.info(f"✅ User #{user.id} registered")
        return user, token

    def authenticate(self, data: LoginRequest) -> str:
        user = self.repo.get_user_by_email(self.db, data.email)
        if not user or not verify_password_bcrypt(data.password, user.password):
            logger.warning(f"🔒 Failed login for {data.email}")
            raise HTTPException(status_code=401, detail="Invalid credentials")

        logger.info(f"🔓 User #{user.id} logged in")
        return create_access_token(user.id, user.email, user.get_roles())

    def confirm_account(self, token: str) -> dict:
        confirm_account(self.db, token)
        return {"success": True, "redirectUrl": FRONTEND_URL}

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def get_me(self, user: User) -> User:
        check_access(user)
        return user

    def get_user(self, user_id: int) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def get_masters(self) -> list[User]:
        return self.repo.get_users_by_role(self.db, ROLE_MASTER)

    def get_clients(self) -> list[User]:
        return self.repo.get_users_by_role(self.db, ROLE_CLIENT)

    def get_user_with_role(self, role: str, user_id: int, viewer: User) -> User:
        check_access(viewer)
        user = self.repo.get_user_by_role(self.db, role, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def update_me(self, data: UserUpdate, user: User) -> User:
        check_access(user, active_and_approved=False)
        updates = data.model_dump(exclude_unset=True)
        return self.repo.update_user(self.db, user, **updates)

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def grant_role(self, data: GrantRoleRequest, user: User) -> tuple[User, str]:
        """
        Let an account without a marketplace role become a client or a master.
        The account goes through e-mail confirmation again.

        Returns:
            (user, confirmation token)
        """
        if user.has_role(ROLE_ADMIN):
            raise HTTPException(status_code=403, detail="You're admin")
        if user.has_role(ROLE_MASTER) and not user.has_role(ROLE_CLIENT):
            raise HTTPException(status_code=403, detail="You're master")
        if user.has_role(ROLE_CLIENT) and not user.has_role(ROLE_MASTER):
            raise HTTPException(status_code=403, detail="You're client")

        role = ROLE_BY_NAME.get(data.role or "")
        if role is None:
            raise HTTPException(status_code=404, detail="Wrong role provided")

        user.roles = [role]
        self.db.commit()

        token = issue_confirmation_token(self.db, user)
        logger.info(f"🎖️ User #{user.id} granted {role}")
        return user, token

    # ------------------------------------------------------------------
    # Presence
    # ------------------------------------------------------------------

    def ping(self, user: User) -> dict:
        check_access(user)
        UserPresenceService(self.db).mark_online(user)
        return {"ok": True}

    def go_offline(self, user: User) -> dict:
        check_access(user)
        UserPresenceService(self.db).mark_offline(user)
        return {"ok": True}
