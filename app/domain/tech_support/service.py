"""Tech support service - Support tickets, status changes and the message thread"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...access import check_access
from ...models import ROLE_ADMIN, TechSupport, TechSupportMessage, User, utcnow
from ...shared.iri import extract_entity
from .repository import TechSupportMessageRepository, TechSupportRepository
from .schemas import (
    SUPPORT_LABELS,
    TechSupportCreate,
    TechSupportMessageCreate,
    TechSupportMessageUpdate,
    TechSupportStatusUpdate,
)

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = "normal"


def _is_party(tech_support: TechSupport, user: User) -> bool:
    return user.id in (tech_support.author_id, tech_support.administrant_id)


class TechSupportService:
    """Service layer for support tickets"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TechSupportRepository()

    @staticmethod
    def get_reasons() -> list[dict]:
        return [
            {"id": index, "support_code": code, "support_human": SUPPORT_LABELS.get(code, code)}
            for index, code in enumerate(TechSupport.SUPPORT, start=1)
        ]

    def _get_or_404(self, tech_support_id: int) -> TechSupport:
        tech_support = self.repo.get_by_id(self.db, tech_support_id)
        if not tech_support:
            raise HTTPException(status_code=404, detail="Tech support not found")
        return tech_support

    def get_my_tech_supports(self, user: User) -> list[TechSupport]:
        check_access(user)
        return self.repo.get_for_user(self.db, user.id)

    def get_tech_support(self, tech_support_id: int, user: User) -> TechSupport:
        check_access(user)
        tech_support = self._get_or_404(tech_support_id)
        if not _is_party(tech_support, user) and not user.has_role(ROLE_ADMIN):
            raise HTTPException(status_code=403, detail="Ownership doesn't match")
        return tech_support

    def get_admin_tech_supports(self, admin_id: int, user: User) -> list[TechSupport]:
        check_access(user, "admin")
        if not self.db.get(User, admin_id):
            raise HTTPException(status_code=404, detail="User not found")
        return self.repo.get_for_admin(self.db, admin_id)

    def create_tech_support(self, data: TechSupportCreate, user: User) -> TechSupport:
        """Open a ticket; the least-loaded admin is assigned on insert"""
        check_access(user, "double")

        if data.reason not in TechSupport.SUPPORT:
            raise HTTPException(status_code=400, detail="Wrong support type")
        if data.priority is not None and data.priority not in TechSupport.PRIORITIES:
            raise HTTPException(
                status_code=400,
                detail=f"Wrong priority. Formats [{', '.join(TechSupport.PRIORITIES)}]",
            )

        tech_support = self.repo.create(
            self.db,
            title=data.title,
            reason=data.reason,
            status="new",
            priority=data.priority or DEFAULT_PRIORITY,
            description=data.description,
            author_id=user.id,
        )
        logger.info(
            f"🆘 Tech support #{tech_support.id} ({tech_support.reason}) opened by user #{user.id}, "
            f"administrant #{tech_support.administrant_id}"
        )
        return tech_support

    def update_status(self, tech_support_id: int, data: TechSupportStatusUpdate, user: User) -> TechSupport:
        check_access(user)

        if data.status == "in_progress" and not user.has_role(ROLE_ADMIN):
            raise HTTPException(status_code=403, detail="Extra denied")

        tech_support = self._get_or_404(tech_support_id)
        if not _is_party(tech_support, user):
            raise HTTPException(status_code=403, detail="Extra denied")

        if data.status not in TechSupport.STATUSES:
            raise HTTPException(
                status_code=400,
                detail=f"Wrong status type. Formats [{', '.join(TechSupport.STATUSES)}]",
            )

        tech_support.status = data.status
        tech_support = self.repo.save(self.db, tech_support)
        logger.info(f"🔄 Tech support #{tech_support.id} status -> {tech_support.status}")
        return tech_support


class TechSupportMessageService:
    """Service layer for the message thread of a support ticket"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TechSupportMessageRepository()

    def _get_or_404(self, message_id: int) -> TechSupportMessage:
        message = self.repo.get_by_id(self.db, message_id)
        if not message:
            raise HTTPException(status_code=404, detail="Tech support message not found")
        return message

    def create_message(self, data: TechSupportMessageCreate, user: User) -> TechSupportMessage:
        check_access(user)

        if not data.text:
            raise HTTPException(status_code=400, detail="Empty text")
        if data.techSupport is None:
            raise HTTPException(status_code=400, detail="Wrong tech support format")

        tech_support = extract_entity(self.db, data.techSupport, TechSupport, "tech-support")
        if not _is_party(tech_support, user):
            raise HTTPException(status_code=403, detail="Ownership doesn't match")

        return self.repo.create(self.db, text=data.text, tech_support_id=tech_support.id, author_id=user.id)

    def update_message(self, message_id: int, data: TechSupportMessageUpdate, user: User) -> TechSupportMessage:
        check_access(user)
        message = self._get_or_404(message_id)

        if message.author_id != user.id:
            raise HTTPException(status_code=403, detail="Ownership doesn't match")
        if not data.text:
            raise HTTPException(status_code=400, detail="Empty text")

        message.text = data.text
        message.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(message)
        return message

    def delete_message(self, message_id: int, user: User) -> None:
        check_access(user)
        message = self._get_or_404(message_id)

        if message.author_id != user.id:
            raise HTTPException(status_code=403, detail="Ownership doesn't match")

        self.repo.delete(self.db, message)
