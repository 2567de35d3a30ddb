"""Appeal service - Complaints about tickets and chats"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...access import check_access
from ...models import Appeal, AppealChat, AppealTicket, Chat, Ticket, User
from ...shared.iri import extract_entity
from .repository import AppealRepository
from .schemas import COMPLAINT_LABELS, AppealCreate

logger = logging.getLogger(__name__)


class AppealService:
    """Service layer for appeal business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppealRepository()

    @staticmethod
    def get_reasons() -> list[dict]:
        """Complaint reasons of both appeal types, duplicates removed"""
        codes = list(dict.fromkeys(AppealChat.COMPLAINTS + AppealTicket.COMPLAINTS))
        return [
            {"id": index, "complaint_code": code, "complaint_human": COMPLAINT_LABELS.get(code, code)}
            for index, code in enumerate(codes, start=1)
        ]

    def get_appeals(self, user: User, appeal_type: Optional[str] = None) -> list[Appeal]:
        check_access(user, "admin")
        return self.repo.get_appeals(self.db, appeal_type)

    def get_appeal(self, appeal_id: int, user: User) -> Appeal:
        check_access(user, "admin")
        appeal = self.repo.get_appeal_by_id(self.db, appeal_id)
        if not appeal:
            raise HTTPException(status_code=404, detail="Appeal not found")
        return appeal

    def create_appeal(self, data: AppealCreate, user: User) -> Appeal:
        """
        File a complaint.

        - ticket: the respondent must be the ticket's author or master
        - chat: the caller must have opened the chat and the respondent
          must be its reply author
        """
        check_access(user)

        if not data.title or not data.description or not data.complaintReason or not data.type:
            raise HTTPException(status_code=400, detail="Missing required fields")
        if data.respondent is None:
            raise HTTPException(status_code=400, detail="Missing respondent")

        if data.type == "ticket":
            complaints = AppealTicket.COMPLAINTS
        elif data.type == "chat":
            complaints = AppealChat.COMPLAINTS
        else:
            raise HTTPException(status_code=400, detail="Wrong type")

        if data.complaintReason not in complaints:
            raise HTTPException(status_code=400, detail="Wrong complaint reason")

        respondent = extract_entity(self.db, data.respondent, User, "users")
        details = {
            "title": data.title,
            "description": data.description,
            "complaint_reason": data.complaintReason,
            "author_id": user.id,
            "respondent_id": respondent.id,
        }
        appeal = Appeal(type=data.type)

        if data.type == "ticket":
            if data.ticket is None:
                raise HTTPException(status_code=400, detail="Missing ticket")
            ticket = extract_entity(self.db, data.ticket, Ticket, "tickets")
            if respondent.id not in (ticket.author_id, ticket.master_id):
                raise HTTPException(status_code=400, detail="Respondent's ticket doesn't match")
            appeal.appeal_ticket = AppealTicket(ticket_id=ticket.id, **details)
        else:
            if data.chat is None:
                raise HTTPException(status_code=400, detail="Missing chat")
            chat = extract_entity(self.db, data.chat, Chat, "chats")
            if chat.author_id != user.id:
                raise HTTPException(status_code=400, detail="Ownership doesn't match")
            if chat.reply_author_id != respondent.id:
                raise HTTPException(status_code=400, detail="Respondent's chat doesn't match")
            appeal.appeal_chat = AppealChat(chat_id=chat.id, **details)

        appeal = self.repo.create_appeal(self.db, appeal)
        logger.info(
            f"🚩 Appeal #{appeal.id} ({appeal.type}, {data.complaintReason}) "
            f"filed by user #{user.id} against user #{respondent.id}"
        )
        return appeal
