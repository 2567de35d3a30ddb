"""Appeal domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel

from ...models import Appeal
from ...shared.iri import iri

IriOrId = Union[str, int]

COMPLAINT_LABELS = {
    "offend": "Insults / obscene language",
    "rude_language": "Rude language",
    "lateness": "Lateness / no-show",
    "bad_quality": "Poor quality",
    "property_damage": "Property damage",
    "overpricing": "Overpricing",
    "unprofessionalism": "Unprofessional behaviour",
    "fraud": "Fraud",
    "racism_nazism_xenophobia": "Racism / Nazism / Xenophobia",
    "other": "Other",
}


class AppealCreate(BaseModel):
    """type "ticket" needs `ticket`, type "chat" needs `chat`"""

    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    complaintReason: Optional[str] = None
    respondent: Optional[IriOrId] = None
    ticket: Optional[IriOrId] = None
    chat: Optional[IriOrId] = None


class AppealResponse(BaseModel):
    id: int
    type: Optional[str]
    title: Optional[str]
    description: Optional[str]
    complaintReason: Optional[str]
    author: Optional[str]
    respondent: Optional[str]
    ticket: Optional[str] = None
    chat: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_appeal(cls, appeal: Appeal) -> "AppealResponse":
        details = appeal.details
        return cls(
            id=appeal.id,
            type=appeal.type,
            title=details.title if details else None,
            description=details.description if details else None,
            complaintReason=details.complaint_reason if details else None,
            author=iri("users", details.author_id) if details else None,
            respondent=iri("users", details.respondent_id) if details else None,
            ticket=iri("tickets", appeal.appeal_ticket.ticket_id) if appeal.appeal_ticket else None,
            chat=iri("chats", appeal.appeal_chat.chat_id) if appeal.appeal_chat else None,
            createdAt=appeal.created_at,
        )


class ComplaintReason(BaseModel):
    id: int
    complaint_code: str
    complaint_human: str
