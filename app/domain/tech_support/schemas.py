"""Tech support schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel

from ...models import TechSupport, TechSupportMessage
from ...shared.iri import iri

IriOrId = Union[str, int]

SUPPORT_LABELS = {
    "account": "Account issues",
    "ticket": "Ticket issues",
    "platform": "Questions about the platform",
    "issues": "Technical problems",
    "law": "Legal questions",
    "feedback": "Suggestions and feedback",
    "urgent": "Urgent",
    "other": "Other",
}


class TechSupportCreate(BaseModel):
    title: Optional[str] = None
    reason: Optional[str] = None
    priority: Optional[str] = None
    description: Optional[str] = None


class TechSupportStatusUpdate(BaseModel):
    status: Optional[str] = None


class TechSupportMessageCreate(BaseModel):
    techSupport: Optional[IriOrId] = None
    text: Optional[str] = None


class TechSupportMessageUpdate(BaseModel):
    text: Optional[str] = None


class TechSupportMessageResponse(BaseModel):
    id: int
    text: Optional[str]
    techSupport: Optional[str]
    author: Optional[str]
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_message(cls, message: TechSupportMessage) -> "TechSupportMessageResponse":
        return cls(
            id=message.id,
            text=message.text,
            techSupport=iri("tech-support", message.tech_support_id),
            author=iri("users", message.author_id),
            createdAt=message.created_at,
            updatedAt=message.updated_at,
        )


class TechSupportResponse(BaseModel):
    id: int
    title: Optional[str]
    supportReason: Optional[str]
    status: Optional[str]
    priority: Optional[str]
    description: Optional[str]
    author: Optional[str]
    administrant: Optional[str]
    messages: list[TechSupportMessageResponse] = []
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_tech_support(cls, tech_support: TechSupport) -> "TechSupportResponse":
        return cls(
            id=tech_support.id,
            title=tech_support.title,
            supportReason=tech_support.reason,
            status=tech_support.status,
            priority=tech_support.priority,
            description=tech_support.description,
            author=iri("users", tech_support.author_id),
            administrant=iri("users", tech_support.administrant_id),
            messages=[TechSupportMessageResponse.from_message(m) for m in tech_support.messages],
            createdAt=tech_support.created_at,
            updatedAt=tech_support.updated_at,
        )


class SupportReason(BaseModel):
    id: int
    support_code: str
    support_human: str
