"""Ticket domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, field_validator

from ...models import Ticket
from ...shared.iri import iri

IriOrId = Union[str, int]


class TicketCreate(BaseModel):
    """title, description, category and unit are required; checked in the service for a 400"""

    title: Optional[str] = None
    description: Optional[str] = None
    notice: Optional[str] = None
    budget: Optional[float] = None
    negotiableBudget: Optional[bool] = None
    active: Optional[bool] = None
    category: Optional[IriOrId] = None
    unit: Optional[IriOrId] = None

    @field_validator("budget")
    @classmethod
    def validate_budget(cls, v):
        if v is not None and v < 0:
            raise ValueError("Budget cannot be negative")
        return v


class TicketUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    notice: Optional[str] = None
    budget: Optional[float] = None
    negotiableBudget: Optional[bool] = None
    active: Optional[bool] = None
    category: Optional[IriOrId] = None
    unit: Optional[IriOrId] = None

    @field_validator("budget")
    @classmethod
    def validate_budget(cls, v):
        if v is not None and v < 0:
            raise ValueError("Budget cannot be negative")
        return v


class TicketResponse(BaseModel):
    id: int
    title: Optional[str]
    description: Optional[str]
    notice: Optional[str]
    budget: Optional[float]
    negotiableBudget: Optional[bool]
    service: Optional[bool]
    active: Optional[bool]
    category: Optional[str]
    unit: Optional[str]
    author: Optional[str]
    master: Optional[str]
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_ticket(cls, ticket: Ticket) -> "TicketResponse":
        return cls(
            id=ticket.id,
            title=ticket.title,
            description=ticket.description,
            notice=ticket.notice,
            budget=ticket.budget,
            negotiableBudget=ticket.negotiable_budget,
            service=ticket.service,
            active=ticket.active,
            category=iri("categories", ticket.category_id),
            unit=iri("units", ticket.unit_id),
            author=iri("users", ticket.author_id),
            master=iri("users", ticket.master_id),
            createdAt=ticket.created_at,
            updatedAt=ticket.updated_at,
        )
