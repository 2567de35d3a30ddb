"""Review domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel

from ...models import Review
from ...shared.iri import iri

IriOrId = Union[str, int]


class ReviewCreate(BaseModel):
    """
    type "client": a master reviews a client (client is required)
    type "master": a client reviews a master (master is required)
    """

    type: Optional[str] = None
    rating: float
    description: Optional[str] = None
    ticket: Optional[IriOrId] = None
    master: Optional[IriOrId] = None
    client: Optional[IriOrId] = None


class ReviewUpdate(BaseModel):
    rating: Optional[float] = None
    description: Optional[str] = None


class ReviewResponse(BaseModel):
    id: int
    type: Optional[str]
    rating: Optional[float]
    description: Optional[str]
    ticket: Optional[str]
    master: Optional[str]
    client: Optional[str]
    createdAt: Optional[datetime] = None

    @classmethod
    def from_review(cls, review: Review) -> "ReviewResponse":
        return cls(
            id=review.id,
            type=review.type,
            rating=review.rating,
            description=review.description,
            ticket=iri("tickets", review.ticket_id),
            master=iri("users", review.master_id),
            client=iri("users", review.client_id),
            createdAt=review.created_at,
        )
