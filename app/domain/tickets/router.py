"""Ticket router - FastAPI endpoints for tickets"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import TicketCreate, TicketResponse, TicketUpdate
from .service import TicketService

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


def get_ticket_service(db: Session = Depends(get_db)) -> TicketService:
    """Dependency injection for TicketService"""
    return TicketService(db)


@router.get("", response_model=list[TicketResponse])
async def get_tickets(
    service: Optional[bool] = Query(None, description="true: masters' services, false: clients' requests"),
    category: Optional[str] = Query(None, description="Category IRI or id"),
    active: Optional[bool] = Query(None),
    ticket_service: TicketService = Depends(get_ticket_service),
):
    tickets = ticket_service.get_tickets(service=service, category=category, active=active)
    return [TicketResponse.from_ticket(t) for t in tickets]


@router.get("/me", response_model=list[TicketResponse])
async def get_my_tickets(
    current_user: User = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service),
):
    return [TicketResponse.from_ticket(t) for t in ticket_service.get_my_tickets(current_user)]


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(ticket_id: int, ticket_service: TicketService = Depends(get_ticket_service)):
    return TicketResponse.from_ticket(ticket_service.get_ticket(ticket_id))


@router.post("", response_model=TicketResponse, status_code=201)
async def create_ticket(
    data: TicketCreate,
    current_user: User = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service),
):
    return TicketResponse.from_ticket(ticket_service.create_ticket(data, current_user))


@router.patch("/{ticket_id}", response_model=TicketResponse)
async def update_ticket(
    ticket_id: int,
    data: TicketUpdate,
    current_user: User = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service),
):
    return TicketResponse.from_ticket(ticket_service.update_ticket(ticket_id, data, current_user))
