"""Ticket service - Business logic for requests and service offers"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...access import check_access
from ...models import ROLE_CLIENT, ROLE_MASTER, Category, Ticket, Unit, User
from ...shared.iri import extract_entity, extract_id
from .repository import TicketRepository
from .schemas import TicketCreate, TicketUpdate

logger = logging.getLogger(__name__)


class TicketService:
    """Service layer for ticket business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TicketRepository()

    def get_tickets(
        self, service: Optional[bool] = None, category: Optional[str] = None, active: Optional[bool] = None
    ) -> list[Ticket]:
        category_id = None
        if category is not None:
            category_id = extract_id(category, "categories")
            if category_id is None:
                raise HTTPException(status_code=400, detail="Wrong category format")
        return self.repo.get_tickets(self.db, service=service, category_id=category_id, active=active)

    def get_my_tickets(self, user: User) -> list[Ticket]:
        check_access(user)
        return self.repo.get_tickets_for_user(self.db, user.id)

    def get_ticket(self, ticket_id: int) -> Ticket:
        ticket = self.repo.get_ticket_by_id(self.db, ticket_id)
        if not ticket:
            raise HTTPException(status_code=404, detail="Ticket not found")
        return ticket

    def create_ticket(self, data: TicketCreate, user: User) -> Ticket:
        """
        A client posts a request (service=False, author=client); a master
        posts a service offer (service=True, master=master).
        """
        check_access(user)

        if not data.title or not data.description or data.category is None or data.unit is None:
            raise HTTPException(status_code=400, detail="Missing required fields")

        category = extract_entity(self.db, data.category, Category, "categories")
        unit = extract_entity(self.db, data.unit, Unit, "units")

        ticket_data = {
            "title": data.title,
            "description": data.description,
            "notice": data.notice,
            "budget": data.budget,
            "negotiable_budget": data.negotiableBudget,
            "active": True if data.active is None else data.active,
            "category_id": category.id,
            "unit_id": unit.id,
        }

        if user.has_role(ROLE_CLIENT):
            ticket_data.update(author_id=user.id, master_id=None, service=False)
        elif user.has_role(ROLE_MASTER):
            ticket_data.update(master_id=user.id, author_id=None, service=True)
        else:
            raise HTTPException(status_code=403, detail="Access denied")

        ticket = self.repo.create_ticket(self.db, **ticket_data)
        kind = "service" if ticket.service else "request"
        logger.info(f"📝 Ticket #{ticket.id} ({kind}) created by user #{user.id}")
        return ticket

    def update_ticket(self, ticket_id: int, data: TicketUpdate, user: User) -> Ticket:
        check_access(user)
        ticket = self.get_ticket(ticket_id)

        if user.id not in (ticket.author_id, ticket.master_id):
            raise HTTPException(status_code=403, detail="Ownership doesn't match")

        updates = {
            "title": data.title,
            "description": data.description,
            "notice": data.notice,
            "budget": data.budget,
            "negotiable_budget": data.negotiableBudget,
            "active": data.active,
        }
        if data.category is not None:
            updates["category_id"] = extract_entity(self.db, data.category, Category, "categories").id
        if data.unit is not None:
            updates["unit_id"] = extract_entity(self.db, data.unit, Unit, "units").id

        return self.repo.update_ticket(self.db, ticket, **updates)
