"""Ticket repository - Database operations for tickets"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Ticket


class TicketRepository:
    """Repository for ticket database operations"""

    @staticmethod
    def get_tickets(
        db: Session,
        service: Optional[bool] = None,
        category_id: Optional[int] = None,
        active: Optional[bool] = None,
    ) -> list[Ticket]:
        query = db.query(Ticket)
        if service is not None:
            query = query.filter(Ticket.service.is_(service))
        if category_id is not None:
            query = query.filter(Ticket.category_id == category_id)
        if active is not None:
            query = query.filter(Ticket.active.is_(active))
        return query.order_by(Ticket.created_at.desc(), Ticket.id.desc()).all()

    @staticmethod
    def get_tickets_for_user(db: Session, user_id: int) -> list[Ticket]:
        """Requests the user authored and services the user offers"""
        return (
            db.query(Ticket)
            .filter(or_(Ticket.author_id == user_id, Ticket.master_id == user_id))
            .order_by(Ticket.created_at.desc(), Ticket.id.desc())
            .all()
        )

    @staticmethod
    def get_ticket_by_id(db: Session, ticket_id: int) -> Optional[Ticket]:
        return db.get(Ticket, ticket_id)

    @staticmethod
    def create_ticket(db: Session, **ticket_data) -> Ticket:
        ticket = Ticket(**ticket_data)
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
        return ticket

    @staticmethod
    def update_ticket(db: Session, ticket: Ticket, **updates) -> Ticket:
        for key, value in updates.items():
            if value is not None and hasattr(ticket, key):
                setattr(ticket, key, value)

        db.commit()
        db.refresh(ticket)
        return ticket
