"""Tech support repository - Database operations for support tickets and their messages"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import TechSupport, TechSupportMessage


class TechSupportRepository:
    """Repository for tech support database operations"""

    @staticmethod
    def get_by_id(db: Session, tech_support_id: int) -> Optional[TechSupport]:
        return db.get(TechSupport, tech_support_id)

    @staticmethod
    def get_for_user(db: Session, user_id: int) -> list[TechSupport]:
        """Tickets the user opened or administers"""
        return (
            db.query(TechSupport)
            .filter(or_(TechSupport.author_id == user_id, TechSupport.administrant_id == user_id))
            .order_by(TechSupport.created_at.desc(), TechSupport.id.desc())
            .all()
        )

    @staticmethod
    def get_for_admin(db: Session, admin_id: int) -> list[TechSupport]:
        return (
            db.query(TechSupport)
            .filter(TechSupport.administrant_id == admin_id)
            .order_by(TechSupport.created_at.desc(), TechSupport.id.desc())
            .all()
        )

    @staticmethod
    def create(db: Session, **data) -> TechSupport:
        tech_support = TechSupport(**data)
        db.add(tech_support)
        db.commit()
        db.refresh(tech_support)
        return tech_support

    @staticmethod
    def save(db: Session, obj):
        db.commit()
        db.refresh(obj)
        return obj


class TechSupportMessageRepository:
    """Repository for tech support message database operations"""

    @staticmethod
    def get_by_id(db: Session, message_id: int) -> Optional[TechSupportMessage]:
        return db.get(TechSupportMessage, message_id)

    @staticmethod
    def create(db: Session, **data) -> TechSupportMessage:
        message = TechSupportMessage(**data)
        db.add(message)
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def delete(db: Session, message: TechSupportMessage) -> None:
        db.delete(message)
        db.commit()
