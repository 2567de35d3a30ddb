"""Appeal repository - Database operations for appeals"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appeal


class AppealRepository:
    """Repository for appeal database operations"""

    @staticmethod
    def get_appeals(db: Session, appeal_type: Optional[str] = None) -> list[Appeal]:
        query = db.query(Appeal)
        if appeal_type is not None:
            query = query.filter(Appeal.type == appeal_type)
        return query.order_by(Appeal.created_at.desc(), Appeal.id.desc()).all()

    @staticmethod
    def get_appeal_by_id(db: Session, appeal_id: int) -> Optional[Appeal]:
        return db.get(Appeal, appeal_id)

    @staticmethod
    def create_appeal(db: Session, appeal: Appeal) -> Appeal:
        """Persist an appeal together with its typed child row"""
        db.add(appeal)
        db.commit()
        db.refresh(appeal)
        return appeal
