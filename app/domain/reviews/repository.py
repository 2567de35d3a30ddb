"""Review repository - Database operations for reviews"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Review


class ReviewRepository:
    """Repository for review database operations"""

    @staticmethod
    def get_reviews(
        db: Session,
        master_id: Optional[int] = None,
        client_id: Optional[int] = None,
        review_type: Optional[str] = None,
    ) -> list[Review]:
        query = db.query(Review)
        if master_id is not None:
            query = query.filter(Review.master_id == master_id)
        if client_id is not None:
            query = query.filter(Review.client_id == client_id)
        if review_type is not None:
            query = query.filter(Review.type == review_type)
        return query.order_by(Review.created_at.desc(), Review.id.desc()).all()

    @staticmethod
    def get_reviews_for_user(db: Session, user_id: int) -> list[Review]:
        """Reviews the user wrote or received"""
        return (
            db.query(Review)
            .filter(or_(Review.master_id == user_id, Review.client_id == user_id))
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    @staticmethod
    def get_review_by_id(db: Session, review_id: int) -> Optional[Review]:
        return db.get(Review, review_id)

    @staticmethod
    def create_review(db: Session, **review_data) -> Review:
        review = Review(**review_data)
        db.add(review)
        db.commit()
        db.refresh(review)
        return review

    @staticmethod
    def update_review(db: Session, review: Review, **updates) -> Review:
        for key, value in updates.items():
            if value is not None and hasattr(review, key):
                setattr(review, key, value)

        db.commit()
        db.refresh(review)
        return review

    @staticmethod
    def delete_review(db: Session, review: Review) -> None:
        db.delete(review)
        db.commit()
