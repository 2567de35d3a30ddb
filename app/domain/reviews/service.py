"""Review service - Business logic for reviews between clients and masters"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...access import check_access
from ...models import ROLE_ADMIN, ROLE_CLIENT, ROLE_MASTER, Review, Ticket, User
from ...shared.iri import extract_entity, extract_id
from .repository import ReviewRepository
from .schemas import ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def _check_rating(rating: Optional[float]) -> None:
    if rating is not None and not MIN_RATING <= rating <= MAX_RATING:
        raise HTTPException(status_code=400, detail=f"Rating must be between {MIN_RATING} and {MAX_RATING}")


class ReviewService:
    """Service layer for review business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepository()

    def _get_review_or_404(self, review_id: int) -> Review:
        review = self.repo.get_review_by_id(self.db, review_id)
        if not review:
            raise HTTPException(status_code=404, detail="Review not found")
        return review

    def _user_filter(self, value: Optional[str]) -> Optional[int]:
        if value is None:
            return None
        user_id = extract_id(value, "users")
        if user_id is None:
            raise HTTPException(status_code=400, detail="Wrong user format")
        return user_id

    def get_reviews(
        self, master: Optional[str] = None, client: Optional[str] = None, review_type: Optional[str] = None
    ) -> list[Review]:
        if review_type is not None and review_type not in Review.TYPES:
            raise HTTPException(status_code=400, detail="Wrong review type")
        return self.repo.get_reviews(
            self.db,
            master_id=self._user_filter(master),
            client_id=self._user_filter(client),
            review_type=review_type,
        )

    def get_my_reviews(self, user: User) -> list[Review]:
        check_access(user)
        return self.repo.get_reviews_for_user(self.db, user.id)

    def create_review(self, data: ReviewCreate, user: User) -> Review:
        """
        Masters review clients (type "client"), clients review masters
        (type "master"). An optional ticket must link the two sides: it is
        accepted when the reviewed user is on it (client as author, master as
        master) or when the writer is on the opposite side of it.

        Both ticket kinds are checked: a client's request unrelated to both
        users is refused for either review type, and a master may cite their
        own service ticket when reviewing a client.
        """
        check_access(user)
        _check_rating(data.rating)

        ticket = extract_entity(self.db, data.ticket, Ticket, "tickets") if data.ticket is not None else None

        if data.type == "client":
            if data.client is None:
                raise HTTPException(status_code=400, detail="Client parameter is required")
            client = extract_entity(self.db, data.client, User, "users")
            if not user.has_role(ROLE_MASTER):
                raise HTTPException(status_code=403, detail="Access denied")
            if not client.has_role(ROLE_CLIENT):
                raise HTTPException(status_code=403, detail="Client's role doesn't match")
            if ticket is not None and client.id != ticket.author_id and user.id != ticket.master_id:
                raise HTTPException(status_code=404, detail="Client's ticket doesn't match")
            master = user

        elif data.type == "master":
            if data.master is None:
                raise HTTPException(status_code=400, detail="Master parameter is required")
            master = extract_entity(self.db, data.master, User, "users")
            if not user.has_role(ROLE_CLIENT):
                raise HTTPException(status_code=403, detail="Access denied")
            if not master.has_role(ROLE_MASTER):
                raise HTTPException(status_code=403, detail="Master's role doesn't match")
            if ticket is not None and master.id != ticket.master_id and user.id != ticket.author_id:
                raise HTTPException(status_code=404, detail="Master's service doesn't match")
            client = user

        else:
            raise HTTPException(status_code=400, detail="Wrong review type")

        review = self.repo.create_review(
            self.db,
            type=data.type,
            rating=data.rating,
            description=data.description,
            ticket_id=ticket.id if ticket else None,
            master_id=master.id,
            client_id=client.id,
        )
        logger.info(f"⭐ Review #{review.id} ({review.type}, {review.rating}) by user #{user.id}")
        return review

    def update_review(self, review_id: int, data: ReviewUpdate, user: User) -> Review:
        check_access(user)
        review = self._get_review_or_404(review_id)

        if review.writer_id != user.id:
            raise HTTPException(status_code=403, detail="Ownership doesn't match")

        _check_rating(data.rating)
        return self.repo.update_review(self.db, review, rating=data.rating, description=data.description)

    def delete_review(self, review_id: int, user: User) -> None:
        check_access(user)
        review = self._get_review_or_404(review_id)

        if review.writer_id != user.id and not user.has_role(ROLE_ADMIN):
            raise HTTPException(status_code=403, detail="Ownership doesn't match")

        self.repo.delete_review(self.db, review)
        logger.info(f"🗑️ Review #{review_id} deleted by user #{user.id}")
