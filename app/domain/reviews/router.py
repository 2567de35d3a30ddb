"""Review router - FastAPI endpoints for reviews"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import ReviewCreate, ReviewResponse, ReviewUpdate
from .service import ReviewService

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(db)


@router.get("", response_model=list[ReviewResponse])
async def get_reviews(
    master: Optional[str] = Query(None, description="Master IRI or id"),
    client: Optional[str] = Query(None, description="Client IRI or id"),
    type: Optional[str] = Query(None, description="client or master"),
    service: ReviewService = Depends(get_review_service),
):
    reviews = service.get_reviews(master=master, client=client, review_type=type)
    return [ReviewResponse.from_review(r) for r in reviews]


@router.get("/me", response_model=list[ReviewResponse])
async def get_my_reviews(
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    return [ReviewResponse.from_review(r) for r in service.get_my_reviews(current_user)]


@router.post("", response_model=ReviewResponse, status_code=201)
async def create_review(
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    return ReviewResponse.from_review(service.create_review(data, current_user))


@router.patch("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: int,
    data: ReviewUpdate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    return ReviewResponse.from_review(service.update_review(review_id, data, current_user))


@router.delete("/{review_id}", status_code=204)
async def delete_review(
    review_id: int,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    service.delete_review(review_id, current_user)
    return Response(status_code=204)
