from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from flowershop.database import get_session
from flowershop.dependencies.auth import get_current_user, get_optional_user
from flowershop.schemas.review_schemas import ReviewCreate, ReviewUpdate
from flowershop.services import review_service
from flowershop.services.session_service import SessionContext



router = APIRouter()


# ---------------------------------------------------------
# LIST / READ
# ---------------------------------------------------------

@router.get("")
def list_reviews(session: Session = Depends(get_session)):
    return review_service.serialize_reviews(session, review_service.list_reviews(session))


@router.get("/user/me")
def my_reviews(
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user)
):
    reviews = review_service.list_by_user(session, current_user.user_id)
    return review_service.serialize_reviews(session, reviews)


@router.get("/user/{user_id}")
def reviews_by_user(user_id: int, session: Session = Depends(get_session)):
    return review_service.serialize_reviews(session, review_service.list_by_user(session, user_id))


@router.get("/parent/{parent_id}")
def reviews_by_parent(parent_id: int, session: Session = Depends(get_session)):
    return review_service.serialize_reviews(session, review_service.list_by_parent(session, parent_id))


@router.get("/{review_id}")
def get_review(review_id: int, session: Session = Depends(get_session)):
    review = review_service.get_review(session, review_id)
    return review_service.serialize_reviews(session, [review])[0]


# ---------------------------------------------------------
# WRITE (product rating is refreshed after each commit)
# ---------------------------------------------------------

@router.post("", status_code=status.HTTP_201_CREATED)
def create_review(
    data: ReviewCreate,
    session: Session = Depends(get_session),
    current_user: Optional[SessionContext] = Depends(get_optional_user)
):
    user_id = current_user.user_id if current_user else None
    review = review_service.create_review(session, data, user_id)
    review_service.on_review_committed(session, review.parent_id)
    return review_service.serialize_reviews(session, [review])[0]


@router.put("/{review_id}")
def update_review(
    review_id: int,
    data: ReviewUpdate,
    session: Session = Depends(get_session),
    current_user: Optional[SessionContext] = Depends(get_optional_user)
):
    user_id = current_user.user_id if current_user else None
    review, previous_parent = review_service.update_review(session, review_id, data, user_id)
    review_service.on_review_committed(session, previous_parent, review.parent_id)
    return review_service.serialize_reviews(session, [review])[0]


@router.delete("/{review_id}")
def delete_review(
    review_id: int,
    session: Session = Depends(get_session),
    current_user: Optional[SessionContext] = Depends(get_optional_user)
):
    user_id = current_user.user_id if current_user else None
    deleted = review_service.delete_review(session, review_id, user_id)
    review_service.on_review_committed(session, deleted["parent_id"])
    return {"message": "Review deleted successfully", "review": deleted}
