import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, func
from sqlmodel import Session, select

from flowershop.exceptions import Forbidden, NotFound, Unauthorized
from flowershop.models.file import File
from flowershop.models.product import Product
from flowershop.models.review import Review
from flowershop.schemas.review_schemas import ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)


def recompute_product_rating(session: Session, product_id: int) -> Optional[float]:
    """Mean rating over the product's reviews, 0 when it has none."""
    product = session.get(Product, product_id)
    if not product:
        return None

    average = session.exec(
        select(func.avg(Review.rating)).where(Review.parent_id == product_id)
    ).one()

    product.rating = float(average or 0)
    session.add(product)
    session.commit()
    session.refresh(product)
    return product.rating


def on_review_committed(session: Session, *product_ids: int) -> None:
    """Post-write hook: callers invoke it after a review create/update/delete commits."""
    for product_id in {pid for pid in product_ids if pid is not None}:
        rating = recompute_product_rating(session, product_id)
        logger.debug("Product %s rating is now %s", product_id, rating)


def _attach_files(session: Session, review: Review) -> dict:
    files = session.exec(
        select(File)
        .where(File.parent_type == "review", File.parent_id == review.id)
        .order_by(File.created_at)
    ).all()
    return {
        **review.model_dump(),
        "files": [{"id": f.id, "filename": f.filename, "mimetype": f.mimetype} for f in files],
    }


def serialize_reviews(session: Session, reviews: List[Review]) -> List[dict]:
    return [_attach_files(session, r) for r in reviews]


def list_reviews(session: Session) -> List[Review]:
    return session.exec(select(Review).order_by(Review.created_at.desc())).all()


def list_by_parent(session: Session, parent_id: int) -> List[Review]:
    return session.exec(
        select(Review)
        .where(Review.parent_id == parent_id)
        .order_by(Review.created_at.desc())
    ).all()


def list_by_user(session: Session, user_id: int) -> List[Review]:
    return session.exec(
        select(Review)
        .where(Review.user_id == user_id)
        .order_by(Review.created_at.desc())
    ).all()


def get_review(session: Session, review_id: int) -> Review:
    review = session.get(Review, review_id)
    if not review:
        raise NotFound("Review not found")
    return review


def _check_parent(session: Session, parent_id: int) -> None:
    if not session.get(Product, parent_id):
        raise NotFound("Product not found")


def _check_owner(review: Review, user_id: Optional[int], action: str) -> None:
    if review.user_id is None:
        return
    if user_id is None:
        raise Unauthorized(f"Log in to {action} this review")
    if review.user_id != user_id:
        raise Forbidden(f"You are not allowed to {action} this review")


def create_review(session: Session, data: ReviewCreate, user_id: Optional[int] = None) -> Review:
    _check_parent(session, data.parent_id)

    review = Review(
        title=data.title,
        description=data.description,
        rating=data.rating,
        parent_id=data.parent_id,
        user_id=user_id,
    )
    session.add(review)
    session.commit()
    session.refresh(review)
    return review


def update_review(
    session: Session,
    review_id: int,
    data: ReviewUpdate,
    user_id: Optional[int] = None,
) -> tuple[Review, int]:
    """Returns the review and the parent it had before the update."""
    review = get_review(session, review_id)
    _check_owner(review, user_id, "edit")
    _check_parent(session, data.parent_id)

    previous_parent = review.parent_id
    review.title = data.title
    review.description = data.description
    review.rating = data.rating
    review.parent_id = data.parent_id
    review.updated_at = datetime.utcnow()

    session.add(review)
    session.commit()
    session.refresh(review)
    return review, previous_parent


def delete_review(session: Session, review_id: int, user_id: Optional[int] = None) -> dict:
    review = get_review(session, review_id)
    _check_owner(review, user_id, "delete")

    snapshot = review.model_dump()
    session.exec(delete(File).where(File.parent_type == "review", File.parent_id == review_id))
    session.delete(review)
    session.commit()
    return snapshot
