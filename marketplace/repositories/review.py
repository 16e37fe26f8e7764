from sqlalchemy import or_
from sqlalchemy.orm import Session

from marketplace.db.models.review import Review as ReviewModel
from marketplace.errors import NotFoundError


def get_review_by_id(db: Session, review_id: int) -> ReviewModel | None:
    """Get a review by ID."""
    return db.query(ReviewModel).filter(ReviewModel.id == review_id).first()


def get_review_by_rental_id(db: Session, rental_id: int) -> ReviewModel | None:
    """Get the review attached to a rental. Used to check for duplicates."""
    return db.query(ReviewModel).filter(ReviewModel.rental_id == rental_id).first()


def get_reviews(
    db: Session,
    product_id: int | None = None,
    user_id: int | None = None,
    min_rating: int | None = None,
    max_rating: int | None = None,
) -> list[ReviewModel]:
    """
    Get all reviews, optionally filtered.

    user_id matches reviews written by or about the user.
    """
    query = db.query(ReviewModel)

    if product_id is not None:
        query = query.filter(ReviewModel.product_id == product_id)
    if user_id is not None:
        query = query.filter(
            or_(ReviewModel.reviewer_id == user_id, ReviewModel.reviewee_id == user_id)
        )
    if min_rating is not None:
        query = query.filter(ReviewModel.rating >= min_rating)
    if max_rating is not None:
        query = query.filter(ReviewModel.rating <= max_rating)

    return query.order_by(ReviewModel.id).all()


def add_review(
    db: Session,
    rental_id: int,
    product_id: int,
    reviewer_id: int,
    reviewee_id: int,
    rating: int,
    comment: str | None = None,
) -> ReviewModel:
    """Stage a new review row inside the caller's transaction. Flushes, does not commit."""
    db_review = ReviewModel(
        rental_id=rental_id,
        product_id=product_id,
        reviewer_id=reviewer_id,
        reviewee_id=reviewee_id,
        rating=rating,
        comment=comment,
    )
    db.add(db_review)
    db.flush()
    return db_review


def delete_review(db: Session, review_id: int) -> None:
    """Delete a review by ID."""
    review = get_review_by_id(db, review_id)
    if not review:
        raise NotFoundError("Review", review_id)

    db.delete(review)
    db.commit()
