import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import marketplace.repositories.product as product_repo
import marketplace.repositories.rental as rental_repo
import marketplace.repositories.review as review_repo
import marketplace.repositories.user as user_repo
from marketplace.db.models.review import Review as ReviewModel
from marketplace.db.transaction import transaction
from marketplace.domain.review_eligibility import DEFAULT_REVIEW_POLICY, ReviewEligibilityPolicy
from marketplace.errors import (
    ConflictError,
    DomainValidationError,
    DuplicateResourceError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

RENTAL_NOT_COMPLETED = "rental not completed"
REVIEW_ALREADY_EXISTS = "review already exists"


def create_review(
    db: Session,
    rental_id: int,
    product_id: int,
    reviewer_id: int,
    reviewee_id: int,
    rating: int,
    comment: str | None = None,
    policy: ReviewEligibilityPolicy = DEFAULT_REVIEW_POLICY,
) -> ReviewModel:
    """
    Create the review of a completed rental.

    Business logic:
    - Validates rating bounds before touching storage
    - Validates rental, product, reviewer and reviewee exist
    - Validates the rental reached the terminal COMPLETED state
    - Validates the rental has no review yet (at most one per rental)

    Raises:
        DomainValidationError: If rating is outside the policy bounds.
        NotFoundError: If a referenced entity does not exist.
        ConflictError: If the rental is not completed.
        DuplicateResourceError: If the rental already has a review.
    """
    if not policy.is_rating_in_bounds(rating):
        raise DomainValidationError(
            f"Rating must be between {policy.min_rating} and {policy.max_rating}",
            field="rating",
        )

    rental = rental_repo.get_rental_by_id(db, rental_id)
    product = product_repo.get_product_by_id(db, product_id)
    reviewer = user_repo.get_user_by_id(db, reviewer_id)
    reviewee = user_repo.get_user_by_id(db, reviewee_id)

    if not rental:
        raise NotFoundError("Rental", rental_id)
    if not product:
        raise NotFoundError("Product", product_id)
    if not reviewer:
        raise NotFoundError("Reviewer", reviewer_id)
    if not reviewee:
        raise NotFoundError("Reviewee", reviewee_id)

    if not policy.is_reviewable(rental.status):
        logger.warning("Review for rental %s rejected: %s", rental_id, RENTAL_NOT_COMPLETED)
        raise ConflictError(RENTAL_NOT_COMPLETED)

    if review_repo.get_review_by_rental_id(db, rental_id):
        logger.warning("Review for rental %s rejected: %s", rental_id, REVIEW_ALREADY_EXISTS)
        raise DuplicateResourceError(REVIEW_ALREADY_EXISTS)

    try:
        with transaction(db) as tx:
            review = review_repo.add_review(
                tx,
                rental_id=rental_id,
                product_id=product_id,
                reviewer_id=reviewer_id,
                reviewee_id=reviewee_id,
                rating=rating,
                comment=comment,
            )
            review_id = review.id
    except IntegrityError as e:
        if review_repo.get_review_by_rental_id(db, rental_id):
            logger.warning("Concurrent review for rental %s rejected", rental_id)
            raise DuplicateResourceError(REVIEW_ALREADY_EXISTS) from e
        raise

    logger.info("Review %s left for rental %s", review_id, rental_id)
    return review_repo.get_review_by_id(db, review_id)


def get_review(db: Session, review_id: int) -> ReviewModel:
    """Get a review by ID. Raises NotFoundError if it does not exist."""
    review = review_repo.get_review_by_id(db, review_id)
    if not review:
        raise NotFoundError("Review", review_id)
    return review


def list_reviews(
    db: Session,
    product_id: int | None = None,
    user_id: int | None = None,
    min_rating: int | None = None,
    max_rating: int | None = None,
) -> list[ReviewModel]:
    """
    List reviews by product, by user (as reviewer or reviewee) and/or by
    rating range.

    Raises:
        NotFoundError: If the product or user filter does not exist.
        DomainValidationError: If min_rating is greater than max_rating.
    """
    if min_rating is not None and max_rating is not None and min_rating > max_rating:
        raise DomainValidationError(
            "min_rating cannot be greater than max_rating", field="min_rating"
        )
    if product_id is not None and not product_repo.get_product_by_id(db, product_id):
        raise NotFoundError("Product", product_id)
    if user_id is not None and not user_repo.get_user_by_id(db, user_id):
        raise NotFoundError("User", user_id)

    return review_repo.get_reviews(
        db,
        product_id=product_id,
        user_id=user_id,
        min_rating=min_rating,
        max_rating=max_rating,
    )


def delete_review(db: Session, review_id: int) -> None:
    review_repo.delete_review(db, review_id)
