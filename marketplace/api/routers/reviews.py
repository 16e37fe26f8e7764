from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marketplace.api.deps import get_db
from marketplace.domain.review_eligibility import MAX_RATING, MIN_RATING
from marketplace.schemas.review import Review, ReviewCreate
from marketplace.services.review import create_review, delete_review, get_review, list_reviews

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", response_model=Review, status_code=status.HTTP_201_CREATED)
def create_new_review(review_data: ReviewCreate, db: Session = Depends(get_db)):
    """
    Review a rental. Only COMPLETED rentals can be reviewed, once.
    """
    review = create_review(
        db,
        rental_id=review_data.rental_id,
        product_id=review_data.product_id,
        reviewer_id=review_data.reviewer_id,
        reviewee_id=review_data.reviewee_id,
        rating=review_data.rating,
        comment=review_data.comment,
    )
    return Review.model_validate(review)


@router.get("", response_model=list[Review])
def get_all_reviews(
    product: int | None = Query(None, description="Filter by product ID"),
    user: int | None = Query(None, description="Filter by reviewer or reviewee user ID"),
    min_rating: int | None = Query(None, ge=MIN_RATING, le=MAX_RATING, description="Minimum rating (inclusive)"),
    max_rating: int | None = Query(None, ge=MIN_RATING, le=MAX_RATING, description="Maximum rating (inclusive)"),
    db: Session = Depends(get_db),
):
    """
    Get reviews.

    Optional query parameters:
    - product: only reviews of this product
    - user: reviews written by or about this user
    - min_rating / max_rating: inclusive rating range
    """
    reviews = list_reviews(
        db,
        product_id=product,
        user_id=user,
        min_rating=min_rating,
        max_rating=max_rating,
    )
    return [Review.model_validate(review) for review in reviews]


@router.get("/{review_id}", response_model=Review)
def get_review_by_id(review_id: int, db: Session = Depends(get_db)):
    review = get_review(db, review_id)
    return Review.model_validate(review)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review_by_id(review_id: int, db: Session = Depends(get_db)):
    delete_review(db, review_id)
