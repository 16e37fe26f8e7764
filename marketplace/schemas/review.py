from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from marketplace.domain.review_eligibility import MAX_RATING, MIN_RATING
from marketplace.schemas.user import User


class Review(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    rental_id: int
    product_id: int
    reviewer_id: int
    reviewee_id: int
    rating: int
    comment: str | None = None
    created_at: datetime | None = None
    reviewer: User | None = None
    reviewee: User | None = None


class ReviewCreate(BaseModel):
    rental_id: int
    product_id: int
    reviewer_id: int
    reviewee_id: int
    rating: int = Field(
        ..., ge=MIN_RATING, le=MAX_RATING, description=f"Rating ({MIN_RATING}-{MAX_RATING})"
    )
    comment: str | None = None
