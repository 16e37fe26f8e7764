from __future__ import annotations

from dataclasses import dataclass

from marketplace.domain.statuses import RentalStatus

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True, slots=True)
class ReviewEligibilityPolicy:
    """Defines when a rental may receive a review and what a valid rating is.

    Semantics (intentionally centralized):
    - A rental is reviewable only once it reached the terminal state
      (RentalStatus.COMPLETED).
    - A rating is valid if min_rating <= rating <= max_rating (both inclusive).

    Uniqueness (one review per rental) is a storage concern and is enforced
    by the review service together with the unique constraint on
    reviews.rental_id.
    """

    min_rating: int = MIN_RATING
    max_rating: int = MAX_RATING
    terminal_status: RentalStatus = RentalStatus.COMPLETED

    def is_rating_in_bounds(self, rating: int) -> bool:
        return self.min_rating <= rating <= self.max_rating

    def is_reviewable(self, rental_status: RentalStatus | str) -> bool:
        return RentalStatus(rental_status) == self.terminal_status

    def sqlalchemy_rating_check(self, column_name: str = "rating") -> str:
        """Render the rating bounds as a CHECK constraint expression.

        Kept here so migrations and models share the same limits.
        """
        return f"{column_name} >= {self.min_rating} AND {column_name} <= {self.max_rating}"


DEFAULT_REVIEW_POLICY = ReviewEligibilityPolicy()
