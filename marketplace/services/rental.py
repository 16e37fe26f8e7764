import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session
from sqlalchemy.sql import Update

import marketplace.repositories.product as product_repo
import marketplace.repositories.rental as rental_repo
import marketplace.repositories.user as user_repo
from marketplace.db.models.rental import Rental as RentalModel
from marketplace.db.transaction import transaction
from marketplace.domain.statuses import RentalStatus
from marketplace.errors import ConflictError, DomainValidationError, NotFoundError
from marketplace.services.availability import PRODUCT_UNAVAILABLE, check_rental_request

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def create_rental(
    db: Session,
    product_id: int,
    owner_id: int,
    renter_id: int,
    start_date: datetime,
    end_date: datetime,
    total_price: float,
    status: RentalStatus | None = None,
) -> RentalModel:
    """
    Create a rental and mark its product RENTED as one atomic unit.

    - Validates the rental window (end after start) before any storage access
    - Runs the availability guard (existence, ownership, availability)
    - Claims the product with a conditional AVAILABLE -> RENTED update and
      inserts the rental in the same transaction

    If a concurrent request claimed the product between the guard and the
    claim, the conditional update matches no row and the whole transaction
    is rolled back.

    Raises:
        DomainValidationError: If end_date does not come after start_date.
        NotFoundError: If product, owner or renter does not exist.
        ConflictError: On owner mismatch or unavailable product.
    """
    if _as_utc(end_date) <= _as_utc(start_date):
        raise DomainValidationError(
            f"End date ({end_date.isoformat()}) must be after start date ({start_date.isoformat()})",
            field="end_date",
        )

    try:
        check_rental_request(db, product_id, owner_id, renter_id)

        with transaction(db) as tx:
            if not product_repo.claim_product(tx, product_id):
                raise ConflictError(PRODUCT_UNAVAILABLE)

            rental = rental_repo.add_rental(
                tx,
                product_id=product_id,
                owner_id=owner_id,
                renter_id=renter_id,
                start_date=start_date,
                end_date=end_date,
                total_price=total_price,
                status=status if status is not None else RentalStatus.ACTIVE,
            )
            rental_id = rental.id
    except ConflictError as e:
        logger.warning("Rental request for product %s rejected: %s", product_id, e)
        raise

    logger.info(
        "Rental %s created for product %s (owner %s, renter %s)",
        rental_id,
        product_id,
        owner_id,
        renter_id,
    )
    return rental_repo.get_rental_by_id(db, rental_id)


def restore_availability(product_id: int) -> Update:
    """
    Build the statement that puts a product back to AVAILABLE.

    Returned as a statement value rather than executed: availability may
    only flip back in lock-step with a rental removal, so the only consumer
    is the rental removal cascade plan, which runs it inside its own scope.
    """
    return product_repo.release_product_statement(product_id)


def get_rental(db: Session, rental_id: int) -> RentalModel:
    """
    Get a rental by ID.

    Raises:
        NotFoundError: If rental does not exist.
    """
    rental = rental_repo.get_rental_by_id(db, rental_id)
    if not rental:
        raise NotFoundError("Rental", rental_id)
    return rental


def list_rentals(
    db: Session,
    owner_id: int | None = None,
    renter_id: int | None = None,
    product_id: int | None = None,
    status: RentalStatus | None = None,
) -> list[RentalModel]:
    """
    List rentals, optionally filtered.

    Raises:
        NotFoundError: If a filter references an owner, renter or product
            that does not exist.
    """
    if owner_id is not None and not user_repo.get_user_by_id(db, owner_id):
        raise NotFoundError("Owner", owner_id)
    if renter_id is not None and not user_repo.get_user_by_id(db, renter_id):
        raise NotFoundError("Renter", renter_id)
    if product_id is not None and not product_repo.get_product_by_id(db, product_id):
        raise NotFoundError("Product", product_id)

    return rental_repo.get_rentals(
        db,
        owner_id=owner_id,
        renter_id=renter_id,
        product_id=product_id,
        status=status,
    )


def update_rental_status(db: Session, rental_id: int, status: RentalStatus) -> RentalModel:
    """
    Advance a rental's lifecycle status on behalf of an external process.

    Product availability is not touched: it tracks whether the rental row
    exists, not its lifecycle state.
    """
    rental = rental_repo.update_rental_status(db, rental_id, status)
    logger.info("Rental %s moved to %s", rental_id, status.value)
    return rental
