import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import marketplace.repositories.payment as payment_repo
import marketplace.repositories.rental as rental_repo
import marketplace.repositories.user as user_repo
from marketplace.db.models.payment import Payment as PaymentModel
from marketplace.db.transaction import transaction
from marketplace.domain.statuses import PaymentMethod, PaymentStatus
from marketplace.errors import DuplicateResourceError, NotFoundError

logger = logging.getLogger(__name__)

PAYMENT_ALREADY_EXISTS = "payment already exists"


def create_payment(
    db: Session,
    rental_id: int,
    user_id: int,
    amount: float,
    method: PaymentMethod,
    status: PaymentStatus | None = None,
    transaction_id: str | None = None,
) -> PaymentModel:
    """
    Create the payment of a rental.

    - Validates rental and paying user exist
    - Validates the rental has no payment yet (at most one per rental)

    A concurrent insert that slips past the duplicate check is stopped by the
    unique constraint on payments.rental_id and reported the same way.

    Raises:
        NotFoundError: If rental or user does not exist.
        DuplicateResourceError: If the rental already has a payment.
    """
    rental = rental_repo.get_rental_by_id(db, rental_id)
    user = user_repo.get_user_by_id(db, user_id)

    if not rental:
        raise NotFoundError("Rental", rental_id)
    if not user:
        raise NotFoundError("User", user_id)

    if payment_repo.get_payment_by_rental_id(db, rental_id):
        logger.warning("Payment for rental %s rejected: %s", rental_id, PAYMENT_ALREADY_EXISTS)
        raise DuplicateResourceError(PAYMENT_ALREADY_EXISTS)

    try:
        with transaction(db) as tx:
            payment = payment_repo.add_payment(
                tx,
                rental_id=rental_id,
                user_id=user_id,
                amount=amount,
                method=method,
                status=status if status is not None else PaymentStatus.PENDING,
                transaction_id=transaction_id,
            )
            payment_id = payment.id
    except IntegrityError as e:
        if payment_repo.get_payment_by_rental_id(db, rental_id):
            logger.warning("Concurrent payment for rental %s rejected", rental_id)
            raise DuplicateResourceError(PAYMENT_ALREADY_EXISTS) from e
        raise

    logger.info("Payment %s recorded for rental %s", payment_id, rental_id)
    return payment_repo.get_payment_by_id(db, payment_id)


def get_payment(db: Session, payment_id: int) -> PaymentModel:
    """Get a payment by ID. Raises NotFoundError if it does not exist."""
    payment = payment_repo.get_payment_by_id(db, payment_id)
    if not payment:
        raise NotFoundError("Payment", payment_id)
    return payment


def update_payment_status(db: Session, payment_id: int, status: PaymentStatus) -> PaymentModel:
    """
    Advance a payment's status, e.g. PENDING -> COMPLETED once settled or
    COMPLETED -> REFUNDED.

    Raises:
        NotFoundError: If payment does not exist.
    """
    payment = payment_repo.update_payment_status(db, payment_id, status)
    logger.info("Payment %s moved to %s", payment_id, status.value)
    return payment


def delete_payment(db: Session, payment_id: int) -> None:
    payment_repo.delete_payment(db, payment_id)
