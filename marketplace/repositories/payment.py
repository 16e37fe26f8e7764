from sqlalchemy.orm import Session

from marketplace.db.models.payment import Payment as PaymentModel
from marketplace.domain.statuses import PaymentMethod, PaymentStatus
from marketplace.errors import NotFoundError


def get_payment_by_id(db: Session, payment_id: int) -> PaymentModel | None:
    """Get a payment by ID."""
    return db.query(PaymentModel).filter(PaymentModel.id == payment_id).first()


def get_payment_by_rental_id(db: Session, rental_id: int) -> PaymentModel | None:
    """Get the payment attached to a rental. Used to check for duplicates."""
    return db.query(PaymentModel).filter(PaymentModel.rental_id == rental_id).first()


def add_payment(
    db: Session,
    rental_id: int,
    user_id: int,
    amount: float,
    method: PaymentMethod,
    status: PaymentStatus = PaymentStatus.PENDING,
    transaction_id: str | None = None,
) -> PaymentModel:
    """Stage a new payment row inside the caller's transaction. Flushes, does not commit."""
    db_payment = PaymentModel(
        rental_id=rental_id,
        user_id=user_id,
        amount=amount,
        method=method,
        status=status,
        transaction_id=transaction_id,
    )
    db.add(db_payment)
    db.flush()
    return db_payment


def update_payment_status(db: Session, payment_id: int, status: PaymentStatus) -> PaymentModel:
    """Update a payment's status."""
    payment = get_payment_by_id(db, payment_id)
    if not payment:
        raise NotFoundError("Payment", payment_id)

    payment.status = status
    db.commit()
    db.refresh(payment)
    return payment


def delete_payment(db: Session, payment_id: int) -> None:
    """Delete a payment by ID."""
    payment = get_payment_by_id(db, payment_id)
    if not payment:
        raise NotFoundError("Payment", payment_id)

    db.delete(payment)
    db.commit()
