from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from marketplace.api.deps import get_db
from marketplace.schemas.payment import Payment, PaymentCreate, PaymentStatusUpdate
from marketplace.services.payment import (
    create_payment,
    delete_payment,
    get_payment,
    update_payment_status,
)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", response_model=Payment, status_code=status.HTTP_201_CREATED)
def create_new_payment(payment_data: PaymentCreate, db: Session = Depends(get_db)):
    """
    Record the payment of a rental. A rental can have at most one payment.
    """
    payment = create_payment(
        db,
        rental_id=payment_data.rental_id,
        user_id=payment_data.user_id,
        amount=payment_data.amount,
        method=payment_data.method,
        status=payment_data.status,
        transaction_id=payment_data.transaction_id,
    )
    return Payment.model_validate(payment)


@router.get("/{payment_id}", response_model=Payment)
def get_payment_by_id(payment_id: int, db: Session = Depends(get_db)):
    payment = get_payment(db, payment_id)
    return Payment.model_validate(payment)


@router.patch("/{payment_id}/status", response_model=Payment)
def update_payment_status_by_id(
    payment_id: int,
    status_data: PaymentStatusUpdate,
    db: Session = Depends(get_db),
):
    """
    Advance a payment's status (for example PENDING to COMPLETED, or to REFUNDED).
    """
    payment = update_payment_status(db, payment_id, status_data.status)
    return Payment.model_validate(payment)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment_by_id(payment_id: int, db: Session = Depends(get_db)):
    delete_payment(db, payment_id)
