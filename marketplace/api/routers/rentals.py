from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marketplace.api.deps import get_db
from marketplace.domain.statuses import RentalStatus
from marketplace.schemas.rental import Rental, RentalCreate, RentalStatusUpdate
from marketplace.services.cascade import remove_rental
from marketplace.services.rental import (
    create_rental,
    get_rental,
    list_rentals,
    update_rental_status,
)

router = APIRouter(prefix="/rentals", tags=["rentals"])


@router.post("", response_model=Rental, status_code=status.HTTP_201_CREATED)
def create_new_rental(rental_data: RentalCreate, db: Session = Depends(get_db)):
    """
    Rent a product. The product must belong to owner_id and be AVAILABLE;
    on success it becomes RENTED.
    """
    rental = create_rental(
        db,
        product_id=rental_data.product_id,
        owner_id=rental_data.owner_id,
        renter_id=rental_data.renter_id,
        start_date=rental_data.start_date,
        end_date=rental_data.end_date,
        total_price=rental_data.total_price,
        status=rental_data.status,
    )
    return Rental.model_validate(rental)


@router.get("", response_model=list[Rental])
def get_all_rentals(
    owner: int | None = Query(None, description="Filter by owner user ID"),
    renter: int | None = Query(None, description="Filter by renter user ID"),
    product: int | None = Query(None, description="Filter by product ID"),
    rental_status: RentalStatus | None = Query(
        None, alias="status", description="Filter by rental status"
    ),
    db: Session = Depends(get_db),
):
    """
    Get all rentals with optional filters. Unknown owner, renter or product
    IDs are reported as not found rather than as an empty list.
    """
    rentals = list_rentals(
        db,
        owner_id=owner,
        renter_id=renter,
        product_id=product,
        status=rental_status,
    )
    return [Rental.model_validate(rental) for rental in rentals]


@router.get("/{rental_id}", response_model=Rental)
def get_rental_by_id(rental_id: int, db: Session = Depends(get_db)):
    rental = get_rental(db, rental_id)
    return Rental.model_validate(rental)


@router.patch("/{rental_id}/status", response_model=Rental)
def update_rental_status_by_id(
    rental_id: int,
    status_data: RentalStatusUpdate,
    db: Session = Depends(get_db),
):
    """
    Advance a rental's lifecycle status. Completing a rental unlocks its review;
    product availability is unaffected.
    """
    rental = update_rental_status(db, rental_id, status_data.status)
    return Rental.model_validate(rental)


@router.delete("/{rental_id}", response_model=Rental)
def delete_rental_by_id(rental_id: int, db: Session = Depends(get_db)):
    """
    Delete a rental with its payment and review, and make the product
    AVAILABLE again. Returns the removed rental.
    """
    return remove_rental(db, rental_id)
