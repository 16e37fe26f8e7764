from datetime import datetime

from sqlalchemy.orm import Session, joinedload

from marketplace.db.models.rental import Rental as RentalModel
from marketplace.domain.statuses import RentalStatus
from marketplace.errors import NotFoundError


def get_rental_by_id(db: Session, rental_id: int) -> RentalModel | None:
    """Get a rental by ID with product, owner and renter relationships loaded."""
    return (
        db.query(RentalModel)
        .options(
            joinedload(RentalModel.product),
            joinedload(RentalModel.owner),
            joinedload(RentalModel.renter),
        )
        .filter(RentalModel.id == rental_id)
        .first()
    )


def get_rentals(
    db: Session,
    owner_id: int | None = None,
    renter_id: int | None = None,
    product_id: int | None = None,
    status: RentalStatus | None = None,
) -> list[RentalModel]:
    """Get all rentals, optionally filtered by owner, renter, product and status."""
    query = db.query(RentalModel)

    if owner_id is not None:
        query = query.filter(RentalModel.owner_id == owner_id)
    if renter_id is not None:
        query = query.filter(RentalModel.renter_id == renter_id)
    if product_id is not None:
        query = query.filter(RentalModel.product_id == product_id)
    if status is not None:
        query = query.filter(RentalModel.status == status)

    return query.order_by(RentalModel.id).all()


def add_rental(
    db: Session,
    product_id: int,
    owner_id: int,
    renter_id: int,
    start_date: datetime,
    end_date: datetime,
    total_price: float,
    status: RentalStatus = RentalStatus.ACTIVE,
) -> RentalModel:
    """Stage a new rental row inside the caller's transaction. Flushes, does not commit."""
    db_rental = RentalModel(
        product_id=product_id,
        owner_id=owner_id,
        renter_id=renter_id,
        start_date=start_date,
        end_date=end_date,
        total_price=total_price,
        status=status,
    )
    db.add(db_rental)
    db.flush()
    return db_rental


def update_rental_status(db: Session, rental_id: int, status: RentalStatus) -> RentalModel:
    """Update a rental's lifecycle status."""
    rental = get_rental_by_id(db, rental_id)
    if not rental:
        raise NotFoundError("Rental", rental_id)

    rental.status = status
    db.commit()
    db.refresh(rental)
    return rental
