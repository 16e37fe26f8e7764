from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from marketplace.domain.statuses import RentalStatus
from marketplace.schemas.payment import Payment
from marketplace.schemas.product import Product
from marketplace.schemas.review import Review
from marketplace.schemas.user import User


class Rental(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    owner_id: int
    renter_id: int
    start_date: datetime
    end_date: datetime
    total_price: float
    status: RentalStatus
    created_at: datetime | None = None
    product: Product | None = None
    owner: User | None = None
    renter: User | None = None
    payment: Payment | None = None
    review: Review | None = None


class RentalCreate(BaseModel):
    product_id: int
    owner_id: int
    renter_id: int
    start_date: datetime
    end_date: datetime
    total_price: float = Field(..., ge=0, description="Total price (must be >= 0)")
    status: RentalStatus | None = None


class RentalStatusUpdate(BaseModel):
    status: RentalStatus
