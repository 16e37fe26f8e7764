from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from marketplace.domain.statuses import PaymentMethod, PaymentStatus


class Payment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    rental_id: int
    user_id: int
    amount: float
    method: PaymentMethod
    status: PaymentStatus
    transaction_id: str | None = None
    created_at: datetime | None = None


class PaymentCreate(BaseModel):
    rental_id: int
    user_id: int
    amount: float = Field(..., ge=0, description="Amount paid (must be >= 0)")
    method: PaymentMethod
    status: PaymentStatus | None = None
    transaction_id: str | None = Field(None, max_length=255)


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus
