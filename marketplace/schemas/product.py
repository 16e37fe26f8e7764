from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from marketplace.domain.statuses import ProductCondition, ProductStatus
from marketplace.schemas.user import User


class Product(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    title: str
    description: str
    price: float
    deposit: float
    location: str
    condition: ProductCondition
    status: ProductStatus
    created_at: datetime | None = None
    owner: User | None = None


class ProductCreate(BaseModel):
    owner_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: str
    price: float = Field(..., ge=0, description="Price per rental (must be >= 0)")
    deposit: float = Field(..., ge=0, description="Deposit amount (must be >= 0)")
    location: str = Field(..., min_length=1, max_length=255)
    condition: ProductCondition | None = None


class ProductRemoval(BaseModel):
    message: str
