from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from marketplace.db.base import Base
from marketplace.domain.statuses import ProductCondition, ProductStatus


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    deposit = Column(Float, nullable=False)
    location = Column(String(255), nullable=False)
    condition = Column(
        Enum(ProductCondition, name="product_condition"),
        nullable=False,
        default=ProductCondition.GOOD,
    )
    # Maintained by the rental coordinator only
    status = Column(
        Enum(ProductStatus, name="product_status"),
        nullable=False,
        default=ProductStatus.AVAILABLE,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    owner = relationship("User", backref="products")
