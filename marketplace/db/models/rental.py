from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, func
from sqlalchemy.orm import relationship

from marketplace.db.base import Base
from marketplace.domain.statuses import RentalStatus


class Rental(Base):
    __tablename__ = "rentals"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    renter_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    total_price = Column(Float, nullable=False)
    status = Column(
        Enum(RentalStatus, name="rental_status"),
        nullable=False,
        default=RentalStatus.ACTIVE,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    product = relationship("Product", backref="rentals")
    owner = relationship("User", foreign_keys=[owner_id], backref="rentals_as_owner")
    renter = relationship("User", foreign_keys=[renter_id], backref="rentals_as_renter")
