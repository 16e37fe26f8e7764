from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Text, func
from sqlalchemy.orm import backref, relationship

from marketplace.db.base import Base
from marketplace.domain.review_eligibility import DEFAULT_REVIEW_POLICY


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint(
            DEFAULT_REVIEW_POLICY.sqlalchemy_rating_check(),
            name="ck_reviews_rating_bounds",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    rental_id = Column(Integer, ForeignKey("rentals.id"), nullable=False, unique=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    reviewee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    rental = relationship("Rental", backref=backref("review", uselist=False))
    product = relationship("Product", backref="reviews")
    reviewer = relationship("User", foreign_keys=[reviewer_id], backref="reviews_written")
    reviewee = relationship("User", foreign_keys=[reviewee_id], backref="reviews_received")
