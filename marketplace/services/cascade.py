"""Dependent-record cascades for rental and product removal.

Each removal is described as a ``CascadePlan``: an ordered tuple of
dependent statements followed by the delete of the target row. A plan is
applied inside a single transaction scope, so either every statement
takes effect or none does.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Delete, Executable

import marketplace.repositories.product as product_repo
import marketplace.repositories.rental as rental_repo
from marketplace.db.models.payment import Payment as PaymentModel
from marketplace.db.models.product import Product as ProductModel
from marketplace.db.models.rental import Rental as RentalModel
from marketplace.db.models.review import Review as ReviewModel
from marketplace.db.transaction import transaction
from marketplace.errors import NotFoundError
from marketplace.schemas.rental import Rental
from marketplace.services.rental import restore_availability

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CascadePlan:
    """Ordered dependent statements plus the delete of the target row."""

    entity: str
    entity_id: int
    dependents: tuple[Executable, ...]
    target: Delete

    def apply(self, tx: Session) -> None:
        """
        Execute the plan inside the caller's transaction scope.

        Raises:
            NotFoundError: If the target row was already gone when its delete
                ran. The caller's scope rolls back the dependents.
        """
        for statement in self.dependents:
            tx.execute(statement)

        result = tx.execute(self.target)
        if result.rowcount != 1:
            raise NotFoundError(self.entity, self.entity_id)


def rental_removal_plan(rental_id: int, product_id: int) -> CascadePlan:
    return CascadePlan(
        entity="Rental",
        entity_id=rental_id,
        dependents=(
            delete(PaymentModel).where(PaymentModel.rental_id == rental_id),
            delete(ReviewModel).where(ReviewModel.rental_id == rental_id),
            restore_availability(product_id),
        ),
        target=delete(RentalModel).where(RentalModel.id == rental_id),
    )


def product_removal_plan(product_id: int) -> CascadePlan:
    # Resolved at execution time so rentals created after the plan was
    # built are still covered.
    product_rentals = select(RentalModel.id).where(RentalModel.product_id == product_id)
    return CascadePlan(
        entity="Product",
        entity_id=product_id,
        dependents=(
            delete(ReviewModel).where(
                or_(
                    ReviewModel.product_id == product_id,
                    ReviewModel.rental_id.in_(product_rentals),
                )
            ),
            delete(PaymentModel).where(PaymentModel.rental_id.in_(product_rentals)),
            delete(RentalModel).where(RentalModel.product_id == product_id),
        ),
        target=delete(ProductModel).where(ProductModel.id == product_id),
    )


def remove_rental(db: Session, rental_id: int) -> Rental:
    """
    Remove a rental together with its payment and review, and make its
    product AVAILABLE again.

    Business logic:
    - Validates rental exists
    - Deletes payment and review (if any), restores product availability and
      deletes the rental in one transaction

    Returns:
        Snapshot of the removed rental, taken before removal.

    Raises:
        NotFoundError: If rental does not exist, or vanished before its
            delete ran (nothing is removed in that case).
    """
    rental = rental_repo.get_rental_by_id(db, rental_id)
    if not rental:
        raise NotFoundError("Rental", rental_id)

    snapshot = Rental.model_validate(rental)
    plan = rental_removal_plan(rental.id, rental.product_id)

    with transaction(db) as tx:
        plan.apply(tx)

    logger.info(
        "Rental %s removed; product %s is available again",
        rental_id,
        snapshot.product_id,
    )
    return snapshot


def remove_product(db: Session, product_id: int) -> dict[str, str]:
    """
    Remove a product with all of its rentals and their payments and reviews.

    Raises:
        NotFoundError: If product does not exist.
    """
    product = product_repo.get_product_by_id(db, product_id)
    if not product:
        raise NotFoundError("Product", product_id)

    with transaction(db) as tx:
        product_removal_plan(product_id).apply(tx)

    logger.info("Product %s removed with all related rentals, payments and reviews", product_id)
    return {"message": "Product and all related data deleted successfully"}
