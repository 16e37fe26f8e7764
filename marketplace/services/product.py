from sqlalchemy.orm import Session

import marketplace.repositories.product as product_repo
import marketplace.repositories.user as user_repo
from marketplace.db.models.product import Product as ProductModel
from marketplace.domain.statuses import ProductCondition
from marketplace.errors import NotFoundError


def create_product(
    db: Session,
    owner_id: int,
    title: str,
    description: str,
    price: float,
    deposit: float,
    location: str,
    condition: ProductCondition | None = None,
) -> ProductModel:
    """
    Create a product listing.

    - Validates owner exists
    - Status is not accepted from callers: new products start AVAILABLE

    Raises:
        NotFoundError: If owner does not exist.
    """
    if not user_repo.get_user_by_id(db, owner_id):
        raise NotFoundError("Owner", owner_id)

    return product_repo.create_product(
        db,
        owner_id=owner_id,
        title=title,
        description=description,
        price=price,
        deposit=deposit,
        location=location,
        condition=condition if condition is not None else ProductCondition.GOOD,
    )


def get_product(db: Session, product_id: int) -> ProductModel:
    product = product_repo.get_product_by_id(db, product_id)
    if not product:
        raise NotFoundError("Product", product_id)
    return product


def list_products_by_owner(db: Session, owner_id: int) -> list[ProductModel]:
    if not user_repo.get_user_by_id(db, owner_id):
        raise NotFoundError("Owner", owner_id)
    return product_repo.get_products_by_owner_id(db, owner_id)
