from sqlalchemy import update
from sqlalchemy.orm import Session
from sqlalchemy.sql import Update

from marketplace.db.models.product import Product as ProductModel
from marketplace.domain.statuses import ProductCondition, ProductStatus


def get_product_by_id(db: Session, product_id: int) -> ProductModel | None:
    """Get a product by ID."""
    return db.query(ProductModel).filter(ProductModel.id == product_id).first()


def get_products_by_owner_id(db: Session, owner_id: int) -> list[ProductModel]:
    """Get all products owned by a user."""
    return (
        db.query(ProductModel)
        .filter(ProductModel.owner_id == owner_id)
        .order_by(ProductModel.id)
        .all()
    )


def create_product(
    db: Session,
    owner_id: int,
    title: str,
    description: str,
    price: float,
    deposit: float,
    location: str,
    condition: ProductCondition = ProductCondition.GOOD,
) -> ProductModel:
    """Create a new product in the database. New products always start AVAILABLE."""
    db_product = ProductModel(
        owner_id=owner_id,
        title=title,
        description=description,
        price=price,
        deposit=deposit,
        location=location,
        condition=condition,
        status=ProductStatus.AVAILABLE,
    )
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product


def claim_product(db: Session, product_id: int) -> bool:
    """
    Conditionally flip a product from AVAILABLE to RENTED.

    Single UPDATE ... WHERE status = 'AVAILABLE', so the check and the write
    are serialized by the database. Returns False when no row matched (the
    product is gone or was claimed by someone else). Does not commit.
    """
    result = db.execute(
        update(ProductModel)
        .where(
            ProductModel.id == product_id,
            ProductModel.status == ProductStatus.AVAILABLE,
        )
        .values(status=ProductStatus.RENTED)
    )
    return result.rowcount == 1


def release_product_statement(product_id: int) -> Update:
    """Build (but do not execute) the UPDATE that marks a product AVAILABLE again."""
    return (
        update(ProductModel)
        .where(ProductModel.id == product_id)
        .values(status=ProductStatus.AVAILABLE)
    )
