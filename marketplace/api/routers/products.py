from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marketplace.api.deps import get_db
from marketplace.schemas.product import Product, ProductCreate, ProductRemoval
from marketplace.services.cascade import remove_product
from marketplace.services.product import create_product, get_product, list_products_by_owner

router = APIRouter(prefix="/products", tags=["products"])


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_new_product(product_data: ProductCreate, db: Session = Depends(get_db)):
    """
    Create a product listing. New products are always AVAILABLE; availability
    afterwards is driven by rentals only.
    """
    product = create_product(
        db,
        owner_id=product_data.owner_id,
        title=product_data.title,
        description=product_data.description,
        price=product_data.price,
        deposit=product_data.deposit,
        location=product_data.location,
        condition=product_data.condition,
    )
    return Product.model_validate(product)


@router.get("", response_model=list[Product])
def get_products_by_owner(
    owner: int = Query(..., description="Owner user ID"),
    db: Session = Depends(get_db),
):
    products = list_products_by_owner(db, owner)
    return [Product.model_validate(product) for product in products]


@router.get("/{product_id}", response_model=Product)
def get_product_by_id(product_id: int, db: Session = Depends(get_db)):
    product = get_product(db, product_id)
    return Product.model_validate(product)


@router.delete("/{product_id}", response_model=ProductRemoval)
def delete_product_by_id(product_id: int, db: Session = Depends(get_db)):
    """
    Delete a product together with its rentals and their payments and reviews.
    """
    return remove_product(db, product_id)
