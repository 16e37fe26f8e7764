from sqlalchemy.orm import Session

import marketplace.repositories.product as product_repo
import marketplace.repositories.user as user_repo
from marketplace.db.models.product import Product as ProductModel
from marketplace.domain.statuses import ProductStatus
from marketplace.errors import ConflictError, NotFoundError

OWNER_MISMATCH = "owner mismatch"
PRODUCT_UNAVAILABLE = "product unavailable"


def check_rental_request(
    db: Session,
    product_id: int,
    owner_id: int,
    renter_id: int,
) -> ProductModel:
    """
    Validate a rental request against current product/owner/renter state.

    Read-only: performs no writes. Passing this check does not reserve the
    product; the coordinator's conditional claim is what serializes
    concurrent requests.

    Raises:
        NotFoundError: If the product, owner or renter does not exist.
        ConflictError: If the owner does not own the product, or the product
            is not AVAILABLE.
    """
    product = product_repo.get_product_by_id(db, product_id)
    owner = user_repo.get_user_by_id(db, owner_id)
    renter = user_repo.get_user_by_id(db, renter_id)

    if not product:
        raise NotFoundError("Product", product_id)
    if not owner:
        raise NotFoundError("Owner", owner_id)
    if not renter:
        raise NotFoundError("Renter", renter_id)

    if product.owner_id != owner_id:
        raise ConflictError(OWNER_MISMATCH)

    if product.status != ProductStatus.AVAILABLE:
        raise ConflictError(PRODUCT_UNAVAILABLE)

    return product
