from marketplace.db.models.user import User
from marketplace.db.models.product import Product
from marketplace.db.models.rental import Rental
from marketplace.db.models.payment import Payment
from marketplace.db.models.review import Review

__all__ = ["User", "Product", "Rental", "Payment", "Review"]
