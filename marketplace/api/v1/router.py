from fastapi import APIRouter

from marketplace.api.routers import payments, products, rentals, reviews, users

api_router = APIRouter()

api_router.include_router(users.router)
api_router.include_router(products.router)
api_router.include_router(rentals.router)
api_router.include_router(payments.router)
api_router.include_router(reviews.router)
