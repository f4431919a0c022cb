from fastapi import APIRouter
from multistore.api.v1.endpoints import (
    auth, users, vendors, domains, categories, products, variants,
    cart, orders, storefront, dashboard, upload
)

api_router = APIRouter()

api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(users.router, tags=["users"])
api_router.include_router(vendors.router, tags=["vendors"])
api_router.include_router(domains.router, tags=["domains"])
api_router.include_router(categories.router, tags=["categories"])
api_router.include_router(products.router, tags=["products"])
api_router.include_router(variants.router, tags=["variants"])
api_router.include_router(cart.router, tags=["cart"])
api_router.include_router(orders.router, tags=["orders"])
api_router.include_router(storefront.router, tags=["storefront"])
api_router.include_router(dashboard.router, tags=["dashboard"])
api_router.include_router(upload.router, tags=["upload"])
