"""
API v1 router aggregator.

All v1 routes are registered here.
"""

from fastapi import APIRouter

from app.features.auth.router import router as auth_router
from app.features.contracts.router import router as contracts_router
from app.features.credentials.router import router as credentials_router
from app.features.storefront.router import router as storefront_router
from app.features.tenants.router import router as tenants_router

v1_router = APIRouter(prefix="/v1")

v1_router.include_router(auth_router)
v1_router.include_router(tenants_router)
v1_router.include_router(contracts_router)
v1_router.include_router(credentials_router)
v1_router.include_router(storefront_router)
