"""
Main API router for v1 endpoints
"""
from fastapi import APIRouter

from leadmarket.api.v1.endpoints import admin, credits, financial, leads, quotes

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(leads.router, tags=["leads"])
api_router.include_router(quotes.router, tags=["quotes"])
api_router.include_router(credits.router, tags=["credits"])
api_router.include_router(financial.router, tags=["financial"])
api_router.include_router(admin.router, tags=["admin"])
