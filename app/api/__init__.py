"""
API routes for the finance tracker.
"""

from fastapi import APIRouter

from app.api import calculations, categorization

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
router.include_router(categorization.router, prefix="/categorize", tags=["categorization"])
