"""
API routes for the calculators.
"""

from fastapi import APIRouter

from fincalc.api import calculations, subscribers
from fincalc.catalog import CALCULATORS

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
router.include_router(subscribers.router, tags=["subscribers"])


@router.get("/calculators", tags=["calculations"])
async def list_calculators():
    """List available calculators."""
    return {"calculators": CALCULATORS, "total": len(CALCULATORS)}
