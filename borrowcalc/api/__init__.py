"""
API routes for the borrowing calculators.
"""

from fastapi import APIRouter

from borrowcalc.api import calculations, economic, simulations

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
router.include_router(simulations.router, prefix="/simulations", tags=["simulations"])
router.include_router(economic.router, prefix="/economic-data", tags=["economic-data"])
