"""
Main API Router - Consolidates all module routes
"""

from fastapi import APIRouter
from stockpick.api.v1 import picking

api_router = APIRouter()

# Picking routes
api_router.include_router(picking.router, prefix="/picking", tags=["picking"])
