"""
API Dependencies
Common dependencies for API endpoints
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from stockpick.core.database import get_db
from stockpick.services.picking_service import PickingPlanService

__all__ = ["get_db", "get_picking_service"]


def get_picking_service(db: Session = Depends(get_db)) -> PickingPlanService:
    """
    Picking plan service bound to the request's database session.
    """
    return PickingPlanService(db)
