"""Stockpick Services - picking engine and inventory-backed planning"""

from .picking_service import PickingPlanService

__all__ = ["PickingPlanService"]
