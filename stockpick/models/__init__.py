"""
Stockpick SQLAlchemy Models
"""

# Import all models to ensure they are registered with SQLAlchemy
from .inventory import InventoryItemRec, ConversionRateRec

__all__ = ["InventoryItemRec", "ConversionRateRec"]
