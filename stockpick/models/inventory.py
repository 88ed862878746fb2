"""
Stockpick Inventory Models
SQLAlchemy models for per-location stock holdings and conversion rates
"""
from sqlalchemy import (
    Column, String, Numeric, Date, DateTime, CheckConstraint, Index
)
from sqlalchemy.sql import func

from stockpick.core.database import Base


class InventoryItemRec(Base):
    """
    Inventory Item - one holding of one SKU at one warehouse location

    Quantities are kept in a three-level unit hierarchy (case -> box -> piece).
    Rates are expressed as level-3 units per one unit of that level.
    """
    __tablename__ = "inventory_items"

    id = Column(String(36), primary_key=True, doc="Inventory item id")
    sku = Column(String(50), index=True, doc="Stock keeping code")
    product_name = Column(String(200), default='', doc="Product display name")
    location = Column(String(30), nullable=False, default='', doc="Location code, e.g. A1/1")
    warehouse_id = Column(String(36), doc="Owning warehouse")

    # Unit hierarchy
    unit_level1_name = Column(String(20), doc="Level 1 unit name (case)")
    unit_level1_quantity = Column(Numeric(15, 3), default=0, doc="Level 1 quantity")
    unit_level1_rate = Column(Numeric(15, 3), default=0, doc="Base units per level 1 unit")
    unit_level2_name = Column(String(20), doc="Level 2 unit name (box)")
    unit_level2_quantity = Column(Numeric(15, 3), default=0, doc="Level 2 quantity")
    unit_level2_rate = Column(Numeric(15, 3), default=0, doc="Base units per level 2 unit")
    unit_level3_name = Column(String(20), doc="Level 3 (base) unit name (piece)")
    unit_level3_quantity = Column(Numeric(15, 3), default=0, doc="Level 3 quantity")

    # FEFO support
    lot = Column(String(50), doc="Lot / batch number")
    mfd = Column(Date, doc="Manufacture date")

    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), doc="Record creation timestamp")
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), doc="Last update timestamp")

    __table_args__ = (
        CheckConstraint("unit_level1_quantity >= 0", name='inv_l1_qty_non_negative'),
        CheckConstraint("unit_level2_quantity >= 0", name='inv_l2_qty_non_negative'),
        CheckConstraint("unit_level3_quantity >= 0", name='inv_l3_qty_non_negative'),
        Index('ix_inventory_items_sku_location', 'sku', 'location'),
    )

    def __repr__(self):
        return f"<InventoryItemRec(id='{self.id}', sku='{self.sku}', location='{self.location}')>"


class ConversionRateRec(Base):
    """
    Product Conversion Rate - default unit hierarchy rates per SKU
    """
    __tablename__ = "product_conversion_rates"

    sku = Column(String(50), primary_key=True, doc="Stock keeping code")
    product_name = Column(String(200), default='', doc="Product display name")
    unit_level1_name = Column(String(20), doc="Level 1 unit name")
    unit_level1_rate = Column(Numeric(15, 3), default=0, doc="Base units per level 1 unit")
    unit_level2_name = Column(String(20), doc="Level 2 unit name")
    unit_level2_rate = Column(Numeric(15, 3), default=0, doc="Base units per level 2 unit")
    unit_level3_name = Column(String(20), doc="Base unit name")

    def __repr__(self):
        return f"<ConversionRateRec(sku='{self.sku}')>"
