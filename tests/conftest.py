"""
Test Configuration and Fixtures
Shared testing infrastructure for stockpick
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from typing import Generator, Optional
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

from stockpick.main import app
from stockpick.core.database import get_db, Base, create_db_engine, init_db
from stockpick.models.inventory import InventoryItemRec, ConversionRateRec
from stockpick.schemas.picking import PickingLocation, ProductDemand, StockRecord
from stockpick.services.picking.location_parser import parse_location

# In-memory SQLite shared across the session's connections
TEST_DATABASE_URL = "sqlite://"

engine = create_db_engine(TEST_DATABASE_URL)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test"""
    init_db(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_record():
    """Factory for stock snapshot records"""
    counter = {"next": 1}

    def _make(code: Optional[str] = "L3-8G", location: str = "A1/1", level3: int = 0,
              level1: int = 0, level1_rate=None, level2: int = 0, level2_rate=None,
              mfd: Optional[str] = None, lot: Optional[str] = None,
              record_id: Optional[str] = None) -> StockRecord:
        if record_id is None:
            record_id = f"inv-{counter['next']:03d}"
            counter["next"] += 1
        return StockRecord(
            id=record_id,
            code=code,
            location=location,
            lot=lot,
            manufacture_date=date.fromisoformat(mfd) if mfd else None,
            level1_quantity=level1,
            level1_rate=level1_rate,
            level2_quantity=level2,
            level2_rate=level2_rate,
            level3_quantity=level3,
        )

    return _make


@pytest.fixture
def make_location():
    """Factory for unallocated picking candidates"""
    def _make(record_id: str, location: str, available, mfd: Optional[str] = None,
              lot: Optional[str] = None) -> PickingLocation:
        token = parse_location(location)
        return PickingLocation(
            location=location,
            normalized_location=token.normalized,
            zone=token.zone,
            position=token.position,
            level=token.level,
            available=Decimal(str(available)),
            remaining=Decimal(str(available)),
            lot=lot,
            manufacture_date=date.fromisoformat(mfd) if mfd else None,
            stock_record_id=record_id,
        )

    return _make


@pytest.fixture
def demand():
    """Factory for product demand lines"""
    def _make(code: str, quantity, name: str = "") -> ProductDemand:
        return ProductDemand(product_code=code, product_name=name or code, requested_quantity=quantity)

    return _make


@pytest.fixture
def fefo_stock(make_record):
    """Two holdings of one code with different manufacture dates"""
    return [
        make_record(location="B2/1", level3=10, mfd="2024-06-01", record_id="inv-new"),
        make_record(location="A1/1", level3=10, mfd="2024-01-01", record_id="inv-old"),
    ]


@pytest.fixture
def inventory_rows(db_session: Session):
    """Inventory store rows for service and API tests"""
    rows = [
        InventoryItemRec(
            id="row-1", sku="L3-8G", product_name="Widget 8G", location="A1/1",
            unit_level1_name="case", unit_level1_quantity=Decimal("1"), unit_level1_rate=Decimal("24"),
            unit_level3_name="piece", unit_level3_quantity=Decimal("6"),
            lot="LOT-A", mfd=date(2024, 1, 1), created_at=datetime(2024, 1, 5, 8, 0)
        ),
        InventoryItemRec(
            id="row-2", sku="l3-8g", product_name="Widget 8G", location="B3/2",
            unit_level2_name="box", unit_level2_quantity=Decimal("2"), unit_level2_rate=None,
            unit_level3_quantity=Decimal("0"),
            lot="LOT-B", mfd=date(2024, 3, 1), created_at=datetime(2024, 3, 5, 8, 0)
        ),
        InventoryItemRec(
            id="row-3", sku="L3-8G", product_name="Widget 8G", location="C1/1",
            unit_level3_quantity=Decimal("0"), created_at=datetime(2024, 4, 1, 8, 0)
        ),
        InventoryItemRec(
            id="row-4", sku="M5", product_name="Gadget", location="dock",
            unit_level3_quantity=Decimal("7"), created_at=datetime(2024, 2, 1, 8, 0)
        ),
    ]
    db_session.add_all(rows)
    db_session.add(ConversionRateRec(
        sku="L3-8G", product_name="Widget 8G",
        unit_level1_rate=Decimal("24"), unit_level2_rate=Decimal("6")
    ))
    db_session.commit()
    return rows
