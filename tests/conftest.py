"""
Shared test fixtures: SQLite test database, test client, in-memory catalog.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point the app at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from kitchen_quoting.calculators.catalog import (
    AddonDependency,
    AddonPricingEntry,
    CabinetPricingEntry,
    PricingCatalog,
    SurfacePricingEntry,
    pad_price_levels,
)
from kitchen_quoting.database import Base, get_db
from kitchen_quoting.main import app
from kitchen_quoting.models import HandleType, MeasurementType, RoundingRule


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_client(client):
    """Test client with the default price list loaded."""
    response = client.get("/api/catalog/seed")
    assert response.status_code == 200
    return client


# --- In-memory catalog ---

LF = MeasurementType.LINEAR_FOOT
SF = MeasurementType.SQUARE_FOOT
PC = MeasurementType.PER_PIECE

LED_ID = 10
TRANSFORMER_ID = 11
SINK_ID = 12
PROFILES_ID = 13


def make_catalog(dependencies=None) -> PricingCatalog:
    """
    Small catalog with round numbers:
    BASE $100/LF at level 0 (+$10/level, STR $20), WALL none-handle wildcard,
    COUNTER TOP $50/sqft laminate, LED $30/LF -> TRANSFORMER $60/pc (1/3, roundUp).
    """
    if dependencies is None:
        dependencies = [
            AddonDependency(parent_addon_id=LED_ID, dependent_addon_id=TRANSFORMER_ID,
                            quantity_ratio=1.0 / 3.0, rounding_rule=RoundingRule.ROUND_UP, id=1),
        ]
    return PricingCatalog(
        cabinets=[
            CabinetPricingEntry(
                id=1, name="BASE", area="KITCHEN", room_name="Kitchen",
                measurement_type=LF, handle_type=HandleType.HANDLES,
                price_levels=tuple(100.0 + 10 * i for i in range(11)), str_addon=20.0,
            ),
            CabinetPricingEntry(
                id=2, name="BASE", area="KITCHEN", room_name="Kitchen",
                measurement_type=LF, handle_type=HandleType.PROFILES,
                price_levels=pad_price_levels([120.0]), str_addon=25.0,
            ),
            CabinetPricingEntry(
                id=3, name="WALL", area="KITCHEN", room_name="Kitchen",
                measurement_type=LF, handle_type=HandleType.NONE,
                price_levels=pad_price_levels([80.0, 90.0]),
            ),
            CabinetPricingEntry(
                id=4, name="DW PANEL", area="KITCHEN", room_name="Kitchen",
                measurement_type=PC, handle_type=HandleType.HANDLES,
                price_levels=pad_price_levels([250.0]),
            ),
            CabinetPricingEntry(
                id=5, name="ISLAND", area="ISLAND", room_name="Kitchen",
                measurement_type=LF, handle_type=HandleType.HANDLES,
                price_levels=pad_price_levels([200.0, 220.0]),
            ),
        ],
        surfaces=[
            SurfacePricingEntry(id=1, name="COUNTER TOP", area="KITCHEN-SURFACES",
                                laminate=50.0, fenix=75.0, quartz=90.0, glass_matte=110.0),
            SurfacePricingEntry(id=2, name="COUNTER TOP", area="ISLAND", laminate=55.0, quartz=95.0),
            SurfacePricingEntry(id=3, name="WATERFALL", area="ISLAND", laminate=60.0, quartz=100.0),
        ],
        addons=[
            AddonPricingEntry(id=LED_ID, name="LED LIGHTING", area="KITCHEN", measurement_type=LF, price=30.0),
            AddonPricingEntry(id=TRANSFORMER_ID, name="TRANSFORMER", area="KITCHEN", measurement_type=PC, price=60.0),
            AddonPricingEntry(id=SINK_ID, name="INTEGRATED SINK", area="ISLAND", measurement_type=PC, price=900.0),
            AddonPricingEntry(id=PROFILES_ID, name="ALUMINUM PROFILES", area="ISLAND", measurement_type=LF, price=40.0),
        ],
        dependencies=dependencies,
    )


@pytest.fixture
def catalog():
    return make_catalog()
