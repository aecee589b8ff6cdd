from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
import logging
from .. import models, schemas
from ..calculators.catalog import (
    MATERIAL_FIELDS,
    AddonDependency,
    CatalogError,
    PricingCatalog,
    build_surface_entry,
)
from ..catalog_loader import load_catalog
from ..config import settings
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])

LF = models.MeasurementType.LINEAR_FOOT
SF = models.MeasurementType.SQUARE_FOOT
PC = models.MeasurementType.PER_PIECE


def _levels(base: float, step: float) -> list:
    """Eleven price levels, each one `step` above the previous."""
    return [round(base + step * i, 2) for i in range(models.PRICE_LEVEL_COUNT)]


# Default price list (dealer cost per unit). Update via API as the list changes.
# (name, area, measurement, handle, price levels, STR surcharge)
DEFAULT_CABINETS = [
    ("BASE", "KITCHEN", LF, models.HandleType.HANDLES, _levels(395.0, 28.0), 45.0),
    ("BASE", "KITCHEN", LF, models.HandleType.PROFILES, _levels(425.0, 30.0), 45.0),
    ("BASE LE MANS", "KITCHEN", PC, models.HandleType.HANDLES, _levels(1450.0, 95.0), 0.0),
    ("BASE LE MANS", "KITCHEN", PC, models.HandleType.PROFILES, _levels(1525.0, 100.0), 0.0),
    ("COLUMNS", "KITCHEN", LF, models.HandleType.HANDLES, _levels(820.0, 55.0), 60.0),
    ("COLUMNS", "KITCHEN", LF, models.HandleType.PROFILES, _levels(865.0, 58.0), 60.0),
    ("COLUMNS LE MANS", "KITCHEN", PC, models.HandleType.HANDLES, _levels(1890.0, 120.0), 0.0),
    ("COLUMNS LE MANS", "KITCHEN", PC, models.HandleType.PROFILES, _levels(1960.0, 125.0), 0.0),
    ("STACK", "KITCHEN", LF, models.HandleType.HANDLES, _levels(310.0, 20.0), 30.0),
    ("STACK", "KITCHEN", LF, models.HandleType.PROFILES, _levels(335.0, 22.0), 30.0),
    ("WALL", "KITCHEN", LF, models.HandleType.HANDLES, _levels(285.0, 18.0), 30.0),
    ("WALL", "KITCHEN", LF, models.HandleType.PROFILES, _levels(305.0, 20.0), 30.0),
    ("DW PANEL", "KITCHEN", PC, models.HandleType.HANDLES, _levels(240.0, 15.0), 0.0),
    ("DW PANEL", "KITCHEN", PC, models.HandleType.PROFILES, _levels(255.0, 16.0), 0.0),
    # Same price regardless of handle type
    ("FRIDGE PANEL", "KITCHEN", LF, models.HandleType.NONE, _levels(210.0, 12.0), 0.0),
    ("SHELVES", "KITCHEN", LF, models.HandleType.NONE, _levels(95.0, 6.0), 0.0),
    ("ISLAND", "ISLAND", LF, models.HandleType.HANDLES, _levels(455.0, 30.0), 0.0),
    ("ISLAND", "ISLAND", LF, models.HandleType.PROFILES, _levels(485.0, 32.0), 0.0),
]

# (name, area, base price per sq ft). Every material gets the base price,
# Fenix gets FENIX_IMPORT_MULTIPLIER × base.
DEFAULT_SURFACES = [
    ("COUNTER TOP", "KITCHEN", 85.0),
    ("BACKSPLASH", "KITCHEN", 65.0),
    ("COUNTER TOP", "ISLAND", 85.0),
    ("WATERFALL", "ISLAND", 95.0),
]

# (name, area, measurement, unit price)
DEFAULT_ADDONS = [
    ("ALUMINUM PROFILES", "KITCHEN", LF, 42.0),
    ("ALUMINUM TOE KICKS", "KITCHEN", LF, 36.0),
    ("LED LIGHTING", "KITCHEN", LF, 28.0),
    ("TRANSFORMER", "KITCHEN", PC, 85.0),
    ("INTEGRATED SINK", "KITCHEN", PC, 950.0),
    ("POWER STRIP", "KITCHEN", PC, 120.0),
    ("ALUMINUM PROFILES", "ISLAND", LF, 42.0),
    ("ALUMINUM TOE KICKS", "ISLAND", LF, 36.0),
    ("INTEGRATED SINK", "ISLAND", PC, 950.0),
]

# (parent key, dependent key, ratio, rounding): one transformer per started 3 ft of LED
DEFAULT_DEPENDENCIES = [
    (("LED LIGHTING", "KITCHEN", LF), ("TRANSFORMER", "KITCHEN", PC), 1.0 / 3.0, models.RoundingRule.ROUND_UP),
]


def _cabinet_columns(price_levels: list) -> dict:
    return {f"price_level_{i}": float(p) for i, p in enumerate(price_levels)}


def _surface_columns(name: str, area: str, base_price: float) -> dict:
    entry = build_surface_entry(0, name, area, base_price, settings.FENIX_IMPORT_MULTIPLIER)
    return {attr: getattr(entry, attr) for attr in MATERIAL_FIELDS.values()}


def _find_addon(db: Session, name: str, area: str, measurement_type):
    return db.query(models.AddonPricing).filter(
        models.AddonPricing.name == name,
        models.AddonPricing.area == area,
        models.AddonPricing.measurement_type == measurement_type,
    ).first()


def seed_default_catalog(db: Session) -> dict:
    """Insert default rows that are missing. Safe to run multiple times, existing rows are left alone."""
    seeded = {"cabinets": 0, "surfaces": 0, "addons": 0, "dependencies": 0}

    for name, area, measurement, handle, levels, str_addon in DEFAULT_CABINETS:
        existing = db.query(models.CabinetPricing).filter(
            models.CabinetPricing.name == name,
            models.CabinetPricing.area == area,
            models.CabinetPricing.measurement_type == measurement,
            models.CabinetPricing.handle_type == handle,
        ).first()
        if not existing:
            db.add(models.CabinetPricing(
                name=name, area=area, room_name="Kitchen", measurement_type=measurement,
                handle_type=handle, str_addon=str_addon, **_cabinet_columns(levels),
            ))
            seeded["cabinets"] += 1

    for name, area, base_price in DEFAULT_SURFACES:
        existing = db.query(models.SurfacePricing).filter(
            models.SurfacePricing.name == name,
            models.SurfacePricing.area == area,
        ).first()
        if not existing:
            db.add(models.SurfacePricing(
                name=name, area=area, measurement_type=SF, **_surface_columns(name, area, base_price),
            ))
            seeded["surfaces"] += 1

    for name, area, measurement, price in DEFAULT_ADDONS:
        if not _find_addon(db, name, area, measurement):
            db.add(models.AddonPricing(name=name, area=area, measurement_type=measurement, price=price))
            seeded["addons"] += 1
    db.flush()

    for parent_key, dependent_key, ratio, rounding in DEFAULT_DEPENDENCIES:
        parent = _find_addon(db, *parent_key)
        dependent = _find_addon(db, *dependent_key)
        if not parent or not dependent:
            continue
        existing = db.query(models.AddonDependency).filter(
            models.AddonDependency.parent_addon_id == parent.id,
            models.AddonDependency.dependent_addon_id == dependent.id,
        ).first()
        if not existing:
            db.add(models.AddonDependency(
                parent_addon_id=parent.id, dependent_addon_id=dependent.id,
                quantity_ratio=ratio, rounding_rule=rounding,
            ))
            seeded["dependencies"] += 1

    db.commit()
    logger.info("Seeded default catalog: %s", seeded)
    return seeded


@router.get("/seed")
def seed_catalog(db: Session = Depends(get_db)):
    """Seed default catalog rows."""
    seeded = seed_default_catalog(db)
    return {"ok": True, "seeded": seeded}


@router.get("/reference")
def reference_data():
    return {
        "areas": models.KNOWN_AREAS,
        "measurement_types": [m.value for m in models.MeasurementType],
        "handle_types": [h.value for h in models.HandleType],
        "materials": [m.value for m in models.SurfaceMaterial],
        "rounding_rules": [r.value for r in models.RoundingRule],
        "price_levels": list(range(models.PRICE_LEVEL_COUNT)),
    }


# --- Cabinets ---

@router.get("/cabinets", response_model=List[schemas.CabinetPricing])
def list_cabinets(db: Session = Depends(get_db)):
    return db.query(models.CabinetPricing).order_by(models.CabinetPricing.id).all()


@router.post("/cabinets", response_model=schemas.CabinetPricing)
def create_cabinet(entry: schemas.CabinetPricingCreate, db: Session = Depends(get_db)):
    data = entry.model_dump(exclude={"price_levels"})
    db_entry = models.CabinetPricing(**data, **_cabinet_columns(entry.price_levels))
    db.add(db_entry)
    db.commit()
    db.refresh(db_entry)
    return db_entry


# --- Surfaces ---

@router.get("/surfaces", response_model=List[schemas.SurfacePricing])
def list_surfaces(db: Session = Depends(get_db)):
    return db.query(models.SurfacePricing).order_by(models.SurfacePricing.id).all()


@router.post("/surfaces", response_model=schemas.SurfacePricing)
def create_surface(entry: schemas.SurfacePricingCreate, db: Session = Depends(get_db)):
    db_entry = models.SurfacePricing(**entry.model_dump())
    db.add(db_entry)
    db.commit()
    db.refresh(db_entry)
    return db_entry


# --- Addons ---

@router.get("/addons", response_model=List[schemas.AddonPricing])
def list_addons(db: Session = Depends(get_db)):
    return db.query(models.AddonPricing).order_by(models.AddonPricing.id).all()


@router.post("/addons", response_model=schemas.AddonPricing)
def create_addon(entry: schemas.AddonPricingCreate, db: Session = Depends(get_db)):
    db_entry = models.AddonPricing(**entry.model_dump())
    db.add(db_entry)
    db.commit()
    db.refresh(db_entry)
    return db_entry


@router.patch("/addons/{addon_id}", response_model=schemas.AddonPricing)
def update_addon_price(addon_id: int, update: schemas.AddonPriceUpdate, db: Session = Depends(get_db)):
    addon = db.query(models.AddonPricing).filter(models.AddonPricing.id == addon_id).first()
    if not addon:
        raise HTTPException(status_code=404, detail="Addon not found")
    addon.price = update.price
    db.commit()
    db.refresh(addon)
    return addon


# --- Dependencies ---

@router.get("/dependencies", response_model=List[schemas.AddonDependency])
def list_dependencies(db: Session = Depends(get_db)):
    return db.query(models.AddonDependency).order_by(models.AddonDependency.id).all()


@router.post("/dependencies", response_model=schemas.AddonDependency)
def create_dependency(dependency: schemas.AddonDependencyCreate, db: Session = Depends(get_db)):
    """
    Add a derived-quantity edge between two addons.

    Rejects edges that would make an addon its own ancestor. The pricing
    engine treats such a table as a fatal configuration error.
    """
    for addon_id in (dependency.parent_addon_id, dependency.dependent_addon_id):
        if not db.query(models.AddonPricing).filter(models.AddonPricing.id == addon_id).first():
            raise HTTPException(status_code=404, detail=f"Addon {addon_id} not found")
    current = load_catalog(db)
    candidate = AddonDependency(
        parent_addon_id=dependency.parent_addon_id,
        dependent_addon_id=dependency.dependent_addon_id,
        quantity_ratio=dependency.quantity_ratio,
        rounding_rule=dependency.rounding_rule,
    )
    catalog = PricingCatalog(
        cabinets=current.cabinets,
        surfaces=current.surfaces,
        addons=current.addons,
        dependencies=current.dependencies + [candidate],
    )
    try:
        catalog.validate()
    except CatalogError as e:
        # DependencyCycleError included
        logger.warning("Rejected addon dependency %s -> %s: %s",
                       candidate.parent_addon_id, candidate.dependent_addon_id, e)
        raise HTTPException(status_code=400, detail=str(e))

    db_dependency = models.AddonDependency(**dependency.model_dump())
    db.add(db_dependency)
    db.commit()
    db.refresh(db_dependency)
    return db_dependency
