"""
Builds the in-memory PricingCatalog from the pricing tables.

Each pricing call gets its own snapshot, so edits made through the catalog API
never change a calculation that is already running.
"""

import logging

from sqlalchemy.orm import Session

from . import models
from .calculators.catalog import (
    AddonDependency,
    AddonPricingEntry,
    CabinetPricingEntry,
    PricingCatalog,
    SurfacePricingEntry,
    pad_price_levels,
)

logger = logging.getLogger(__name__)


def load_catalog(db: Session) -> PricingCatalog:
    cabinets = [
        CabinetPricingEntry(
            id=row.id,
            name=row.name,
            area=row.area,
            room_name=row.room_name,
            measurement_type=row.measurement_type,
            handle_type=row.handle_type,
            price_levels=pad_price_levels(row.price_levels),
            str_addon=row.str_addon or 0.0,
        )
        for row in db.query(models.CabinetPricing).order_by(models.CabinetPricing.id).all()
    ]
    surfaces = [
        SurfacePricingEntry(
            id=row.id,
            name=row.name,
            area=row.area,
            measurement_type=row.measurement_type,
            laminate=row.laminate or 0.0,
            fenix=row.fenix or 0.0,
            porcelain=row.porcelain or 0.0,
            quartz=row.quartz or 0.0,
            stainless=row.stainless or 0.0,
            glass_matte=row.glass_matte or 0.0,
            granite=row.granite or 0.0,
        )
        for row in db.query(models.SurfacePricing).order_by(models.SurfacePricing.id).all()
    ]
    addons = [
        AddonPricingEntry(
            id=row.id,
            name=row.name,
            area=row.area,
            measurement_type=row.measurement_type,
            price=row.price or 0.0,
        )
        for row in db.query(models.AddonPricing).order_by(models.AddonPricing.id).all()
    ]
    dependencies = [
        AddonDependency(
            id=row.id,
            parent_addon_id=row.parent_addon_id,
            dependent_addon_id=row.dependent_addon_id,
            quantity_ratio=row.quantity_ratio,
            rounding_rule=row.rounding_rule,
        )
        for row in db.query(models.AddonDependency).order_by(models.AddonDependency.id).all()
    ]
    logger.debug(
        "Loaded catalog: %d cabinets, %d surfaces, %d addons, %d dependencies",
        len(cabinets), len(surfaces), len(addons), len(dependencies),
    )
    return PricingCatalog(cabinets=cabinets, surfaces=surfaces, addons=addons, dependencies=dependencies)
