"""
Line-item pricer tests: cabinets, surfaces, addons and catalog lookups.

Pure math over an in-memory PricingCatalog, no database.
"""

import math

import pytest

from kitchen_quoting.calculators.addon import AddonPricer, calculate_addon_price
from kitchen_quoting.calculators.cabinet import CabinetPricer, calculate_cabinet_price
from kitchen_quoting.calculators.catalog import (
    build_surface_entry,
    normalize_surface_area,
    pad_price_levels,
)
from kitchen_quoting.calculators.surface import calculate_surface_price
from kitchen_quoting.models import HandleType, MeasurementType, SurfaceMaterial
from kitchen_quoting.schemas import AddonConfig, CabinetConfig, SurfaceConfig


# ============================================================
# Cabinet pricer
# ============================================================

def test_cabinet_linear_foot_price(catalog):
    """5 LF of BASE at level 0 = 5 × $100."""
    config = CabinetConfig(name="BASE", linear_feet=5, price_level=0)
    assert calculate_cabinet_price(config, catalog, HandleType.HANDLES) == 500.0


def test_cabinet_price_level_selects_column(catalog):
    config = CabinetConfig(name="BASE", linear_feet=2, price_level=3)
    assert calculate_cabinet_price(config, catalog, HandleType.HANDLES) == 260.0


def test_cabinet_price_level_clamped(catalog):
    """Levels outside 0-10 use the nearest valid column."""
    high = CabinetConfig(name="BASE", linear_feet=1, price_level=42)
    low = CabinetConfig(name="BASE", linear_feet=1, price_level=-3)
    assert calculate_cabinet_price(high, catalog, HandleType.HANDLES) == 200.0
    assert calculate_cabinet_price(low, catalog, HandleType.HANDLES) == 100.0


def test_cabinet_str_surcharge_added_per_unit(catalog):
    config = CabinetConfig(name="BASE", linear_feet=4, price_level=0, str_enabled=True)
    pricer = CabinetPricer()
    assert pricer.price(config, catalog, handle_type=HandleType.HANDLES) == 480.0
    assert pricer.str_surcharge(config, catalog, handle_type=HandleType.HANDLES) == 80.0


def test_cabinet_handle_type_selects_row(catalog):
    config = CabinetConfig(name="BASE", linear_feet=1)
    assert calculate_cabinet_price(config, catalog, HandleType.HANDLES) == 100.0
    assert calculate_cabinet_price(config, catalog, HandleType.PROFILES) == 120.0


def test_cabinet_own_handle_type_used_without_override(catalog):
    config = CabinetConfig(name="BASE", linear_feet=1, handle_type=HandleType.PROFILES)
    assert calculate_cabinet_price(config, catalog) == 120.0


def test_cabinet_none_handle_row_matches_any_handle(catalog):
    """A row with handle type 'none' is the fallback for every handle type."""
    config = CabinetConfig(name="WALL", linear_feet=3)
    assert calculate_cabinet_price(config, catalog, HandleType.HANDLES) == 240.0
    assert calculate_cabinet_price(config, catalog, HandleType.PROFILES) == 240.0


def test_cabinet_per_piece_uses_quantity(catalog):
    config = CabinetConfig(name="DW PANEL", measurement_type=MeasurementType.PER_PIECE,
                           quantity=2, linear_feet=99)
    assert calculate_cabinet_price(config, catalog, HandleType.HANDLES) == 500.0


def test_cabinet_catalog_miss_is_zero(catalog):
    """Unknown name, area or measurement type prices at exactly 0."""
    configs = [
        CabinetConfig(name="PANTRY", linear_feet=5),
        CabinetConfig(name="BASE", area="BATHROOM", linear_feet=5),
        CabinetConfig(name="BASE", measurement_type=MeasurementType.PER_PIECE, quantity=5),
        CabinetConfig(name="DW PANEL", measurement_type=MeasurementType.PER_PIECE, quantity=1),
    ]
    for config in configs:
        assert calculate_cabinet_price(config, catalog, HandleType.PROFILES) == 0.0


@pytest.mark.parametrize("feet", [0, -4, math.nan, math.inf])
def test_cabinet_non_positive_measurement_is_zero(catalog, feet):
    config = CabinetConfig(name="BASE", linear_feet=feet)
    assert calculate_cabinet_price(config, catalog, HandleType.HANDLES) == 0.0


# ============================================================
# Surface pricer
# ============================================================

def test_surface_price_by_material(catalog):
    laminate = SurfaceConfig(name="COUNTER TOP", material="laminate", square_feet=10)
    quartz = SurfaceConfig(name="COUNTER TOP", material="quartz", square_feet=10)
    assert calculate_surface_price(laminate, catalog) == 500.0
    assert calculate_surface_price(quartz, catalog) == 900.0


def test_surface_kitchen_area_synonyms(catalog):
    """kitchen, kitchen-surface and kitchen-surfaces all hit the same row."""
    for area in ["KITCHEN", "kitchen-surface", "Kitchen-Surfaces"]:
        config = SurfaceConfig(name="COUNTER TOP", area=area, square_feet=2)
        assert calculate_surface_price(config, catalog) == 100.0


def test_surface_glass_matte_spellings():
    for spelling in ["glass-matte", "Glass Matte", "glass_matte"]:
        assert SurfaceConfig(name="X", material=spelling).material == SurfaceMaterial.GLASS_MATTE


def test_surface_material_without_price_is_zero(catalog):
    config = SurfaceConfig(name="COUNTER TOP", material="granite", square_feet=10)
    assert calculate_surface_price(config, catalog) == 0.0


def test_surface_miss_and_negative_are_zero(catalog):
    assert calculate_surface_price(SurfaceConfig(name="SPLASH", square_feet=10), catalog) == 0.0
    assert calculate_surface_price(SurfaceConfig(name="COUNTER TOP", square_feet=-1), catalog) == 0.0


def test_normalize_surface_area():
    assert normalize_surface_area("KITCHEN-SURFACES") == "kitchen"
    assert normalize_surface_area(" kitchen ") == "kitchen"
    assert normalize_surface_area("ISLAND") == "island"


# ============================================================
# Addon pricer
# ============================================================

def test_addon_linear_foot_price(catalog):
    config = AddonConfig(name="LED LIGHTING", linear_feet=7)
    assert calculate_addon_price(config, catalog) == 210.0


def test_addon_per_piece_price(catalog):
    config = AddonConfig(name="INTEGRATED SINK", area="ISLAND",
                         measurement_type=MeasurementType.PER_PIECE, quantity=2)
    assert calculate_addon_price(config, catalog) == 1800.0


def test_addon_miss_is_zero(catalog):
    assert calculate_addon_price(AddonConfig(name="LED LIGHTING", area="ISLAND", linear_feet=5), catalog) == 0.0
    assert calculate_addon_price(AddonConfig(name="LED LIGHTING", linear_feet=0), catalog) == 0.0


def test_format_measurement():
    pricer = AddonPricer()
    assert pricer.format_measurement(5, MeasurementType.LINEAR_FOOT) == "5 LF"
    assert pricer.format_measurement(2.5, MeasurementType.SQUARE_FOOT) == "2.50 SF"
    assert pricer.format_measurement(3, MeasurementType.PER_PIECE) == "3 pcs"


# ============================================================
# Catalog helpers
# ============================================================

def test_pad_price_levels():
    assert pad_price_levels([1, 2]) == (1.0, 2.0) + (0.0,) * 9
    assert len(pad_price_levels(range(20))) == 11


def test_build_surface_entry_scales_fenix_only():
    entry = build_surface_entry(1, "COUNTER TOP", "KITCHEN", 80.0, fenix_multiplier=1.5)
    assert entry.fenix == 120.0
    assert entry.laminate == 80.0
    assert entry.price_for("glass-matte") == 80.0
    assert entry.price_for("marble") is None
