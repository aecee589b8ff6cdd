"""
Pricing catalog snapshot: the three price tables plus the addon dependency table.

Rows are loaded once per pricing call and never mutated; the pricers only read
from a PricingCatalog. Lookups never raise: a miss returns None and the caller
prices the line at zero.

Matching rules:
- Cabinets match exactly on (name, area, room, measurement, handle type). A row
  with handle type "none" is the fallback for any handle type.
- Surfaces match on (name, area, measurement); area synonyms for the kitchen
  surface list are folded together first.
- Addons match exactly on (name, area, measurement).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..models import HandleType, MeasurementType, RoundingRule, SurfaceMaterial, PRICE_LEVEL_COUNT

logger = logging.getLogger(__name__)

# All of these name the same surface price list
KITCHEN_AREA_SYNONYMS = {"kitchen-surfaces", "kitchen-surface", "kitchen"}

# SurfaceMaterial value -> SurfacePricingEntry attribute
MATERIAL_FIELDS = {
    SurfaceMaterial.LAMINATE: "laminate",
    SurfaceMaterial.FENIX: "fenix",
    SurfaceMaterial.PORCELAIN: "porcelain",
    SurfaceMaterial.QUARTZ: "quartz",
    SurfaceMaterial.STAINLESS: "stainless",
    SurfaceMaterial.GLASS_MATTE: "glass_matte",
    SurfaceMaterial.GRANITE: "granite",
}


class CatalogError(ValueError):
    """Pricing catalog is misconfigured."""


class DependencyCycleError(CatalogError):
    """An addon depends (directly or transitively) on itself."""

    def __init__(self, addon_id: int, path: Tuple[int, ...] = ()):
        self.addon_id = addon_id
        self.path = path
        chain = " -> ".join(str(p) for p in path + (addon_id,))
        super().__init__(f"Addon dependency cycle detected at addon {addon_id} ({chain})")


def normalize_surface_area(area: str) -> str:
    key = (area or "").strip().lower()
    if key in KITCHEN_AREA_SYNONYMS:
        return "kitchen"
    return key


@dataclass(frozen=True)
class CabinetPricingEntry:
    id: int
    name: str
    area: str
    room_name: str
    measurement_type: MeasurementType
    handle_type: HandleType
    price_levels: Tuple[float, ...]
    str_addon: float = 0.0

    def price_at_level(self, level: int) -> float:
        """Unit price at a price level, clamped to the table's range."""
        if not self.price_levels:
            return 0.0
        index = max(0, min(int(level), len(self.price_levels) - 1))
        return self.price_levels[index]


@dataclass(frozen=True)
class SurfacePricingEntry:
    id: int
    name: str
    area: str
    measurement_type: MeasurementType = MeasurementType.SQUARE_FOOT
    laminate: float = 0.0
    fenix: float = 0.0
    porcelain: float = 0.0
    quartz: float = 0.0
    stainless: float = 0.0
    glass_matte: float = 0.0
    granite: float = 0.0

    def price_for(self, material) -> Optional[float]:
        try:
            attr = MATERIAL_FIELDS[SurfaceMaterial(material)]
        except ValueError:
            return None
        return getattr(self, attr)


@dataclass(frozen=True)
class AddonPricingEntry:
    id: int
    name: str
    area: str
    measurement_type: MeasurementType
    price: float


@dataclass(frozen=True)
class AddonDependency:
    parent_addon_id: int
    dependent_addon_id: int
    quantity_ratio: float
    rounding_rule: RoundingRule = RoundingRule.NONE
    id: Optional[int] = None


@dataclass
class PricingCatalog:
    cabinets: List[CabinetPricingEntry] = field(default_factory=list)
    surfaces: List[SurfacePricingEntry] = field(default_factory=list)
    addons: List[AddonPricingEntry] = field(default_factory=list)
    dependencies: List[AddonDependency] = field(default_factory=list)

    def __post_init__(self):
        self._cabinet_index: Dict[tuple, CabinetPricingEntry] = {}
        for entry in self.cabinets:
            key = (entry.name, entry.area, entry.room_name,
                   MeasurementType(entry.measurement_type), HandleType(entry.handle_type))
            # First row wins, same as a linear scan
            self._cabinet_index.setdefault(key, entry)

        self._surface_index: Dict[tuple, SurfacePricingEntry] = {}
        for entry in self.surfaces:
            key = (entry.name, normalize_surface_area(entry.area), MeasurementType(entry.measurement_type))
            self._surface_index.setdefault(key, entry)

        self._addon_index: Dict[tuple, AddonPricingEntry] = {}
        self._addons_by_id: Dict[int, AddonPricingEntry] = {}
        for entry in self.addons:
            key = (entry.name, entry.area, MeasurementType(entry.measurement_type))
            self._addon_index.setdefault(key, entry)
            self._addons_by_id[entry.id] = entry

        self._dependencies_by_parent: Dict[int, List[AddonDependency]] = {}
        for dep in self.dependencies:
            self._dependencies_by_parent.setdefault(dep.parent_addon_id, []).append(dep)

    # --- Lookups ---

    def find_cabinet(self, name: str, area: str, room_name: str,
                     measurement_type, handle_type) -> Optional[CabinetPricingEntry]:
        measurement_type = MeasurementType(measurement_type)
        handle_type = HandleType(handle_type)
        entry = self._cabinet_index.get((name, area, room_name, measurement_type, handle_type))
        if entry is None and handle_type != HandleType.NONE:
            entry = self._cabinet_index.get((name, area, room_name, measurement_type, HandleType.NONE))
        if entry is None:
            logger.debug("No cabinet pricing for %s / %s / %s / %s / %s",
                         name, area, room_name, measurement_type.value, handle_type.value)
        return entry

    def find_surface(self, name: str, area: str, measurement_type) -> Optional[SurfacePricingEntry]:
        entry = self._surface_index.get(
            (name, normalize_surface_area(area), MeasurementType(measurement_type))
        )
        if entry is None:
            logger.debug("No surface pricing for %s / %s", name, area)
        return entry

    def find_addon(self, name: str, area: str, measurement_type) -> Optional[AddonPricingEntry]:
        entry = self._addon_index.get((name, area, MeasurementType(measurement_type)))
        if entry is None:
            logger.debug("No addon pricing for %s / %s", name, area)
        return entry

    def addon_by_id(self, addon_id: int) -> Optional[AddonPricingEntry]:
        return self._addons_by_id.get(addon_id)

    def dependencies_of(self, parent_addon_id: int) -> List[AddonDependency]:
        return list(self._dependencies_by_parent.get(parent_addon_id, []))

    # --- Validation ---

    def validate(self):
        """
        Reject dependency tables that are not a forest.

        Raises DependencyCycleError on the first cycle found, CatalogError when
        an edge references an addon that is not in the catalog.
        """
        for dep in self.dependencies:
            for addon_id in (dep.parent_addon_id, dep.dependent_addon_id):
                if addon_id not in self._addons_by_id:
                    raise CatalogError(f"Dependency references unknown addon {addon_id}")

        done = set()
        for start in self._dependencies_by_parent:
            if start not in done:
                self._walk(start, (), done)

    def _walk(self, addon_id: int, path: Tuple[int, ...], done: set):
        if addon_id in path:
            raise DependencyCycleError(addon_id, path)
        if addon_id in done:
            return
        for dep in self._dependencies_by_parent.get(addon_id, []):
            self._walk(dep.dependent_addon_id, path + (addon_id,), done)
        done.add(addon_id)


def build_surface_entry(entry_id: int, name: str, area: str, base_price: float,
                        fenix_multiplier: float = 1.0) -> SurfacePricingEntry:
    """
    Surface row from a single base price list column.

    Every material gets the base price except Fenix, which is scaled by
    fenix_multiplier.
    """
    return SurfacePricingEntry(
        id=entry_id,
        name=name,
        area=area,
        laminate=base_price,
        fenix=base_price * fenix_multiplier,
        porcelain=base_price,
        quartz=base_price,
        stainless=base_price,
        glass_matte=base_price,
        granite=base_price,
    )


def pad_price_levels(prices) -> Tuple[float, ...]:
    """Pad or trim to exactly PRICE_LEVEL_COUNT levels."""
    levels = [float(p or 0.0) for p in list(prices)[:PRICE_LEVEL_COUNT]]
    levels.extend([0.0] * (PRICE_LEVEL_COUNT - len(levels)))
    return tuple(levels)
