"""
Pricing Engine: folds every configured entity into one PricingSummary.

Pure math over a catalog snapshot with no database access or hidden state.
Calling it twice with the same inputs returns identical summaries.

Input: CalculatorConfig + PricingCatalog + PricingRates
Output: PricingSummary

    subtotal = Σ item prices
    buffer   = subtotal × contingency_rate
    tariff   = (subtotal + buffer) × tariff_rate
    total    = subtotal + buffer + tariff          (dealer tier)
    trade    = total × 1.40
    retail 1 = total × 2.00
    retail 2 = total × 2.50

Unmatched catalog rows and non-positive measurements fail open to a zero
contribution and the line is left out. The only hard failure is a cycle in
the addon dependency table (DependencyCycleError).
"""

import logging
from typing import Dict, List, Optional

from . import schemas
from .calculators.addon import AddonPricer
from .calculators.cabinet import CabinetPricer
from .calculators.dependencies import DependencyResolver, ResolvedDependent
from .calculators.surface import SurfacePricer
from .models import MeasurementType

logger = logging.getLogger(__name__)

# Markup tiers, fixed multipliers of the dealer total
TRADE_MULTIPLIER = 1.4
RETAIL_1_MULTIPLIER = 2.0
RETAIL_2_MULTIPLIER = 2.5

# Island cabinet run is estimated from the counter top area. Not a geometric
# derivation, replace once real island dimensions are captured.
ISLAND_LINEAR_FEET_DIVISOR = 2.0
ISLAND_CABINET_NAME = "ISLAND"
ISLAND_AREA = "ISLAND"


def island_linear_feet(counter_top_square_feet: float) -> float:
    return counter_top_square_feet / ISLAND_LINEAR_FEET_DIVISOR


class PricingEngine:
    """
    Aggregator. Drives the cabinet, surface and addon pricers plus the
    dependency resolver and builds the summary.
    """

    def __init__(self, catalog, rates: Optional[schemas.PricingRates] = None):
        self.catalog = catalog
        self.rates = rates or schemas.PricingRates()
        self.cabinet_pricer = CabinetPricer()
        self.surface_pricer = SurfacePricer()
        self.addon_pricer = AddonPricer()
        self.resolver = DependencyResolver(catalog, self.addon_pricer)

    def price_configuration(self, config: schemas.CalculatorConfig) -> schemas.PricingSummary:
        items: List[schemas.PricingItem] = []

        # --- Cabinets ---
        for cabinet in config.cabinets:
            item = self._price_cabinet_line(
                cabinet,
                name=f"{cabinet.name} ({cabinet.area})",
                handle_type=cabinet.handle_type or config.handle_type,
            )
            if item:
                items.append(item)

        # --- Surfaces ---
        for surface in config.surfaces:
            item = self._price_surface_line(
                surface,
                name=f"{surface.name} - {surface.material.value} ({surface.area})",
            )
            if item:
                items.append(item)

        # --- Addons ---
        derived = self._derived_dependents(config.addons)
        for addon in config.addons:
            addon = self._with_derived_measurement(addon, derived)
            item = self._price_addon_line(addon, name=f"{addon.name} ({addon.area})")
            if item:
                items.append(item)

        # --- Island ---
        if config.island is not None and config.island.enabled:
            items.extend(self._price_island(config.island))

        return self._build_summary(items)

    def resolve_configuration(self, config: schemas.CalculatorConfig) -> schemas.CalculatorConfig:
        """
        Copy of the configuration with every top-level addon's dependents
        filled in from the dependency table, and derived quantities written into
        configured dependents. Used for quote snapshots.
        """
        resolved = config.model_copy(deep=True)
        derived = self._derived_dependents(resolved.addons)
        resolved.addons = [self._with_derived_measurement(addon, derived) for addon in resolved.addons]
        for addon in resolved.addons:
            addon.dependents = self._dependent_configs(addon)
        return resolved

    # --- Line pricing ---

    def _price_cabinet_line(self, cabinet, name: str, handle_type=None,
                            price_level: Optional[int] = None,
                            category: str = "cabinet") -> Optional[schemas.PricingItem]:
        price = self.cabinet_pricer.price(
            cabinet, self.catalog, handle_type=handle_type, price_level=price_level,
        )
        if price <= 0:
            return None
        amount = self.cabinet_pricer.measurement(cabinet)
        return schemas.PricingItem(
            name=name,
            price=price,
            category=category,
            measurement=self.cabinet_pricer.format_measurement(amount, cabinet.measurement_type),
        )

    def _price_surface_line(self, surface, name: str,
                            category: str = "surface") -> Optional[schemas.PricingItem]:
        price = self.surface_pricer.price(surface, self.catalog)
        if price <= 0:
            return None
        return schemas.PricingItem(
            name=name,
            price=price,
            category=category,
            measurement=self.surface_pricer.format_measurement(
                surface.square_feet, MeasurementType.SQUARE_FOOT,
            ),
        )

    def _price_addon_line(self, addon, name: str,
                          category: str = "addon") -> Optional[schemas.PricingItem]:
        price = self.addon_pricer.price(addon, self.catalog)
        if price <= 0:
            return None

        amount = self.addon_pricer.measurement(addon)
        entry = self.addon_pricer.lookup(addon, self.catalog)
        dependents = [
            schemas.DependentItem(
                name=d.entry.name,
                area=d.entry.area,
                measurement_type=d.entry.measurement_type,
                quantity=d.quantity,
                unit_price=d.unit_price,
                informational_price=d.price,
            )
            for d in self.resolver.resolve(entry, amount)
        ]
        return schemas.PricingItem(
            name=name,
            price=price,
            category=category,
            measurement=self.addon_pricer.format_measurement(amount, addon.measurement_type),
            dependents=dependents,
        )

    def _price_island(self, island: schemas.IslandConfig) -> List[schemas.PricingItem]:
        items = []

        island_cabinet = schemas.CabinetConfig(
            name=ISLAND_CABINET_NAME,
            area=ISLAND_AREA,
            room_name=island.room_name,
            measurement_type=MeasurementType.LINEAR_FOOT,
            handle_type=island.handle_type,
            linear_feet=island_linear_feet(self.addon_pricer.positive(island.counter_top.square_feet)),
            price_level=island.price_level,
            str_enabled=False,
        )
        candidates = [
            self._price_cabinet_line(island_cabinet, "Island Cabinet",
                                     handle_type=island.handle_type, category="island"),
        ]

        for cabinet in island.cabinets:
            candidates.append(self._price_cabinet_line(
                cabinet,
                f"Island {cabinet.name}",
                handle_type=island.handle_type,
                price_level=island.price_level,
                category="island",
            ))

        counter_top = island.counter_top
        candidates.append(self._price_surface_line(
            counter_top, f"Island Counter Top - {counter_top.material.value}", category="island",
        ))

        if island.waterfall is not None:
            # Waterfall always uses the counter top material
            waterfall = island.waterfall.model_copy(update={"material": counter_top.material})
            candidates.append(self._price_surface_line(
                waterfall, f"Island Waterfall - {waterfall.material.value}", category="island",
            ))

        island_addons = [
            (island.aluminum_profiles, "Island Aluminum Profiles"),
            (island.aluminum_toe_kicks, "Island Aluminum Toe Kicks"),
            (island.integrated_sink, "Island Integrated Sink"),
        ]
        for addon, label in island_addons:
            if addon is not None:
                candidates.append(self._price_addon_line(addon, label, category="island"))

        for item in candidates:
            if item:
                items.append(item)
        return items

    # --- Dependencies ---

    def _derived_dependents(self, addons) -> Dict[int, ResolvedDependent]:
        """Derived quantities of every dependent of a configured, measured parent, by catalog id."""
        derived: Dict[int, ResolvedDependent] = {}
        for addon in addons:
            amount = self.addon_pricer.measurement(addon)
            if amount <= 0:
                continue
            entry = self.addon_pricer.lookup(addon, self.catalog)
            if entry is None:
                continue
            for dependent in self.resolver.resolve(entry, amount):
                # First parent wins
                derived.setdefault(dependent.entry.id, dependent)
        return derived

    def _with_derived_measurement(self, addon, derived: Dict[int, ResolvedDependent]):
        """
        A configured addon whose quantity comes from a parent gets the derived
        linear feet or quantity in place of whatever the caller sent.
        """
        entry = self.addon_pricer.lookup(addon, self.catalog)
        if entry is None or entry.id not in derived:
            return addon
        dependent = derived[entry.id]
        logger.debug("%s (%s) quantity derived from addon %s: %s",
                     addon.name, addon.area, dependent.parent_addon_id, dependent.quantity)
        return addon.model_copy(update={
            "linear_feet": dependent.linear_feet,
            "quantity": dependent.piece_quantity,
        })

    def _dependent_configs(self, addon) -> List[schemas.AddonConfig]:
        amount = self.addon_pricer.measurement(addon)
        entry = self.addon_pricer.lookup(addon, self.catalog)
        if amount <= 0 or entry is None:
            return []
        return [
            schemas.AddonConfig(
                name=d.entry.name,
                area=d.entry.area,
                measurement_type=d.entry.measurement_type,
                linear_feet=d.linear_feet,
                quantity=d.piece_quantity,
            )
            for d in self.resolver.resolve(entry, amount)
        ]

    # --- Totals ---

    def _build_summary(self, items: List[schemas.PricingItem]) -> schemas.PricingSummary:
        contingency_rate = self.rates.contingency_rate
        tariff_rate = self.rates.tariff_rate

        subtotal = sum(item.price for item in items)
        buffer = subtotal * contingency_rate
        tariff = (subtotal + buffer) * tariff_rate
        total = subtotal + buffer + tariff

        return schemas.PricingSummary(
            items=items,
            subtotal=subtotal,
            buffer=buffer,
            tariff=tariff,
            total=total,
            trade_price=total * TRADE_MULTIPLIER,
            retail_price_1=total * RETAIL_1_MULTIPLIER,
            retail_price_2=total * RETAIL_2_MULTIPLIER,
            contingency_rate=contingency_rate,
            tariff_rate=tariff_rate,
        )


def price_configuration(config: schemas.CalculatorConfig, catalog,
                        rates: Optional[schemas.PricingRates] = None) -> schemas.PricingSummary:
    """Price a configuration against a catalog snapshot."""
    return PricingEngine(catalog, rates).price_configuration(config)
