"""
Dependency resolver: derived addon quantities.

Some addons are sold in proportion to another one (one transformer per started
3 ft of LED strip). For every edge in the dependency table:

    derived = parent measurement × quantity_ratio, then the edge's rounding rule

The derived value becomes the dependent's linear feet or quantity (whichever
its own measurement type bills by) and is priced like any other addon.
Dependents of dependents are followed; revisiting an addon is a cycle and
raises DependencyCycleError instead of looping.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..models import MeasurementType, RoundingRule
from .addon import AddonPricer
from .catalog import AddonDependency, AddonPricingEntry, DependencyCycleError

logger = logging.getLogger(__name__)


def apply_rounding(value: float, rule) -> float:
    rule = RoundingRule(rule)
    if rule == RoundingRule.ROUND_UP:
        return float(math.ceil(value))
    if rule == RoundingRule.ROUND_DOWN:
        return float(math.floor(value))
    if rule == RoundingRule.ROUND_NEAREST:
        # Halves round up, not to even
        return float(math.floor(value + 0.5))
    return value


def derive_quantity(parent_measurement: float, dependency: AddonDependency) -> float:
    return apply_rounding(parent_measurement * dependency.quantity_ratio, dependency.rounding_rule)


@dataclass(frozen=True)
class ResolvedDependent:
    parent_addon_id: int
    entry: AddonPricingEntry
    dependency: AddonDependency
    quantity: float
    unit_price: float
    price: float
    depth: int = 1

    @property
    def linear_feet(self) -> float:
        if MeasurementType(self.entry.measurement_type) == MeasurementType.PER_PIECE:
            return 0.0
        return self.quantity

    @property
    def piece_quantity(self) -> float:
        if MeasurementType(self.entry.measurement_type) == MeasurementType.PER_PIECE:
            return self.quantity
        return 0.0


class DependencyResolver:

    def __init__(self, catalog, pricer: Optional[AddonPricer] = None):
        self.catalog = catalog
        self.pricer = pricer or AddonPricer()

    def resolve(self, parent_entry: AddonPricingEntry, parent_measurement: float) -> List[ResolvedDependent]:
        """
        All dependents of a parent addon, depth-first, with derived quantities
        and prices. Edges pointing at addons missing from the catalog are skipped.
        """
        resolved: List[ResolvedDependent] = []
        visited = {parent_entry.id}
        self._resolve(parent_entry, parent_measurement, (parent_entry.id,), visited, resolved)
        return resolved

    def _resolve(self, parent_entry, parent_measurement: float,
                 path: Tuple[int, ...], visited: set, resolved: List[ResolvedDependent]):
        for dependency in self.catalog.dependencies_of(parent_entry.id):
            dependent_id = dependency.dependent_addon_id
            if dependent_id in path:
                raise DependencyCycleError(dependent_id, path)
            if dependent_id in visited:
                # Already reached through another parent
                logger.debug("Addon %s already resolved, skipping second path", dependent_id)
                continue
            visited.add(dependent_id)

            entry = self.catalog.addon_by_id(dependent_id)
            if entry is None:
                logger.debug("Dependency %s -> %s points at a missing addon",
                             parent_entry.id, dependent_id)
                continue

            quantity = derive_quantity(self.pricer.positive(parent_measurement), dependency)
            price = self.pricer.price_entry(entry, quantity)
            resolved.append(ResolvedDependent(
                parent_addon_id=parent_entry.id,
                entry=entry,
                dependency=dependency,
                quantity=quantity,
                unit_price=entry.price or 0.0,
                price=price,
                depth=len(path),
            ))
            self._resolve(entry, quantity, path + (dependent_id,), visited, resolved)
