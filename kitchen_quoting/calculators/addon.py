"""
Addon pricer: profiles, toe kicks, lighting, sinks, power strips.

price = unit price × linear feet (LF/SF rows) or × quantity (per-piece rows)
Dependents are not priced here; see dependencies.py.
"""

from .base import BaseLinePricer


class AddonPricer(BaseLinePricer):

    def lookup(self, config, catalog):
        return catalog.find_addon(config.name, config.area, config.measurement_type)

    def measurement(self, config) -> float:
        return self.measured_amount(config.measurement_type, config.linear_feet, config.quantity)

    def price(self, config, catalog) -> float:
        amount = self.measurement(config)
        if amount <= 0:
            return 0.0
        entry = self.lookup(config, catalog)
        if entry is None:
            return 0.0
        return self.price_entry(entry, amount)

    def price_entry(self, entry, amount: float) -> float:
        """Price an already-resolved catalog row for a measurement."""
        amount = self.positive(amount)
        if amount <= 0:
            return 0.0
        return (entry.price or 0.0) * amount


def calculate_addon_price(config, catalog) -> float:
    return AddonPricer().price(config, catalog)
