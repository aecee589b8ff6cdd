"""
Cabinet pricer.

unit price = price level column (+ STR surcharge when enabled)
price = unit price × linear feet (LF/SF rows) or × quantity (per-piece rows)
"""

from typing import Optional

from ..models import HandleType
from .base import BaseLinePricer


class CabinetPricer(BaseLinePricer):

    def lookup(self, config, catalog, handle_type=None):
        return catalog.find_cabinet(
            config.name,
            config.area,
            config.room_name,
            config.measurement_type,
            handle_type or config.handle_type or HandleType.NONE,
        )

    def measurement(self, config) -> float:
        return self.measured_amount(config.measurement_type, config.linear_feet, config.quantity)

    def price(self, config, catalog, handle_type=None, price_level: Optional[int] = None) -> float:
        """
        handle_type / price_level override the config's own values. The island
        prices its cabinets with the island's handle type and level.
        """
        amount = self.measurement(config)
        if amount <= 0:
            return 0.0

        entry = self.lookup(config, catalog, handle_type)
        if entry is None:
            return 0.0

        level = config.price_level if price_level is None else price_level
        unit_price = entry.price_at_level(level)
        if config.str_enabled:
            unit_price += entry.str_addon or 0.0

        return unit_price * amount

    def str_surcharge(self, config, catalog, handle_type=None) -> float:
        """STR share of the cabinet price, for callers that show it separately."""
        if not config.str_enabled:
            return 0.0
        entry = self.lookup(config, catalog, handle_type)
        if entry is None:
            return 0.0
        return (entry.str_addon or 0.0) * self.measurement(config)


def calculate_cabinet_price(config, catalog, handle_type=None) -> float:
    return CabinetPricer().price(config, catalog, handle_type=handle_type)
