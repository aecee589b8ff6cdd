"""
Surface pricer: countertops, backsplash, waterfall.

price = material unit price × square feet
"""

from .base import BaseLinePricer


class SurfacePricer(BaseLinePricer):

    def price(self, config, catalog) -> float:
        square_feet = self.positive(config.square_feet)
        if square_feet <= 0:
            return 0.0

        entry = catalog.find_surface(config.name, config.area, config.measurement_type)
        if entry is None:
            return 0.0

        unit_price = entry.price_for(config.material)
        if not unit_price:
            return 0.0
        return unit_price * square_feet


def calculate_surface_price(config, catalog) -> float:
    return SurfacePricer().price(config, catalog)
