"""
Abstract base class for the line-item pricers.

Input: one configuration entry (cabinet, surface or addon) + PricingCatalog
Output: dollar amount for that entry, 0.0 when it can't be priced
"""

import math
from abc import ABC, abstractmethod

from ..models import MeasurementType

UNIT_LABELS = {
    MeasurementType.LINEAR_FOOT: "LF",
    MeasurementType.SQUARE_FOOT: "SF",
    MeasurementType.PER_PIECE: "pcs",
}


class BaseLinePricer(ABC):
    """All line-item pricers inherit from this."""

    @abstractmethod
    def price(self, config, catalog) -> float:
        """
        Returns the dollar price of one configuration entry.
        Catalog misses and non-positive measurements return 0.0, never raise.
        """
        pass

    # --- Helper methods for all pricers ---

    def positive(self, value) -> float:
        """NaN, infinite, negative or missing measurements count as zero."""
        try:
            value = float(value)
        except (TypeError, ValueError):
            return 0.0
        if math.isnan(value) or math.isinf(value) or value <= 0:
            return 0.0
        return value

    def measured_amount(self, measurement_type, linear_feet, quantity) -> float:
        """Linear and square-foot kinds bill by feet, per-piece kinds by count."""
        if MeasurementType(measurement_type) == MeasurementType.PER_PIECE:
            return self.positive(quantity)
        return self.positive(linear_feet)

    def format_measurement(self, amount: float, measurement_type) -> str:
        unit = UNIT_LABELS.get(MeasurementType(measurement_type), "")
        if float(amount).is_integer():
            return f"{int(amount)} {unit}"
        return f"{amount:.2f} {unit}"
