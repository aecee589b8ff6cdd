from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import enum


# --- Enums ---

class MeasurementType(str, enum.Enum):
    LINEAR_FOOT = "LINEAR FOOT"
    SQUARE_FOOT = "SQUARE FOOT"
    PER_PIECE = "PER PIECE"


class HandleType(str, enum.Enum):
    HANDLES = "Handles"
    PROFILES = "Profiles"
    # Catalog rows with no handle type match any selected handle type
    NONE = "none"


class RoundingRule(str, enum.Enum):
    NONE = "none"
    ROUND_UP = "roundUp"
    ROUND_DOWN = "roundDown"
    ROUND_NEAREST = "roundNearest"


class SurfaceMaterial(str, enum.Enum):
    LAMINATE = "laminate"
    FENIX = "fenix"
    PORCELAIN = "porcelain"
    QUARTZ = "quartz"
    STAINLESS = "stainless"
    GLASS_MATTE = "glass-matte"
    GRANITE = "granite"


# Areas seen in the price list. Stored as VARCHAR, not enum, so new rooms
# don't need a migration.
KNOWN_AREAS = ["KITCHEN", "ISLAND", "KITCHEN-SURFACES"]

PRICE_LEVEL_COUNT = 11


# --- Pricing catalog ---

class CabinetPricing(Base):
    """Tiered cabinet price list, one column per price level."""
    __tablename__ = "cabinet_pricing"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    area = Column(String, nullable=False, default="KITCHEN")
    room_name = Column(String, nullable=False, default="Kitchen")
    measurement_type = Column(Enum(MeasurementType), nullable=False)
    handle_type = Column(Enum(HandleType), nullable=False, default=HandleType.NONE)
    price_level_0 = Column(Float, default=0.0)
    price_level_1 = Column(Float, default=0.0)
    price_level_2 = Column(Float, default=0.0)
    price_level_3 = Column(Float, default=0.0)
    price_level_4 = Column(Float, default=0.0)
    price_level_5 = Column(Float, default=0.0)
    price_level_6 = Column(Float, default=0.0)
    price_level_7 = Column(Float, default=0.0)
    price_level_8 = Column(Float, default=0.0)
    price_level_9 = Column(Float, default=0.0)
    price_level_10 = Column(Float, default=0.0)
    str_addon = Column(Float, default=0.0)  # Structural upgrade, per unit
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def price_levels(self) -> list:
        return [getattr(self, f"price_level_{i}") or 0.0 for i in range(PRICE_LEVEL_COUNT)]


class SurfacePricing(Base):
    """Per-square-foot surface prices, one column per material."""
    __tablename__ = "surface_pricing"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    area = Column(String, nullable=False, default="KITCHEN")
    measurement_type = Column(Enum(MeasurementType), nullable=False, default=MeasurementType.SQUARE_FOOT)
    laminate = Column(Float, default=0.0)
    fenix = Column(Float, default=0.0)
    porcelain = Column(Float, default=0.0)
    quartz = Column(Float, default=0.0)
    stainless = Column(Float, default=0.0)
    glass_matte = Column(Float, default=0.0)
    granite = Column(Float, default=0.0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class AddonPricing(Base):
    __tablename__ = "addon_pricing"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    area = Column(String, nullable=False, default="KITCHEN")
    measurement_type = Column(Enum(MeasurementType), nullable=False)
    price = Column(Float, nullable=False, default=0.0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    dependencies = relationship(
        "AddonDependency",
        back_populates="parent",
        foreign_keys="AddonDependency.parent_addon_id",
        cascade="all, delete-orphan",
    )


class AddonDependency(Base):
    """Derived addon quantity: dependent units per one parent unit."""
    __tablename__ = "addon_dependencies"

    id = Column(Integer, primary_key=True, index=True)
    parent_addon_id = Column(Integer, ForeignKey("addon_pricing.id"), nullable=False)
    dependent_addon_id = Column(Integer, ForeignKey("addon_pricing.id"), nullable=False)
    quantity_ratio = Column(Float, nullable=False, default=1.0)
    rounding_rule = Column(Enum(RoundingRule), nullable=False, default=RoundingRule.NONE)

    parent = relationship("AddonPricing", back_populates="dependencies", foreign_keys=[parent_addon_id])
    dependent = relationship("AddonPricing", foreign_keys=[dependent_addon_id])


# --- Quotes ---

class Quote(Base):
    """Saved quote. Configuration and computed pricing, immutable once created."""
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    customer_phone = Column(String, nullable=True)
    configuration = Column(JSON, nullable=False)  # CalculatorConfig snapshot
    pricing = Column(JSON, nullable=False)  # PricingSummary snapshot
    created_at = Column(DateTime, default=datetime.utcnow)
