from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from .config import settings
from .models import MeasurementType, HandleType, RoundingRule, SurfaceMaterial, PRICE_LEVEL_COUNT


def _normalize_material(value):
    """Accept 'glass matte' / 'Glass_Matte' spellings from older price lists."""
    if isinstance(value, str):
        return value.strip().lower().replace("_", "-").replace(" ", "-")
    return value


# --- Calculator configuration ---

class CabinetConfig(BaseModel):
    name: str
    area: str = "KITCHEN"
    room_name: str = "Kitchen"
    measurement_type: MeasurementType = MeasurementType.LINEAR_FOOT
    handle_type: Optional[HandleType] = None  # None = use the configuration's handle type
    linear_feet: float = 0.0
    quantity: float = 0.0
    price_level: int = 0
    str_enabled: bool = False


class SurfaceConfig(BaseModel):
    name: str
    area: str = "KITCHEN"
    measurement_type: MeasurementType = MeasurementType.SQUARE_FOOT
    material: SurfaceMaterial = SurfaceMaterial.LAMINATE
    square_feet: float = 0.0

    @field_validator("material", mode="before")
    @classmethod
    def normalize_material(cls, v):
        return _normalize_material(v)


class AddonConfig(BaseModel):
    name: str
    area: str = "KITCHEN"
    measurement_type: MeasurementType = MeasurementType.LINEAR_FOOT
    linear_feet: float = 0.0
    quantity: float = 0.0
    # Derived from the dependency table, caller-supplied values are replaced
    dependents: List["AddonConfig"] = []


AddonConfig.model_rebuild()


class IslandConfig(BaseModel):
    enabled: bool = False
    handle_type: HandleType = HandleType.HANDLES
    price_level: int = 0
    room_name: str = "Kitchen"
    counter_top: SurfaceConfig = Field(
        default_factory=lambda: SurfaceConfig(name="COUNTER TOP", area="ISLAND")
    )
    waterfall: Optional[SurfaceConfig] = None
    aluminum_profiles: Optional[AddonConfig] = None
    aluminum_toe_kicks: Optional[AddonConfig] = None
    integrated_sink: Optional[AddonConfig] = None
    cabinets: List[CabinetConfig] = []


class CalculatorConfig(BaseModel):
    handle_type: HandleType = HandleType.HANDLES
    cabinets: List[CabinetConfig] = []
    surfaces: List[SurfaceConfig] = []
    addons: List[AddonConfig] = []
    island: Optional[IslandConfig] = None


class PricingRates(BaseModel):
    contingency_rate: float = Field(default_factory=lambda: settings.CONTINGENCY_RATE_DEFAULT, ge=0)
    tariff_rate: float = Field(default_factory=lambda: settings.TARIFF_RATE_DEFAULT, ge=0)


# --- Pricing output ---

class DependentItem(BaseModel):
    """Derived addon shown under its parent; never added to the subtotal."""
    name: str
    area: str
    measurement_type: MeasurementType
    quantity: float
    unit_price: float
    informational_price: float


class PricingItem(BaseModel):
    name: str
    price: float
    category: str
    measurement: Optional[str] = None
    dependents: List[DependentItem] = []


class PricingSummary(BaseModel):
    items: List[PricingItem] = []
    subtotal: float = 0.0
    buffer: float = 0.0
    tariff: float = 0.0
    total: float = 0.0
    trade_price: float = 0.0
    retail_price_1: float = 0.0
    retail_price_2: float = 0.0
    contingency_rate: float = 0.0
    tariff_rate: float = 0.0


class CalculateRequest(BaseModel):
    config: CalculatorConfig
    rates: Optional[PricingRates] = None


# --- Quotes ---

class QuoteCreate(BaseModel):
    customer_name: str = Field(min_length=1)
    customer_email: str = Field(min_length=1)
    customer_phone: Optional[str] = None
    config: CalculatorConfig
    rates: Optional[PricingRates] = None


class Quote(BaseModel):
    id: int
    quote_number: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    created_at: Optional[datetime] = None
    configuration: dict
    pricing: dict


# --- Catalog ---

class CabinetPricingBase(BaseModel):
    name: str
    area: str = "KITCHEN"
    room_name: str = "Kitchen"
    measurement_type: MeasurementType = MeasurementType.LINEAR_FOOT
    handle_type: HandleType = HandleType.NONE
    price_levels: List[float] = Field(min_length=PRICE_LEVEL_COUNT, max_length=PRICE_LEVEL_COUNT)
    str_addon: float = Field(default=0.0, ge=0)


class CabinetPricingCreate(CabinetPricingBase):
    pass


class CabinetPricing(CabinetPricingBase):
    id: int
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True


class SurfacePricingBase(BaseModel):
    name: str
    area: str = "KITCHEN"
    measurement_type: MeasurementType = MeasurementType.SQUARE_FOOT
    laminate: float = 0.0
    fenix: float = 0.0
    porcelain: float = 0.0
    quartz: float = 0.0
    stainless: float = 0.0
    glass_matte: float = 0.0
    granite: float = 0.0


class SurfacePricingCreate(SurfacePricingBase):
    pass


class SurfacePricing(SurfacePricingBase):
    id: int
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True


class AddonPricingBase(BaseModel):
    name: str
    area: str = "KITCHEN"
    measurement_type: MeasurementType = MeasurementType.LINEAR_FOOT
    price: float = Field(default=0.0, ge=0)


class AddonPricingCreate(AddonPricingBase):
    pass


class AddonPriceUpdate(BaseModel):
    price: float = Field(ge=0)


class AddonPricing(AddonPricingBase):
    id: int
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True


class AddonDependencyCreate(BaseModel):
    parent_addon_id: int
    dependent_addon_id: int
    quantity_ratio: float = Field(gt=0)
    rounding_rule: RoundingRule = RoundingRule.NONE


class AddonDependency(AddonDependencyCreate):
    id: int
    class Config:
        from_attributes = True
