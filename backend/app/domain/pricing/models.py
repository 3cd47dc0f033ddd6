from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Currency and rate values stay Decimal in Python and go out as JSON numbers.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ServiceType(str, Enum):
    residential = "residential"
    commercial = "commercial"
    carpet = "carpet"
    window = "window"
    floor = "floor"


class ServiceFrequency(str, Enum):
    one_time = "one-time"
    once_a_month = "1x-month"
    bi_weekly = "bi-weekly"
    weekly = "weekly"
    twice_a_week = "2x-week"
    three_times_a_week = "3x-week"
    five_times_a_week = "5x-week"
    daily = "daily"
    monthly = "monthly"
    quarterly = "quarterly"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PricingCalculationInput(_CamelModel):
    service_type: str
    facility_size: Money
    service_frequency: str
    service_specific_data: Dict[str, Any] = Field(default_factory=dict)
    global_inputs: Dict[str, Any] = Field(default_factory=dict)
    adjustments: Dict[str, Money] = Field(default_factory=dict)
    tax_rate: Money = Decimal("0")


class PricingCalculationRequest(PricingCalculationInput):
    model_config = ConfigDict(extra="forbid")

    service_type: ServiceType
    facility_size: Money = Field(gt=0)
    service_frequency: ServiceFrequency
    tax_rate: Money = Field(default=Decimal("0"), ge=0, le=100)


class PricingBreakdown(_CamelModel):
    base_rate: Money
    frequency_multiplier: Money
    base_price: Money
    overhead_percentage: Money
    overhead_amount: Money
    margin_percentage: Money
    margin_amount: Money
    adjustments: Dict[str, Money] = Field(default_factory=dict)
    adjustments_total: Money
    subtotal: Money
    tax_rate: Money = Decimal("0")
    tax_amount: Money = Decimal("0")
    total: Money


class PreviewCalculationInput(_CamelModel):
    labor_hours: Money
    items: Dict[str, Money] = Field(default_factory=dict)
    tax_rate: Money = Decimal("0")


class PreviewCalculationRequest(PreviewCalculationInput):
    model_config = ConfigDict(extra="forbid")

    labor_hours: Money = Field(ge=0)
    tax_rate: Money = Field(default=Decimal("0"), ge=0, le=100)


class PreviewBreakdown(_CamelModel):
    labor_hours: Money
    labor_rate: Money
    labor_cost: Money
    items: Dict[str, Money] = Field(default_factory=dict)
    production_cost: Money
    subtotal: Money
    tax_rate: Money
    tax_amount: Money
    total: Money


class QuickEstimateInput(_CamelModel):
    service_type: ServiceType
    facility_size: Money
    service_frequency: ServiceFrequency


class PricingCalculationResponse(BaseModel):
    pricing: PricingBreakdown
    input: PricingCalculationRequest


class QuickEstimateResponse(BaseModel):
    estimate: Money
    input: QuickEstimateInput


class PreviewCalculationResponse(BaseModel):
    preview: PreviewBreakdown
    input: PreviewCalculationRequest
