from __future__ import annotations

import math
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _check_rate_table(value: dict[str, float] | None) -> dict[str, float] | None:
    if value is None:
        return value
    for key, rate in value.items():
        if not key or not key.strip():
            raise ValueError("rate keys must be non-empty")
        if not math.isfinite(rate) or rate < 0:
            raise ValueError(f"rate for {key!r} must be a non-negative finite number")
    return value


class PricingSettingsResponse(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False, alias_generator=to_camel, populate_by_name=True)

    org_id: uuid.UUID
    labor_rate: float = Field(ge=0.0)
    overhead_percentage: float = Field(ge=0.0, le=100.0)
    margin_percentage: float = Field(ge=0.0, le=100.0)
    service_type_rates: dict[str, float] = Field(default_factory=dict)
    frequency_multipliers: dict[str, float] = Field(default_factory=dict)
    production_rates: dict[str, float] = Field(default_factory=dict)

    @field_validator("service_type_rates", "frequency_multipliers", "production_rates")
    @classmethod
    def validate_rate_table(cls, value: dict[str, float]) -> dict[str, float]:
        return _check_rate_table(value)


class PricingSettingsUpdateRequest(BaseModel):
    model_config = ConfigDict(
        allow_inf_nan=False, extra="forbid", alias_generator=to_camel, populate_by_name=True
    )

    labor_rate: float | None = Field(default=None, ge=0.0)
    overhead_percentage: float | None = Field(default=None, ge=0.0, le=100.0)
    margin_percentage: float | None = Field(default=None, ge=0.0, le=100.0)
    service_type_rates: dict[str, float] | None = None
    frequency_multipliers: dict[str, float] | None = None
    production_rates: dict[str, float] | None = None

    @field_validator("service_type_rates", "frequency_multipliers", "production_rates")
    @classmethod
    def validate_rate_table(cls, value: dict[str, float] | None) -> dict[str, float] | None:
        return _check_rate_table(value)


class PricingSettingsEnvelope(BaseModel):
    settings: PricingSettingsResponse
