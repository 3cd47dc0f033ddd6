from __future__ import annotations

import copy
import logging
from decimal import Decimal
from types import MappingProxyType

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.pricing_settings import db_models, schemas

logger = logging.getLogger(__name__)

# The one place where "default pricing" is defined. New tenants get a copy of
# this the first time their settings are read.
DEFAULT_PRICING_SETTINGS = MappingProxyType(
    {
        "labor_rate": 25,
        "overhead_percentage": 15,
        "margin_percentage": 20,
        "service_type_rates": {
            "residential": 0.15,
            "commercial": 0.20,
            "carpet": 0.12,
            "window": 0.25,
            "floor": 0.18,
        },
        "frequency_multipliers": {
            "one-time": 1.0,
            "weekly": 0.9,
            "bi-weekly": 0.95,
            "monthly": 1.0,
            "quarterly": 1.1,
        },
        "production_rates": {
            "residential": 1000,
            "commercial": 800,
            "carpet": 1200,
            "window": 500,
            "floor": 900,
        },
    }
)

_SCALAR_FIELDS = ("labor_rate", "overhead_percentage", "margin_percentage")
_TABLE_FIELDS = ("service_type_rates", "frequency_multipliers", "production_rates")


def default_settings_values() -> dict:
    return copy.deepcopy(dict(DEFAULT_PRICING_SETTINGS))


def _apply_values(record: db_models.PricingSettings, values: dict) -> None:
    for field in _SCALAR_FIELDS:
        if field in values:
            setattr(record, field, Decimal(str(values[field])))
    for field in _TABLE_FIELDS:
        if field in values:
            setattr(record, field, dict(values[field]))


def pricing_settings_from_record(record: db_models.PricingSettings) -> schemas.PricingSettingsResponse:
    data = {
        "org_id": record.org_id,
        "labor_rate": float(record.labor_rate),
        "overhead_percentage": float(record.overhead_percentage),
        "margin_percentage": float(record.margin_percentage),
        "service_type_rates": record.service_type_rates or {},
        "frequency_multipliers": record.frequency_multipliers or {},
        "production_rates": record.production_rates or {},
    }
    return schemas.PricingSettingsResponse.model_validate(data)


async def get_or_create_pricing_settings(
    session: AsyncSession, org_id
) -> db_models.PricingSettings:
    record = await session.get(db_models.PricingSettings, org_id)
    if record is not None:
        return record
    record = db_models.PricingSettings(org_id=org_id)
    _apply_values(record, default_settings_values())
    session.add(record)
    await session.flush()
    logger.info("pricing_settings_defaults_created", extra={"extra": {"org_id": str(org_id)}})
    return record


async def update_pricing_settings(
    session: AsyncSession, org_id, payload: schemas.PricingSettingsUpdateRequest
) -> db_models.PricingSettings:
    record = await get_or_create_pricing_settings(session, org_id)
    updates = payload.model_dump(exclude_unset=True, exclude_none=True)
    _apply_values(record, updates)
    await session.flush()
    logger.info(
        "pricing_settings_updated",
        extra={"extra": {"org_id": str(org_id), "fields": sorted(updates)}},
    )
    return record


async def reset_pricing_settings(session: AsyncSession, org_id) -> db_models.PricingSettings:
    record = await get_or_create_pricing_settings(session, org_id)
    _apply_values(record, default_settings_values())
    await session.flush()
    logger.info("pricing_settings_reset", extra={"extra": {"org_id": str(org_id)}})
    return record
