import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.org_context import require_org_context
from app.domain.pricing_settings import schemas
from app.domain.pricing_settings import service as pricing_settings_service
from app.infra.db import get_db_session

router = APIRouter(prefix="/v1/pricing-settings", tags=["pricing-settings"])


@router.get("", response_model=schemas.PricingSettingsEnvelope)
async def get_pricing_settings(
    session: AsyncSession = Depends(get_db_session),
    org_id: uuid.UUID = Depends(require_org_context),
) -> schemas.PricingSettingsEnvelope:
    record = await pricing_settings_service.get_or_create_pricing_settings(session, org_id)
    response = pricing_settings_service.pricing_settings_from_record(record)
    await session.commit()
    return schemas.PricingSettingsEnvelope(settings=response)


@router.put("", response_model=schemas.PricingSettingsEnvelope)
async def update_pricing_settings(
    payload: schemas.PricingSettingsUpdateRequest,
    session: AsyncSession = Depends(get_db_session),
    org_id: uuid.UUID = Depends(require_org_context),
) -> schemas.PricingSettingsEnvelope:
    record = await pricing_settings_service.update_pricing_settings(session, org_id, payload)
    response = pricing_settings_service.pricing_settings_from_record(record)
    await session.commit()
    return schemas.PricingSettingsEnvelope(settings=response)


@router.post("/reset", response_model=schemas.PricingSettingsEnvelope)
async def reset_pricing_settings(
    session: AsyncSession = Depends(get_db_session),
    org_id: uuid.UUID = Depends(require_org_context),
) -> schemas.PricingSettingsEnvelope:
    record = await pricing_settings_service.reset_pricing_settings(session, org_id)
    response = pricing_settings_service.pricing_settings_from_record(record)
    await session.commit()
    return schemas.PricingSettingsEnvelope(settings=response)
