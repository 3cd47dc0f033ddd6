import uuid

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.org_context import require_org_context
from app.domain.pricing.engine import PricingEngine, create_pricing_engine
from app.domain.pricing_settings import service as pricing_settings_service
from app.infra.db import get_db_session


async def get_pricing_engine(
    session: AsyncSession = Depends(get_db_session),
    org_id: uuid.UUID = Depends(require_org_context),
) -> PricingEngine:
    # Built from the ORM row so corrupt stored values raise ConfigurationError.
    record = await pricing_settings_service.get_or_create_pricing_settings(session, org_id)
    engine = create_pricing_engine(record)
    await session.commit()
    return engine
