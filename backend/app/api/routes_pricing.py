import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_pricing_engine
from app.domain.errors import ValidationError
from app.domain.pricing.engine import PricingEngine
from app.domain.pricing.models import (
    PreviewCalculationRequest,
    PreviewCalculationResponse,
    PricingCalculationRequest,
    PricingCalculationResponse,
    QuickEstimateInput,
    QuickEstimateResponse,
    ServiceFrequency,
    ServiceType,
)
from app.infra.metrics import metrics

router = APIRouter(prefix="/v1/pricing", tags=["pricing"])
logger = logging.getLogger(__name__)


@router.post("/calculate", response_model=PricingCalculationResponse)
async def calculate_pricing(
    payload: PricingCalculationRequest,
    engine: PricingEngine = Depends(get_pricing_engine),
) -> PricingCalculationResponse:
    try:
        breakdown = engine.calculate_pricing(payload)
    except ValidationError:
        metrics.record_pricing_calculation("calculate", "invalid")
        raise
    metrics.record_pricing_calculation("calculate", "ok")
    logger.info(
        "pricing_calculated",
        extra={
            "extra": {
                "operation": "calculate",
                "service_type": payload.service_type.value,
                "service_frequency": payload.service_frequency.value,
                "rate_configured": breakdown.base_rate > 0,
                "subtotal": breakdown.subtotal,
            }
        },
    )
    return PricingCalculationResponse(pricing=breakdown, input=payload)


@router.get("/calculate", response_model=QuickEstimateResponse)
async def quick_estimate(
    service_type: ServiceType = Query(..., alias="serviceType"),
    facility_size: Decimal = Query(Decimal("1000"), alias="facilitySize", gt=0, allow_inf_nan=False),
    service_frequency: ServiceFrequency = Query(..., alias="serviceFrequency"),
    engine: PricingEngine = Depends(get_pricing_engine),
) -> QuickEstimateResponse:
    try:
        estimate = engine.get_quick_estimate(service_type, facility_size, service_frequency)
    except ValidationError:
        metrics.record_pricing_calculation("quick_estimate", "invalid")
        raise
    metrics.record_pricing_calculation("quick_estimate", "ok")
    logger.info(
        "pricing_calculated",
        extra={
            "extra": {
                "operation": "quick_estimate",
                "service_type": service_type.value,
                "service_frequency": service_frequency.value,
                "subtotal": estimate,
            }
        },
    )
    return QuickEstimateResponse(
        estimate=estimate,
        input=QuickEstimateInput(
            service_type=service_type,
            facility_size=facility_size,
            service_frequency=service_frequency,
        ),
    )


@router.post("/preview", response_model=PreviewCalculationResponse)
async def preview_pricing(
    payload: PreviewCalculationRequest,
    engine: PricingEngine = Depends(get_pricing_engine),
) -> PreviewCalculationResponse:
    try:
        preview = engine.calculate_preview(payload)
    except ValidationError:
        metrics.record_pricing_calculation("preview", "invalid")
        raise
    metrics.record_pricing_calculation("preview", "ok")
    logger.info(
        "pricing_calculated",
        extra={"extra": {"operation": "preview", "items": sorted(preview.items), "total": preview.total}},
    )
    return PreviewCalculationResponse(preview=preview, input=payload)
