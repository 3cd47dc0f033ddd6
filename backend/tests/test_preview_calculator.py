from decimal import Decimal

import pytest

from app.domain.errors import ValidationError
from app.domain.pricing.engine import PricingEngine
from app.domain.pricing.models import PreviewCalculationInput

SETTINGS = {
    "labor_rate": 75,
    "overhead_percentage": 15,
    "margin_percentage": 20,
    "service_type_rates": {"residential": 0.15},
    "frequency_multipliers": {},
    "production_rates": {"business_cards": 0.05},
}


def test_preview_labor_and_items_with_tax():
    engine = PricingEngine(SETTINGS)

    preview = engine.calculate_preview(
        {"labor_hours": 5, "items": {"business_cards": 1000}, "tax_rate": "8.5"}
    )

    assert preview.labor_rate == Decimal("75")
    assert preview.labor_cost == Decimal("375.00")
    assert preview.items == {"business_cards": Decimal("50.00")}
    assert preview.production_cost == Decimal("50.00")
    assert preview.subtotal == Decimal("425.00")
    assert preview.tax_amount == Decimal("36.13")
    assert preview.total == Decimal("461.13")


def test_preview_ignores_overhead_and_margin():
    engine = PricingEngine(dict(SETTINGS, overhead_percentage=100, margin_percentage=100))

    preview = engine.calculate_preview({"labor_hours": 2})

    assert preview.subtotal == Decimal("150.00")
    assert preview.total == Decimal("150.00")


def test_preview_unknown_item_costs_nothing():
    engine = PricingEngine(SETTINGS)

    preview = engine.calculate_preview(
        PreviewCalculationInput(labor_hours=Decimal("0"), items={"flyers": Decimal("300")})
    )

    assert preview.items == {"flyers": Decimal("0.00")}
    assert preview.subtotal == Decimal("0.00")


def test_preview_accepts_camel_case_keys():
    engine = PricingEngine(SETTINGS)

    preview = engine.calculate_preview({"laborHours": "1.5", "taxRate": 10})

    assert preview.labor_cost == Decimal("112.50")
    assert preview.tax_amount == Decimal("11.25")
    assert preview.total == Decimal("123.75")


@pytest.mark.parametrize(
    "payload,field",
    [
        ({"labor_hours": -1}, "laborHours"),
        ({"labor_hours": "many"}, "laborHours"),
        ({"labor_hours": 1, "items": {"business_cards": -10}}, "items.business_cards"),
        ({"labor_hours": 1, "items": "business_cards"}, "items"),
        ({"labor_hours": 1, "tax_rate": -0.5}, "taxRate"),
        ({"labor_hours": "1e13"}, "laborHours"),
        ({"labor_hours": 1, "items": {"business_cards": "1e30"}}, "items.business_cards"),
    ],
)
def test_preview_rejects_invalid_arguments(payload, field):
    engine = PricingEngine(SETTINGS)

    with pytest.raises(ValidationError) as excinfo:
        engine.calculate_preview(payload)

    assert excinfo.value.field == field


def test_preview_rejects_totals_too_large_to_round():
    engine = PricingEngine(dict(SETTINGS, labor_rate="1000000000000"))

    with pytest.raises(ValidationError) as excinfo:
        engine.calculate_preview({"labor_hours": "1000000000000", "tax_rate": "1000000000000"})

    assert excinfo.value.field == "laborHours"
