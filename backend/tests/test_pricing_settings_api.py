import asyncio
import uuid

import pytest

from app.domain.pricing_settings import db_models, service
from app.domain.pricing_settings.schemas import PricingSettingsUpdateRequest

ORG_ID = uuid.UUID("0b8f8a4e-2f6d-4f43-8a57-0c9f3c1d2e11")
ORG_HEADERS = {"X-Org-Id": str(ORG_ID)}


def test_get_materializes_defaults(client):
    response = client.get("/v1/pricing-settings", headers=ORG_HEADERS)

    assert response.status_code == 200
    payload = response.json()["settings"]
    assert payload["orgId"] == str(ORG_ID)
    assert payload["laborRate"] == 25
    assert payload["overheadPercentage"] == 15
    assert payload["marginPercentage"] == 20
    assert payload["serviceTypeRates"] == {
        "residential": 0.15,
        "commercial": 0.2,
        "carpet": 0.12,
        "window": 0.25,
        "floor": 0.18,
    }
    assert payload["frequencyMultipliers"] == {
        "one-time": 1.0,
        "weekly": 0.9,
        "bi-weekly": 0.95,
        "monthly": 1.0,
        "quarterly": 1.1,
    }
    assert payload["productionRates"]["window"] == 500


def test_update_is_partial(client):
    client.get("/v1/pricing-settings", headers=ORG_HEADERS)

    response = client.put(
        "/v1/pricing-settings",
        json={"laborRate": 40, "serviceTypeRates": {"residential": 0.2}},
        headers=ORG_HEADERS,
    )

    assert response.status_code == 200
    payload = response.json()["settings"]
    assert payload["laborRate"] == 40
    assert payload["serviceTypeRates"] == {"residential": 0.2}
    assert payload["overheadPercentage"] == 15
    assert payload["frequencyMultipliers"]["weekly"] == 0.9

    fetched = client.get("/v1/pricing-settings", headers=ORG_HEADERS).json()["settings"]
    assert fetched == payload


def test_update_changes_pricing(client):
    client.put(
        "/v1/pricing-settings",
        json={"overheadPercentage": 0, "marginPercentage": 0},
        headers=ORG_HEADERS,
    )

    response = client.get(
        "/v1/pricing/calculate",
        params={"serviceType": "residential", "facilitySize": 1000, "serviceFrequency": "weekly"},
        headers=ORG_HEADERS,
    )

    assert response.json()["estimate"] == 135.0


@pytest.mark.parametrize(
    "payload,field",
    [
        ({"laborRate": -1}, "laborRate"),
        ({"overheadPercentage": 120}, "overheadPercentage"),
        ({"marginPercentage": -0.1}, "marginPercentage"),
        ({"serviceTypeRates": {"residential": -0.5}}, "serviceTypeRates"),
        ({"frequencyMultipliers": {"": 1.0}}, "frequencyMultipliers"),
        ({"productionRates": {"flyers": "cheap"}}, "productionRates.flyers"),
        ({"discountPolicy": "aggressive"}, "discountPolicy"),
    ],
)
def test_update_rejects_invalid_values(client, payload, field):
    response = client.put("/v1/pricing-settings", json=payload, headers=ORG_HEADERS)

    assert response.status_code == 400
    fields = [error["field"] for error in response.json()["errors"]]
    assert field in fields


def test_reset_restores_defaults(client):
    client.put(
        "/v1/pricing-settings",
        json={"laborRate": 99, "productionRates": {}},
        headers=ORG_HEADERS,
    )

    response = client.post("/v1/pricing-settings/reset", headers=ORG_HEADERS)

    assert response.status_code == 200
    payload = response.json()["settings"]
    assert payload["laborRate"] == 25
    assert payload["productionRates"]["residential"] == 1000


def test_get_or_create_reuses_existing_record(async_session_maker):
    async def _run() -> tuple[db_models.PricingSettings, db_models.PricingSettings]:
        async with async_session_maker() as session:
            first = await service.get_or_create_pricing_settings(session, ORG_ID)
            await session.commit()
        async with async_session_maker() as session:
            second = await service.get_or_create_pricing_settings(session, ORG_ID)
            return first, second

    first, second = asyncio.run(_run())

    assert first.org_id == second.org_id == ORG_ID
    assert second.labor_rate == 25


def test_update_service_ignores_unset_fields(async_session_maker):
    async def _run() -> db_models.PricingSettings:
        async with async_session_maker() as session:
            record = await service.update_pricing_settings(
                session, ORG_ID, PricingSettingsUpdateRequest(margin_percentage=30)
            )
            await session.commit()
            return record

    record = asyncio.run(_run())
    response = service.pricing_settings_from_record(record)

    assert response.margin_percentage == 30
    assert response.labor_rate == 25
    assert response.service_type_rates["carpet"] == 0.12


def test_defaults_constant_is_read_only():
    with pytest.raises(TypeError):
        service.DEFAULT_PRICING_SETTINGS["labor_rate"] = 1

    values = service.default_settings_values()
    values["service_type_rates"]["residential"] = 9

    assert service.DEFAULT_PRICING_SETTINGS["service_type_rates"]["residential"] == 0.15


def test_update_only_touches_the_tenant_named_in_the_header(client):
    other_headers = {"X-Org-Id": str(uuid.uuid4())}
    client.get("/v1/pricing-settings", headers=other_headers)

    client.put("/v1/pricing-settings", json={"laborRate": 80}, headers=ORG_HEADERS)

    assert client.get("/v1/pricing-settings", headers=ORG_HEADERS).json()["settings"]["laborRate"] == 80
    assert client.get("/v1/pricing-settings", headers=other_headers).json()["settings"]["laborRate"] == 25
