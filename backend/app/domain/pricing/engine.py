"""Deterministic pricing for cleaning-service proposals.

``PricingEngine`` is built from one tenant's pricing settings and prices
requests without touching storage or the network. Two pricing models share
the same settings object and stay separate:

* area-and-frequency (``calculate_pricing`` / ``get_quick_estimate``), driven
  by ``service_type_rates`` and ``frequency_multipliers``;
* time-and-materials (``calculate_preview``), driven by ``labor_rate`` and
  ``production_rates``.

All arithmetic runs on ``Decimal`` at full precision. Currency amounts are
rounded half-up to cents only when a breakdown is assembled.
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from app.domain.errors import ConfigurationError, ValidationError
from app.domain.pricing.models import (
    PreviewBreakdown,
    PreviewCalculationInput,
    PricingBreakdown,
    PricingCalculationInput,
)

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
NEUTRAL_MULTIPLIER = Decimal("1.0")
# Inputs and stored rates above this are rejected before any arithmetic.
MAX_MAGNITUDE = Decimal("1000000000000")

_REQUIRED_SCALARS = ("labor_rate", "overhead_percentage", "margin_percentage")
_PERCENTAGE_FIELDS = {"overhead_percentage", "margin_percentage"}
_RATE_TABLES = ("service_type_rates", "frequency_multipliers", "production_rates")


def round_currency(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _to_decimal(value: Any) -> Decimal | None:
    """Return ``value`` as a finite Decimal, or None when it is not a number."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not result.is_finite():
        return None
    return result


def _as_key(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _read(source: Any, name: str, alias: str | None = None, default: Any = None) -> Any:
    if isinstance(source, Mapping):
        if name in source:
            return source[name]
        if alias and alias in source:
            return source[alias]
        return default
    return getattr(source, name, default)


@dataclass(frozen=True)
class RateCard:
    labor_rate: Decimal
    overhead_percentage: Decimal
    margin_percentage: Decimal
    service_type_rates: Mapping[str, Decimal]
    frequency_multipliers: Mapping[str, Decimal]
    production_rates: Mapping[str, Decimal]


def build_rate_card(settings: Any) -> RateCard:
    """Copy a settings record into an immutable ``RateCard``.

    Accepts a mapping, a pydantic model or any object exposing the settings
    attributes. Raises ``ConfigurationError`` naming the first unusable field.
    """
    if settings is None:
        raise ConfigurationError("settings", "pricing settings are required")
    if hasattr(settings, "model_dump"):
        settings = settings.model_dump()

    scalars: dict[str, Decimal] = {}
    for field in _REQUIRED_SCALARS:
        raw = _read(settings, field)
        if raw is None:
            raise ConfigurationError(field, "missing")
        value = _to_decimal(raw)
        if value is None:
            raise ConfigurationError(field, f"expected a finite number, got {raw!r}")
        if value < 0:
            raise ConfigurationError(field, "must not be negative")
        if value > MAX_MAGNITUDE:
            raise ConfigurationError(field, f"must not exceed {MAX_MAGNITUDE}")
        if field in _PERCENTAGE_FIELDS and value > HUNDRED:
            raise ConfigurationError(field, "must be between 0 and 100")
        scalars[field] = value

    tables: dict[str, Mapping[str, Decimal]] = {}
    for table in _RATE_TABLES:
        raw_table = _read(settings, table)
        if raw_table is None:
            tables[table] = MappingProxyType({})
            continue
        if not isinstance(raw_table, Mapping):
            raise ConfigurationError(table, "expected a mapping of rates")
        entries: dict[str, Decimal] = {}
        for key, raw in raw_table.items():
            value = _to_decimal(raw)
            if value is None:
                raise ConfigurationError(f"{table}.{key}", f"expected a finite number, got {raw!r}")
            if value < 0:
                raise ConfigurationError(f"{table}.{key}", "must not be negative")
            if value > MAX_MAGNITUDE:
                raise ConfigurationError(f"{table}.{key}", f"must not exceed {MAX_MAGNITUDE}")
            entries[str(key)] = value
        tables[table] = MappingProxyType(entries)

    return RateCard(**scalars, **tables)


def _require_text(value: Any, field: str) -> str:
    value = _as_key(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "must be a non-empty string")
    return value


def _require_number(value: Any, field: str, *, positive: bool = False, non_negative: bool = False) -> Decimal:
    number = _to_decimal(value)
    if number is None:
        raise ValidationError(field, "must be a finite number")
    if abs(number) > MAX_MAGNITUDE:
        raise ValidationError(field, f"must not exceed {MAX_MAGNITUDE}")
    if positive and number <= 0:
        raise ValidationError(field, "must be greater than 0")
    if non_negative and number < 0:
        raise ValidationError(field, "must not be negative")
    return number


def _require_mapping(value: Any, field: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValidationError(field, "must be an object")
    return value


class PricingEngine:
    def __init__(self, settings: Any) -> None:
        self._rates = build_rate_card(settings)

    def resolve_base_rate(self, service_type: str) -> Decimal:
        return self._rates.service_type_rates.get(service_type, Decimal("0"))

    def resolve_frequency_multiplier(self, service_frequency: str) -> Decimal:
        return self._rates.frequency_multipliers.get(service_frequency, NEUTRAL_MULTIPLIER)

    def calculate_pricing(self, calculation: PricingCalculationInput | Mapping[str, Any]) -> PricingBreakdown:
        """Price a service request on the area-and-frequency model.

        Overhead and margin are independent percentages of the same base price.
        A service type without a configured rate prices at zero, and an unknown
        frequency uses the neutral multiplier. Adjustments are rounded to cents and
        summed without clamping, so the subtotal may be negative.
        """
        service_type = _require_text(_read(calculation, "service_type", "serviceType"), "serviceType")
        facility_size = _require_number(
            _read(calculation, "facility_size", "facilitySize"), "facilitySize", positive=True
        )
        service_frequency = _require_text(
            _read(calculation, "service_frequency", "serviceFrequency"), "serviceFrequency"
        )
        raw_adjustments = _require_mapping(_read(calculation, "adjustments"), "adjustments")
        adjustments = {
            str(name): _require_number(amount, f"adjustments.{name}")
            for name, amount in raw_adjustments.items()
        }
        tax_rate = _require_number(
            _read(calculation, "tax_rate", "taxRate", Decimal("0")), "taxRate", non_negative=True
        )

        base_rate = self.resolve_base_rate(service_type)
        frequency_multiplier = self.resolve_frequency_multiplier(service_frequency)
        try:
            base_price = facility_size * base_rate * frequency_multiplier
            overhead_amount = base_price * self._rates.overhead_percentage / HUNDRED
            margin_amount = base_price * self._rates.margin_percentage / HUNDRED

            rounded_adjustments = {name: round_currency(amount) for name, amount in adjustments.items()}
            base_price_out = round_currency(base_price)
            overhead_out = round_currency(overhead_amount)
            margin_out = round_currency(margin_amount)
            # Itemized adjustments are shown rounded, so the total is their sum.
            adjustments_total = sum(rounded_adjustments.values(), Decimal("0"))
            subtotal = base_price_out + overhead_out + margin_out + adjustments_total
            tax_amount = round_currency(subtotal * tax_rate / HUNDRED)
        except InvalidOperation:
            raise ValidationError("facilitySize", "price is too large to represent") from None

        return PricingBreakdown(
            base_rate=base_rate,
            frequency_multiplier=frequency_multiplier,
            base_price=base_price_out,
            overhead_percentage=self._rates.overhead_percentage,
            overhead_amount=overhead_out,
            margin_percentage=self._rates.margin_percentage,
            margin_amount=margin_out,
            adjustments=rounded_adjustments,
            adjustments_total=adjustments_total,
            subtotal=subtotal,
            tax_rate=tax_rate,
            tax_amount=tax_amount,
            total=subtotal + tax_amount,
        )

    def get_quick_estimate(self, service_type: str, facility_size: Any, service_frequency: str) -> Decimal:
        return self.calculate_pricing(
            {
                "service_type": service_type,
                "facility_size": facility_size,
                "service_frequency": service_frequency,
                "adjustments": {},
            }
        ).subtotal

    def calculate_preview(self, preview: PreviewCalculationInput | Mapping[str, Any]) -> PreviewBreakdown:
        """Time-and-materials what-if pricing used by the settings screen."""
        labor_hours = _require_number(
            _read(preview, "labor_hours", "laborHours"), "laborHours", non_negative=True
        )
        items = _require_mapping(_read(preview, "items"), "items")
        tax_rate = _require_number(
            _read(preview, "tax_rate", "taxRate", Decimal("0")), "taxRate", non_negative=True
        )

        labor_cost = labor_hours * self._rates.labor_rate
        line_costs: dict[str, Decimal] = {}
        for item, quantity in items.items():
            count = _require_number(quantity, f"items.{item}", non_negative=True)
            rate = self._rates.production_rates.get(str(item), Decimal("0"))
            line_costs[str(item)] = count * rate
        production_cost = sum(line_costs.values(), Decimal("0"))
        subtotal = labor_cost + production_cost
        tax_amount = subtotal * tax_rate / HUNDRED
        total = subtotal + tax_amount

        try:
            return PreviewBreakdown(
                labor_hours=labor_hours,
                labor_rate=self._rates.labor_rate,
                labor_cost=round_currency(labor_cost),
                items={item: round_currency(cost) for item, cost in line_costs.items()},
                production_cost=round_currency(production_cost),
                subtotal=round_currency(subtotal),
                tax_rate=tax_rate,
                tax_amount=round_currency(tax_amount),
                total=round_currency(total),
            )
        except InvalidOperation:
            raise ValidationError("laborHours", "price is too large to represent") from None


def create_pricing_engine(settings: Any) -> PricingEngine:
    return PricingEngine(settings)
