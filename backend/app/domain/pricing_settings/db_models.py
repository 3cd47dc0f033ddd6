from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy import func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from app.infra.db import Base, UUID_TYPE


class PricingSettings(Base):
    __tablename__ = "pricing_settings"
    __table_args__ = (
        sa.CheckConstraint("labor_rate >= 0", name="ck_pricing_settings_labor_rate"),
        sa.CheckConstraint(
            "overhead_percentage >= 0 AND overhead_percentage <= 100",
            name="ck_pricing_settings_overhead_percentage",
        ),
        sa.CheckConstraint(
            "margin_percentage >= 0 AND margin_percentage <= 100",
            name="ck_pricing_settings_margin_percentage",
        ),
    )

    org_id: Mapped[uuid.UUID] = mapped_column(UUID_TYPE, primary_key=True)
    labor_rate: Mapped[Decimal] = mapped_column(sa.Numeric(12, 4), nullable=False)
    overhead_percentage: Mapped[Decimal] = mapped_column(sa.Numeric(7, 4), nullable=False)
    margin_percentage: Mapped[Decimal] = mapped_column(sa.Numeric(7, 4), nullable=False)
    service_type_rates: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    frequency_multipliers: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    production_rates: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
