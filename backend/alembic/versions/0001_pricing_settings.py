"""pricing settings

Revision ID: 0001_pricing_settings
Revises: 
Create Date: 2026-10-17 00:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_pricing_settings"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "pricing_settings",
        sa.Column("org_id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("labor_rate", sa.Numeric(12, 4), nullable=False),
        sa.Column("overhead_percentage", sa.Numeric(7, 4), nullable=False),
        sa.Column("margin_percentage", sa.Numeric(7, 4), nullable=False),
        sa.Column("service_type_rates", sa.JSON(), nullable=False),
        sa.Column("frequency_multipliers", sa.JSON(), nullable=False),
        sa.Column("production_rates", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            # ORM-managed updated_at (no database trigger).
            nullable=False,
        ),
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


def downgrade() -> None:
    op.drop_table("pricing_settings")
