"""Create villa booking tables

Revision ID: 3f2a9c1d7b10
Revises:
Create Date: 2025-05-04 10:12:31.418207

"""

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "3f2a9c1d7b10"
down_revision = None
branch_labels = None
depends_on = None

SCHEMA = "villa"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def _property_fk() -> sa.Column:
    return sa.Column(
        "property_id",
        sa.Integer(),
        sa.ForeignKey(f"{SCHEMA}.properties.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.execute(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}")

    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default=sa.text("'ILS'")),
        sa.Column("weekday_rate", sa.Integer(), nullable=False),
        sa.Column("weekend_rate", sa.Integer(), nullable=True),
        sa.Column(
            "weekend_days",
            postgresql.ARRAY(sa.Integer()),
            nullable=False,
            server_default=sa.text("'{3,4,5}'"),
        ),
        sa.Column("price_per_adult", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("price_per_child", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("cleaning_fee", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("vat_rate", sa.Numeric(6, 4), nullable=False, server_default=sa.text("0")),
        sa.Column("min_nights", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("max_nights", sa.Integer(), nullable=False, server_default=sa.text("30")),
        sa.Column("max_occupancy", sa.Integer(), nullable=True),
        sa.Column("security_deposit", postgresql.JSONB(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("TRUE")),
        *_timestamps(),
        sa.CheckConstraint("min_nights >= 1", name="ck_properties_min_nights_positive"),
        sa.CheckConstraint("max_nights >= min_nights", name="ck_properties_night_bounds"),
        sa.CheckConstraint("vat_rate >= 0 AND vat_rate < 1", name="ck_properties_vat_rate_fraction"),
        schema=SCHEMA,
    )

    op.create_table(
        "seasons",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _property_fk(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("nightly_rate", sa.Integer(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.CheckConstraint("end_date >= start_date", name="ck_seasons_date_order"),
        schema=SCHEMA,
    )
    op.create_index("ix_seasons_property_id", "seasons", ["property_id"], schema=SCHEMA)

    op.create_table(
        "custom_pricing",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _property_fk(),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("price_per_night", sa.Integer(), nullable=False),
        sa.Column("price_per_adult", sa.Integer(), nullable=True),
        sa.Column("price_per_child", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("property_id", "date", name="uq_custom_pricing_property_date"),
        schema=SCHEMA,
    )

    op.create_table(
        "blocked_periods",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _property_fk(),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.CheckConstraint("end_date >= start_date", name="ck_blocked_periods_date_order"),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_blocked_periods_property_id", "blocked_periods", ["property_id"], schema=SCHEMA
    )

    op.create_table(
        "coupons",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("percent_off", sa.Numeric(5, 2), nullable=True),
        sa.Column("amount_off", sa.Integer(), nullable=True),
        sa.Column("valid_from", sa.Date(), nullable=True),
        sa.Column("valid_to", sa.Date(), nullable=True),
        sa.Column("min_nights", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("TRUE")),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        *_timestamps(),
        sa.UniqueConstraint("code", name="uq_coupons_code"),
        sa.CheckConstraint(
            "(percent_off IS NULL) <> (amount_off IS NULL)",
            name="ck_coupons_exactly_one_discount",
        ),
        sa.CheckConstraint(
            "percent_off IS NULL OR (percent_off > 0 AND percent_off <= 100)",
            name="ck_coupons_percent_range",
        ),
        sa.CheckConstraint("amount_off IS NULL OR amount_off > 0", name="ck_coupons_amount_positive"),
        sa.CheckConstraint("code = upper(code)", name="ck_coupons_code_upper"),
        schema=SCHEMA,
    )

    op.create_table(
        "reservations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        _property_fk(),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("check_in", sa.Date(), nullable=False),
        sa.Column("check_out", sa.Date(), nullable=False),
        sa.Column("nights", sa.Integer(), nullable=False),
        sa.Column("adults", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("children", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("subtotal", sa.Integer(), nullable=False),
        sa.Column("fees", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("discount", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("taxes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("coupon_code", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("hold_token", sa.String(), nullable=True),
        sa.Column("hold_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancellation_reason", sa.String(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("hold_token", name="uq_reservations_hold_token"),
        sa.CheckConstraint("check_out > check_in", name="ck_reservations_date_order"),
        sa.CheckConstraint("nights = check_out - check_in", name="ck_reservations_nights_match"),
        sa.CheckConstraint(
            "status IN ('PENDING', 'AWAITING_APPROVAL', 'APPROVED', 'PAID', 'CANCELLED')",
            name="ck_reservations_status_values",
        ),
        schema=SCHEMA,
    )
    op.create_index("ix_reservations_user_id", "reservations", ["user_id"], schema=SCHEMA)
    op.create_index("ix_reservations_status", "reservations", ["status"], schema=SCHEMA)
    op.create_index(
        "ix_reservations_property_dates",
        "reservations",
        ["property_id", "check_in", "check_out"],
        schema=SCHEMA,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("reservations", schema=SCHEMA)
    op.drop_table("coupons", schema=SCHEMA)
    op.drop_table("blocked_periods", schema=SCHEMA)
    op.drop_table("custom_pricing", schema=SCHEMA)
    op.drop_table("seasons", schema=SCHEMA)
    op.drop_table("properties", schema=SCHEMA)
