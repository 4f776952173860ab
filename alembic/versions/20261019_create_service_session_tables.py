"""Create service session, ledger entry, session edit and inventory tables.

Revision ID: 20261019_service_session
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

# revision identifiers, used by Alembic.
revision: str = "20261019_service_session"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create session ledger tables."""
    op.create_table(
        "inventory_item",
        sa.Column("id", UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True, index=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("regular_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("service_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true(), index=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("stock >= 0", name="ck_inventory_item_stock_non_negative"),
    )

    op.create_table(
        "service_session",
        sa.Column("id", UUID(as_uuid=True), nullable=False),
        sa.Column("model_id", sa.String(length=255), nullable=False, index=True),
        sa.Column("model_name", sa.String(length=255), nullable=False),
        sa.Column("client_id", sa.String(length=255), nullable=True, index=True),
        sa.Column("client_name", sa.String(length=255), nullable=True),
        sa.Column("client_phone", sa.String(length=50), nullable=True),
        sa.Column("location_kind", sa.String(length=20), nullable=False),
        sa.Column("room", sa.String(length=20), nullable=True, index=True),
        sa.Column("duration_category", sa.String(length=50), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=False),
        sa.Column("payment_proof_ref", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="activo", index=True),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("ended_at", sa.DateTime(), nullable=True),
        sa.Column("service_notes", sa.Text(), nullable=True),
        sa.Column("closing_notes", sa.Text(), nullable=True),
        sa.Column("expiry_warning_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("edited_by_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # At most one active session per model
    op.create_index(
        "uq_service_session_active_model",
        "service_session",
        ["model_id"],
        unique=True,
        postgresql_where=sa.text("status = 'activo'"),
    )

    op.create_table(
        "service_ledger_entry",
        sa.Column("id", UUID(as_uuid=True), nullable=False),
        sa.Column("session_id", UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("entry_type", sa.String(length=14), nullable=False, index=True),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("cost", sa.Numeric(12, 2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("duration_label", sa.String(length=50), nullable=True),
        sa.Column("minutes", sa.Integer(), nullable=True),
        sa.Column("product_id", UUID(as_uuid=True), nullable=True, index=True),
        sa.Column("proof_ref", sa.Text(), nullable=True),
        sa.Column("recorded_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["session_id"], ["service_session.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "service_session_edit",
        sa.Column("id", UUID(as_uuid=True), nullable=False),
        sa.Column("session_id", UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("previous_location_kind", sa.String(length=20), nullable=False),
        sa.Column("previous_duration_category", sa.String(length=50), nullable=False),
        sa.Column("previous_base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("new_location_kind", sa.String(length=20), nullable=False),
        sa.Column("new_duration_category", sa.String(length=50), nullable=False),
        sa.Column("new_base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["session_id"], ["service_session.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Drop session ledger tables."""
    op.drop_table("service_session_edit")
    op.drop_table("service_ledger_entry")
    op.drop_index("uq_service_session_active_model", table_name="service_session")
    op.drop_table("service_session")
    op.drop_table("inventory_item")
