"""add campaign records and network caps tables

Revision ID: 0001_add_campaign_records_and_network_caps
Revises:
Create Date: 2024-03-01 00:00:00.000000

"""

from alembic import op
import sqlalchemy as sa

revision = "0001_add_campaign_records_and_network_caps"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "campaign_records",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("buyer", sa.String(length=255), nullable=False),
        sa.Column("network", sa.String(length=255), nullable=False),
        sa.Column("offer", sa.String(length=255), nullable=False),
        sa.Column("account", sa.String(length=255), nullable=False),
        sa.Column("spend", sa.Float(), nullable=False),
        sa.Column("revenue", sa.Float(), nullable=False),
        sa.Column("profit", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_campaign_records_id", "campaign_records", ["id"], unique=False)
    op.create_index("ix_campaign_records_date", "campaign_records", ["date"], unique=False)
    op.create_index("ix_campaign_records_buyer", "campaign_records", ["buyer"], unique=False)

    op.create_table(
        "network_caps",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("network", sa.String(length=255), nullable=False),
        sa.Column("offer", sa.String(length=255), nullable=False),
        sa.Column("daily_cap", sa.Float(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("network", "offer", name="uq_network_caps_pair"),
    )
    op.create_index("ix_network_caps_id", "network_caps", ["id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_network_caps_id", table_name="network_caps")
    op.drop_table("network_caps")
    op.drop_index("ix_campaign_records_buyer", table_name="campaign_records")
    op.drop_index("ix_campaign_records_date", table_name="campaign_records")
    op.drop_index("ix_campaign_records_id", table_name="campaign_records")
    op.drop_table("campaign_records")
