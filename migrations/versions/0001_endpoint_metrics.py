"""Endpoint metric samples.

Revision ID: 0001_endpoint_metrics
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_endpoint_metrics"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "endpoint_metrics",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("endpoint", sa.String(length=255), nullable=False),
        sa.Column("method", sa.String(length=16), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False, server_default="1"),
    )
    op.create_index(
        "ix_endpoint_metrics_endpoint", "endpoint_metrics", ["endpoint"], unique=False
    )


def downgrade():
    op.drop_index("ix_endpoint_metrics_endpoint", table_name="endpoint_metrics")
    op.drop_table("endpoint_metrics")
