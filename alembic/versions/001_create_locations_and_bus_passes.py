"""Create locations and bus_passes tables

Revision ID: 001
Revises: None
Create Date: 2024-09-02 00:00:00.000000+00:00

What:  Creates the fare table (`locations`) and the pass registry (`bus_passes`).
Rollback: downgrade() drops both tables (all submitted passes are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "source",
            sa.String(120),
            nullable=False,
            comment="Boarding point name, matched exactly (case-sensitive)",
        ),
        sa.Column(
            "destination",
            sa.String(120),
            nullable=False,
            comment="Alighting point name, matched exactly (case-sensitive)",
        ),
        sa.Column(
            "distance",
            sa.Float(),
            nullable=False,
            comment="Route distance; price = distance * fare tariff",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_locations_source_destination",
        "locations",
        ["source", "destination"],
    )

    op.create_table(
        "bus_passes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("valid_till", sa.Date(), nullable=True),
        sa.Column(
            "photo",
            sa.String(255),
            nullable=True,
            comment="Filename reference returned by the photo storage",
        ),
        sa.Column("pass_type", sa.String(100), nullable=True),
        sa.Column("route", sa.String(255), nullable=True),
        sa.Column("college_name", sa.String(255), nullable=True),
        sa.Column("source", sa.String(120), nullable=True),
        sa.Column("destination", sa.String(120), nullable=True),
        sa.Column("price", sa.Float(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When the application was submitted (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("bus_passes")
    op.drop_index("idx_locations_source_destination", table_name="locations")
    op.drop_table("locations")
