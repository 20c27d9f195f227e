"""service profiles and specialties

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19
"""
import sqlalchemy as sa
from alembic import op

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None

DEFAULT_SPECIALTIES = [
    "Carpenter",
    "Cleaner",
    "Electrician",
    "Gardener",
    "Mechanic",
    "Painter",
    "Plumber",
]


def upgrade() -> None:
    specialties = op.create_table(
        "specialties",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False, unique=True),
    )
    op.create_index("ix_specialties_id", "specialties", ["id"])

    op.create_table(
        "service_profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        # Один профиль на пользователя
        sa.UniqueConstraint("user_id", name="uq_service_profiles_user_id"),
    )

    op.create_table(
        "service_profile_specialties",
        sa.Column(
            "service_profile_id",
            sa.Uuid(),
            sa.ForeignKey("service_profiles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "specialty_id",
            sa.Integer(),
            sa.ForeignKey("specialties.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.bulk_insert(specialties, [{"name": name} for name in DEFAULT_SPECIALTIES])


def downgrade() -> None:
    op.drop_table("service_profile_specialties")
    op.drop_table("service_profiles")
    op.drop_index("ix_specialties_id", table_name="specialties")
    op.drop_table("specialties")
