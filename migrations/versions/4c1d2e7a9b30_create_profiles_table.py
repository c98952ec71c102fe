"""create_profiles_table

Revision ID: 4c1d2e7a9b30
Revises:
Create Date: 2026-10-19 09:12:41.518203

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c1d2e7a9b30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create profiles table keyed by GitHub login."""
    op.create_table(
        "profiles",
        sa.Column("username", sa.String(length=39), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("public_repos", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("followers", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("avatar_s3_key", sa.String(length=255), nullable=False),
        sa.Column("github_created_at", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("public_repos >= 0", name="ck_profiles_public_repos_nonneg"),
        sa.CheckConstraint("followers >= 0", name="ck_profiles_followers_nonneg"),
        sa.PrimaryKeyConstraint("username"),
    )


def downgrade() -> None:
    """Drop profiles table."""
    op.drop_table("profiles")
