"""profiles and campaigns

Revision ID: 4b7e21c9a0d3
Revises:
Create Date: 2026-10-19 10:12:44.218305

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b7e21c9a0d3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("website", sa.String(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("preferred_contact", sa.String(), nullable=True),
        sa.Column("gender", sa.String(), nullable=True),
        sa.Column("date_of_birth", sa.String(), nullable=True),
        sa.Column("followers_count", sa.Integer(), nullable=True),
        sa.Column("categories", sa.JSON(), nullable=True),
        sa.Column("platforms", sa.JSON(), nullable=True),
        sa.Column("social_links", sa.JSON(), nullable=True),
        sa.Column("engagement_stats", sa.JSON(), nullable=True),
        sa.Column("budget_range", sa.String(), nullable=True),
        sa.Column("min_budget", sa.Numeric(), nullable=True),
        sa.Column("max_budget", sa.Numeric(), nullable=True),
        sa.Column("collaboration_types", sa.JSON(), nullable=True),
        sa.Column("preferred_creator_niches", sa.JSON(), nullable=True),
        sa.Column("partnership_goals", sa.Text(), nullable=True),
        sa.Column("past_collaborations", sa.Text(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("under_review", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_profiles_type", "profiles", ["type"])
    op.create_index("ix_profiles_is_public", "profiles", ["is_public"])
    op.create_index("ix_profiles_under_review", "profiles", ["under_review"])

    op.create_table(
        "campaigns",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("brand_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("requirements", sa.Text(), nullable=True),
        sa.Column("content_type", sa.JSON(), nullable=True),
        sa.Column("preferred_niches", sa.JSON(), nullable=True),
        sa.Column("preferred_platforms", sa.JSON(), nullable=True),
        sa.Column("geographic_targeting", sa.JSON(), nullable=True),
        sa.Column("hashtags", sa.JSON(), nullable=True),
        sa.Column("budget_range", sa.String(), nullable=True),
        sa.Column("min_budget", sa.Numeric(), nullable=True),
        sa.Column("max_budget", sa.Numeric(), nullable=True),
        sa.Column("payment_type", sa.String(), nullable=True),
        sa.Column("follower_range", sa.String(), nullable=True),
        sa.Column("min_engagement_rate", sa.Numeric(), nullable=True),
        sa.Column("preferred_gender", sa.JSON(), nullable=True),
        sa.Column("usage_rights", sa.Text(), nullable=True),
        sa.Column("past_collaborations", sa.Text(), nullable=True),
        sa.Column("extra_notes", sa.Text(), nullable=True),
        sa.Column("contact_info", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="draft"),
        sa.Column("start_date", sa.String(), nullable=True),
        sa.Column("end_date", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_campaigns_brand_id", "campaigns", ["brand_id"])
    op.create_index("ix_campaigns_status", "campaigns", ["status"])


def downgrade():
    op.drop_index("ix_campaigns_status", table_name="campaigns")
    op.drop_index("ix_campaigns_brand_id", table_name="campaigns")
    op.drop_table("campaigns")
    op.drop_index("ix_profiles_under_review", table_name="profiles")
    op.drop_index("ix_profiles_is_public", table_name="profiles")
    op.drop_index("ix_profiles_type", table_name="profiles")
    op.drop_table("profiles")
