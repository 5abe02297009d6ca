"""create radar tables

Revision ID: 0f1e2d3c4b5a
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0f1e2d3c4b5a"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "keywords",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("term", sa.String(length=500), nullable=False),
        sa.Column("bucket", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("intent", sa.String(length=30), nullable=False, server_default="informational"),
        sa.Column("monthly_volume", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("difficulty", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("strategic_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("matched_app", sa.String(length=200), nullable=True),
        sa.Column("matched_url", sa.String(length=1000), nullable=True),
        sa.Column("page_exists", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "first_seen",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "last_seen",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("term"),
    )
    op.create_index(op.f("ix_keywords_bucket"), "keywords", ["bucket"], unique=False)
    op.create_index(
        op.f("ix_keywords_strategic_score"), "keywords", ["strategic_score"], unique=False
    )

    op.create_table(
        "content_pipeline_topics",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("category_slug", sa.String(length=100), nullable=False),
        sa.Column("category_label", sa.String(length=200), nullable=False),
        sa.Column("topic_key", sa.String(length=100), nullable=False),
        sa.Column("topic_label", sa.String(length=300), nullable=False),
        sa.Column("content_type", sa.String(length=50), nullable=False),
        sa.Column("max_spots", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("search_queries", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("body_system_prompt", sa.Text(), nullable=True),
        sa.Column("faq_system_prompt", sa.Text(), nullable=True),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="planned"),
        sa.Column("standalone_url", sa.String(length=1000), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "category_slug", "topic_key", name="uq_content_topic_category_key"
        ),
    )

    op.create_table(
        "content_pipeline_runs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("topic_id", sa.Integer(), nullable=False),
        sa.Column("category_slug", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("topic_key", sa.String(length=100), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="started"),
        sa.Column(
            "started_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("items_generated", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tokens_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("output_preview", sa.Text(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_content_pipeline_runs_topic_id"),
        "content_pipeline_runs",
        ["topic_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_content_pipeline_runs_started_at"),
        "content_pipeline_runs",
        ["started_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_content_pipeline_runs_started_at"), table_name="content_pipeline_runs")
    op.drop_index(op.f("ix_content_pipeline_runs_topic_id"), table_name="content_pipeline_runs")
    op.drop_table("content_pipeline_runs")
    op.drop_table("content_pipeline_topics")
    op.drop_index(op.f("ix_keywords_strategic_score"), table_name="keywords")
    op.drop_index(op.f("ix_keywords_bucket"), table_name="keywords")
    op.drop_table("keywords")
