"""Create users, reports and report_reviews tables.

Revision ID: 20261019_create_civic_report_tables
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "20261019_create_civic_report_tables"
down_revision: str | None = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    existing = set(inspect(bind).get_table_names())

    if "users" not in existing:
        op.create_table(
            "users",
            sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
            sa.Column("username", sa.String(length=150), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=True),
            sa.Column("role", sa.String(length=32), nullable=False, server_default="user"),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("username", name="uq_users_username"),
            sa.UniqueConstraint("email", name="uq_users_email"),
        )

    if "reports" not in existing:
        op.create_table(
            "reports",
            sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("category", sa.String(length=32), nullable=False),
            sa.Column("location", sa.JSON(), nullable=False),
            sa.Column("image_url", sa.String(length=1024), nullable=False, server_default=""),
            sa.Column("images", sa.JSON(), nullable=False),
            sa.Column("resolved", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("resolved_by", sa.Uuid(as_uuid=True), nullable=True),
            sa.Column("created_by", sa.Uuid(as_uuid=True), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
            sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["resolved_by"], ["users.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_reports_category", "reports", ["category"])
        op.create_index("ix_reports_resolved", "reports", ["resolved"])
        op.create_index("ix_reports_created_by", "reports", ["created_by"])
        op.create_index("ix_reports_created_at", "reports", ["created_at"])

    if "report_reviews" not in existing:
        op.create_table(
            "report_reviews",
            sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
            sa.Column("report_id", sa.Uuid(as_uuid=True), nullable=False),
            sa.Column("author_id", sa.Uuid(as_uuid=True), nullable=False),
            sa.Column("comment", sa.Text(), nullable=False, server_default=""),
            sa.Column("upvote", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("NOW()"), nullable=False),
            sa.ForeignKeyConstraint(["report_id"], ["reports.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_report_reviews_report_id", "report_reviews", ["report_id"])
        op.create_index("ix_report_reviews_author_id", "report_reviews", ["author_id"])


def downgrade() -> None:
    op.drop_index("ix_report_reviews_author_id", table_name="report_reviews")
    op.drop_index("ix_report_reviews_report_id", table_name="report_reviews")
    op.drop_table("report_reviews")
    op.drop_index("ix_reports_created_at", table_name="reports")
    op.drop_index("ix_reports_created_by", table_name="reports")
    op.drop_index("ix_reports_resolved", table_name="reports")
    op.drop_index("ix_reports_category", table_name="reports")
    op.drop_table("reports")
    op.drop_table("users")
