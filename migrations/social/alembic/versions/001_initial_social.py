"""Initial social schema

Revision ID: 001
Revises:
Create Date: 2026-10-18

Tables created:
  - accounts        Social profiles keyed by the identity subject
  - follows         Directed follow edges (follower → following)
  - posts           Authored posts with their own visibility
  - comments        Comments on posts
  - reactions       One reaction per (account, post)
  - reports         Reports against posts, reviewed once by an admin
  - audit_entries   Append-only log of privileged actions (no FKs)
  - notifications   Per-recipient inbox

PostgreSQL ENUM types created (by create_table):
  - accountrole, accountvisibility, postvisibility, reactionkind,
    reportstatus, notificationtype, actiontype
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ENUM_TYPES = (
    "actiontype",
    "notificationtype",
    "reportstatus",
    "reactionkind",
    "postvisibility",
    "accountvisibility",
    "accountrole",
)


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=nullable,
        server_default=None if nullable else sa.text("CURRENT_TIMESTAMP"),
    )


# ─────────────────────────────────────────────────────────────────────────────
#  UPGRADE
# ─────────────────────────────────────────────────────────────────────────────

def upgrade() -> None:
    # ── 1. accounts ───────────────────────────────────────────────────────────
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column(
            "role",
            sa.Enum("USER", "ADMIN", name="accountrole"),
            nullable=False,
            server_default="USER",
        ),
        sa.Column(
            "visibility",
            sa.Enum("PUBLIC", "PRIVATE", name="accountvisibility"),
            nullable=False,
            server_default="PUBLIC",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id", name="pk_accounts"),
        sa.UniqueConstraint("username", name="uq_accounts_username"),
        sa.CheckConstraint(
            "role != 'ADMIN' OR visibility = 'PRIVATE'",
            name="ck_accounts_admin_private",
        ),
    )
    op.create_index("ix_accounts_role_active", "accounts", ["role", "is_active"])

    # ── 2. follows ────────────────────────────────────────────────────────────
    op.create_table(
        "follows",
        sa.Column("follow_id", sa.Uuid(), nullable=False),
        sa.Column("follower_id", sa.Uuid(), nullable=False),
        sa.Column("following_id", sa.Uuid(), nullable=False),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("follow_id", name="pk_follows"),
        sa.ForeignKeyConstraint(
            ["follower_id"],
            ["accounts.id"],
            name="fk_follows_follower_id_accounts",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["following_id"],
            ["accounts.id"],
            name="fk_follows_following_id_accounts",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
        sa.CheckConstraint("follower_id != following_id", name="ck_follows_no_self"),
    )
    op.create_index("idx_follows_follower_id", "follows", ["follower_id"])
    op.create_index("idx_follows_following_id", "follows", ["following_id"])

    # ── 3. posts ──────────────────────────────────────────────────────────────
    op.create_table(
        "posts",
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "visibility",
            sa.Enum("PUBLIC", "PRIVATE", name="postvisibility"),
            nullable=False,
            server_default="PUBLIC",
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("post_id", name="pk_posts"),
        sa.ForeignKeyConstraint(
            ["author_id"], ["accounts.id"], name="fk_posts_author_id_accounts"
        ),
    )
    op.create_index("ix_posts_created_at_post_id", "posts", ["created_at", "post_id"])
    op.create_index("ix_posts_author_created_at", "posts", ["author_id", "created_at"])

    # ── 4. comments ───────────────────────────────────────────────────────────
    op.create_table(
        "comments",
        sa.Column("comment_id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("comment_id", name="pk_comments"),
        sa.ForeignKeyConstraint(
            ["post_id"], ["posts.post_id"], name="fk_comments_post_id_posts"
        ),
        sa.ForeignKeyConstraint(
            ["author_id"], ["accounts.id"], name="fk_comments_author_id_accounts"
        ),
    )
    op.create_index("ix_comments_post_created_at", "comments", ["post_id", "created_at"])
    op.create_index("ix_comments_author_id", "comments", ["author_id"])

    # ── 5. reactions ──────────────────────────────────────────────────────────
    op.create_table(
        "reactions",
        sa.Column("reaction_id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("account_id", sa.Uuid(), nullable=False),
        sa.Column(
            "kind",
            sa.Enum("LIKE", "LOVE", "HAHA", "WOW", "SAD", name="reactionkind"),
            nullable=False,
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("reaction_id", name="pk_reactions"),
        sa.ForeignKeyConstraint(
            ["post_id"], ["posts.post_id"], name="fk_reactions_post_id_posts"
        ),
        sa.ForeignKeyConstraint(
            ["account_id"], ["accounts.id"], name="fk_reactions_account_id_accounts"
        ),
        sa.UniqueConstraint("account_id", "post_id", name="uq_reactions_account_post"),
    )
    op.create_index("ix_reactions_post_id", "reactions", ["post_id"])

    # ── 6. reports ────────────────────────────────────────────────────────────
    op.create_table(
        "reports",
        sa.Column("report_id", sa.Uuid(), nullable=False),
        sa.Column("reporter_id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=True),
        sa.Column("post_author_id", sa.Uuid(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "RESOLVED", "REJECTED", name="reportstatus"),
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("admin_comment", sa.Text(), nullable=True),
        sa.Column("reviewed_by", sa.Uuid(), nullable=True),
        _timestamp("reviewed_at", nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("report_id", name="pk_reports"),
        sa.ForeignKeyConstraint(
            ["reporter_id"],
            ["accounts.id"],
            name="fk_reports_reporter_id_accounts",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["post_id"],
            ["posts.post_id"],
            name="fk_reports_post_id_posts",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("reporter_id", "post_id", name="uq_reports_reporter_post"),
    )
    op.create_index("ix_reports_status_created_at", "reports", ["status", "created_at"])
    op.create_index("ix_reports_post_id", "reports", ["post_id"])

    # ── 7. audit_entries ──────────────────────────────────────────────────────
    op.create_table(
        "audit_entries",
        sa.Column("entry_id", sa.Uuid(), nullable=False),
        sa.Column("admin_id", sa.Uuid(), nullable=False),
        sa.Column(
            "action",
            sa.Enum(
                "ACTIVATE_USER",
                "DEACTIVATE_USER",
                "UPDATE_USER",
                "DELETE_USER",
                "DELETE_POST",
                "RESOLVE_REPORT",
                "REJECT_REPORT",
                "CREATE_ADMIN",
                "DELETE_ADMIN",
                name="actiontype",
            ),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("affected_entity_id", sa.Uuid(), nullable=True),
        sa.Column("affected_entity_type", sa.String(50), nullable=True),
        sa.Column("affected_account_id", sa.Uuid(), nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("entry_id", name="pk_audit_entries"),
    )
    op.create_index("ix_audit_entries_created_at", "audit_entries", ["created_at"])
    op.create_index("ix_audit_entries_action", "audit_entries", ["action"])
    op.create_index(
        "ix_audit_entries_affected_account_id", "audit_entries", ["affected_account_id"]
    )

    # ── 8. notifications ──────────────────────────────────────────────────────
    op.create_table(
        "notifications",
        sa.Column("notification_id", sa.Uuid(), nullable=False),
        sa.Column("recipient_id", sa.Uuid(), nullable=False),
        sa.Column(
            "type",
            sa.Enum(
                "COMMENT",
                "REACTION",
                "FOLLOW",
                "REPORT",
                "ADMIN_ACTION",
                name="notificationtype",
            ),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("reference_id", sa.Uuid(), nullable=True),
        sa.Column("reference_type", sa.String(50), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("notification_id", name="pk_notifications"),
        sa.ForeignKeyConstraint(
            ["recipient_id"],
            ["accounts.id"],
            name="fk_notifications_recipient_id_accounts",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_notifications_recipient_created_at",
        "notifications",
        ["recipient_id", "created_at"],
    )
    op.create_index(
        "ix_notifications_recipient_is_read", "notifications", ["recipient_id", "is_read"]
    )


# ─────────────────────────────────────────────────────────────────────────────
#  DOWNGRADE
# ─────────────────────────────────────────────────────────────────────────────

def downgrade() -> None:
    # Reverse FK dependency order
    op.drop_table("notifications")
    op.drop_table("audit_entries")
    op.drop_table("reports")
    op.drop_table("reactions")
    op.drop_table("comments")
    op.drop_table("posts")
    op.drop_table("follows")
    op.drop_table("accounts")

    for type_name in _ENUM_TYPES:
        op.execute(f"DROP TYPE IF EXISTS {type_name}")
