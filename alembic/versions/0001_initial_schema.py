"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 12:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_id", "users", ["id"], unique=True)

    op.create_table(
        "clubs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("admin_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("invite_code", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_clubs_id", "clubs", ["id"])
    op.create_index("ix_clubs_admin_id", "clubs", ["admin_id"])
    op.create_index("ix_clubs_invite_code", "clubs", ["invite_code"], unique=True)

    op.create_table(
        "club_members",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("joined_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("club_id", "user_id", name="uq_club_members_club_user"),
    )
    op.create_index("ix_club_members_id", "club_members", ["id"])
    op.create_index("ix_club_members_club_id", "club_members", ["club_id"])
    op.create_index("ix_club_members_user_id", "club_members", ["user_id"])

    op.create_table(
        "books",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id"), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("author", sa.String(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("cover_url", sa.String(), nullable=True),
        sa.Column("genre", sa.String(), nullable=True),
        sa.Column("spice_rating", sa.Integer(), nullable=False),
        sa.Column("suggested_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("suggested_at", sa.DateTime(), nullable=True),
        sa.Column("selected_at", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_books_id", "books", ["id"])
    op.create_index("ix_books_club_id", "books", ["club_id"])
    op.create_index("ix_books_suggested_by", "books", ["suggested_by"])
    op.create_index("ix_books_club_status", "books", ["club_id", "status"])
    op.create_index(
        "uq_books_one_current_per_club",
        "books",
        ["club_id"],
        unique=True,
        postgresql_where=sa.text("status = 'current'"),
        sqlite_where=sa.text("status = 'current'"),
    )

    for table in ("votes", "progress", "ratings"):
        columns = [
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("book_id", sa.Integer(), sa.ForeignKey("books.id"), nullable=False),
            sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
            sa.Column("club_id", sa.Integer(), sa.ForeignKey("clubs.id"), nullable=False),
        ]
        if table == "votes":
            columns += [
                sa.Column("decision", sa.String(), nullable=False),
                sa.Column("veto_reason", sa.String(), nullable=True),
                sa.Column("voted_at", sa.DateTime(), nullable=True),
            ]
        elif table == "progress":
            columns += [
                sa.Column("current_page", sa.Integer(), nullable=False),
                sa.Column("total_pages", sa.Integer(), nullable=True),
                sa.Column("updated_at", sa.DateTime(), nullable=True),
            ]
        else:
            columns += [
                sa.Column("storyline", sa.Integer(), nullable=False),
                sa.Column("characters", sa.Integer(), nullable=False),
                sa.Column("spice", sa.Integer(), nullable=False),
                sa.Column("rated_at", sa.DateTime(), nullable=True),
            ]
        op.create_table(
            table,
            *columns,
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("book_id", "user_id", name=f"uq_{table}_book_user"),
        )
        for column in ("id", "book_id", "user_id", "club_id"):
            op.create_index(f"ix_{table}_{column}", table, [column])


def downgrade() -> None:
    for table in ("ratings", "progress", "votes", "books", "club_members", "clubs", "users"):
        op.drop_table(table)
