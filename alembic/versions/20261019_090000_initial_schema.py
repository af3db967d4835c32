"""Initial schema: players, tournaments, matches, statistics, chat, pipeline runs

Revision ID: 3f1a8c2d9b40
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers, used by Alembic.
revision: str = "3f1a8c2d9b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=True, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), nullable=True, server_default=sa.text("CURRENT_TIMESTAMP")),
    ]


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("country", sa.String(length=10), nullable=False, server_default="Unknown"),
        sa.Column("ranking", sa.Integer(), nullable=True),
        sa.Column("points", sa.Integer(), nullable=True),
        sa.Column("ranking_change", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("idx_players_ranking", "players", ["ranking"], unique=False)

    op.create_table(
        "tournaments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False, server_default="Unknown"),
        sa.Column("surface", sa.String(length=20), nullable=False, server_default="Hard"),
        sa.Column("category", sa.String(length=50), nullable=False, server_default="ATP 250"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="upcoming"),
        sa.Column("prize_money", sa.BigInteger(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("idx_tournaments_start_date", "tournaments", ["start_date"], unique=False)
    op.create_index("idx_tournaments_status", "tournaments", ["status"], unique=False)

    op.create_table(
        "matches",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("tournament_id", sa.Integer(), nullable=True),
        sa.Column("player1_id", sa.Integer(), nullable=True),
        sa.Column("player2_id", sa.Integer(), nullable=True),
        sa.Column("winner_id", sa.Integer(), nullable=True),
        sa.Column("round", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="scheduled"),
        sa.Column("score", sa.String(length=100), nullable=True),
        sa.Column("match_date", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["player1_id"], ["players.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["player2_id"], ["players.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["winner_id"], ["players.id"], ondelete="SET NULL"),
        sa.CheckConstraint("player1_id <> player2_id", name="ck_match_distinct_players"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "tournament_id", "player1_id", "player2_id",
            name="uq_match_tournament_players",
        ),
    )
    op.create_index("idx_matches_status", "matches", ["status"], unique=False)
    op.create_index("idx_matches_match_date", "matches", ["match_date"], unique=False)

    op.create_table(
        "statistics",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("active_players", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("live_tournaments", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("matches_today", sa.Integer(), nullable=True),
        sa.Column("ranking_updates", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(), nullable=True, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "conversation_history",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("session_id", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.CheckConstraint("role IN ('user', 'assistant')", name="ck_conversation_role"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_conversation_session_created",
        "conversation_history",
        ["session_id", "created_at"],
        unique=False,
    )

    op.create_table(
        "pipeline_runs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("run_id", sa.String(length=64), nullable=False),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("ended_at", sa.DateTime(), nullable=True),
        sa.Column("success", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("summary_json", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("run_id"),
    )
    op.create_index("idx_pipeline_runs_started_at", "pipeline_runs", ["started_at"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_pipeline_runs_started_at", table_name="pipeline_runs")
    op.drop_table("pipeline_runs")

    op.drop_index("idx_conversation_session_created", table_name="conversation_history")
    op.drop_table("conversation_history")

    op.drop_table("statistics")

    op.drop_index("idx_matches_match_date", table_name="matches")
    op.drop_index("idx_matches_status", table_name="matches")
    op.drop_table("matches")

    op.drop_index("idx_tournaments_status", table_name="tournaments")
    op.drop_index("idx_tournaments_start_date", table_name="tournaments")
    op.drop_table("tournaments")

    op.drop_index("idx_players_ranking", table_name="players")
    op.drop_table("players")
