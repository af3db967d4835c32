"""
SQLAlchemy ORM models for Courtside.

This module defines all database tables backing the dashboard. Players and
tournaments are keyed by their natural names so every refresh can upsert
into them; matches reference both through nullable foreign keys.

Tables:
- players: Current ranking snapshot (one row per player name)
- tournaments: Tournament calendar (one row per tournament name)
- matches: Matches linked to a tournament and two players
- statistics: Single summary row shown in the dashboard header
- conversation_history: Append-only chat transcript keyed by session id
- pipeline_runs: One row per data refresh with its summary
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# =============================================================================
# Constants
# =============================================================================

SURFACES: tuple[str, ...] = ("Hard", "Clay", "Grass", "Carpet")

CATEGORIES: tuple[str, ...] = (
    "Grand Slam",
    "Masters 1000",
    "ATP 500",
    "ATP 250",
    "ATP Finals",
)

CHAT_ROLES: tuple[str, ...] = ("user", "assistant")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# =============================================================================
# Rankings
# =============================================================================

class Player(Base):
    """
    A ranked player in the current snapshot.

    The name is the natural key used as the upsert conflict target.
    ranking_change is the only history kept: the movement reported by the
    source for the latest ranking week. ranking is NULL once the player is
    missing from a refreshed ranking.
    """
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    country: Mapped[str] = mapped_column(String(10), nullable=False, default="Unknown")
    ranking: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    points: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    ranking_change: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        Index("idx_players_ranking", "ranking"),
    )

    def __repr__(self) -> str:
        return f"<Player(id={self.id}, name='{self.name}', ranking={self.ranking})>"


# =============================================================================
# Tournaments
# =============================================================================

class Tournament(Base):
    """
    A tournament on the calendar.

    status is recomputed from start_date/end_date on every refresh, for
    every stored row:
    - upcoming: starts after today (or start unknown)
    - ongoing: today falls inside [start_date, end_date]; without an end
      date, the week after start_date
    - completed: ended before today
    """
    __tablename__ = "tournaments"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="Unknown")
    surface: Mapped[str] = mapped_column(String(20), nullable=False, default="Hard")
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="ATP 250")

    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="upcoming")

    prize_money: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    matches: Mapped[list["Match"]] = relationship(back_populates="tournament")

    __table_args__ = (
        Index("idx_tournaments_start_date", "start_date"),
        Index("idx_tournaments_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Tournament(id={self.id}, name='{self.name}', status='{self.status}')>"


# =============================================================================
# Matches
# =============================================================================

class Match(Base):
    """
    A match between two players within a tournament.

    All references are nullable so a match survives its tournament or a
    player dropping out of the snapshot. player1 and player2 are never the
    same player.
    """
    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(primary_key=True)

    tournament_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("tournaments.id", ondelete="SET NULL"), nullable=True
    )
    player1_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("players.id", ondelete="SET NULL"), nullable=True
    )
    player2_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("players.id", ondelete="SET NULL"), nullable=True
    )
    winner_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("players.id", ondelete="SET NULL"), nullable=True
    )

    round: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="scheduled")
    score: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    match_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    tournament: Mapped[Optional["Tournament"]] = relationship(back_populates="matches")
    player1: Mapped[Optional["Player"]] = relationship(foreign_keys=[player1_id])
    player2: Mapped[Optional["Player"]] = relationship(foreign_keys=[player2_id])
    winner: Mapped[Optional["Player"]] = relationship(foreign_keys=[winner_id])

    __table_args__ = (
        UniqueConstraint(
            "tournament_id", "player1_id", "player2_id",
            name="uq_match_tournament_players",
        ),
        CheckConstraint("player1_id <> player2_id", name="ck_match_distinct_players"),
        Index("idx_matches_status", "status"),
        Index("idx_matches_match_date", "match_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Match(id={self.id}, tournament={self.tournament_id}, "
            f"{self.player1_id} vs {self.player2_id}, status='{self.status}')>"
        )


# =============================================================================
# Dashboard Statistics
# =============================================================================

class Statistics(Base):
    """
    Single summary row, fully replaced by every refresh.

    matches_today stays NULL unless the randomized estimate is explicitly
    enabled in settings.
    """
    __tablename__ = "statistics"

    id: Mapped[int] = mapped_column(primary_key=True)

    active_players: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    live_tournaments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    matches_today: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    ranking_updates: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return (
            f"<Statistics(players={self.active_players}, "
            f"live_tournaments={self.live_tournaments})>"
        )


# =============================================================================
# Chat
# =============================================================================

class ConversationTurn(Base):
    """
    One message in a chat session.

    Append-only; the storage layer keeps every turn and the read path
    decides how many trailing turns to send to the model.
    """
    __tablename__ = "conversation_history"

    id: Mapped[int] = mapped_column(primary_key=True)

    session_id: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("role IN ('user', 'assistant')", name="ck_conversation_role"),
        Index("idx_conversation_session_created", "session_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ConversationTurn(session='{self.session_id}', role='{self.role}')>"


# =============================================================================
# Pipeline Runs
# =============================================================================

class PipelineRun(Base):
    """Audit record of one data refresh and the summary it returned."""
    __tablename__ = "pipeline_runs"

    id: Mapped[int] = mapped_column(primary_key=True)

    run_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    summary_json: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        Index("idx_pipeline_runs_started_at", "started_at"),
    )

    def __repr__(self) -> str:
        return f"<PipelineRun(run_id='{self.run_id}', success={self.success})>"
