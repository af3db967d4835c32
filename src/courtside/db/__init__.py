"""
Database module for Courtside.

Provides SQLAlchemy ORM models and session management.

Usage:
    from courtside.db import get_session, Player, Tournament

    with get_session() as session:
        players = session.query(Player).order_by(Player.ranking).all()
"""

from courtside.db.models import (
    Base,
    ConversationTurn,
    Match,
    PipelineRun,
    Player,
    Statistics,
    Tournament,
)
from courtside.db.session import SessionLocal, get_db, get_engine, get_session

__all__ = [
    # Base
    "Base",
    # Models
    "Player",
    "Tournament",
    "Match",
    "Statistics",
    "ConversationTurn",
    "PipelineRun",
    # Session
    "get_session",
    "get_db",
    "get_engine",
    "SessionLocal",
]
