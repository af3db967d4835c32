"""
Sink writer: reconciles normalized records with the database.

Upsert is the only reconciliation policy. Each table is written with one
INSERT ... ON CONFLICT DO UPDATE keyed on its natural key, so rows the
current run does not mention are left alone and running the same input
twice leaves the same rows behind.

Every table is written in its own session by write_table(). A failure is
rolled back, logged and reported, and never stops the next table.

Usage:
    result = write_table(get_session, "players", upsert_players, players)
    if not result.ok:
        print(result.error)
"""

import logging
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Optional, Sequence

from sqlalchemy import and_, case, or_, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from courtside.db.models import Match, Player, Tournament
from courtside.scrape.records import ScrapedPlayer, ScrapedTournament
from courtside.statuses import OPEN_ENDED_DAYS

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractContextManager[Session]]
TableWriter = Callable[[Session, Any], int]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class TableWriteResult:
    """Outcome of writing one table."""

    table: str
    ok: bool
    rows: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"table": self.table, "ok": self.ok, "rows": self.rows, "error": self.error}


def _insert(session: Session, model):
    """Dialect-specific INSERT that supports ON CONFLICT (PostgreSQL, SQLite)."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Upsert not supported for dialect {dialect!r}")


def _upsert(
    session: Session,
    model,
    rows: list[dict[str, Any]],
    conflict_columns: Sequence[str],
) -> int:
    if not rows:
        return 0

    now = _utc_now()
    for row in rows:
        row.setdefault("created_at", now)
        row["updated_at"] = now

    stmt = _insert(session, model).values(rows)
    update_columns = [
        column for column in rows[0]
        if column not in conflict_columns and column != "created_at"
    ]
    stmt = stmt.on_conflict_do_update(
        index_elements=list(conflict_columns),
        set_={column: stmt.excluded[column] for column in update_columns},
    )
    session.execute(stmt)
    return len(rows)


def upsert_players(session: Session, players: Sequence[ScrapedPlayer]) -> int:
    """
    Insert or update players by name.

    A non-empty list is the whole current ranking: anyone stored but not in
    it loses their ranking (set to NULL), so no two rows share a position.
    An empty list changes nothing.
    """
    if players:
        dropped = session.execute(
            update(Player)
            .where(Player.name.not_in([p.name for p in players]), Player.ranking.is_not(None))
            .values(ranking=None, updated_at=_utc_now())
        ).rowcount
        if dropped:
            logger.info("%d players dropped out of the rankings", dropped)
    return _upsert(session, Player, [p.to_row() for p in players], ["name"])


def upsert_tournaments(session: Session, tournaments: Sequence[ScrapedTournament]) -> int:
    """Insert or update tournaments by name; status is always overwritten."""
    return _upsert(session, Tournament, [t.to_row() for t in tournaments], ["name"])


def refresh_tournament_statuses(session: Session, today: date) -> int:
    """
    Recompute the status of every stored tournament against today.

    Same rules as statuses.tournament_status(), applied in one UPDATE so
    tournaments no longer listed by the source do not keep a stale status.
    """
    open_end_cutoff = today - timedelta(days=OPEN_ENDED_DAYS)
    status = case(
        (or_(Tournament.start_date.is_(None), Tournament.start_date > today), "upcoming"),
        (and_(Tournament.end_date.is_not(None), Tournament.end_date < today), "completed"),
        (and_(Tournament.end_date.is_(None), Tournament.start_date < open_end_cutoff), "completed"),
        else_="ongoing",
    )
    result = session.execute(update(Tournament).values(status=status))
    return result.rowcount


def upsert_matches(session: Session, matches: Sequence[dict[str, Any]]) -> int:
    """Insert or update matches keyed on (tournament_id, player1_id, player2_id)."""
    return _upsert(
        session,
        Match,
        [dict(m) for m in matches],
        ["tournament_id", "player1_id", "player2_id"],
    )


def write_table(
    session_factory: SessionFactory,
    table: str,
    writer: TableWriter,
    records: Any,
) -> TableWriteResult:
    """
    Run one table writer inside its own session.

    Returns a failed TableWriteResult instead of raising, so the caller can
    carry on with the remaining tables.
    """
    try:
        with session_factory() as session:
            rows = writer(session, records)
            session.commit()
    except Exception as exc:
        logger.exception("Failed writing %s", table)
        return TableWriteResult(table=table, ok=False, error=str(exc))

    logger.info("Wrote %d rows to %s", rows, table)
    return TableWriteResult(table=table, ok=True, rows=rows)
