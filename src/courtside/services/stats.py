"""
Dashboard statistics aggregation.

Counts are read back from the tables after the refresh has written them,
so the summary row always agrees with what the dashboard lists.
"""

import logging
import random
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from courtside.db.models import Player, Statistics, Tournament
from courtside.services.sink import refresh_tournament_statuses

logger = logging.getLogger(__name__)


def aggregate_statistics(
    session: Session,
    today: date,
    updated_since: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
    estimate_matches_today: bool = False,
) -> Statistics:
    """
    Replace the single statistics row.

    Tournament statuses are recomputed against ``today`` first, so
    live_tournaments never counts an event that has already finished.

    Args:
        session: Database session (caller commits)
        today: Date tournament statuses are derived against
        updated_since: Ranked players updated at or after this time count as
                       ranking updates; None counts every ranked player
        rng: Random source for the matches_today estimate
        estimate_matches_today: Store a randomized 20-69 estimate. When
                                False, matches_today is left NULL.

    Returns:
        The new Statistics row (flushed)
    """
    refresh_tournament_statuses(session, today)

    ranked = select(func.count()).select_from(Player).where(Player.ranking.is_not(None))
    active_players = session.scalar(ranked) or 0
    live_tournaments = session.scalar(
        select(func.count()).select_from(Tournament).where(Tournament.status == "ongoing")
    ) or 0

    if updated_since is None:
        ranking_updates = active_players
    else:
        ranking_updates = session.scalar(ranked.where(Player.updated_at >= updated_since)) or 0

    matches_today = None
    if estimate_matches_today:
        matches_today = (rng or random.Random()).randint(20, 69)

    session.execute(delete(Statistics))
    row = Statistics(
        active_players=active_players,
        live_tournaments=live_tournaments,
        matches_today=matches_today,
        ranking_updates=ranking_updates,
        updated_at=datetime.now(timezone.utc).replace(tzinfo=None),
    )
    session.add(row)
    session.flush()

    logger.info(
        "Statistics: %d players, %d live tournaments, %d ranking updates",
        active_players, live_tournaments, ranking_updates,
    )
    return row
