"""
Synthetic match generation.

The scores page rarely yields matches we can tie to ranked players, so the
dashboard can optionally be populated with generated fixtures: the top 16
players paired off (1 v 2, 3 v 4, ...) in each of the first three ongoing or
upcoming tournaments.

This fabricates data. It only runs when settings.fabricate_matches is
enabled; with the default configuration no generated match is written.
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from courtside.db.models import Player, Tournament
from courtside.services.sink import upsert_matches

logger = logging.getLogger(__name__)

MIN_PLAYERS = 4
PLAYERS_PER_TOURNAMENT = 16
MAX_TOURNAMENTS = 3

# Round label by pair index within a tournament
PAIR_ROUNDS: tuple[str, ...] = (
    "Round 1", "Round 1", "Round 1", "Round 1",
    "Round 2", "Round 2",
    "Quarterfinals",
    "Semifinals",
)


def _set_score(rng: random.Random) -> str:
    return f"{rng.randint(1, 6)}-{rng.randint(1, 6)}"


def _match_date(tournament: Tournament, pair_index: int) -> Optional[datetime]:
    if tournament.start_date is None:
        return None
    start = datetime.combine(tournament.start_date, datetime.min.time())
    return start + timedelta(days=pair_index)


def generate_matches(
    players: Sequence[Player],
    tournaments: Sequence[Tournament],
    rng: random.Random,
) -> list[dict[str, Any]]:
    """
    Build match rows for persisted players and tournaments.

    Players must be ordered by ranking. Matches in upcoming tournaments are
    always scheduled; in ongoing tournaments roughly 30% are live (two-set
    score) and 30% completed (three-set score, random winner).

    Returns:
        Row dicts ready for upsert_matches(); empty when there are fewer
        than four players or no active tournament.
    """
    if len(players) < MIN_PLAYERS:
        return []

    active = [t for t in tournaments if t.status == "ongoing"]
    active += [t for t in tournaments if t.status == "upcoming"]
    active = active[:MAX_TOURNAMENTS]

    entrants = list(players[:PLAYERS_PER_TOURNAMENT])
    rows: list[dict[str, Any]] = []

    for tournament in active:
        for pair_index in range(len(entrants) // 2):
            player1 = entrants[pair_index * 2]
            player2 = entrants[pair_index * 2 + 1]

            status = "scheduled"
            score = ""
            winner_id = None
            if tournament.status == "ongoing":
                roll = rng.random()
                if roll < 0.3:
                    status = "live"
                    score = ", ".join(_set_score(rng) for _ in range(2))
                elif roll < 0.6:
                    status = "completed"
                    score = ", ".join(_set_score(rng) for _ in range(3))
                    winner_id = player1.id if rng.random() > 0.5 else player2.id

            rows.append({
                "tournament_id": tournament.id,
                "player1_id": player1.id,
                "player2_id": player2.id,
                "winner_id": winner_id,
                "round": PAIR_ROUNDS[min(pair_index, len(PAIR_ROUNDS) - 1)],
                "status": status,
                "score": score,
                "match_date": _match_date(tournament, pair_index),
            })

    return rows


def write_synthetic_matches(
    session: Session,
    rng: random.Random,
    player_names: Sequence[str],
    tournament_names: Sequence[str],
) -> int:
    """Load the just-written players/tournaments by name and upsert generated matches."""
    if not player_names or not tournament_names:
        return 0

    players = session.scalars(
        select(Player).where(Player.name.in_(player_names)).order_by(Player.ranking)
    ).all()
    tournaments = session.scalars(
        select(Tournament)
        .where(Tournament.name.in_(tournament_names))
        .order_by(Tournament.start_date.asc().nullslast())
    ).all()

    rows = generate_matches(players, tournaments, rng)
    if rows:
        logger.info("Generated %d synthetic matches", len(rows))
    return upsert_matches(session, rows)
