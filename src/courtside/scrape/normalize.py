"""
Normalization of extracted records before they are written.

Every normalizer follows the same contract:
- drop records whose values are out of range,
- deduplicate by natural key, first seen wins,
- sort by the table's designated key,
- cap the result size.

Usage:
    players = normalize_players(result.records, limit=settings.max_players)
"""

import logging
from datetime import date
from typing import Iterable

from courtside.scrape.records import ScrapedLiveMatch, ScrapedPlayer, ScrapedTournament
from courtside.statuses import tournament_status

logger = logging.getLogger(__name__)


def normalize_players(
    records: Iterable[ScrapedPlayer],
    limit: int = 100,
) -> list[ScrapedPlayer]:
    """
    Clean a rankings extraction.

    Rankings must be positive and points non-negative. A player name or a
    ranking position seen twice keeps its first occurrence, so the output
    has unique names and unique rankings. Sorted by ranking ascending.
    """
    seen_names: set[str] = set()
    seen_rankings: set[int] = set()
    players: list[ScrapedPlayer] = []
    dropped = 0

    for player in records:
        if player.ranking <= 0 or player.points < 0:
            dropped += 1
            continue
        name_key = player.name.casefold()
        if name_key in seen_names or player.ranking in seen_rankings:
            dropped += 1
            continue
        seen_names.add(name_key)
        seen_rankings.add(player.ranking)
        players.append(player)

    if dropped:
        logger.debug("Dropped %d invalid or duplicate player records", dropped)

    players.sort(key=lambda p: p.ranking)
    return players[:limit]


def normalize_tournaments(
    records: Iterable[ScrapedTournament],
    today: date,
    limit: int = 50,
) -> list[ScrapedTournament]:
    """
    Clean a tournament extraction and derive each status from today's date.

    A tournament ending before it starts is dropped. Tournaments without a
    start date sort after all dated ones, in first-seen order.
    """
    seen: set[str] = set()
    tournaments: list[ScrapedTournament] = []

    for tournament in records:
        key = tournament.name.casefold()
        if key in seen:
            continue
        if (
            tournament.start_date is not None
            and tournament.end_date is not None
            and tournament.end_date < tournament.start_date
        ):
            logger.debug("Dropping %s: ends before it starts", tournament.name)
            continue
        if tournament.prize_money is not None and tournament.prize_money < 0:
            tournament.prize_money = None
        seen.add(key)
        tournament.status = tournament_status(tournament.start_date, tournament.end_date, today)
        tournaments.append(tournament)

    tournaments.sort(key=lambda t: (t.start_date is None, t.start_date or date.min))
    return tournaments[:limit]


def normalize_live_matches(
    records: Iterable[ScrapedLiveMatch],
    limit: int = 20,
) -> list[ScrapedLiveMatch]:
    """Deduplicate live matches by pairing and drop a player facing themself."""
    seen: set[frozenset[str]] = set()
    matches: list[ScrapedLiveMatch] = []

    for match in records:
        pair = frozenset({match.player1_name.casefold(), match.player2_name.casefold()})
        if len(pair) < 2 or pair in seen:
            continue
        seen.add(pair)
        matches.append(match)

    return matches[:limit]
