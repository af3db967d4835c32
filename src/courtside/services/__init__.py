"""
Courtside services - business logic for the data refresh.

Pipeline stages:
1. Sink: upsert normalized players/tournaments/matches by natural key
2. Matches: optional synthetic fixtures from ranked players
3. Stats: single summary row derived from the written tables
4. Refresh: composes fetching, extraction and the stages above

Usage:
    from courtside.services import RefreshPipeline

    summary = await RefreshPipeline().run()
"""

from courtside.services.matches import generate_matches, write_synthetic_matches
from courtside.services.refresh import RefreshPipeline, RefreshSummary, SourceOutcome
from courtside.services.sink import (
    TableWriteResult,
    refresh_tournament_statuses,
    upsert_matches,
    upsert_players,
    upsert_tournaments,
    write_table,
)
from courtside.services.stats import aggregate_statistics

__all__ = [
    # Sink
    "TableWriteResult",
    "upsert_players",
    "upsert_tournaments",
    "upsert_matches",
    "refresh_tournament_statuses",
    "write_table",
    # Matches
    "generate_matches",
    "write_synthetic_matches",
    # Stats
    "aggregate_statistics",
    # Refresh
    "RefreshPipeline",
    "RefreshSummary",
    "SourceOutcome",
]
