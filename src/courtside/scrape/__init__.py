"""
Data acquisition for Courtside.

This module turns third-party tennis pages into validated records:
- PageFetcher: one GET per source with a fixed browser identity
- StrategyChain: ordered extraction strategies, first non-empty result wins
- normalize_*: range checks, natural-key dedup, sorting and caps
- fallback: static snapshot used under the "snapshot" empty-result policy

Pages are fetched with httpx and parsed with BeautifulSoup (lxml) or,
as a last resort, regular expressions over the raw markup.
"""

from courtside.scrape.fetcher import FetchError, PageFetcher
from courtside.scrape.normalize import (
    normalize_live_matches,
    normalize_players,
    normalize_tournaments,
)
from courtside.scrape.records import (
    RecordValidationError,
    ScrapedLiveMatch,
    ScrapedPlayer,
    ScrapedTournament,
)
from courtside.scrape.strategies import (
    ChainResult,
    ExtractionStrategy,
    StrategyChain,
    build_live_matches_chain,
    build_rankings_chain,
    build_tournaments_chain,
)

__all__ = [
    "FetchError",
    "PageFetcher",
    "RecordValidationError",
    "ScrapedPlayer",
    "ScrapedTournament",
    "ScrapedLiveMatch",
    "ChainResult",
    "ExtractionStrategy",
    "StrategyChain",
    "build_rankings_chain",
    "build_tournaments_chain",
    "build_live_matches_chain",
    "normalize_players",
    "normalize_tournaments",
    "normalize_live_matches",
]
