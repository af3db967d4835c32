"""
Parsers for scraped tennis pages.

Each module holds the extraction strategies for one record kind:
- rankings: singles rankings table -> ScrapedPlayer
- tournaments: tournament calendar -> ScrapedTournament
- live: scores page -> ScrapedLiveMatch
"""

from courtside.scrape.parsers.tournaments import (
    detect_category,
    normalize_surface,
    parse_date_range,
    parse_prize_money,
)

__all__ = [
    "detect_category",
    "normalize_surface",
    "parse_date_range",
    "parse_prize_money",
]
