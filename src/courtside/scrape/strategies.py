"""
Extraction strategy chains.

Source markup changes shape without notice, so each record kind has an
ordered list of independent extractors. A chain runs them in registration
order and stops at the first one that yields at least one record.

Usage:
    chain = build_rankings_chain()
    result = chain.run(html)
    if result.records:
        print(f"{result.strategy} found {len(result.records)} players")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from courtside.scrape.parsers import live, rankings, tournaments

logger = logging.getLogger(__name__)

Extractor = Callable[[str], list[Any]]


@dataclass(frozen=True)
class ExtractionStrategy:
    """A named extractor that turns raw markup into records."""

    name: str
    extract: Extractor
    description: str = ""


@dataclass
class ChainResult:
    """Records from the winning strategy, or an empty list if none matched."""

    records: list[Any] = field(default_factory=list)
    strategy: Optional[str] = None
    attempted: list[str] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return bool(self.records)


class StrategyChain:
    """Ordered registry of extraction strategies for one record kind."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._strategies: dict[str, ExtractionStrategy] = {}

    def register(self, strategy: ExtractionStrategy) -> None:
        if strategy.name in self._strategies:
            raise ValueError(f"Strategy already registered: {strategy.name}")
        self._strategies[strategy.name] = strategy

    def get(self, name: str) -> ExtractionStrategy:
        try:
            return self._strategies[name]
        except KeyError as exc:
            raise KeyError(f"Unknown strategy: {name}") from exc

    def names(self) -> list[str]:
        return list(self._strategies)

    def run(self, html: str) -> ChainResult:
        """
        Try each strategy in order until one returns records.

        A strategy that raises is logged and treated as having found nothing,
        so one broken parser never hides the ones after it.
        """
        result = ChainResult()
        for strategy in self._strategies.values():
            result.attempted.append(strategy.name)
            try:
                records = strategy.extract(html)
            except Exception:
                logger.exception("%s strategy %s failed", self.kind, strategy.name)
                continue

            if records:
                logger.info(
                    "%s strategy %s extracted %d records",
                    self.kind, strategy.name, len(records),
                )
                result.records = list(records)
                result.strategy = strategy.name
                return result

            logger.debug("%s strategy %s found nothing", self.kind, strategy.name)

        logger.warning(
            "All %s strategies found nothing (%s)",
            self.kind, ", ".join(result.attempted),
        )
        return result


def build_rankings_chain() -> StrategyChain:
    chain = StrategyChain("rankings")
    chain.register(ExtractionStrategy(
        name="ranking_row_classes",
        extract=rankings.extract_ranking_rows,
        description="<tr class='ranking-row'> with rank/player/country/points cells",
    ))
    chain.register(ExtractionStrategy(
        name="generic_table_rows",
        extract=rankings.extract_generic_rows,
        description="Any table row with rank, name, IOC code and points in order",
    ))
    chain.register(ExtractionStrategy(
        name="player_link_regex",
        extract=rankings.extract_player_links,
        description="Regex over raw markup around /players/ links",
    ))
    return chain


def build_tournaments_chain() -> StrategyChain:
    chain = StrategyChain("tournaments")
    chain.register(ExtractionStrategy(
        name="tournament_cards",
        extract=tournaments.extract_tournament_cards,
        description="Calendar cards with name, venue, dates and surface",
    ))
    chain.register(ExtractionStrategy(
        name="tournament_links",
        extract=tournaments.extract_tournament_links,
        description="/tournaments/ anchors with details read from nearby text",
    ))
    return chain


def build_live_matches_chain() -> StrategyChain:
    chain = StrategyChain("live matches")
    chain.register(ExtractionStrategy(
        name="match_containers",
        extract=live.extract_match_containers,
        description="Match containers with two player-name spans",
    ))
    chain.register(ExtractionStrategy(
        name="versus_text",
        extract=live.extract_versus_text,
        description="'A vs B' phrases with a nearby game score",
    ))
    return chain
