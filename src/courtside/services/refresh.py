"""
Tennis data refresh pipeline.

One run is a straight line:

    fetch pages -> extraction strategy chain -> normalize -> upsert -> statistics

Failures are contained where they happen:
- a source that cannot be fetched, or whose strategies all find nothing,
  yields either no records or the static snapshot (settings.empty_result_policy);
- a table that cannot be written is logged and reported, and the remaining
  tables are still written.

So a run only raises for something unexpected; otherwise it returns a
RefreshSummary with success=True and whatever counts it managed.

Usage:
    pipeline = RefreshPipeline()
    summary = await pipeline.run()
    print(summary.to_dict())
"""

import logging
import random
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from functools import partial
from typing import Any, Callable, Optional

from courtside.config import Settings, settings as default_settings
from courtside.db.models import PipelineRun
from courtside.db.session import get_session
from courtside.scrape.fallback import snapshot_players, snapshot_tournaments
from courtside.scrape.fetcher import FetchError, PageFetcher
from courtside.scrape.normalize import (
    normalize_live_matches,
    normalize_players,
    normalize_tournaments,
)
from courtside.scrape.records import ScrapedLiveMatch, ScrapedPlayer, ScrapedTournament
from courtside.scrape.strategies import (
    StrategyChain,
    build_live_matches_chain,
    build_rankings_chain,
    build_tournaments_chain,
)
from courtside.services.matches import write_synthetic_matches
from courtside.services.sink import (
    SessionFactory,
    TableWriteResult,
    refresh_tournament_statuses,
    upsert_players,
    upsert_tournaments,
    write_table,
)
from courtside.services.stats import aggregate_statistics

logger = logging.getLogger(__name__)

FetcherFactory = Callable[[], PageFetcher]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class SourceOutcome:
    """What one source (rankings, tournaments, live scores) produced."""

    kind: str
    records: list[Any] = field(default_factory=list)
    strategy: Optional[str] = None
    fetch_errors: list[str] = field(default_factory=list)
    used_snapshot: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "records": len(self.records),
            "strategy": self.strategy,
            "fetch_errors": self.fetch_errors,
            "used_snapshot": self.used_snapshot,
        }


@dataclass
class RefreshSummary:
    """Result of one pipeline run, serialized as the trigger's JSON response."""

    run_id: str
    started_at: datetime
    ended_at: Optional[datetime] = None
    success: bool = True
    players_scraped: int = 0
    tournaments_processed: int = 0
    live_matches_found: int = 0
    matches_generated: int = 0
    statistics_updated: bool = False
    tables: list[TableWriteResult] = field(default_factory=list)
    sources: dict[str, SourceOutcome] = field(default_factory=dict)

    @property
    def message(self) -> str:
        failed = [t.table for t in self.tables if not t.ok]
        if failed:
            return f"Tennis data partially updated (failed: {', '.join(failed)})"
        return "ATP tennis data updated successfully"

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "run_id": self.run_id,
            "players_scraped": self.players_scraped,
            "tournaments_processed": self.tournaments_processed,
            "live_matches_found": self.live_matches_found,
            "matches_generated": self.matches_generated,
            "statistics_updated": self.statistics_updated,
            "tables": [t.to_dict() for t in self.tables],
            "sources": {kind: s.to_dict() for kind, s in self.sources.items()},
        }


class RefreshPipeline:
    """
    Runs one data refresh.

    Args:
        session_factory: Returns a session context manager; each table write
                         gets its own (defaults to get_session)
        fetcher_factory: Returns an unopened PageFetcher (defaults to one
                         built from config's user agent and timeout)
        config: Settings to read URLs, caps and policies from
        today: Date tournament statuses are derived against (defaults to today)
        rng: Random source for the opt-in fabricated values
    """

    def __init__(
        self,
        session_factory: SessionFactory = get_session,
        fetcher_factory: Optional[FetcherFactory] = None,
        config: Optional[Settings] = None,
        today: Optional[date] = None,
        rng: Optional[random.Random] = None,
    ):
        self.session_factory = session_factory
        self.config = config or default_settings
        self.fetcher_factory = fetcher_factory or self._default_fetcher
        self.today = today or date.today()
        self.rng = rng or random.Random()

        self.rankings_chain: StrategyChain = build_rankings_chain()
        self.tournaments_chain: StrategyChain = build_tournaments_chain()
        self.live_chain: StrategyChain = build_live_matches_chain()

        self._outcomes: dict[str, SourceOutcome] = {}

    def _default_fetcher(self) -> PageFetcher:
        return PageFetcher(
            user_agent=self.config.scrape_user_agent,
            timeout=self.config.scrape_timeout,
        )

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    async def _extract(
        self,
        fetcher: PageFetcher,
        urls: list[str],
        chain: StrategyChain,
        outcome: SourceOutcome,
    ) -> None:
        """Fetch each URL in order and pool what the chain extracts from it."""
        for url in urls:
            try:
                html = await fetcher.fetch(url)
            except FetchError as exc:
                logger.warning("%s source unavailable: %s", outcome.kind, exc)
                outcome.fetch_errors.append(str(exc))
                continue

            result = chain.run(html)
            if result.records:
                outcome.records.extend(result.records)
                outcome.strategy = outcome.strategy or result.strategy

    def _apply_empty_policy(self, outcome: SourceOutcome, snapshot: Callable[[], list]) -> None:
        if outcome.records or self.config.empty_result_policy != "snapshot":
            return
        logger.warning("No %s extracted; substituting static snapshot", outcome.kind)
        outcome.records = snapshot()
        outcome.strategy = None
        outcome.used_snapshot = True

    async def acquire_players(self, fetcher: PageFetcher) -> list[ScrapedPlayer]:
        outcome = SourceOutcome(kind="players")
        await self._extract(fetcher, [self.config.atp_rankings_url], self.rankings_chain, outcome)
        self._apply_empty_policy(outcome, snapshot_players)
        outcome.records = normalize_players(outcome.records, limit=self.config.max_players)
        self._outcomes["players"] = outcome
        return outcome.records

    async def acquire_tournaments(self, fetcher: PageFetcher) -> list[ScrapedTournament]:
        outcome = SourceOutcome(kind="tournaments")
        await self._extract(
            fetcher, list(self.config.atp_tournament_urls), self.tournaments_chain, outcome
        )
        self._apply_empty_policy(outcome, partial(snapshot_tournaments, self.today.year))
        outcome.records = normalize_tournaments(
            outcome.records, today=self.today, limit=self.config.max_tournaments
        )
        self._outcomes["tournaments"] = outcome
        return outcome.records

    async def acquire_live_matches(self, fetcher: PageFetcher) -> list[ScrapedLiveMatch]:
        outcome = SourceOutcome(kind="live_matches")
        await self._extract(fetcher, [self.config.atp_scores_url], self.live_chain, outcome)
        outcome.records = normalize_live_matches(
            outcome.records, limit=self.config.max_live_matches
        )
        self._outcomes["live_matches"] = outcome
        return outcome.records

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self) -> RefreshSummary:
        started_at = _utc_now()
        run_id = started_at.strftime("%Y%m%dT%H%M%SZ") + "-" + uuid.uuid4().hex[:8]
        summary = RefreshSummary(run_id=run_id, started_at=started_at)
        self._outcomes = {}

        logger.info("Starting tennis data refresh %s", run_id)

        async with self.fetcher_factory() as fetcher:
            players = await self.acquire_players(fetcher)
            tournaments = await self.acquire_tournaments(fetcher)
            live_matches = await self.acquire_live_matches(fetcher)

        summary.sources = dict(self._outcomes)
        summary.live_matches_found = len(live_matches)

        players_result = write_table(self.session_factory, "players", upsert_players, players)
        summary.tables.append(players_result)
        if players_result.ok:
            summary.players_scraped = len(players)

        tournaments_result = write_table(
            self.session_factory, "tournaments", self._write_tournaments, tournaments
        )
        summary.tables.append(tournaments_result)
        if tournaments_result.ok:
            summary.tournaments_processed = len(tournaments)

        if self.config.fabricate_matches:
            matches_result = write_table(
                self.session_factory,
                "matches",
                self._write_matches,
                ([p.name for p in players], [t.name for t in tournaments]),
            )
            summary.tables.append(matches_result)
            summary.matches_generated = matches_result.rows

        stats_result = write_table(
            self.session_factory,
            "statistics",
            self._write_statistics,
            started_at,
        )
        summary.tables.append(stats_result)
        summary.statistics_updated = stats_result.ok

        summary.ended_at = _utc_now()
        self._record_run(summary)

        logger.info(
            "Refresh %s finished: %d players, %d tournaments, %d live matches",
            run_id, summary.players_scraped, summary.tournaments_processed,
            summary.live_matches_found,
        )
        return summary

    def _write_tournaments(self, session, tournaments: list[ScrapedTournament]) -> int:
        written = upsert_tournaments(session, tournaments)
        refresh_tournament_statuses(session, self.today)
        return written

    def _write_matches(self, session, names: tuple[list[str], list[str]]) -> int:
        player_names, tournament_names = names
        return write_synthetic_matches(session, self.rng, player_names, tournament_names)

    def _write_statistics(self, session, started_at: datetime) -> int:
        aggregate_statistics(
            session,
            self.today,
            updated_since=started_at,
            rng=self.rng,
            estimate_matches_today=self.config.estimate_matches_today,
        )
        return 1

    def _record_run(self, summary: RefreshSummary) -> None:
        def _writer(session, payload: RefreshSummary) -> int:
            session.add(PipelineRun(
                run_id=payload.run_id,
                started_at=payload.started_at,
                ended_at=payload.ended_at,
                success=payload.success,
                summary_json=payload.to_dict(),
            ))
            return 1

        write_table(self.session_factory, "pipeline_runs", _writer, summary)
