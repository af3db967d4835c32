"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

from contextlib import contextmanager

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from courtside.config import Settings
from courtside.db.models import Base
from courtside.scrape.fetcher import PageFetcher

RANKINGS_URL = "https://atp.test/en/rankings/singles"
TOURNAMENT_URLS = ["https://atp.test/en/tournaments", "https://atp.test/en/tournaments/calendar"]
SCORES_URL = "https://atp.test/en/scores"

RANKINGS_HTML = """
<table class="mega-table">
  <thead><tr><th>Rank</th><th>Player</th><th>Country</th><th>Points</th></tr></thead>
  <tbody>
    <tr><td>1</td><td>Jannik Sinner</td><td>ITA</td><td>11,480</td></tr>
    <tr><td>2</td><td>Alexander Zverev</td><td>GER</td><td>8,135</td></tr>
    <tr><td>3</td><td>Carlos Alcaraz</td><td>ESP</td><td>7,510</td></tr>
    <tr><td>4</td><td>Taylor Fritz</td><td>USA</td><td>5,100</td></tr>
  </tbody>
</table>
"""

TOURNAMENTS_HTML = """
<ul class="events">
  <li>
    <img class="events_banner" src="/assets/categorystamps_500.png"/>
    <a class="tournament__profile" href="/en/tournaments/rotterdam/407/overview">
      <span class="name">Rotterdam</span>
      <span class="venue">Rotterdam, Netherlands | </span>
      <span class="Date">10 - 16 February, 2025</span>
    </a>
    <span class="surface">Indoor Hard</span>
    <span class="prize">&#8364;2,388,830</span>
  </li>
  <li>
    <a class="tournament__profile" href="/en/tournaments/monte-carlo/410/overview">
      <span class="name">Monte Carlo Masters</span>
      <span class="venue">Monte Carlo, Monaco | </span>
      <span class="Date">6 - 13 April, 2025</span>
    </a>
    <span class="surface">Clay</span>
  </li>
</ul>
"""

SCORES_HTML = """
<div class="match-group">
  <div class="match">
    <span class="player-name">Jannik Sinner</span>
    <span class="player-name">Carlos Alcaraz</span>
    <span class="score">6-4 3-2</span>
    <span class="status">Live</span>
  </div>
</div>
"""


@pytest.fixture
def test_engine():
    """
    Create a test database engine.

    SQLite in-memory on a single shared connection, so every session opened
    by the code under test sees the same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    """A get_session() look-alike bound to the test engine."""
    Session = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)

    @contextmanager
    def _session():
        session = Session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return _session


@pytest.fixture
def db_session(session_factory):
    """A plain session for arranging and asserting on table contents."""
    with session_factory() as session:
        yield session


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        atp_rankings_url=RANKINGS_URL,
        atp_tournament_urls=TOURNAMENT_URLS,
        atp_scores_url=SCORES_URL,
        empty_result_policy="empty",
        fabricate_matches=False,
        estimate_matches_today=False,
        llm_api_key="test-key",
        llm_api_url="https://llm.test/v1/chat/completions",
    )


def make_site(pages: dict[str, tuple[int, str]]) -> httpx.MockTransport:
    """
    Transport serving canned pages by URL.

    Unknown URLs answer 404.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        status, body = pages.get(str(request.url), (404, "not found"))
        return httpx.Response(status, text=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def site_pages():
    """URL -> (status, body) for a source site where every page parses."""
    return dict({
        RANKINGS_URL: (200, RANKINGS_HTML),
        TOURNAMENT_URLS[0]: (200, TOURNAMENTS_HTML),
        TOURNAMENT_URLS[1]: (200, "<html><body>No events</body></html>"),
        SCORES_URL: (200, SCORES_HTML),
    })


@pytest.fixture
def healthy_site(site_pages):
    return make_site(site_pages)


@pytest.fixture
def fetcher_factory():
    """Build a fetcher_factory serving the given transport."""
    def _factory(transport: httpx.MockTransport):
        return lambda: PageFetcher(user_agent="courtside-tests", timeout=5.0, transport=transport)

    return _factory


@pytest.fixture
def make_transport():
    return make_site
