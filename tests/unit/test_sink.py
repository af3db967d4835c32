"""
Unit tests for the upsert sink.

Runs against SQLite, which supports the same ON CONFLICT DO UPDATE
clause used in production.
"""

from datetime import date

from sqlalchemy import func, select

from courtside.db.models import Match, Player, Tournament
from courtside.scrape.records import ScrapedPlayer, ScrapedTournament
from courtside.services.sink import (
    refresh_tournament_statuses,
    upsert_matches,
    upsert_players,
    upsert_tournaments,
    write_table,
)


def _players():
    return [
        ScrapedPlayer(name="Jannik Sinner", ranking=1, points=11480, country="ITA"),
        ScrapedPlayer(name="Alexander Zverev", ranking=2, points=8135, country="GER"),
    ]


def _count(session, model) -> int:
    return session.scalar(select(func.count()).select_from(model))


class TestUpsertPlayers:
    def test_insert_then_reinsert_is_idempotent(self, session_factory):
        for _ in range(2):
            with session_factory() as session:
                assert upsert_players(session, _players()) == 2

        with session_factory() as session:
            assert _count(session, Player) == 2

    def test_updates_changed_values(self, session_factory):
        with session_factory() as session:
            upsert_players(session, _players())

        with session_factory() as session:
            upsert_players(session, [
                ScrapedPlayer(name="Jannik Sinner", ranking=1, points=11830, country="ITA", ranking_change=0),
                ScrapedPlayer(name="Carlos Alcaraz", ranking=2, points=7010, country="ESP", ranking_change=1),
            ])

        with session_factory() as session:
            rows = {p.name: p for p in session.scalars(select(Player)).all()}
            assert rows["Jannik Sinner"].points == 11830
            assert rows["Carlos Alcaraz"].ranking_change == 1
            # Zverev fell out of the ranking: kept, but without a position
            assert rows["Alexander Zverev"].points == 8135
            assert rows["Alexander Zverev"].ranking is None

    def test_no_two_players_share_a_ranking(self, session_factory):
        with session_factory() as session:
            upsert_players(session, _players() + [
                ScrapedPlayer(name="Taylor Fritz", ranking=3, points=5100, country="USA"),
            ])

        with session_factory() as session:
            upsert_players(session, _players() + [
                ScrapedPlayer(name="Casper Ruud", ranking=3, points=4000, country="NOR"),
            ])

        with session_factory() as session:
            ranked = session.execute(
                select(Player.ranking, Player.name)
                .where(Player.ranking.is_not(None))
                .order_by(Player.ranking)
            ).all()
            assert [tuple(r) for r in ranked] == [
                (1, "Jannik Sinner"),
                (2, "Alexander Zverev"),
                (3, "Casper Ruud"),
            ]
            assert _count(session, Player) == 4

    def test_empty_input_keeps_rankings(self, session_factory):
        with session_factory() as session:
            upsert_players(session, _players())
        with session_factory() as session:
            upsert_players(session, [])

        with session_factory() as session:
            assert [p.ranking for p in session.scalars(select(Player).order_by(Player.ranking))] == [1, 2]

    def test_empty_input_writes_nothing(self, session_factory):
        with session_factory() as session:
            assert upsert_players(session, []) == 0
            assert _count(session, Player) == 0


class TestUpsertTournaments:
    def test_status_is_overwritten(self, session_factory):
        rotterdam = ScrapedTournament(
            name="Rotterdam",
            start_date=date(2025, 2, 10),
            end_date=date(2025, 2, 16),
            status="upcoming",
        )
        with session_factory() as session:
            upsert_tournaments(session, [rotterdam])

        rotterdam.status = "ongoing"
        with session_factory() as session:
            upsert_tournaments(session, [rotterdam])

        with session_factory() as session:
            stored = session.scalars(select(Tournament)).all()
            assert len(stored) == 1
            assert stored[0].status == "ongoing"


    def test_refresh_statuses_covers_unlisted_rows(self, session_factory):
        with session_factory() as session:
            upsert_tournaments(session, [
                ScrapedTournament(
                    name="Rotterdam",
                    start_date=date(2025, 2, 10),
                    end_date=date(2025, 2, 16),
                    status="ongoing",
                ),
                ScrapedTournament(name="Exhibition", start_date=date(2025, 2, 20), status="upcoming"),
                ScrapedTournament(name="Mystery Open", status="upcoming"),
            ])

        with session_factory() as session:
            assert refresh_tournament_statuses(session, date(2025, 2, 24)) == 3

        with session_factory() as session:
            statuses = {t.name: t.status for t in session.scalars(select(Tournament))}
            assert statuses == {
                "Rotterdam": "completed",
                "Exhibition": "ongoing",
                "Mystery Open": "upcoming",
            }


class TestUpsertMatches:
    def test_keyed_on_tournament_and_players(self, session_factory):
        with session_factory() as session:
            upsert_players(session, _players())
            upsert_tournaments(session, [ScrapedTournament(name="Rotterdam")])
            ids = [p.id for p in session.scalars(select(Player).order_by(Player.ranking))]
            tournament_id = session.scalar(select(Tournament.id))

        row = {
            "tournament_id": tournament_id,
            "player1_id": ids[0],
            "player2_id": ids[1],
            "winner_id": None,
            "round": "Final",
            "status": "live",
            "score": "6-4",
            "match_date": None,
        }
        with session_factory() as session:
            upsert_matches(session, [row])
        with session_factory() as session:
            upsert_matches(session, [dict(row, status="completed", winner_id=ids[0])])

        with session_factory() as session:
            matches = session.scalars(select(Match)).all()
            assert len(matches) == 1
            assert matches[0].status == "completed"
            assert matches[0].winner_id == ids[0]


class TestWriteTable:
    def test_success_reports_rows(self, session_factory):
        result = write_table(session_factory, "players", upsert_players, _players())

        assert result.ok
        assert result.rows == 2
        assert result.to_dict() == {"table": "players", "ok": True, "rows": 2, "error": None}

    def test_failure_is_contained_and_rolled_back(self, session_factory):
        def explode(session, records):
            upsert_players(session, records)
            raise RuntimeError("disk full")

        failed = write_table(session_factory, "players", explode, _players())
        assert not failed.ok
        assert "disk full" in failed.error

        with session_factory() as session:
            assert _count(session, Player) == 0

        # The next table is unaffected
        ok = write_table(
            session_factory, "tournaments", upsert_tournaments, [ScrapedTournament(name="Rotterdam")]
        )
        assert ok.ok
