"""
Unit tests for scraped record validation and normalization.

Normalizers drop out-of-range records, deduplicate by natural key (first
seen wins), sort and cap.
"""

from datetime import date

import pytest

from courtside.scrape.fallback import snapshot_players, snapshot_tournaments
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
    parse_int,
)


class TestRecords:
    @pytest.mark.parametrize(
        "raw,expected",
        [("11,480", 11480), ("+2", 2), ("-1", -1), (" 7 ", 7), (5, 5), ("n/a", None), (None, None)],
    )
    def test_parse_int(self, raw, expected):
        assert parse_int(raw) == expected

    def test_player_requires_name(self):
        with pytest.raises(RecordValidationError):
            ScrapedPlayer(name="  ", ranking=1, points=100)

    def test_player_requires_numeric_points(self):
        with pytest.raises(RecordValidationError):
            ScrapedPlayer(name="Jannik Sinner", ranking=1, points="lots")

    def test_player_country_must_be_ioc_code(self):
        assert ScrapedPlayer(name="Jannik Sinner", ranking=1, points=1, country="ita").country == "ITA"
        assert ScrapedPlayer(name="Jannik Sinner", ranking=1, points=1, country="Italy").country == "Unknown"

    @pytest.mark.parametrize("name", ["", "AO", "<script>"])
    def test_tournament_name_validation(self, name):
        with pytest.raises(RecordValidationError):
            ScrapedTournament(name=name)

    def test_live_match_needs_both_players(self):
        with pytest.raises(RecordValidationError):
            ScrapedLiveMatch(player1_name="Jannik Sinner", player2_name="")


class TestNormalizePlayers:
    def test_drops_out_of_range(self):
        players = [
            ScrapedPlayer(name="Zero Rank", ranking=0, points=10),
            ScrapedPlayer(name="Negative Points", ranking=5, points=-1),
            ScrapedPlayer(name="Fine", ranking=6, points=0),
        ]
        assert [p.name for p in normalize_players(players)] == ["Fine"]

    def test_dedupes_name_and_ranking_first_seen_wins(self):
        players = [
            ScrapedPlayer(name="Jannik Sinner", ranking=1, points=11480),
            ScrapedPlayer(name="jannik sinner", ranking=2, points=9000),
            ScrapedPlayer(name="Carlos Alcaraz", ranking=1, points=7000),
            ScrapedPlayer(name="Carlos Alcaraz", ranking=3, points=7010),
        ]

        result = normalize_players(players)

        assert [(p.name, p.ranking, p.points) for p in result] == [
            ("Jannik Sinner", 1, 11480),
            ("Carlos Alcaraz", 3, 7010),
        ]

    def test_sorted_and_capped(self):
        players = [
            ScrapedPlayer(name=f"Player {n}", ranking=n, points=1000 - n)
            for n in (5, 3, 1, 4, 2)
        ]
        result = normalize_players(players, limit=3)
        assert [p.ranking for p in result] == [1, 2, 3]


class TestNormalizeTournaments:
    TODAY = date(2025, 2, 12)

    def test_derives_status_from_dates(self):
        tournaments = [
            ScrapedTournament(name="Rotterdam", start_date=date(2025, 2, 10), end_date=date(2025, 2, 16)),
            ScrapedTournament(name="Australian Open", start_date=date(2025, 1, 12), end_date=date(2025, 1, 26)),
            ScrapedTournament(name="Indian Wells", start_date=date(2025, 3, 5), end_date=date(2025, 3, 16)),
            ScrapedTournament(name="Mystery Open"),
        ]

        result = {t.name: t.status for t in normalize_tournaments(tournaments, today=self.TODAY)}

        assert result == {
            "Rotterdam": "ongoing",
            "Australian Open": "completed",
            "Indian Wells": "upcoming",
            "Mystery Open": "upcoming",
        }

    def test_drops_inverted_ranges_and_duplicates(self):
        tournaments = [
            ScrapedTournament(name="Backwards Cup", start_date=date(2025, 5, 10), end_date=date(2025, 5, 1)),
            ScrapedTournament(name="Rotterdam", location="Rotterdam, NED"),
            ScrapedTournament(name="ROTTERDAM", location="Elsewhere"),
        ]

        result = normalize_tournaments(tournaments, today=self.TODAY)

        assert [(t.name, t.location) for t in result] == [("Rotterdam", "Rotterdam, NED")]

    def test_undated_sort_last(self):
        tournaments = [
            ScrapedTournament(name="Mystery Open"),
            ScrapedTournament(name="Indian Wells", start_date=date(2025, 3, 5)),
            ScrapedTournament(name="Rotterdam", start_date=date(2025, 2, 10)),
        ]
        result = normalize_tournaments(tournaments, today=self.TODAY)
        assert [t.name for t in result] == ["Rotterdam", "Indian Wells", "Mystery Open"]


class TestNormalizeLiveMatches:
    def test_dedupes_pairings_either_order(self):
        matches = [
            ScrapedLiveMatch("Jannik Sinner", "Carlos Alcaraz"),
            ScrapedLiveMatch("Carlos Alcaraz", "Jannik Sinner"),
            ScrapedLiveMatch("Taylor Fritz", "Taylor Fritz"),
        ]
        result = normalize_live_matches(matches)
        assert [m.label for m in result] == ["Jannik Sinner vs Carlos Alcaraz"]


class TestSnapshot:
    def test_snapshot_players_are_valid_and_ordered(self):
        players = normalize_players(snapshot_players())
        assert len(players) == 10
        assert players[0].name == "Jannik Sinner"
        assert [p.ranking for p in players] == list(range(1, 11))

    def test_snapshot_tournaments_use_requested_year(self):
        tournaments = snapshot_tournaments(2026)
        assert all(t.start_date.year == 2026 for t in tournaments)
        assert {t.category for t in tournaments} >= {"Grand Slam", "ATP Finals"}
