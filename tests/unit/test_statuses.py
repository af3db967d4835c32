"""Unit tests for shared status helpers."""

from datetime import date

import pytest

from courtside.statuses import normalize_status_filter, tournament_status

TODAY = date(2025, 2, 12)


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (date(2025, 2, 10), date(2025, 2, 16), "ongoing"),
        (date(2025, 2, 12), date(2025, 2, 12), "ongoing"),
        (date(2025, 1, 12), date(2025, 1, 26), "completed"),
        (date(2025, 3, 5), date(2025, 3, 16), "upcoming"),
        (None, None, "upcoming"),
        (None, date(2025, 2, 16), "upcoming"),
    ],
)
def test_tournament_status(start, end, expected):
    assert tournament_status(start, end, TODAY) == expected


class TestOpenEndedTournaments:
    """A start date without an end date covers one week."""

    def test_ongoing_through_the_seventh_day(self):
        assert tournament_status(date(2025, 2, 8), None, TODAY) == "ongoing"
        assert tournament_status(date(2025, 2, 5), None, TODAY) == "ongoing"

    def test_completed_after_a_week(self):
        assert tournament_status(date(2025, 2, 4), None, TODAY) == "completed"

    def test_old_start_date_is_not_live(self):
        assert tournament_status(date(2024, 1, 1), None, date(2025, 6, 1)) == "completed"


def test_normalize_status_filter():
    assert normalize_status_filter(None) == ["scheduled", "live", "completed"]
    assert normalize_status_filter([" LIVE", "live", "bogus", "completed"]) == ["live", "completed"]
    assert normalize_status_filter(["bogus", ""]) == ["scheduled", "live", "completed"]
