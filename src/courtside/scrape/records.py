"""
Value objects produced by the extraction strategies.

Each record validates itself on construction: the natural-key field is
required (a record without it raises RecordValidationError and is dropped by
the extractor), every other field falls back to a documented default.

Numeric fields are converted here, once, so the normalizer and the sink
writer only ever see ints and dates.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional


class RecordValidationError(ValueError):
    """Raised when a scraped record is missing its natural key."""


def _clean_text(value: Optional[str]) -> str:
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value)).strip()


def parse_int(value) -> Optional[int]:
    """
    Parse an integer from scraped text.

    Accepts thousands separators and a leading sign ("11,480", "+2", "-1").
    Returns None for anything else.
    """
    if value is None:
        return None
    if isinstance(value, int):
        return value
    text = _clean_text(value).replace(",", "").replace(" ", "")
    match = re.fullmatch(r"([+-]?)\s*(\d+)", text)
    if not match:
        return None
    number = int(match.group(2))
    return -number if match.group(1) == "-" else number


@dataclass
class ScrapedPlayer:
    """
    One row of the rankings table.

    name is required; ranking and points must parse as integers (range
    checks happen in the normalizer, not here).
    """

    name: str
    ranking: int
    points: int
    country: str = "Unknown"
    ranking_change: int = 0

    def __post_init__(self) -> None:
        self.name = _clean_text(self.name)
        if not self.name:
            raise RecordValidationError("player record has no name")

        ranking = parse_int(self.ranking)
        points = parse_int(self.points)
        if ranking is None or points is None:
            raise RecordValidationError(f"player {self.name!r} has no ranking/points")
        self.ranking = ranking
        self.points = points

        country = _clean_text(self.country).upper()
        self.country = country if re.fullmatch(r"[A-Z]{3}", country) else "Unknown"
        self.ranking_change = parse_int(self.ranking_change) or 0

    def to_row(self) -> dict:
        return {
            "name": self.name,
            "country": self.country,
            "ranking": self.ranking,
            "points": self.points,
            "ranking_change": self.ranking_change,
        }


@dataclass
class ScrapedTournament:
    """
    A tournament found on a calendar page.

    Only the name is required. status is a placeholder until the normalizer
    derives it from the dates.
    """

    name: str
    location: str = "Unknown"
    surface: str = "Hard"
    category: str = "ATP 250"
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    prize_money: Optional[int] = None
    status: str = "upcoming"

    def __post_init__(self) -> None:
        self.name = _clean_text(self.name)
        if len(self.name) < 3 or "<" in self.name or ">" in self.name:
            raise RecordValidationError(f"invalid tournament name {self.name!r}")
        self.location = _clean_text(self.location) or "Unknown"
        if self.prize_money is not None:
            self.prize_money = parse_int(self.prize_money)

    def to_row(self) -> dict:
        return {
            "name": self.name,
            "location": self.location,
            "surface": self.surface,
            "category": self.category,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "status": self.status,
            "prize_money": self.prize_money,
        }


@dataclass
class ScrapedLiveMatch:
    """A match currently shown on the scores page."""

    player1_name: str
    player2_name: str
    score: str = "0-0"
    status: str = "Live"

    def __post_init__(self) -> None:
        self.player1_name = _clean_text(self.player1_name)
        self.player2_name = _clean_text(self.player2_name)
        if not self.player1_name or not self.player2_name:
            raise RecordValidationError("live match needs both player names")
        self.score = _clean_text(self.score) or "0-0"
        self.status = _clean_text(self.status) or "Live"

    @property
    def label(self) -> str:
        return f"{self.player1_name} vs {self.player2_name}"

    def __repr__(self) -> str:
        return f"<ScrapedLiveMatch({self.label}, {self.score})>"
