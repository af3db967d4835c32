"""
Live scores extraction strategies.

The scores page lists each match in a container holding two player-name
spans plus optional score and status spans. When that layout is missing we
fall back to "Player A vs Player B" phrases in the page text.
"""

import re

from bs4 import BeautifulSoup

from courtside.scrape.records import RecordValidationError, ScrapedLiveMatch

NAME_PATTERN = r"[A-Z][a-z]+(?:[ '-][A-Z][a-z]+)*"
VERSUS_RE = re.compile(rf"({NAME_PATTERN})\s+(?:vs\.?|v)\s+({NAME_PATTERN})")
GAME_SCORE_RE = re.compile(r"\b(\d{1,2})-(\d{1,2})\b")
SCORE_WINDOW = 200


def extract_match_containers(html: str) -> list[ScrapedLiveMatch]:
    """Strategy 1: match containers with player-name/score/status spans."""
    soup = BeautifulSoup(html, "lxml")
    matches: list[ScrapedLiveMatch] = []

    for container in soup.select("[class*='match']"):
        names = container.select("[class*='player-name']")
        if len(names) < 2:
            continue
        # Outer wrappers also carry a 'match' class; only read the innermost
        if any(
            len(inner.select("[class*='player-name']")) >= 2
            for inner in container.select("[class*='match']")
        ):
            continue

        score = container.select_one("[class*='score']")
        status = container.select_one("[class*='status']")
        try:
            matches.append(ScrapedLiveMatch(
                player1_name=names[0].get_text(" ", strip=True),
                player2_name=names[1].get_text(" ", strip=True),
                score=score.get_text(" ", strip=True) if score else "0-0",
                status=status.get_text(" ", strip=True) if status else "Live",
            ))
        except RecordValidationError:
            continue

    return matches


def extract_versus_text(html: str) -> list[ScrapedLiveMatch]:
    """Strategy 2: 'A vs B' phrases with the nearest game score."""
    text = BeautifulSoup(html, "lxml").get_text(" ", strip=True)
    matches: list[ScrapedLiveMatch] = []

    for match in VERSUS_RE.finditer(text):
        window = text[max(0, match.start() - SCORE_WINDOW):match.end() + SCORE_WINDOW]
        score_match = GAME_SCORE_RE.search(window)
        try:
            matches.append(ScrapedLiveMatch(
                player1_name=match.group(1),
                player2_name=match.group(2),
                score=f"{score_match.group(1)}-{score_match.group(2)}" if score_match else "0-0",
            ))
        except RecordValidationError:
            continue

    return matches
