"""
Tournament calendar extraction strategies.

Tournament pages come in two shapes we know how to read:

1. Calendar cards (archive/calendar pages, as of 2025):
    <ul class="events">
      <li>
        <img class="events_banner" src="...categorystamps_500.png"/>
        <a class="tournament__profile" href="/en/tournaments/rotterdam/407/overview">
          <span class="name">Rotterdam</span>
          <span class="venue">Rotterdam, Netherlands | </span>
          <span class="Date">10 - 16 February, 2025</span>
        </a>
        <span class="surface">Indoor Hard</span>
        <span class="prize">€2,388,830</span>
      </li>
    </ul>

2. Anything else: bare /tournaments/ links, with location, surface and
   dates picked out of the surrounding markup.

Category is never trusted to a random default: it comes from the banner
image when there is one, otherwise from the tournament name.
"""

import re
from datetime import date, datetime
from typing import Optional

from bs4 import BeautifulSoup, Tag

from courtside.scrape.records import RecordValidationError, ScrapedTournament, parse_int

# Maps banner image filename keywords to categories.
# ATP uses images like "categorystamps_250.png", "categorystamps_grandslam.png".
BANNER_CATEGORY_MAP: dict[str, str] = {
    "grandslam": "Grand Slam",
    "1000": "Masters 1000",
    "500": "ATP 500",
    "250": "ATP 250",
    "nextgen": "ATP Finals",
    "finals": "ATP Finals",
}

# Known tournaments by name keyword, checked in this order.
FINALS_KEYWORDS = ("atp finals", "nitto", "next gen", "finals")
GRAND_SLAM_KEYWORDS = (
    "australian open", "roland garros", "french open", "wimbledon", "us open",
    "grand slam",
)
MASTERS_1000_KEYWORDS = (
    "indian wells", "miami", "monte carlo", "madrid", "rome", "internazionali",
    "canada", "toronto", "montreal", "cincinnati", "shanghai", "paris", "masters",
)
ATP_500_KEYWORDS = (
    "rotterdam", "rio de janeiro", "acapulco", "dubai", "barcelona", "washington",
    "hamburg", "tokyo", "beijing", "vienna", "basel", "queens", "halle", "doha",
)

SURFACE_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("clay", "Clay"),
    ("grass", "Grass"),
    ("carpet", "Carpet"),
    ("hard", "Hard"),
)

CONTEXT_WINDOW = 500

TOURNAMENT_LINK_RE = re.compile(
    r"<a[^>]*href=\"[^\"]*/tournaments/[^\"]*\"[^>]*>([^<]+)</a>",
    re.I,
)
LOCATION_RE = re.compile(r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*),\s*([A-Z]{2,3})\b")
PRIZE_RE = re.compile(r"(?:[$€£]|USD|EUR)\s?(\d{1,3}(?:,\d{3})+|\d{4,})")
NUMERIC_DATE_RE = re.compile(r"(\d{4})[-./](\d{2})[-./](\d{2})")
TEXT_RANGE_RE = re.compile(
    r"(\d{1,2}(?:\s+[A-Z][a-z]+)?(?:,\s*\d{4})?)\s*[-–]\s*(\d{1,2}\s+[A-Z][a-z]+,\s*\d{4})"
)


def _keyword_in(keywords: tuple[str, ...], text: str) -> bool:
    return any(re.search(rf"\b{re.escape(k)}\b", text) for k in keywords)


def detect_category(name: str) -> str:
    """
    Categorize a tournament from its name.

    Known event names are checked from the most specific (finals) down;
    anything unrecognized is an ATP 250.
    """
    text = name.lower().replace("-", " ").replace("'", "").replace("’", "")
    if _keyword_in(FINALS_KEYWORDS, text):
        return "ATP Finals"
    if _keyword_in(GRAND_SLAM_KEYWORDS, text):
        return "Grand Slam"
    if _keyword_in(MASTERS_1000_KEYWORDS, text):
        return "Masters 1000"
    if _keyword_in(ATP_500_KEYWORDS, text):
        return "ATP 500"
    return "ATP 250"


def _category_from_banner(src: str) -> Optional[str]:
    src_lower = src.lower()
    for keyword, category in BANNER_CATEGORY_MAP.items():
        if keyword in src_lower:
            return category
    return None


def normalize_surface(surface_str: str) -> str:
    """
    Normalize surface names to standard format.

    Returns:
        'Hard', 'Clay', 'Grass' or 'Carpet'; Hard when nothing matches
    """
    surface_lower = surface_str.lower()
    for keyword, surface in SURFACE_KEYWORDS:
        if keyword in surface_lower:
            return surface
    return "Hard"


def _parse_day_month_range(left: str, right: str) -> tuple[Optional[date], Optional[date]]:
    """
    Parse the two halves of a "D Month, YYYY" style range.

    Formats (real examples from calendar pages):
      - "31 December, 2023" / "7 January, 2024"   (cross-year)
      - "1" / "7 January, 2024"                    (same month, short form)
      - "29 January" / "4 February, 2024"          (cross-month)
    """
    end = datetime.strptime(right.strip(), "%d %B, %Y").date()
    left = left.strip()

    if "," in left:
        start = datetime.strptime(left, "%d %B, %Y").date()
    elif re.search(r"[a-zA-Z]", left):
        parsed = datetime.strptime(left, "%d %B")
        # December start with a January end belongs to the previous year
        start_year = end.year - 1 if parsed.month > end.month else end.year
        start = parsed.replace(year=start_year).date()
    else:
        start_day = int(left)
        if start_day > end.day:
            if end.month == 1:
                start = end.replace(year=end.year - 1, month=12, day=start_day)
            else:
                start = end.replace(month=end.month - 1, day=start_day)
        else:
            start = end.replace(day=start_day)

    return start, end


def parse_date_range(text: str) -> tuple[Optional[date], Optional[date]]:
    """
    Find a tournament date range in free text.

    Accepts "2025.02.10 - 2025.02.16", ISO dates, and the "D Month, YYYY"
    forms handled by _parse_day_month_range. Returns (None, None) when no
    range is found; a single numeric date yields (date, None).
    """
    if not text:
        return None, None

    numeric = NUMERIC_DATE_RE.findall(text)
    if numeric:
        try:
            dates = [date(int(y), int(m), int(d)) for y, m, d in numeric[:2]]
        except ValueError:
            dates = []
        if dates:
            return dates[0], dates[1] if len(dates) > 1 else None

    match = TEXT_RANGE_RE.search(text)
    if match:
        try:
            return _parse_day_month_range(match.group(1), match.group(2))
        except ValueError:
            return None, None

    return None, None


def parse_prize_money(text: str) -> Optional[int]:
    """'$1,234,567' or '€2,388,830' -> integer amount."""
    match = PRIZE_RE.search(text or "")
    if not match:
        return None
    return parse_int(match.group(1))


def _first_text(elem: Tag, selector: str) -> str:
    found = elem.select_one(selector)
    return found.get_text(" ", strip=True) if found else ""


def _parse_card(card: Tag) -> Optional[ScrapedTournament]:
    name = _first_text(card, ".name, .tourney-title, .tournament-name, h3, h4")
    if not name:
        return None

    location = _first_text(card, ".venue, .tourney-location, .location").rstrip("| ").strip()
    start_date, end_date = parse_date_range(
        _first_text(card, ".Date, .date, .tourney-dates, .dates")
    )
    surface = normalize_surface(
        _first_text(card, ".surface, [class*='surface'], .tourney-details")
    )
    prize_money = parse_prize_money(
        _first_text(card, ".prize, [class*='prize'], .financial")
    )

    category = None
    banner = card.select_one("img.events_banner, img[src*='categorystamps'], img[src*='banner']")
    if banner:
        category = _category_from_banner(banner.get("src", ""))

    return ScrapedTournament(
        name=name,
        location=location or "Unknown",
        surface=surface,
        category=category or detect_category(name),
        start_date=start_date,
        end_date=end_date,
        prize_money=prize_money,
    )


def extract_tournament_cards(html: str) -> list[ScrapedTournament]:
    """Strategy 1: structured calendar cards."""
    soup = BeautifulSoup(html, "lxml")
    tournaments: list[ScrapedTournament] = []

    cards = soup.select("ul.events > li, .tournament-card, .tourney-result")
    for card in cards:
        try:
            tournament = _parse_card(card)
        except RecordValidationError:
            continue
        if tournament is not None:
            tournaments.append(tournament)

    return tournaments


def _strip_tags(markup: str) -> str:
    return re.sub(r"\s+", " ", re.sub(r"<[^>]+>", " ", markup))


def extract_tournament_links(html: str) -> list[ScrapedTournament]:
    """
    Strategy 2: /tournaments/ anchors.

    Everything except the name is read from a window of markup around the
    anchor, text after the anchor first, so values can bleed over from a
    neighbouring entry. This is the last resort after the card layout.
    """
    tournaments: list[ScrapedTournament] = []

    for match in TOURNAMENT_LINK_RE.finditer(html):
        name = match.group(1).strip()
        after = _strip_tags(html[match.end():match.end() + CONTEXT_WINDOW])
        before = _strip_tags(html[max(0, match.start() - CONTEXT_WINDOW):match.start()])
        context = f"{after} | {before}"

        location_match = LOCATION_RE.search(context)
        location = (
            f"{location_match.group(1)}, {location_match.group(2)}"
            if location_match else "Unknown"
        )
        start_date, end_date = parse_date_range(context)

        try:
            tournaments.append(ScrapedTournament(
                name=name,
                location=location,
                surface=normalize_surface(context),
                category=detect_category(name),
                start_date=start_date,
                end_date=end_date,
                prize_money=parse_prize_money(context),
            ))
        except RecordValidationError:
            continue

    return tournaments
