"""
Singles rankings extraction strategies.

Three independent takes on the rankings table, from most to least
structured. Each returns ScrapedPlayer records in page order; rows missing a
rank, name or points are skipped, a missing country becomes "Unknown".

The table we expect (as of 2025):
    <tr class="lower-row ranking-row">
      <td class="rank">1</td>
      <td class="player">
        <svg class="flag"><use href="/assets/flags.svg#flag-ita"></use></svg>
        <a href="/en/players/jannik-sinner/s0ag/overview">Jannik Sinner</a>
      </td>
      <td class="country">ITA</td>
      <td class="points">11,480</td>
      <td class="move">+1</td>
    </tr>
"""

import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

from courtside.scrape.records import RecordValidationError, ScrapedPlayer

IOC_RE = re.compile(r"^[A-Z]{3}$")
POINTS_RE = re.compile(r"^\d{1,3}(?:,\d{3})+$|^\d+$")
MOVE_RE = re.compile(r"^[+-]\d+$")

# "1 Jannik Sinner ITA 11,480" once tags are stripped
ROW_TEXT_RE = re.compile(
    r"^\s*(?P<rank>\d+)\s+(?P<name>[^\d,]+?)\s+(?P<country>[A-Z]{3})\b.*?(?P<points>\d{1,3}(?:,\d{3})+|\d{4,})"
)

# Regex fallback over raw markup, one <tr> at a time
TR_RE = re.compile(r"<tr[^>]*>.*?</tr>", re.I | re.S)
LINK_ROW_RE = re.compile(
    r"<td[^>]*>\s*(?P<rank>\d+)\s*</td>.*?"
    r"<a[^>]*href=\"[^\"]*/players/[^\"]*\"[^>]*>(?P<name>[^<]+)</a>.*?"
    r"<td[^>]*>\s*(?P<country>[A-Z]{3})\s*</td>.*?"
    r"<td[^>]*>\s*(?P<points>[0-9,]+)\s*</td>",
    re.I | re.S,
)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def _country_from_cell(cell: Tag) -> Optional[str]:
    """
    Read an IOC code from a cell.

    Tries the cell text, then a flag image (alt text or flag-XXX class),
    then an SVG sprite reference like "#flag-ita".
    """
    text = cell.get_text(strip=True)
    if IOC_RE.match(text):
        return text

    flag = cell.find("img", class_=re.compile(r"flag|country", re.I))
    if flag:
        flag_class = " ".join(flag.get("class", []))
        flag_match = re.search(r"flag-([A-Za-z]{3})\b", flag_class)
        if flag_match:
            return flag_match.group(1).upper()
        alt = flag.get("alt", "")
        if alt and re.fullmatch(r"[A-Za-z]{3}", alt):
            return alt.upper()

    use = cell.find("use")
    if use:
        href = use.get("href") or use.get("xlink:href") or ""
        sprite_match = re.search(r"#flag-([A-Za-z]{3})\b", href)
        if sprite_match:
            return sprite_match.group(1).upper()

    return None


def _player_link(cell: Tag) -> Optional[str]:
    link = cell.find("a", href=re.compile(r"/players/"))
    if link:
        name = link.get_text(" ", strip=True)
        return name or None
    return None


def extract_ranking_rows(html: str) -> list[ScrapedPlayer]:
    """Strategy 1: rows marked with a ranking-row class and named cells."""
    soup = _soup(html)
    players: list[ScrapedPlayer] = []

    for row in soup.select("tr[class*='ranking-row']"):
        rank_cell = row.find("td", class_=re.compile(r"^rank(ing)?(-cell)?$"))
        player_cell = row.find("td", class_=re.compile(r"player"))
        points_cell = row.find("td", class_=re.compile(r"points"))
        if rank_cell is None or player_cell is None or points_cell is None:
            continue

        name = _player_link(player_cell)
        if not name:
            continue

        country_cell = row.find("td", class_=re.compile(r"country"))
        country = _country_from_cell(country_cell) if country_cell else None
        if country is None:
            country = _country_from_cell(player_cell)

        move_cell = row.find("td", class_=re.compile(r"move|change"))
        move = move_cell.get_text(strip=True) if move_cell else None

        try:
            players.append(ScrapedPlayer(
                name=name,
                ranking=rank_cell.get_text(strip=True),
                points=points_cell.get_text(strip=True),
                country=country or "Unknown",
                ranking_change=move if move and MOVE_RE.match(move) else 0,
            ))
        except RecordValidationError:
            continue

    return players


def _parse_generic_row(row: Tag) -> Optional[ScrapedPlayer]:
    """
    Read a player from an unlabelled table row.

    Cells are scanned left to right: the first bare integer is the rank,
    then the player name (a /players/ link if present, otherwise the first
    text cell that is neither a number nor a country code), then the
    country, then the points. When a thousands-grouped number exists after
    the name it wins over plain integers such as age.
    """
    cells = row.find_all(["td", "th"])
    if len(cells) < 4:
        return _parse_row_text(row.get_text(" ", strip=True))

    rank = None
    name = None
    country = None
    move = 0
    numbers: list[str] = []

    for cell in cells:
        text = cell.get_text(" ", strip=True)

        if rank is None:
            if re.fullmatch(r"\d+", text):
                rank = text
            continue

        if name is None:
            name = _player_link(cell)
            if name is None and text and not POINTS_RE.match(text) and not IOC_RE.match(text):
                if re.search(r"[A-Za-z]", text):
                    name = text
            if name is not None:
                country = _country_from_cell(cell)
            continue

        if country is None and IOC_RE.match(text):
            country = text
            continue
        if country is None:
            country = _country_from_cell(cell)
            if country is not None:
                continue

        if MOVE_RE.match(text):
            move = text
            continue
        if POINTS_RE.match(text):
            numbers.append(text)

    if rank is None or name is None or not numbers:
        return None

    grouped = [n for n in numbers if "," in n]
    if grouped:
        points = grouped[0]
    else:
        points = max(numbers, key=lambda n: int(n))

    try:
        return ScrapedPlayer(
            name=name,
            ranking=rank,
            points=points,
            country=country or "Unknown",
            ranking_change=move,
        )
    except RecordValidationError:
        return None


def _parse_row_text(text: str) -> Optional[ScrapedPlayer]:
    match = ROW_TEXT_RE.match(text)
    if not match:
        return None
    try:
        return ScrapedPlayer(
            name=match.group("name"),
            ranking=match.group("rank"),
            points=match.group("points"),
            country=match.group("country"),
        )
    except RecordValidationError:
        return None


def extract_generic_rows(html: str) -> list[ScrapedPlayer]:
    """Strategy 2: any table row whose cells read rank, name, country, points."""
    soup = _soup(html)
    players: list[ScrapedPlayer] = []
    for row in soup.find_all("tr"):
        player = _parse_generic_row(row)
        if player is not None:
            players.append(player)
    return players


def extract_player_links(html: str) -> list[ScrapedPlayer]:
    """Strategy 3: regex over raw markup, for pages BeautifulSoup mangles."""
    players: list[ScrapedPlayer] = []
    for row_html in TR_RE.findall(html):
        match = LINK_ROW_RE.search(row_html)
        if not match:
            continue
        try:
            players.append(ScrapedPlayer(
                name=match.group("name"),
                ranking=match.group("rank"),
                points=match.group("points"),
                country=match.group("country"),
            ))
        except RecordValidationError:
            continue
    return players
