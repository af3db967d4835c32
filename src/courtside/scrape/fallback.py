"""
Static fallback snapshot.

Only used when settings.empty_result_policy is "snapshot": a source whose
fetch fails or whose strategies all come back empty is replaced wholesale
by this data. Live and snapshot records are never mixed for one source.
"""

from datetime import date

from courtside.scrape.records import ScrapedPlayer, ScrapedTournament

# Singles top 10, start of the 2025 season
SNAPSHOT_PLAYERS: tuple[tuple[int, str, str, int], ...] = (
    (1, "Jannik Sinner", "ITA", 11830),
    (2, "Alexander Zverev", "GER", 7635),
    (3, "Carlos Alcaraz", "ESP", 7010),
    (4, "Taylor Fritz", "USA", 5100),
    (5, "Daniil Medvedev", "RUS", 5030),
    (6, "Casper Ruud", "NOR", 4210),
    (7, "Novak Djokovic", "SRB", 3910),
    (8, "Alex de Minaur", "AUS", 3745),
    (9, "Andrey Rublev", "RUS", 3520),
    (10, "Grigor Dimitrov", "BUL", 3200),
)

# (name, location, surface, category, (start month, day), (end month, day), prize money)
SNAPSHOT_TOURNAMENTS: tuple[tuple, ...] = (
    ("Australian Open", "Melbourne, AUS", "Hard", "Grand Slam", (1, 12), (1, 26), 96500000),
    ("Indian Wells", "Indian Wells, USA", "Hard", "Masters 1000", (3, 5), (3, 16), 9415725),
    ("Roland Garros", "Paris, FRA", "Clay", "Grand Slam", (5, 25), (6, 8), 56352000),
    ("Wimbledon", "London, GBR", "Grass", "Grand Slam", (6, 30), (7, 13), 53500000),
    ("US Open", "New York, USA", "Hard", "Grand Slam", (8, 24), (9, 7), 75000000),
    ("ATP Finals", "Turin, ITA", "Hard", "ATP Finals", (11, 9), (11, 16), 15250000),
)


def snapshot_players() -> list[ScrapedPlayer]:
    return [
        ScrapedPlayer(name=name, ranking=ranking, points=points, country=country)
        for ranking, name, country, points in SNAPSHOT_PLAYERS
    ]


def snapshot_tournaments(year: int) -> list[ScrapedTournament]:
    """The fixed calendar placed in ``year`` so statuses stay meaningful."""
    return [
        ScrapedTournament(
            name=name,
            location=location,
            surface=surface,
            category=category,
            start_date=date(year, *start),
            end_date=date(year, *end),
            prize_money=prize_money,
        )
        for name, location, surface, category, start, end, prize_money in SNAPSHOT_TOURNAMENTS
    ]
