"""
Prompt assembly for the tennis chatbot.

A DataSnapshot is a plain copy of what the dashboard currently shows (top
players, tournaments, live matches, statistics). It feeds both the prompt
sent to the model and the canned reply used when the model is unavailable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from courtside.chat.history import ChatMessage
from courtside.db.models import Match, Player, Statistics, Tournament

PERSONA_PROMPT = """You are a knowledgeable tennis expert and coach with access to real-time ATP Tour data. You maintain conversation context and can discuss tennis topics in depth. Use the provided current tennis data to answer questions accurately. Be conversational, engaging, and provide specific insights about players, rankings, tournaments, and matches when available.

Key Guidelines:
- Reference specific current data when relevant
- Maintain conversation context from previous messages
- Be personable and engaging like a tennis coach
- Provide analysis and insights, not just facts
- Ask follow-up questions to keep the conversation going"""

SNAPSHOT_PLAYERS = 20
SNAPSHOT_TOURNAMENTS = 10
SNAPSHOT_LIVE_MATCHES = 5
CONTEXT_PLAYERS = 15
FALLBACK_PLAYERS = 5


@dataclass(frozen=True)
class PlayerLine:
    ranking: Optional[int]
    name: str
    country: str
    points: Optional[int]
    ranking_change: int = 0


@dataclass(frozen=True)
class TournamentLine:
    name: str
    location: str
    status: str
    surface: str
    category: str
    prize_money: Optional[int] = None


@dataclass(frozen=True)
class LiveMatchLine:
    player1: Optional[str]
    player2: Optional[str]
    tournament: Optional[str]
    round: str
    score: Optional[str]


@dataclass(frozen=True)
class StatsLine:
    active_players: int
    live_tournaments: int
    matches_today: Optional[int]
    ranking_updates: int


@dataclass
class DataSnapshot:
    players: list[PlayerLine] = field(default_factory=list)
    tournaments: list[TournamentLine] = field(default_factory=list)
    live_matches: list[LiveMatchLine] = field(default_factory=list)
    stats: Optional[StatsLine] = None
    as_of: Optional[date] = None

    @classmethod
    def load(cls, session: Session, as_of: Optional[date] = None) -> "DataSnapshot":
        players = session.scalars(
            select(Player)
            .where(Player.ranking.is_not(None))
            .order_by(Player.ranking)
            .limit(SNAPSHOT_PLAYERS)
        ).all()
        tournaments = session.scalars(
            select(Tournament)
            .order_by(Tournament.start_date.asc().nullslast(), Tournament.name)
            .limit(SNAPSHOT_TOURNAMENTS)
        ).all()
        matches = session.scalars(
            select(Match)
            .options(
                joinedload(Match.player1),
                joinedload(Match.player2),
                joinedload(Match.tournament),
            )
            .where(Match.status == "live")
            .order_by(Match.match_date.asc().nullslast(), Match.id)
            .limit(SNAPSHOT_LIVE_MATCHES)
        ).all()
        stats = session.scalars(select(Statistics).limit(1)).first()

        return cls(
            players=[
                PlayerLine(p.ranking, p.name, p.country, p.points, p.ranking_change or 0)
                for p in players
            ],
            tournaments=[
                TournamentLine(t.name, t.location, t.status, t.surface, t.category, t.prize_money)
                for t in tournaments
            ],
            live_matches=[
                LiveMatchLine(
                    m.player1.name if m.player1 else None,
                    m.player2.name if m.player2 else None,
                    m.tournament.name if m.tournament else None,
                    m.round,
                    m.score,
                )
                for m in matches
            ],
            stats=(
                StatsLine(
                    stats.active_players,
                    stats.live_tournaments,
                    stats.matches_today,
                    stats.ranking_updates,
                )
                if stats else None
            ),
            as_of=as_of or date.today(),
        )

    @property
    def ongoing_tournaments(self) -> list[TournamentLine]:
        return [t for t in self.tournaments if t.status == "ongoing"]


def _player_line(p: PlayerLine, with_change: bool = True) -> str:
    line = f"{p.ranking}. {p.name} ({p.country}) - {p.points} points"
    if with_change and p.ranking_change:
        sign = "+" if p.ranking_change > 0 else ""
        line += f" ({sign}{p.ranking_change})"
    return line


def _prize(amount: Optional[int]) -> str:
    return f"${amount:,}" if amount is not None else "N/A"


def _stat(value: Optional[int]) -> str:
    return str(value) if value is not None else "N/A"


def render_context(snapshot: DataSnapshot) -> str:
    """Render the snapshot as the data block included in every prompt."""
    players = "\n".join(
        _player_line(p) for p in snapshot.players[:CONTEXT_PLAYERS]
    ) or "No ranking data available"
    tournaments = "\n".join(
        f"{t.name} ({t.location}) - {t.status} - {t.surface} - {t.category} - Prize: {_prize(t.prize_money)}"
        for t in snapshot.tournaments
    ) or "No tournament data available"
    matches = "\n".join(
        f"{m.player1 or 'TBD'} vs {m.player2 or 'TBD'} - {m.tournament or 'Unknown'} "
        f"({m.round}) - Score: {m.score or 'Starting soon'}"
        for m in snapshot.live_matches
    ) or "No live matches currently"

    stats = snapshot.stats
    as_of = snapshot.as_of.isoformat() if snapshot.as_of else "today"
    return (
        f"Current ATP Tennis Data (as of {as_of}):\n\n"
        f"Top Players Rankings:\n{players}\n\n"
        f"Current Tournaments:\n{tournaments}\n\n"
        f"Live Matches:\n{matches}\n\n"
        "Tennis Statistics:\n"
        f"- Active Players: {_stat(stats.active_players if stats else None)}\n"
        f"- Matches Today: {_stat(stats.matches_today if stats else None)}\n"
        f"- Live Tournaments: {_stat(stats.live_tournaments if stats else None)}\n"
        f"- Recent Ranking Changes: {_stat(stats.ranking_updates if stats else None)}\n"
    )


def build_messages(
    snapshot: DataSnapshot,
    history: Sequence[ChatMessage],
    message: str,
) -> list[dict[str, str]]:
    """
    Assemble the chat-completions message list.

    Order: persona instruction, data block, prior turns (oldest first),
    the new user message.
    """
    messages = [
        {"role": "system", "content": PERSONA_PROMPT},
        {
            "role": "user",
            "content": (
                f"Current Tennis Data:\n{render_context(snapshot)}\n"
                "Please use this data to inform your responses."
            ),
        },
    ]
    messages.extend(turn.to_dict() for turn in history)
    messages.append({"role": "user", "content": message})
    return messages


def fallback_response(snapshot: DataSnapshot) -> str:
    """Canned reply built from the snapshot when the model cannot be reached."""
    top = "\n".join(
        f"{p.ranking}. {p.name} ({p.country}) - {p.points} pts"
        for p in snapshot.players[:FALLBACK_PLAYERS]
    ) or "Ranking data is not available yet."

    ongoing = snapshot.ongoing_tournaments
    if ongoing:
        live = "Live Tournaments:\n" + "\n".join(
            f"- {t.name} ({t.location})" for t in ongoing
        )
    else:
        live = "No tournaments currently live"

    return (
        "I can help you with tennis information! Here's what's happening right now:\n\n"
        f"Current Top 5 Players:\n{top}\n\n"
        f"{live}\n\n"
        "What would you like to know about tennis?"
    )
