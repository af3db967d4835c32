import logging
from typing import Optional

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session, joinedload

from courtside.chat import ChatRelay, CompletionClient, DataSnapshot, SqlConversationStore
from courtside.config import settings
from courtside.db.models import Match, Player, Statistics, Tournament
from courtside.db.session import get_db
from courtside.logging_setup import configure_logging
from courtside.services.refresh import RefreshPipeline
from courtside.statuses import normalize_status_filter

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Courtside")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    session_id: Optional[str] = Field(None, alias="sessionId")
    conversation_id: Optional[str] = Field(None, alias="conversationId")


def get_refresh_pipeline() -> RefreshPipeline:
    """Dependency returning the pipeline a trigger runs; overridden in tests."""
    return RefreshPipeline()


def get_completion_client() -> CompletionClient:
    return CompletionClient.from_settings()


def _serialize_player(player: Player) -> dict:
    return {
        "id": player.id,
        "name": player.name,
        "country": player.country,
        "ranking": player.ranking,
        "points": player.points,
        "ranking_change": player.ranking_change,
        "updated_at": player.updated_at.isoformat() if player.updated_at else None,
    }


def _serialize_tournament(tournament: Tournament) -> dict:
    return {
        "id": tournament.id,
        "name": tournament.name,
        "location": tournament.location,
        "surface": tournament.surface,
        "category": tournament.category,
        "start_date": tournament.start_date.isoformat() if tournament.start_date else None,
        "end_date": tournament.end_date.isoformat() if tournament.end_date else None,
        "status": tournament.status,
        "prize_money": tournament.prize_money,
    }


def _serialize_match(match: Match) -> dict:
    """
    Serialize a Match with its players and tournament.

    Expects player1, player2 and tournament loaded via joinedload.
    """
    return {
        "id": match.id,
        "tournament": match.tournament.name if match.tournament else None,
        "round": match.round,
        "player1": match.player1.name if match.player1 else None,
        "player2": match.player2.name if match.player2 else None,
        "winner": match.winner.name if match.winner else None,
        "status": match.status,
        "score": match.score,
        "match_date": match.match_date.isoformat() if match.match_date else None,
    }


def _match_query(db: Session):
    return db.query(Match).options(
        joinedload(Match.player1),
        joinedload(Match.player2),
        joinedload(Match.winner),
        joinedload(Match.tournament),
    )


# ----------------------------------------------------------------------
# Triggers
# ----------------------------------------------------------------------

@app.api_route("/fetch-tennis-data", methods=["GET", "POST"])
async def fetch_tennis_data(pipeline: RefreshPipeline = Depends(get_refresh_pipeline)):
    """
    Run one data refresh and return its summary.

    Source and table failures are reported inside the summary; only an
    exception escaping the pipeline produces a 500.
    """
    try:
        summary = await pipeline.run()
    except Exception as exc:
        logger.exception("Error in ATP data fetch")
        return JSONResponse(
            {
                "success": False,
                "error": str(exc),
                "message": "Failed to fetch ATP tennis data",
            },
            status_code=500,
        )
    return JSONResponse(summary.to_dict())


@app.post("/tennis-chatbot")
async def tennis_chatbot(
    payload: ChatRequest,
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
):
    message = (payload.message or "").strip()
    if not message:
        return JSONResponse({"error": "Message is required"}, status_code=400)

    relay = ChatRelay(
        store=SqlConversationStore(db),
        client=client,
        snapshot_loader=lambda: DataSnapshot.load(db),
        history_limit=settings.chat_history_limit,
    )
    answer = await relay.reply(message, payload.session_id or payload.conversation_id)
    db.commit()
    return JSONResponse({"response": answer})


# ----------------------------------------------------------------------
# Dashboard reads
# ----------------------------------------------------------------------

@app.get("/api/players")
async def api_players(
    db: Session = Depends(get_db),
    limit: int = Query(100, ge=1, le=500),
):
    players = (
        db.query(Player)
        .order_by(Player.ranking.asc().nullslast(), Player.name)
        .limit(limit)
        .all()
    )
    return JSONResponse({"players": [_serialize_player(p) for p in players]})


@app.get("/api/tournaments")
async def api_tournaments(
    db: Session = Depends(get_db),
    status: Optional[str] = Query(None, description="upcoming, ongoing or completed"),
    limit: int = Query(50, ge=1, le=200),
):
    query = db.query(Tournament)
    if status:
        query = query.filter(Tournament.status == status.strip().lower())
    tournaments = (
        query.order_by(Tournament.start_date.asc().nullslast(), Tournament.name)
        .limit(limit)
        .all()
    )
    return JSONResponse({"tournaments": [_serialize_tournament(t) for t in tournaments]})


@app.get("/api/matches")
async def api_matches(
    db: Session = Depends(get_db),
    status: Optional[str] = Query(None, description="Comma-separated statuses: scheduled,live,completed"),
    limit: int = Query(50, ge=1, le=200),
):
    raw_statuses = status.split(",") if status else None
    status_list = normalize_status_filter(raw_statuses)
    matches = (
        _match_query(db)
        .filter(Match.status.in_(status_list))
        .order_by(Match.match_date.desc().nullslast(), Match.id.desc())
        .limit(limit)
        .all()
    )
    return JSONResponse({"matches": [_serialize_match(m) for m in matches]})


@app.get("/api/matches/live")
async def api_live_matches(db: Session = Depends(get_db)):
    matches = (
        _match_query(db)
        .filter(Match.status == "live")
        .order_by(Match.id)
        .all()
    )
    return JSONResponse({"matches": [_serialize_match(m) for m in matches]})


@app.get("/api/statistics")
async def api_statistics(db: Session = Depends(get_db)):
    stats = db.query(Statistics).first()
    if stats is None:
        return JSONResponse({"statistics": None})
    return JSONResponse({
        "statistics": {
            "active_players": stats.active_players,
            "live_tournaments": stats.live_tournaments,
            "matches_today": stats.matches_today,
            "ranking_updates": stats.ranking_updates,
            "updated_at": stats.updated_at.isoformat() if stats.updated_at else None,
        }
    })


@app.get("/api/chat/{session_id}/history")
async def api_chat_history(session_id: str, db: Session = Depends(get_db)):
    turns = SqlConversationStore(db).history(session_id)
    return JSONResponse({
        "session_id": session_id,
        "messages": [t.to_dict() for t in turns],
    })


# Only for debugging
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "courtside.web.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
