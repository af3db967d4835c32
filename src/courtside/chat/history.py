"""Session-keyed conversation storage backed by the conversation_history table."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from courtside.db.models import CHAT_ROLES, ConversationTurn


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


class ConversationStore(Protocol):
    """Append-only transcript per session id."""

    def append(self, session_id: str, role: str, content: str) -> None: ...

    def recent(self, session_id: str, limit: int) -> list[ChatMessage]: ...

    def history(self, session_id: str) -> list[ChatMessage]: ...


class SqlConversationStore:
    """ConversationStore over a SQLAlchemy session; the caller commits."""

    def __init__(self, session: Session):
        self.session = session

    def append(self, session_id: str, role: str, content: str) -> None:
        if role not in CHAT_ROLES:
            raise ValueError(f"Unknown chat role: {role}")
        self.session.add(ConversationTurn(
            session_id=session_id,
            role=role,
            content=content,
            created_at=datetime.now(timezone.utc).replace(tzinfo=None),
        ))
        self.session.flush()

    def recent(self, session_id: str, limit: int) -> list[ChatMessage]:
        """The last ``limit`` turns, oldest first."""
        if limit <= 0:
            return []
        rows = self.session.scalars(
            select(ConversationTurn)
            .where(ConversationTurn.session_id == session_id)
            .order_by(ConversationTurn.created_at.desc(), ConversationTurn.id.desc())
            .limit(limit)
        ).all()
        return [ChatMessage(role=r.role, content=r.content) for r in reversed(rows)]

    def history(self, session_id: str) -> list[ChatMessage]:
        rows = self.session.scalars(
            select(ConversationTurn)
            .where(ConversationTurn.session_id == session_id)
            .order_by(ConversationTurn.created_at, ConversationTurn.id)
        ).all()
        return [ChatMessage(role=r.role, content=r.content) for r in rows]
