"""
Chat relay: current data + recent turns -> completion service -> reply.

A successful exchange is appended to the store as the user turn followed by
the assistant turn. When the completion service fails the caller still gets
a useful answer (built from the data snapshot) and nothing is appended.
"""

import logging
from typing import Callable, Optional

from courtside.chat.client import CompletionClient, CompletionError
from courtside.chat.context import DataSnapshot, build_messages, fallback_response
from courtside.chat.history import ConversationStore

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default"


class ChatRelay:
    def __init__(
        self,
        store: ConversationStore,
        client: CompletionClient,
        snapshot_loader: Callable[[], DataSnapshot],
        history_limit: int = 10,
    ):
        self.store = store
        self.client = client
        self.snapshot_loader = snapshot_loader
        self.history_limit = history_limit

    async def reply(self, message: str, session_id: Optional[str] = None) -> str:
        session_id = session_id or DEFAULT_SESSION_ID
        snapshot = self.snapshot_loader()
        history = self.store.recent(session_id, self.history_limit)
        messages = build_messages(snapshot, history, message)

        try:
            answer = await self.client.complete(messages)
        except CompletionError as exc:
            logger.warning("Chat completion failed for session %s: %s", session_id, exc)
            return fallback_response(snapshot)

        self.store.append(session_id, "user", message)
        self.store.append(session_id, "assistant", answer)
        return answer
