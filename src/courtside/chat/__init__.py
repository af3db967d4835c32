"""
Courtside chat - a tennis assistant grounded in the stored data.

Usage:
    from courtside.chat import ChatRelay, CompletionClient, DataSnapshot, SqlConversationStore

    relay = ChatRelay(
        store=SqlConversationStore(session),
        client=CompletionClient.from_settings(),
        snapshot_loader=lambda: DataSnapshot.load(session),
    )
    answer = await relay.reply("Who is world No. 1?", session_id="abc")
"""

from courtside.chat.client import CompletionClient, CompletionError
from courtside.chat.context import (
    DataSnapshot,
    build_messages,
    fallback_response,
    render_context,
)
from courtside.chat.history import ChatMessage, ConversationStore, SqlConversationStore
from courtside.chat.relay import DEFAULT_SESSION_ID, ChatRelay

__all__ = [
    "ChatMessage",
    "ConversationStore",
    "SqlConversationStore",
    "DataSnapshot",
    "render_context",
    "build_messages",
    "fallback_response",
    "CompletionClient",
    "CompletionError",
    "ChatRelay",
    "DEFAULT_SESSION_ID",
]
