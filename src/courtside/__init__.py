"""
Courtside - ATP Tennis Dashboard Backend

Keeps the dashboard's database current and answers chat questions about it.

Main components:
- scrape: Page fetching, extraction strategy chains, normalization
- services: Upsert sink, synthetic matches, statistics, refresh pipeline
- chat: Conversation store, prompt context, completion client, relay
- web: FastAPI endpoints for the refresh trigger, chatbot and dashboard reads
"""

__version__ = "1.0.0"
