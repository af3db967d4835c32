"""HTTP API for the Courtside dashboard."""
