"""Web — FastAPI operations server."""
