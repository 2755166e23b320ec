"""HTTP API for Staybook (FastAPI)."""
