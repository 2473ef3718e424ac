"""Network and stdio surfaces for the relay (FastAPI app, uvicorn runners)."""
