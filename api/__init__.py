"""
Module 09D - Minimal API (FastAPI)

HTTP API for the capsule simulator:
- POST /sim/generate - Commit to synthetic capsules
- POST /sim/verify - Verify a sampled proof
- POST /sim/estimate - Footprint and latency estimate
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
