"""
Top‑level router for version 1 of the API.

The availability routes are served at the application root
(``/availability``), which is the path existing clients use.
"""

from fastapi import APIRouter

from .endpoints import availability

router = APIRouter()

router.include_router(availability.router, prefix="/availability", tags=["availability"])
