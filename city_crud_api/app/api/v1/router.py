"""
Top‑level router for version 1 of the API.

This router aggregates resource routers under a unified prefix.  When
new resources are introduced, update this file to include their
routers.
"""

from fastapi import APIRouter

from .endpoints import cities

router = APIRouter()

# The city routes define "" and "/{city_id}", so both ``/cities`` and
# ``/cities/{id}`` are served without a trailing‑slash redirect.
router.include_router(cities.router, prefix="/cities", tags=["cities"])
