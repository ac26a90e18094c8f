"""
City endpoints for API v1.

These routes expose the CRUD API for cities.  Validation and lookup
failures are raised by :class:`CityService` as domain errors and
rendered by the exception handlers registered in ``main``, so the
handlers below only deal with the success path.

The ``city_id`` path parameter is accepted as a string and resolved by
the service: an id that is not an integer cannot match any city and
yields 404, the same as an unknown numeric id.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, status

from city_crud_api.app.schemas.city import (
    CityCreate,
    CityDeleted,
    CityRead,
    CityUpdate,
    ErrorResponse,
)
from city_crud_api.app.services.city_service import CityService

router = APIRouter()

NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}
BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}


def get_city_service(request: Request) -> CityService:
    """Return the service bound to the running application."""
    return request.app.state.city_service


@router.get("", response_model=List[CityRead])
async def list_cities(service: CityService = Depends(get_city_service)) -> List[CityRead]:
    """Return all cities in insertion order."""
    return service.list_cities()


@router.get("/{city_id}", response_model=CityRead, responses=NOT_FOUND)
async def get_city(city_id: str, service: CityService = Depends(get_city_service)) -> CityRead:
    """Retrieve a single city by ID."""
    return service.get_city(city_id)


@router.post(
    "",
    response_model=CityRead,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST,
)
async def create_city(
    city_in: CityCreate,
    service: CityService = Depends(get_city_service),
) -> CityRead:
    """Create a new city from ``name`` and ``country``; both are trimmed."""
    return service.create_city(city_in.name, city_in.country)


@router.put("/{city_id}", response_model=CityRead, responses={**BAD_REQUEST, **NOT_FOUND})
async def update_city(
    city_id: str,
    city_in: CityUpdate,
    service: CityService = Depends(get_city_service),
) -> CityRead:
    """Update the supplied fields of an existing city."""
    return service.update_city(city_id, city_in.model_dump(exclude_unset=True))


@router.delete("/{city_id}", response_model=CityDeleted, responses=NOT_FOUND)
async def delete_city(city_id: str, service: CityService = Depends(get_city_service)) -> CityDeleted:
    """Delete a city and echo its ID."""
    return service.delete_city(city_id)
