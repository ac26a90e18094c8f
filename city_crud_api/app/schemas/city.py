"""
Pydantic models for city data.

``CityCreate`` and ``CityUpdate`` declare both fields optional so that
a request with a missing field reaches the service, which reports
exactly which field is wrong.  Values that are not strings are still
rejected here by pydantic and rendered as a validation error.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CityCreate(BaseModel):
    """Schema for creating a city."""

    name: Optional[str] = Field(None, example="Addis Ababa")
    country: Optional[str] = Field(None, example="Ethiopia")


class CityUpdate(BaseModel):
    """Schema for updating a city.

    Both fields are optional; at least one must be provided and only
    provided fields are changed.
    """

    name: Optional[str] = None
    country: Optional[str] = None


class CityRead(BaseModel):
    """Schema for reading a city from the API."""

    id: int = Field(..., example=1)
    name: str = Field(..., example="Addis Ababa")
    country: str = Field(..., example="Ethiopia")

    model_config = {
        "from_attributes": True,
    }


class CityDeleted(BaseModel):
    message: str = Field(..., example="City deleted successfully")
    id: int


class ErrorResponse(BaseModel):
    """Body returned with every 4xx and 5xx response."""

    error: str = Field(..., example="Resource Not Found")
    message: str = Field(..., example="City with ID 7 does not exist.")
