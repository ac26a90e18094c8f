"""
Domain errors raised by the service layer.

Each error carries the HTTP status code and the short ``error`` label
used in the JSON body, so the exception handlers in ``main`` can render
any of them without knowing the concrete type.
"""

from typing import Any, Dict


class CityError(Exception):
    """Base class for errors that map to a client‑facing response."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class CityValidationError(CityError):
    """The request carried missing, blank or mistyped fields."""

    status_code = 400
    error = "Validation Error"


class CityNotFoundError(CityError):
    """No city with the requested id exists."""

    status_code = 404
    error = "Resource Not Found"

    def __init__(self, city_id: Any) -> None:
        super().__init__(f"City with ID {city_id} does not exist.")
        self.city_id = city_id
