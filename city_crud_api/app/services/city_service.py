"""
Service layer for cities.

This module validates incoming city fields and applies list, get,
create, update and delete operations to an injected
:class:`~city_crud_api.app.core.store.CityStore`.

Validation rules:

* ``name`` and ``country`` must be strings that are non‑empty after
  trimming surrounding whitespace.  Stored values are always trimmed.
* Creating a city requires both fields.
* Updating a city requires at least one of the two fields; fields that
  are not supplied keep their current value.  A supplied field that is
  blank is rejected rather than ignored.

Failures are reported by raising :class:`CityValidationError` or
:class:`CityNotFoundError`.  All operations are serialised with a
single re‑entrant lock, so concurrent requests can never interleave a
lookup and a write.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, List, Mapping

from city_crud_api.app.core.errors import CityNotFoundError, CityValidationError
from city_crud_api.app.core.store import CityRecord, CityStore
from city_crud_api.app.schemas.city import CityDeleted, CityRead

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "country")

MIN_ID = -(2 ** 63)
MAX_ID = 2 ** 63 - 1

DEMO_CITIES = (
    ("Tokyo", "Japan"),
    ("New York", "USA"),
    ("Paris", "France"),
)


def _clean_field(field: str, value: Any, message: str) -> str:
    """Return ``value`` trimmed, or raise if it is not a non‑blank string."""
    if not isinstance(value, str) or not value.strip():
        raise CityValidationError(message.format(field=field))
    return value.strip()


class CityService:
    """Validation and mutation logic for the city collection."""

    def __init__(self, store: CityStore) -> None:
        self.store = store
        self._lock = threading.RLock()

    @staticmethod
    def parse_id(city_id: Any) -> int:
        """Turn an integer or numeric string into an id.

        Anything else cannot name a stored city, so it is reported as
        not found rather than as a validation problem.
        """
        parsed = None
        if isinstance(city_id, int) and not isinstance(city_id, bool):
            parsed = city_id
        elif isinstance(city_id, str):
            try:
                parsed = int(city_id.strip(), 10)
            except ValueError:
                pass
        # Ids are signed 64-bit integers, the range SQLite can store
        if parsed is None or not MIN_ID <= parsed <= MAX_ID:
            raise CityNotFoundError(city_id)
        return parsed

    def list_cities(self) -> List[CityRead]:
        """Return every city in insertion order."""
        with self._lock:
            records = self.store.all()
        return [self._record_to_read(record) for record in records]

    def get_city(self, city_id: Any) -> CityRead:
        city_id = self.parse_id(city_id)
        with self._lock:
            record = self.store.find(city_id)
        if record is None:
            raise CityNotFoundError(city_id)
        return self._record_to_read(record)

    def create_city(self, name: Any, country: Any) -> CityRead:
        """Validate both fields and store a new city.

        The id is allocated by the store.  Nothing is stored if either
        field is invalid.
        """
        required = 'Field "{field}" is required and must be a string.'
        name = _clean_field("name", name, required)
        country = _clean_field("country", country, required)
        with self._lock:
            record = self.store.append(name, country)
        logger.info("Created city %s (%s, %s)", record.id, record.name, record.country)
        return self._record_to_read(record)

    def update_city(self, city_id: Any, fields: Mapping[str, Any]) -> CityRead:
        """Overwrite the supplied fields of an existing city.

        Fields are validated before the city is looked up, so a request
        without any usable field is a validation error even for an
        unknown id.  Keys other than ``name`` and ``country`` are
        ignored, as are fields explicitly set to ``None``.
        """
        supplied = {
            key: value
            for key, value in fields.items()
            if key in UPDATABLE_FIELDS and value is not None
        }
        if not supplied:
            raise CityValidationError(
                "Please provide at least one field to update (name or country)."
            )
        changes = {
            key: _clean_field(key, value, 'Field "{field}" must be a non-empty string.')
            for key, value in supplied.items()
        }
        city_id = self.parse_id(city_id)
        with self._lock:
            record = self.store.find(city_id)
            if record is None:
                raise CityNotFoundError(city_id)
            for key, value in changes.items():
                setattr(record, key, value)
            if not self.store.replace(record):
                raise CityNotFoundError(city_id)
        logger.info("Updated city %s: %s", city_id, changes)
        return self._record_to_read(record)

    def delete_city(self, city_id: Any) -> CityDeleted:
        city_id = self.parse_id(city_id)
        with self._lock:
            removed = self.store.remove(city_id)
        if not removed:
            raise CityNotFoundError(city_id)
        logger.info("Deleted city %s", city_id)
        return CityDeleted(message="City deleted successfully", id=city_id)

    def seed_demo_data(self) -> int:
        """Add the demo cities to an empty store.

        Returns the number of cities added; a store that already holds
        data is left untouched.
        """
        with self._lock:
            if len(self.store):
                return 0
            for name, country in DEMO_CITIES:
                self.store.append(name, country)
        logger.info("Seeded %d demo cities", len(DEMO_CITIES))
        return len(DEMO_CITIES)

    @staticmethod
    def _record_to_read(record: CityRecord) -> CityRead:
        return CityRead.model_validate(record)
