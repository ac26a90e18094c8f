"""
City storage backends.

``CityStore`` is the interface the service layer works against: an
insertion‑ordered collection of :class:`CityRecord` objects with
append, find, replace and remove operations.  Ids are allocated by the
store itself from a monotonic counter and are never reused within the
store's lifetime, even after deletes.

Two implementations are provided:

* :class:`InMemoryCityStore` keeps records in a Python list for the
  lifetime of the process.  This is the default.
* :class:`SQLiteCityStore` keeps records in a single ``cities`` table
  of an SQLite database file.

Neither store synchronises access on its own; :class:`CityService`
serialises every operation with a lock.
"""

from __future__ import annotations

import os
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, replace as dc_replace
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .config import Settings


@dataclass
class CityRecord:
    """A stored city."""

    id: int
    name: str
    country: str


class CityStore(ABC):
    """Interface over the city collection."""

    @abstractmethod
    def all(self) -> List[CityRecord]:
        """Return every record in insertion order."""

    @abstractmethod
    def find(self, city_id: int) -> Optional[CityRecord]:
        """Return the record with ``city_id`` or ``None``."""

    @abstractmethod
    def append(self, name: str, country: str) -> CityRecord:
        """Allocate the next id, store a new record and return it."""

    @abstractmethod
    def replace(self, record: CityRecord) -> bool:
        """Overwrite the record with the same id in place.

        Returns ``False`` if no such record exists.
        """

    @abstractmethod
    def remove(self, city_id: int) -> bool:
        """Remove the record with ``city_id``.

        Returns ``True`` if a record was removed, ``False`` otherwise.
        """

    @abstractmethod
    def clear(self) -> None:
        """Remove every record."""

    def __len__(self) -> int:
        return len(self.all())


class InMemoryCityStore(CityStore):
    """List‑backed store; contents are lost when the process exits."""

    def __init__(self, records: Optional[Iterable[CityRecord]] = None) -> None:
        self._cities: List[CityRecord] = [dc_replace(r) for r in records or []]
        ids = [r.id for r in self._cities]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate city ids in initial records")
        self._next_id = max(ids, default=0) + 1

    def _index_of(self, city_id: int) -> int:
        for index, city in enumerate(self._cities):
            if city.id == city_id:
                return index
        return -1

    def all(self) -> List[CityRecord]:
        # Copies, so callers cannot mutate stored records behind our back
        return [dc_replace(city) for city in self._cities]

    def find(self, city_id: int) -> Optional[CityRecord]:
        index = self._index_of(city_id)
        if index == -1:
            return None
        return dc_replace(self._cities[index])

    def append(self, name: str, country: str) -> CityRecord:
        record = CityRecord(id=self._next_id, name=name, country=country)
        self._next_id += 1
        self._cities.append(record)
        return dc_replace(record)

    def replace(self, record: CityRecord) -> bool:
        index = self._index_of(record.id)
        if index == -1:
            return False
        self._cities[index] = dc_replace(record)
        return True

    def remove(self, city_id: int) -> bool:
        index = self._index_of(city_id)
        if index == -1:
            return False
        del self._cities[index]
        return True

    def clear(self) -> None:
        # The id counter keeps running so old ids are never handed out again
        self._cities.clear()

    def __len__(self) -> int:
        return len(self._cities)


class SQLiteCityStore(CityStore):
    """Store backed by an SQLite database file.

    A new connection is opened for every operation, so the store can be
    used from FastAPI's worker threads.  ``AUTOINCREMENT`` guarantees
    that ids of deleted rows are not reused, and ordering by id yields
    insertion order.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._init_schema()

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        # Return rows as dict‑like objects keyed by column name
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, commit on success and always close the connection."""
        conn = self._get_connection()
        try:
            yield conn.cursor()
            conn.commit()
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS cities (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    country TEXT NOT NULL
                )
                """
            )

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> CityRecord:
        return CityRecord(id=row["id"], name=row["name"], country=row["country"])

    def all(self) -> List[CityRecord]:
        with self._cursor() as cursor:
            rows = cursor.execute("SELECT id, name, country FROM cities ORDER BY id ASC").fetchall()
        return [self._row_to_record(row) for row in rows]

    def find(self, city_id: int) -> Optional[CityRecord]:
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT id, name, country FROM cities WHERE id = ?",
                (city_id,),
            ).fetchone()
        return self._row_to_record(row) if row else None

    def append(self, name: str, country: str) -> CityRecord:
        with self._cursor() as cursor:
            cursor.execute(
                "INSERT INTO cities (name, country) VALUES (?, ?)",
                (name, country),
            )
            city_id = cursor.lastrowid
        return CityRecord(id=city_id, name=name, country=country)

    def replace(self, record: CityRecord) -> bool:
        with self._cursor() as cursor:
            cursor.execute(
                "UPDATE cities SET name = ?, country = ? WHERE id = ?",
                (record.name, record.country, record.id),
            )
            return cursor.rowcount > 0

    def remove(self, city_id: int) -> bool:
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM cities WHERE id = ?", (city_id,))
            return cursor.rowcount > 0

    def clear(self) -> None:
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM cities")

    def __len__(self) -> int:
        with self._cursor() as cursor:
            row = cursor.execute("SELECT COUNT(*) AS total FROM cities").fetchone()
        return row["total"]


def build_store(settings: Settings) -> CityStore:
    """Create the store selected by ``settings.store_backend``."""
    backend = settings.store_backend.lower()
    if backend == "memory":
        return InMemoryCityStore()
    if backend == "sqlite":
        db_path = settings.database_url
        if not os.path.isabs(db_path):
            db_path = str(Path(db_path).resolve())
        return SQLiteCityStore(db_path)
    raise ValueError(f"Unknown store backend: {settings.store_backend!r}")
