"""City CRUD API client.

This module defines a small client wrapper around the ``/cities`` REST
API.  Two interchangeable backends usually serve that API on different
base URLs, so the client is configured with an ordered list of
candidate base URLs and sends every request to the first candidate
that answers:

* A connection error, timeout or 5xx response moves on to the next
  candidate.
* A 2xx response is returned.  If its body cannot be parsed the
  request is reported as failed and not retried, since the backend has
  already applied it.
* A 4xx response is the backend's final answer (bad input, unknown
  id) and is returned as an error without trying other candidates.

When every candidate fails the error carries a generic "could not load
data" message, or the message of the last 5xx response if one was
received.

Like the other high‑level methods, the CRUD operations return a tuple
``(data, error)``.  On success ``error`` is ``None``; on failure
``data`` is ``None`` (or an empty list for :meth:`list_cities`) and
``error`` is a dictionary with keys ``status_code`` and ``message``.
``message`` is the text from the server's ``{"error", "message"}``
body whenever one was sent, so callers can show it to the user as is.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests


logger = logging.getLogger(__name__)

# Laravel first, then the Node backend, the same order the web UI uses.
DEFAULT_BASE_URLS: Tuple[str, ...] = (
    "http://localhost:8000/api/cities",
    "http://localhost:3000/cities",
)

UNREACHABLE_MESSAGE = "Could not load data. Is the API server running?"

Error = Dict[str, Any]


def base_urls_from_env(env_var: str = "CITY_API_BASES") -> List[str]:
    """Read a comma separated list of base URLs, falling back to the defaults."""
    raw = os.getenv(env_var, "")
    urls = [part.strip() for part in raw.split(",") if part.strip()]
    return urls or list(DEFAULT_BASE_URLS)


def _error_message(response: requests.Response) -> str:
    """Extract a human readable message from an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            if body.get(key):
                return str(body[key])
    return str(body)


class CityCrudClient:
    """Client for the city API with ordered fallback between base URLs."""

    def __init__(
        self,
        base_urls: Optional[Sequence[str]] = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ) -> None:
        """Initialise the API client.

        Args:
            base_urls: Candidate base URLs of the ``cities`` collection, in
                the order they should be tried, e.g.
                ``["http://localhost:3000/cities"]``.  Defaults to
                :func:`base_urls_from_env`.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per‑request timeout in seconds.
        """
        urls = list(base_urls) if base_urls is not None else base_urls_from_env()
        if not urls:
            raise ValueError("At least one base URL is required")
        self.base_urls = [url.rstrip("/") for url in urls]
        self.session = session or requests.Session()
        self.timeout = timeout
        # Base URL that answered the most recent request, for display only.
        self.last_base_url: Optional[str] = None

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str = "", *, json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Send one request, trying each base URL in order.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to the base URL (e.g. ``/7``).
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.
        """
        last_error: Error = {"status_code": None, "message": UNREACHABLE_MESSAGE}
        for base_url in self.base_urls:
            url = f"{base_url}{path}"
            try:
                logger.debug("Sending %s request to %s", method, url)
                response = self.session.request(
                    method=method,
                    url=url,
                    json=json_body,
                    headers={"Accept": "application/json"},
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                logger.warning("%s %s failed: %s", method, url, exc)
                continue

            if response.status_code >= 500:
                message = _error_message(response)
                logger.warning("%s %s returned %s: %s", method, url, response.status_code, message)
                last_error = {"status_code": response.status_code, "message": message}
                continue

            self.last_base_url = base_url
            if response.status_code >= 400:
                message = _error_message(response)
                logger.info("%s %s rejected (%s): %s", method, url, response.status_code, message)
                return None, {"status_code": response.status_code, "message": message}
            if not response.content:
                return None, None
            try:
                return response.json(), None
            except ValueError:
                # The backend accepted the request, so it must not be replayed elsewhere
                logger.warning("%s %s returned a non-JSON body", method, url)
                return None, {
                    "status_code": response.status_code,
                    "message": "Server returned an invalid response.",
                }

        logger.error("All API endpoints failed for %s %s: %s", method, path or "/", last_error["message"])
        return None, last_error

    # ------------------------------------------------------------------
    # City operations
    # ------------------------------------------------------------------
    def list_cities(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Retrieve all cities.

        Returns:
            A tuple ``(cities, error)``.  ``cities`` is empty on failure.
        """
        data, error = self._request("GET")
        if error:
            return [], error
        if isinstance(data, list):
            return data, None
        return [], {"status_code": None, "message": "Server returned an invalid city list."}

    def get_city(self, city_id: Any) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/{city_id}")

    def create_city(self, name: str, country: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create a city; the server assigns the id."""
        return self._request("POST", json_body={"name": name, "country": country})

    def update_city(
        self,
        city_id: Any,
        *,
        name: Optional[str] = None,
        country: Optional[str] = None,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Update a city.  Only the fields that are not ``None`` are sent."""
        payload = {key: value for key, value in (("name", name), ("country", country)) if value is not None}
        return self._request("PUT", f"/{city_id}", json_body=payload)

    def delete_city(self, city_id: Any) -> Tuple[bool, Optional[Error]]:
        """Delete a city.

        Returns:
            A tuple ``(success, error)``.
        """
        _, error = self._request("DELETE", f"/{city_id}")
        if error:
            return False, error
        return True, None
