import json
from typing import Any, Dict, List, Optional, Tuple

import pytest
import requests

from city_crud_client import (
    DEFAULT_BASE_URLS,
    UNREACHABLE_MESSAGE,
    CityCrudClient,
    base_urls_from_env,
)

PRIMARY = "http://primary.test/api/cities"
FALLBACK = "http://fallback.test/cities"


class FakeResponse:
    def __init__(self, status_code: int, body: Any = None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text
        self.content = text.encode("utf-8")

    def json(self) -> Any:
        return json.loads(self.text)


class FakeSession:
    """Replays scripted outcomes per URL prefix and records every request."""

    def __init__(self, outcomes: Dict[str, Any]) -> None:
        self.outcomes = outcomes
        self.calls: List[Tuple[str, str, Any]] = []

    def request(self, method: str, url: str, json: Any = None, **kwargs: Any) -> FakeResponse:
        self.calls.append((method, url, json))
        for prefix, outcome in self.outcomes.items():
            if url.startswith(prefix):
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise requests.ConnectionError(f"no route to {url}")


def _client(outcomes: Dict[str, Any]) -> Tuple[CityCrudClient, FakeSession]:
    session = FakeSession(outcomes)
    return CityCrudClient([PRIMARY, FALLBACK], session=session), session


def test_primary_answers() -> None:
    cities = [{"id": 1, "name": "Tokyo", "country": "Japan"}]
    client, session = _client({PRIMARY: FakeResponse(200, cities), FALLBACK: FakeResponse(200, [])})

    assert client.list_cities() == (cities, None)
    assert [url for _, url, _ in session.calls] == [PRIMARY]
    assert client.last_base_url == PRIMARY


def test_falls_back_when_primary_is_down() -> None:
    cities = [{"id": 3, "name": "Paris", "country": "France"}]
    client, session = _client(
        {PRIMARY: requests.ConnectionError("refused"), FALLBACK: FakeResponse(200, cities)}
    )

    assert client.list_cities() == (cities, None)
    assert [url for _, url, _ in session.calls] == [PRIMARY, FALLBACK]
    assert client.last_base_url == FALLBACK


def test_falls_back_on_server_error() -> None:
    client, session = _client(
        {
            PRIMARY: FakeResponse(500, {"error": "Internal Server Error", "message": "boom"}),
            FALLBACK: FakeResponse(201, {"id": 9, "name": "Rome", "country": "Italy"}),
        }
    )

    city, error = client.create_city("Rome", "Italy")

    assert error is None
    assert city["id"] == 9
    assert session.calls[1] == ("POST", FALLBACK, {"name": "Rome", "country": "Italy"})


def test_client_errors_are_final() -> None:
    client, session = _client(
        {
            PRIMARY: FakeResponse(404, {"error": "Resource Not Found", "message": "City with ID 5 does not exist."}),
            FALLBACK: FakeResponse(200, {"id": 5, "name": "x", "country": "y"}),
        }
    )

    city, error = client.get_city(5)

    assert city is None
    assert error == {"status_code": 404, "message": "City with ID 5 does not exist."}
    assert [url for _, url, _ in session.calls] == [f"{PRIMARY}/5"]


def test_laravel_style_error_body() -> None:
    client, _ = _client({PRIMARY: FakeResponse(404, {"error": "City not found"})})

    ok, error = client.delete_city(12)

    assert not ok
    assert error["message"] == "City not found"


def test_all_candidates_unreachable() -> None:
    client, session = _client({})

    cities, error = client.list_cities()

    assert cities == []
    assert error == {"status_code": None, "message": UNREACHABLE_MESSAGE}
    assert len(session.calls) == 2


def test_all_candidates_failing_reports_last_server_message() -> None:
    client, _ = _client(
        {
            PRIMARY: requests.Timeout("slow"),
            FALLBACK: FakeResponse(503, text="Service Unavailable"),
        }
    )

    _, error = client.get_city(1)

    assert error == {"status_code": 503, "message": "Service Unavailable"}


def test_update_sends_only_given_fields() -> None:
    client, session = _client({PRIMARY: FakeResponse(200, {"id": 2, "name": "Kyiv", "country": "Ukraine"})})

    city, error = client.update_city(2, name="Kyiv")

    assert error is None
    assert city["name"] == "Kyiv"
    assert session.calls == [("PUT", f"{PRIMARY}/2", {"name": "Kyiv"})]


def test_delete_success() -> None:
    client, _ = _client({PRIMARY: FakeResponse(200, {"message": "City deleted successfully", "id": 4})})

    assert client.delete_city(4) == (True, None)


def test_list_rejects_unexpected_payload() -> None:
    client, _ = _client({PRIMARY: FakeResponse(200, {"cities": []})})

    cities, error = client.list_cities()

    assert cities == []
    assert error is not None


def test_base_urls_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CITY_API_BASES", " http://a/cities , ,http://b/cities/ ")
    assert base_urls_from_env() == ["http://a/cities", "http://b/cities/"]

    monkeypatch.delenv("CITY_API_BASES")
    assert base_urls_from_env() == list(DEFAULT_BASE_URLS)


def test_base_urls_are_normalised_and_required() -> None:
    client = CityCrudClient(["http://b/cities/"], session=FakeSession({}))
    assert client.base_urls == ["http://b/cities"]

    with pytest.raises(ValueError):
        CityCrudClient([], session=FakeSession({}))


def test_accepted_request_with_unreadable_body_is_not_replayed() -> None:
    client, session = _client(
        {
            PRIMARY: FakeResponse(201, text="<html>created</html>"),
            FALLBACK: FakeResponse(201, {"id": 1, "name": "Rome", "country": "Italy"}),
        }
    )

    city, error = client.create_city("Rome", "Italy")

    assert city is None
    assert error == {"status_code": 201, "message": "Server returned an invalid response."}
    assert [url for _, url, _ in session.calls] == [PRIMARY]
    assert client.last_base_url == PRIMARY
