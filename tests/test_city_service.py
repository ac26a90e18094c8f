import threading

import pytest

from city_crud_api.app.core.errors import CityNotFoundError, CityValidationError
from city_crud_api.app.core.store import InMemoryCityStore
from city_crud_api.app.schemas.city import CityRead
from city_crud_api.app.services.city_service import CityService


def test_create_trims_and_get_returns_it(service: CityService) -> None:
    rome = service.create_city(" Rome ", " Italy ")

    assert rome.name == "Rome"
    assert rome.country == "Italy"
    assert service.get_city(rome.id) == rome

    service.delete_city(rome.id)
    with pytest.raises(CityNotFoundError):
        service.get_city(rome.id)


@pytest.mark.parametrize(
    "name, country, field",
    [
        ("", "Italy", "name"),
        ("   ", "Italy", "name"),
        (None, "Italy", "name"),
        (42, "Italy", "name"),
        ("Rome", None, "country"),
        ("Rome", " \t", "country"),
        ("Rome", ["Italy"], "country"),
    ],
)
def test_create_rejects_invalid_fields(
    service: CityService, store: InMemoryCityStore, name, country, field: str
) -> None:
    with pytest.raises(CityValidationError) as exc_info:
        service.create_city(name, country)

    assert exc_info.value.message == f'Field "{field}" is required and must be a string.'
    assert exc_info.value.status_code == 400
    assert len(store) == 0


def test_get_accepts_numeric_string_ids(service: CityService) -> None:
    city = service.create_city("Lagos", "Nigeria")

    assert service.get_city(str(city.id)) == city


@pytest.mark.parametrize("city_id", ["abc", "12abc", "1.5", "", True, None, 2 ** 63, str(-(2 ** 63) - 1)])
def test_unparseable_ids_are_not_found(service: CityService, city_id) -> None:
    service.create_city("Lagos", "Nigeria")

    with pytest.raises(CityNotFoundError) as exc_info:
        service.get_city(city_id)

    assert exc_info.value.status_code == 404


def test_not_found_message(service: CityService) -> None:
    with pytest.raises(CityNotFoundError) as exc_info:
        service.get_city(99)

    assert exc_info.value.to_dict() == {
        "error": "Resource Not Found",
        "message": "City with ID 99 does not exist.",
    }


def test_update_changes_only_supplied_fields(service: CityService) -> None:
    city = service.create_city("Bombay", "India")

    updated = service.update_city(city.id, {"name": "  Mumbai "})

    assert updated == CityRead(id=city.id, name="Mumbai", country="India")
    assert service.get_city(city.id) == updated


def test_update_both_fields(service: CityService) -> None:
    city = service.create_city("Constantinople", "Byzantium")

    updated = service.update_city(city.id, {"name": "Istanbul", "country": "Turkey"})

    assert (updated.id, updated.name, updated.country) == (city.id, "Istanbul", "Turkey")


def test_update_missing_city_leaves_store_unchanged(service: CityService) -> None:
    city = service.create_city("Quito", "Ecuador")
    before = service.list_cities()

    with pytest.raises(CityNotFoundError):
        service.update_city(city.id + 1, {"name": "Elsewhere"})

    assert service.list_cities() == before


@pytest.mark.parametrize("fields", [{}, {"population": 3}, {"name": None, "country": None}])
def test_update_requires_a_field(service: CityService, fields: dict) -> None:
    city = service.create_city("Quito", "Ecuador")

    with pytest.raises(CityValidationError) as exc_info:
        service.update_city(city.id, fields)

    assert "at least one field" in exc_info.value.message


def test_update_validates_before_looking_up_the_id(service: CityService) -> None:
    with pytest.raises(CityValidationError):
        service.update_city(12345, {})


@pytest.mark.parametrize("fields", [{"name": "  "}, {"country": ""}, {"name": "Ok", "country": 5}])
def test_update_rejects_blank_or_mistyped_fields(service: CityService, fields: dict) -> None:
    city = service.create_city("Quito", "Ecuador")

    with pytest.raises(CityValidationError):
        service.update_city(city.id, fields)

    assert service.get_city(city.id) == city


def test_delete_removes_exactly_one_record(service: CityService) -> None:
    cities = [service.create_city(f"City {i}", "Land") for i in range(5)]

    result = service.delete_city(cities[2].id)

    assert result.message == "City deleted successfully"
    assert result.id == cities[2].id
    remaining = service.list_cities()
    assert len(remaining) == 4
    assert cities[2].id not in {c.id for c in remaining}
    assert remaining == [cities[0], cities[1], cities[3], cities[4]]


def test_delete_missing_city(service: CityService) -> None:
    service.create_city("Quito", "Ecuador")

    with pytest.raises(CityNotFoundError):
        service.delete_city(777)

    assert len(service.list_cities()) == 1


def test_seed_demo_data_only_fills_an_empty_store(service: CityService) -> None:
    assert service.seed_demo_data() == 3
    assert [c.name for c in service.list_cities()] == ["Tokyo", "New York", "Paris"]

    assert service.seed_demo_data() == 0
    assert len(service.list_cities()) == 3


def test_concurrent_creates_get_unique_ids(service: CityService) -> None:
    def create_many() -> None:
        for i in range(50):
            service.create_city(f"City {i}", "Land")

    threads = [threading.Thread(target=create_many) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    ids = [c.id for c in service.list_cities()]
    assert len(ids) == 400
    assert len(set(ids)) == 400
