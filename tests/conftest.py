from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from city_crud_api.app.core.config import Settings
from city_crud_api.app.core.store import InMemoryCityStore
from city_crud_api.app.main import create_app
from city_crud_api.app.services.city_service import CityService


@pytest.fixture
def store() -> InMemoryCityStore:
    return InMemoryCityStore()


@pytest.fixture
def service(store: InMemoryCityStore) -> CityService:
    return CityService(store)


@pytest.fixture
def settings() -> Settings:
    return Settings(store_backend="memory", api_prefix="", seed_demo_data=False)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
