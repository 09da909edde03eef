from __future__ import annotations

import pytest

from memrest.api import RestApp
from memrest.core import ServiceRegistry
from memrest.services import PersonService


@pytest.fixture
def persons() -> PersonService:
    return PersonService()


@pytest.fixture
def rest_app(persons: PersonService) -> RestApp:
    return RestApp(ServiceRegistry({"persons": persons}), timeout=2.0)


@pytest.fixture
def client(rest_app: RestApp):
    from fastapi.testclient import TestClient

    from memrest.runtime.app import create_app

    with TestClient(create_app(rest_app)) as c:
        yield c
