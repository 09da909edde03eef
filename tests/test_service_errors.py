from __future__ import annotations

import threading

from fastapi.testclient import TestClient

from memrest.api import RestApp
from memrest.core import Promise, RestService, ServiceRegistry
from memrest.runtime.app import create_app
from memrest.runtime.web import StaticResolver
from memrest.services import Person, PersonService


class ReadOnlyPersons(RestService[Person]):
    def data_class(self) -> type[Person]:
        return Person

    def list(self) -> Promise[list[Person]]:
        return Promise.of_value([Person(id="1", firstName="A", lastName="B")])


class Exploding(RestService[Person]):
    def data_class(self) -> type[Person]:
        return Person

    def get(self, record_id: str) -> Promise[Person]:
        raise RuntimeError(f"cannot load {record_id}")

    def list(self) -> Promise[list[Person]]:
        return Promise.of_failure(ValueError("store offline"))


class Blocking(RestService[Person]):
    def __init__(self) -> None:
        self.entered = threading.Event()
        self.release = threading.Event()

    def data_class(self) -> type[Person]:
        return Person

    def get(self, record_id: str) -> Promise[Person]:
        self.entered.set()
        self.release.wait(5)
        return Promise.of_value(Person(id=record_id, firstName="A", lastName="B"))


def _client(**services: RestService) -> TestClient:
    return TestClient(create_app(RestApp(ServiceRegistry(services), timeout=1.0)))


def test_supports_reflects_overrides() -> None:
    svc = ReadOnlyPersons()
    assert svc.supports("list")
    assert not svc.supports("post")
    assert not svc.supports("get")
    assert not svc.supports("frobnicate")


def test_declined_operations_are_405() -> None:
    client = _client(things=ReadOnlyPersons())

    assert client.get("/api/things").status_code == 200

    res = client.post("/api/things", json={"firstName": "A", "lastName": "B"})
    assert res.status_code == 405
    assert res.json() == {"error": "Method Not Allowed: POST:things"}

    # Declined before the body is looked at.
    assert client.put("/api/things/1", content=b"{garbage").status_code == 405
    assert client.get("/api/things/1").json() == {"error": "Method Not Allowed: GET:things/1"}
    assert client.delete("/api/things/1").status_code == 405


def test_unexpected_service_errors_are_500() -> None:
    client = _client(boom=Exploding())

    res = client.get("/api/boom/7")
    assert res.status_code == 500
    assert res.json() == {"error": "cannot load 7"}

    res = client.get("/api/boom")
    assert res.status_code == 500
    assert res.json() == {"error": "store offline"}


def test_stop_drains_in_flight_requests() -> None:
    svc = Blocking()
    app = RestApp(ServiceRegistry({"slow": svc}), timeout=5.0)
    results = []

    worker = threading.Thread(target=lambda: results.append(app.handle("GET", "/api/slow/1")))
    worker.start()
    assert svc.entered.wait(5)
    assert app.in_flight == 1

    app.stop()
    assert app.is_stopping
    refused = app.handle("GET", "/api/slow/2")
    assert refused.status == 503
    assert not app.wait_idle(0.05)

    svc.release.set()
    assert app.wait_idle(5)
    worker.join(5)

    assert results[0].status == 200
    assert app.in_flight == 0


def test_stopping_only_refuses_api_requests(tmp_path) -> None:
    (tmp_path / "index.html").write_text("<html></html>")
    app = RestApp(ServiceRegistry({"persons": PersonService()}), StaticResolver(str(tmp_path)))

    app.stop()

    assert app.handle("GET", "/api/persons").status == 503
    page = app.handle("GET", "/")
    assert page.status == 200
    assert page.body == b"<html></html>"
