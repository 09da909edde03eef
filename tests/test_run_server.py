from __future__ import annotations

import pytest

from memrest.runtime.config import Settings
from memrest.runtime.server import RestServer, run
from memrest.sdk import RestClient, RestClientError


@pytest.fixture
def server():
    srv = run(
        host="127.0.0.1",
        port=0,
        open_browser=False,
        data={"persons": None},
        new_server=True,
        settings=Settings(),
    )
    assert isinstance(srv, RestServer)
    yield srv
    srv.stop()


def test_client_talks_to_running_server(server: RestServer) -> None:
    client = server.client()
    assert client.is_alive()

    created = client.post("persons", {"firstName": "Ada", "lastName": "Lovelace"})
    pid = created["id"]
    assert client.get("persons", pid) == created
    assert client.list("persons") == [created]

    with pytest.raises(RestClientError) as exc:
        client.put("persons", pid, {"id": "other", "firstName": "X", "lastName": "Y"})
    assert exc.value.status_code == 400

    assert client.delete("persons", pid) == created
    assert client.get("persons", pid) is None
    assert client.delete("persons", pid) is None


def test_run_attaches_to_existing_server(server: RestServer) -> None:
    attached = run(host=server.host, port=server.port, open_browser=False, settings=Settings())

    assert isinstance(attached, RestClient)
    assert attached.base_url == f"http://{server.host}:{server.port}"


def test_run_attaches_via_env_url(server: RestServer) -> None:
    attached = run(port=0, open_browser=False, settings=Settings(attach_url=f"{server.host}:{server.port}"))
    assert isinstance(attached, RestClient)


def test_stop_releases_the_server() -> None:
    srv = run(host="127.0.0.1", port=0, open_browser=False, data={"persons": None}, new_server=True, settings=Settings())
    assert isinstance(srv, RestServer)
    assert srv.is_running

    assert srv.stop()
    assert not srv.is_running
    assert not RestClient(srv.url, timeout_s=0.2).is_alive()
