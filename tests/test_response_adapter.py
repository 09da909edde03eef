from __future__ import annotations

import json
from concurrent.futures import Future

from memrest.api import render
from memrest.api.responses import CONTENT_TYPES, content_type_for
from memrest.core import ClientError, IdMismatchError, Promise, UnsupportedOperation
from memrest.services import Person


def _body(res) -> dict:
    return json.loads(res.body)


def test_value_renders_200_json_with_no_cache() -> None:
    res = render(Promise.of_value(Person(id="1", firstName="A", lastName="B")))

    assert res.status == 200
    assert res.headers["Content-Type"] == CONTENT_TYPES[".json"]
    assert res.headers["Cache-Control"] == "no-cache"
    # Absent optional fields are left out.
    assert _body(res) == {"id": "1", "firstName": "A", "lastName": "B"}


def test_list_value_renders_array() -> None:
    res = render(Promise.of_value([Person(id="1", firstName="A", lastName="B", nickName="N")]))
    assert _body(res) == [{"id": "1", "firstName": "A", "lastName": "B", "nickName": "N"}]


def test_absence_renders_404_with_context() -> None:
    res = render(Promise.absent(), context="doesnotexist")

    assert res.status == 404
    assert _body(res) == {"error": "Not found: doesnotexist"}
    assert res.headers["Cache-Control"] == "no-cache"

    assert _body(render(Promise.absent())) == {"error": "Not found"}


def test_client_errors_render_400() -> None:
    res = render(Promise.of_failure(IdMismatchError("123", "456")))
    assert res.status == 400
    assert _body(res) == {"error": "ID mismatch: id=[123] vs item.id=[456]"}

    assert render(Promise.of_failure(ClientError("nope"))).status == 400


def test_unsupported_renders_405_with_method_and_path() -> None:
    res = render(Promise.of_failure(UnsupportedOperation("post")), method="POST", path="things")

    assert res.status == 405
    assert _body(res) == {"error": "Method Not Allowed: POST:things"}


def test_unexpected_failure_renders_500() -> None:
    res = render(Promise.of_failure(RuntimeError("kaput")), method="GET", path="persons")

    assert res.status == 500
    assert _body(res) == {"error": "kaput"}
    assert res.headers["Cache-Control"] == "no-cache"


def test_never_settling_promise_times_out_as_500() -> None:
    res = render(Promise(Future()), timeout=0.01, method="GET", path="persons/1")

    assert res.status == 500
    assert "Timed out" in _body(res)["error"]


def test_content_type_lookup_by_extension() -> None:
    assert content_type_for("/index.html") == "text/html; charset=utf-8"
    assert content_type_for("app.JS") == "application/javascript"
    assert content_type_for("/data.json").startswith("application/json")
    assert content_type_for("/secret.bin") is None
    assert content_type_for("/noext") is None


def test_fields_are_snake_case_in_python_and_camel_case_on_the_wire() -> None:
    person = Person(id="1", first_name="A", last_name="B", nick_name="N")

    assert person == Person.model_validate({"id": "1", "firstName": "A", "lastName": "B", "nickName": "N"})
    assert _body(render(Promise.of_value(person))) == {"id": "1", "firstName": "A", "lastName": "B", "nickName": "N"}
