from __future__ import annotations

import itertools
import threading

import pytest
from pydantic import ValidationError

from memrest.core import ClientError, IdMismatchError
from memrest.services import Person, PersonService


def _value(promise):
    res = promise.get_result(timeout=1)
    assert res.is_value, res
    return res.value


def test_post_without_id_assigns_unique_ids() -> None:
    svc = PersonService()
    ids = {_value(svc.post(Person(firstName=f"F{i}", lastName="L"))).id for i in range(50)}

    assert len(ids) == 50
    assert all(ids)
    assert set(svc.store.ids()) == ids


def test_post_keeps_an_explicit_id() -> None:
    svc = PersonService()
    p = _value(svc.post(Person(id="abc", firstName="A", lastName="B")))
    assert p.id == "abc"
    assert _value(svc.get("abc")) == p


def test_empty_id_is_treated_as_missing() -> None:
    svc = PersonService()
    p = _value(svc.post(Person(id="", firstName="A", lastName="B")))
    assert p.id


def test_post_none_is_absence() -> None:
    assert PersonService().post(None).get_result().is_absent


def test_read_your_write() -> None:
    svc = PersonService()
    posted = _value(svc.post(Person(firstName="Ada", lastName="Lovelace", nickName="Countess")))
    assert _value(svc.get(posted.id)) == posted


def test_delete_then_get_is_absent() -> None:
    svc = PersonService()
    posted = _value(svc.post(Person(firstName="Ada", lastName="Lovelace")))

    assert _value(svc.delete(posted.id)) == posted
    assert svc.get(posted.id).get_result().is_absent
    assert svc.delete(posted.id).get_result().is_absent


@pytest.mark.parametrize("existing", [True, False])
def test_put_with_mismatched_id_is_a_client_error(existing: bool) -> None:
    svc = PersonService()
    if existing:
        svc.post(Person(id="123", firstName="A", lastName="B"))

    res = svc.put("123", Person(id="456", firstName="X", lastName="Y")).get_result()
    assert res.is_failure
    assert isinstance(res.cause, IdMismatchError)
    assert isinstance(res.cause, ClientError)
    assert str(res.cause) == "ID mismatch: id=[123] vs item.id=[456]"


def test_put_without_id_uses_the_path_id() -> None:
    svc = PersonService()
    stored = _value(svc.put("7", Person(firstName="X", lastName="Y")))

    assert stored.id == "7"
    assert _value(svc.get("7")) == stored


def test_put_replaces_existing_record() -> None:
    svc = PersonService()
    svc.post(Person(id="1", firstName="A", lastName="B"))
    _value(svc.put("1", Person(id="1", firstName="C", lastName="D")))

    assert _value(svc.get("1")).first_name == "C"
    assert len(_value(svc.list())) == 1


def test_put_without_body_is_a_client_error() -> None:
    res = PersonService().put("1", None).get_result()
    assert isinstance(res.cause, ClientError)


def test_list_returns_every_posted_record() -> None:
    svc = PersonService()
    assert _value(svc.list()) == []

    posted = [_value(svc.post(Person(firstName=f"F{i}", lastName="L"))) for i in range(5)]
    listed = _value(svc.list())

    assert len(listed) == 5
    assert {p.id for p in listed} == {p.id for p in posted}
    for p in listed:
        assert _value(svc.get(p.id)) == p


def test_id_collisions_are_retried() -> None:
    ids = itertools.chain(["dup", "dup"], (f"id{i}" for i in itertools.count()))
    svc = PersonService(id_factory=lambda: next(ids))

    a = _value(svc.post(Person(firstName="A", lastName="A")))
    b = _value(svc.post(Person(firstName="B", lastName="B")))

    assert a.id == "dup"
    assert b.id == "id0"


def test_concurrent_posts_keep_ids_unique() -> None:
    svc = PersonService()
    out: list[str] = []
    lock = threading.Lock()

    def worker() -> None:
        for _ in range(100):
            pid = _value(svc.post(Person(firstName="F", lastName="L"))).id
            with lock:
                out.append(pid)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(out) == len(set(out)) == 800
    assert len(svc.store) == 800


def test_records_are_immutable() -> None:
    p = Person(id="1", firstName="A", lastName="B")
    with pytest.raises(ValidationError):
        p.first_name = "C"  # type: ignore[misc]
