from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..core.service import StoreBackedService


class Person(BaseModel):
    # Wire names are camelCase (firstName); Python code uses snake_case.
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    first_name: str
    last_name: str
    nick_name: str | None = None


class PersonService(StoreBackedService[Person]):
    """Example resource: people, keyed by id."""

    model = Person
