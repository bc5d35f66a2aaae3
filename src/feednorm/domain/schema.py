# src/feednorm/domain/schema.py
"""
Declarative contract for every canonical entity.

``CONTRACTS`` is the single table of field name, kind, required flag and
multiplicity. It is consulted in two places:

* ``build`` rejects construction when a required field is ``None`` and raises
  ``RequiredFieldMissing``. This is part of the normal call path.
* ``validate`` / ``checked`` run the full contract (presence, element kinds,
  sequence shape) over a mapper's output. This is advisory tooling, enabled
  process-wide with ``instrument_all()``, or for the current thread or task
  with the ``instrumented()`` context manager. It has no effect on results
  when switched off.
"""

import functools
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterator, ParamSpec, TypeVar

from pydantic import BaseModel
from returns.result import Failure, Result, Success

from .errors import RequiredFieldMissing, SchemaValidationFailure

M = TypeVar("M", bound=BaseModel)
P = ParamSpec("P")

TEXT = "text"
NUMBER = "number"
TIMESTAMP = "timestamp"


@dataclass(slots=True, frozen=True)
class FieldSpec:
    name: str
    kind: str  # TEXT, NUMBER, TIMESTAMP or an entity name.
    required: bool = False
    many: bool = False


@dataclass(slots=True, frozen=True)
class EntityContract:
    entity: str
    fields: tuple[FieldSpec, ...]

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.required)

    @property
    def names(self) -> frozenset[str]:
        return frozenset(f.name for f in self.fields)


def _text(name: str, required: bool = False) -> FieldSpec:
    return FieldSpec(name, TEXT, required=required)


def _many(name: str, kind: str) -> FieldSpec:
    return FieldSpec(name, kind, required=True, many=True)


CONTRACTS: dict[str, EntityContract] = {
    contract.entity: contract
    for contract in (
        EntityContract("Person", (
            _text("email"),
            _text("name"),
            _text("uri"),
        )),
        EntityContract("Category", (
            _text("name", required=True),
            _text("taxonomy_uri"),
        )),
        EntityContract("Content", (
            _text("type", required=True),
            _text("value", required=True),
        )),
        EntityContract("Enclosure", (
            _text("url", required=True),
            _text("type", required=True),
            FieldSpec("length", NUMBER, required=True),
        )),
        EntityContract("EntryLink", (
            _text("href", required=True),
            _text("hreflang"),
            FieldSpec("length", NUMBER, required=True),
            _text("rel"),
            _text("title"),
            _text("type"),
        )),
        EntityContract("Image", (
            _text("description"),
            _text("link"),
            _text("title"),
            _text("url"),
        )),
        EntityContract("Entry", (
            _many("authors", "Person"),
            _many("categories", "Category"),
            _many("contents", "Content"),
            _many("contributors", "Person"),
            _many("enclosures", "Enclosure"),
            FieldSpec("description", "Content"),
            _text("author"),
            _text("link"),
            FieldSpec("published_date", TIMESTAMP, required=True),
            _text("title"),
            FieldSpec("updated_date", TIMESTAMP),
            _text("uri"),
        )),
        EntityContract("Feed", (
            _many("authors", "Person"),
            _many("categories", "Category"),
            _many("contributors", "Person"),
            _many("entries", "Entry"),
            _many("entry_links", "EntryLink"),
            FieldSpec("image", "Image"),
            _text("author"),
            _text("copyright"),
            _text("description"),
            _text("encoding"),
            _text("feed_type"),
            _text("language"),
            _text("link"),
            FieldSpec("published_date", TIMESTAMP),
            _text("title"),
            _text("uri"),
        )),
    )
}


def build(model: type[M], **values: Any) -> M:
    """Construct ``model`` after checking the contract's required fields."""
    contract = CONTRACTS[model.__name__]
    for name in contract.required:
        if values.get(name) is None:
            raise RequiredFieldMissing(model.__name__, name)
    return model(**values)


def _conforms(kind: str, value: Any) -> bool:
    match kind:
        case "text":
            return isinstance(value, str)
        case "number":
            return isinstance(value, int) and not isinstance(value, bool) and value >= 0
        case "timestamp":
            return isinstance(value, datetime)
        case _:
            return isinstance(value, BaseModel) and type(value).__name__ == kind


def violations(entity: BaseModel, path: str | None = None) -> list[str]:
    name = type(entity).__name__
    where = path or name
    contract = CONTRACTS.get(name)
    if contract is None:
        return [f"{where}: no contract declared for {name}"]

    found: list[str] = []
    for spec in contract.fields:
        value = getattr(entity, spec.name, None)
        field_path = f"{where}.{spec.name}"
        if value is None:
            if spec.required:
                found.append(f"{field_path}: required field is absent")
            continue

        if spec.many:
            if not isinstance(value, (tuple, list)):
                found.append(f"{field_path}: expected an ordered sequence")
                continue
            items = [(f"{field_path}[{i}]", item) for i, item in enumerate(value)]
        else:
            items = [(field_path, value)]

        for item_path, item in items:
            if not _conforms(spec.kind, item):
                found.append(
                    f"{item_path}: expected {spec.kind}, got {type(item).__name__}")
            elif isinstance(item, BaseModel):
                found.extend(violations(item, item_path))
    return found


def validate(entity: M) -> Result[M, SchemaValidationFailure]:
    found = violations(entity)
    if found:
        return Failure(SchemaValidationFailure(type(entity).__name__, found))
    return Success(entity)


# Process-wide default for advisory output checking.
_instrumented: bool = False
# Scoped override set by instrumented(); None defers to the default.
_override: ContextVar[bool | None] = ContextVar("contract_checking", default=None)


def instrument_all() -> None:
    global _instrumented
    _instrumented = True


def unstrument_all() -> None:
    global _instrumented
    _instrumented = False


def is_instrumented() -> bool:
    override = _override.get()
    return _instrumented if override is None else override


@contextmanager
def instrumented(enabled: bool = True) -> Iterator[None]:
    token = _override.set(enabled)
    try:
        yield
    finally:
        _override.reset(token)


def checked(mapper: Callable[P, M]) -> Callable[P, M]:
    """Validate the mapper's return value against its contract when instrumented."""

    @functools.wraps(mapper)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> M:
        result = mapper(*args, **kwargs)
        if not is_instrumented():
            return result
        outcome = validate(result)
        if isinstance(outcome, Failure):
            raise outcome.failure()
        return result

    return wrapper
