# src/feednorm/domain/interfaces.py

from contextlib import AbstractContextManager
from datetime import datetime
from typing import Iterable, Protocol, runtime_checkable
from returns.result import Result

from .errors import NormalizationError
from .models import FeedSource, ParserHints, SourceHandle

# Parse-tree contract. Every format variant reaches the mappers through these
# node types only; an unset accessor returns None.


@runtime_checkable
class PersonNode(Protocol):
    @property
    def email(self) -> str | None: ...
    @property
    def name(self) -> str | None: ...
    @property
    def uri(self) -> str | None: ...


@runtime_checkable
class CategoryNode(Protocol):
    @property
    def name(self) -> str | None: ...
    @property
    def taxonomy_uri(self) -> str | None: ...


@runtime_checkable
class ContentNode(Protocol):
    @property
    def type(self) -> str | None: ...
    @property
    def value(self) -> str | None: ...


@runtime_checkable
class EnclosureNode(Protocol):
    @property
    def url(self) -> str | None: ...
    @property
    def type(self) -> str | None: ...
    @property
    def length(self) -> int | None: ...


@runtime_checkable
class LinkNode(Protocol):
    @property
    def href(self) -> str | None: ...
    @property
    def hreflang(self) -> str | None: ...
    @property
    def length(self) -> int | None: ...
    @property
    def rel(self) -> str | None: ...
    @property
    def title(self) -> str | None: ...
    @property
    def type(self) -> str | None: ...


@runtime_checkable
class ImageNode(Protocol):
    @property
    def description(self) -> str | None: ...
    @property
    def link(self) -> str | None: ...
    @property
    def title(self) -> str | None: ...
    @property
    def url(self) -> str | None: ...


@runtime_checkable
class EntryNode(Protocol):
    @property
    def authors(self) -> Iterable[PersonNode] | None: ...
    @property
    def categories(self) -> Iterable[CategoryNode] | None: ...
    @property
    def contents(self) -> Iterable[ContentNode] | None: ...
    @property
    def contributors(self) -> Iterable[PersonNode] | None: ...
    @property
    def enclosures(self) -> Iterable[EnclosureNode] | None: ...
    @property
    def description(self) -> ContentNode | None: ...
    @property
    def author(self) -> str | None: ...
    @property
    def link(self) -> str | None: ...
    @property
    def published_date(self) -> datetime | None: ...
    @property
    def title(self) -> str | None: ...
    @property
    def updated_date(self) -> datetime | None: ...
    @property
    def uri(self) -> str | None: ...


@runtime_checkable
class FeedNode(Protocol):
    @property
    def authors(self) -> Iterable[PersonNode] | None: ...
    @property
    def categories(self) -> Iterable[CategoryNode] | None: ...
    @property
    def contributors(self) -> Iterable[PersonNode] | None: ...
    @property
    def entries(self) -> Iterable[EntryNode] | None: ...
    @property
    def links(self) -> Iterable[LinkNode] | None: ...
    @property
    def image(self) -> ImageNode | None: ...
    @property
    def author(self) -> str | None: ...
    @property
    def copyright(self) -> str | None: ...
    @property
    def description(self) -> str | None: ...
    @property
    def encoding(self) -> str | None: ...
    @property
    def feed_type(self) -> str | None: ...
    @property
    def language(self) -> str | None: ...
    @property
    def link(self) -> str | None: ...
    @property
    def published_date(self) -> datetime | None: ...
    @property
    def title(self) -> str | None: ...
    @property
    def uri(self) -> str | None: ...


class SourceProvider(Protocol):
    def open(self, source: FeedSource) -> AbstractContextManager[SourceHandle]: ...


class ParserProvider(Protocol):
    def parse(
        self,
        handle: SourceHandle,
        hints: ParserHints,
    ) -> Result[FeedNode, NormalizationError]: ...
