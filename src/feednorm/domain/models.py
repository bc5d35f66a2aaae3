# src/feednorm/domain/models.py

import os
from dataclasses import dataclass
from datetime import datetime
from typing import IO, TypeAlias

from pydantic import BaseModel, ConfigDict

FeedSource: TypeAlias = str | os.PathLike[str] | bytes | bytearray | IO[bytes] | IO[str]


class Person(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str | None = None
    name: str | None = None
    uri: str | None = None


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    taxonomy_uri: str | None = None


class Content(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    value: str


class Enclosure(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    type: str
    length: int  # Bytes, as reported by the source.


class EntryLink(BaseModel):
    model_config = ConfigDict(frozen=True)

    href: str
    length: int
    hreflang: str | None = None
    rel: str | None = None
    title: str | None = None
    type: str | None = None


class Image(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str | None = None
    link: str | None = None
    title: str | None = None
    url: str | None = None


class Entry(BaseModel):
    model_config = ConfigDict(frozen=True)

    published_date: datetime
    authors: tuple[Person, ...] = ()
    categories: tuple[Category, ...] = ()
    contents: tuple[Content, ...] = ()
    contributors: tuple[Person, ...] = ()
    enclosures: tuple[Enclosure, ...] = ()
    description: Content | None = None
    author: str | None = None
    link: str | None = None
    title: str | None = None
    updated_date: datetime | None = None
    uri: str | None = None


class Feed(BaseModel):
    model_config = ConfigDict(frozen=True)

    authors: tuple[Person, ...] = ()
    categories: tuple[Category, ...] = ()
    contributors: tuple[Person, ...] = ()
    entries: tuple[Entry, ...] = ()
    entry_links: tuple[EntryLink, ...] = ()
    image: Image | None = None
    author: str | None = None
    copyright: str | None = None
    description: str | None = None
    encoding: str | None = None  # None when the stream declared no charset.
    feed_type: str | None = None
    language: str | None = None
    link: str | None = None
    published_date: datetime | None = None
    title: str | None = None
    uri: str | None = None


class ParserHints(BaseModel):
    """Hints handed unchanged to the parsing collaborator."""
    model_config = ConfigDict(frozen=True)

    content_type: str | None = None
    lenient: bool | None = None
    default_encoding: str | None = None


@dataclass(slots=True, frozen=True)
class SourceHandle:
    stream: IO[bytes] | IO[str]
    location: str | None = None
    content_type: str | None = None  # As reported by the transport, if any.
