# src/feednorm/infrastructure/feedparser_tree.py
"""
Read-only views over a ``feedparser`` result that satisfy the node protocols
in ``domain.interfaces``.

feedparser already folds RSS and Atom variants onto one key vocabulary
(``summary_detail``, ``tags``, ``rights``, ``subtitle`` ...). These views only
rename keys, convert UTC ``struct_time`` values to aware datetimes and turn
``length`` attributes into integers.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Any, Mapping


def _text(raw: Mapping[str, Any], key: str) -> str | None:
    value = raw.get(key)
    return value if isinstance(value, str) else None


def _timestamp(raw: Mapping[str, Any], key: str) -> datetime | None:
    # Plain dict lookup: FeedParserDict answers a missing updated_parsed
    # with published_parsed.
    value = dict.get(raw, key) if isinstance(raw, dict) else raw.get(key)
    if value is None:
        return None
    return datetime.fromtimestamp(calendar.timegm(value), tz=UTC)


def _length(raw: Mapping[str, Any]) -> int:
    # feedparser keeps the attribute as text; a missing or garbled one reads as 0.
    try:
        return int(raw.get("length") or 0)
    except (TypeError, ValueError):
        return 0


def _nodes(raw: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    return [item for item in raw.get(key) or () if isinstance(item, Mapping)]


def _node(raw: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = raw.get(key)
    return value if isinstance(value, Mapping) else None


@dataclass(slots=True, frozen=True)
class FeedparserPerson:
    raw: Mapping[str, Any]

    @property
    def email(self) -> str | None:
        return _text(self.raw, "email")

    @property
    def name(self) -> str | None:
        return _text(self.raw, "name")

    @property
    def uri(self) -> str | None:
        return _text(self.raw, "href")


@dataclass(slots=True, frozen=True)
class FeedparserCategory:
    raw: Mapping[str, Any]

    @property
    def name(self) -> str | None:
        return _text(self.raw, "term")

    @property
    def taxonomy_uri(self) -> str | None:
        return _text(self.raw, "scheme")


@dataclass(slots=True, frozen=True)
class FeedparserContent:
    raw: Mapping[str, Any]

    @property
    def type(self) -> str | None:
        return _text(self.raw, "type")

    @property
    def value(self) -> str | None:
        return _text(self.raw, "value")


@dataclass(slots=True, frozen=True)
class FeedparserEnclosure:
    raw: Mapping[str, Any]

    @property
    def url(self) -> str | None:
        return _text(self.raw, "href")

    @property
    def type(self) -> str | None:
        return _text(self.raw, "type")

    @property
    def length(self) -> int:
        return _length(self.raw)


@dataclass(slots=True, frozen=True)
class FeedparserLink:
    raw: Mapping[str, Any]

    @property
    def href(self) -> str | None:
        return _text(self.raw, "href")

    @property
    def hreflang(self) -> str | None:
        return _text(self.raw, "hreflang")

    @property
    def length(self) -> int:
        return _length(self.raw)

    @property
    def rel(self) -> str | None:
        return _text(self.raw, "rel")

    @property
    def title(self) -> str | None:
        return _text(self.raw, "title")

    @property
    def type(self) -> str | None:
        return _text(self.raw, "type")


@dataclass(slots=True, frozen=True)
class FeedparserImage:
    raw: Mapping[str, Any]

    @property
    def description(self) -> str | None:
        return _text(self.raw, "description")

    @property
    def link(self) -> str | None:
        return _text(self.raw, "link")

    @property
    def title(self) -> str | None:
        return _text(self.raw, "title")

    @property
    def url(self) -> str | None:
        return _text(self.raw, "href")


@dataclass(slots=True, frozen=True)
class FeedparserEntry:
    raw: Mapping[str, Any]

    @property
    def authors(self) -> list[FeedparserPerson]:
        return [FeedparserPerson(a) for a in _nodes(self.raw, "authors")]

    @property
    def categories(self) -> list[FeedparserCategory]:
        return [FeedparserCategory(t) for t in _nodes(self.raw, "tags")]

    @property
    def contents(self) -> list[FeedparserContent]:
        return [FeedparserContent(c) for c in _nodes(self.raw, "content")]

    @property
    def contributors(self) -> list[FeedparserPerson]:
        return [FeedparserPerson(c) for c in _nodes(self.raw, "contributors")]

    @property
    def enclosures(self) -> list[FeedparserEnclosure]:
        # FeedParserDict derives this key from links with rel="enclosure".
        return [FeedparserEnclosure(e) for e in _nodes(self.raw, "enclosures")]

    @property
    def description(self) -> FeedparserContent | None:
        detail = _node(self.raw, "summary_detail")
        return FeedparserContent(detail) if detail is not None else None

    @property
    def author(self) -> str | None:
        return _text(self.raw, "author")

    @property
    def link(self) -> str | None:
        return _text(self.raw, "link")

    @property
    def published_date(self) -> datetime | None:
        return _timestamp(self.raw, "published_parsed")

    @property
    def title(self) -> str | None:
        return _text(self.raw, "title")

    @property
    def updated_date(self) -> datetime | None:
        return _timestamp(self.raw, "updated_parsed")

    @property
    def uri(self) -> str | None:
        return _text(self.raw, "id")


@dataclass(slots=True, frozen=True)
class FeedparserFeed:
    """The whole ``feedparser.parse`` result; channel data lives under ``feed``."""
    raw: Mapping[str, Any]

    @property
    def _channel(self) -> Mapping[str, Any]:
        return _node(self.raw, "feed") or {}

    @property
    def authors(self) -> list[FeedparserPerson]:
        return [FeedparserPerson(a) for a in _nodes(self._channel, "authors")]

    @property
    def categories(self) -> list[FeedparserCategory]:
        return [FeedparserCategory(t) for t in _nodes(self._channel, "tags")]

    @property
    def contributors(self) -> list[FeedparserPerson]:
        return [FeedparserPerson(c) for c in _nodes(self._channel, "contributors")]

    @property
    def entries(self) -> list[FeedparserEntry]:
        return [FeedparserEntry(e) for e in _nodes(self.raw, "entries")]

    @property
    def links(self) -> list[FeedparserLink]:
        return [FeedparserLink(link) for link in _nodes(self._channel, "links")]

    @property
    def image(self) -> FeedparserImage | None:
        image = _node(self._channel, "image")
        return FeedparserImage(image) if image is not None else None

    @property
    def author(self) -> str | None:
        return _text(self._channel, "author")

    @property
    def copyright(self) -> str | None:
        return _text(self._channel, "rights")

    @property
    def description(self) -> str | None:
        return _text(self._channel, "subtitle")

    @property
    def encoding(self) -> str | None:
        return _text(self.raw, "encoding") or None

    @property
    def feed_type(self) -> str | None:
        return _text(self.raw, "version") or None

    @property
    def language(self) -> str | None:
        return _text(self._channel, "language")

    @property
    def link(self) -> str | None:
        return _text(self._channel, "link")

    @property
    def published_date(self) -> datetime | None:
        # Atom feeds only carry <updated> at channel level.
        return (_timestamp(self._channel, "published_parsed")
                or _timestamp(self._channel, "updated_parsed"))

    @property
    def title(self) -> str | None:
        return _text(self._channel, "title")

    @property
    def uri(self) -> str | None:
        return _text(self._channel, "id")
