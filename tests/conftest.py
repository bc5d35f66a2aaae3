"""
Shared pytest fixtures for the feednorm test suite.

Provides inline RSS/Atom documents, factories for fake parse-tree nodes and a
``FeedNormalizer`` wired with the real feedparser client.
"""

from datetime import datetime, UTC
from types import SimpleNamespace
from typing import Any, Callable

import httpx
import pytest
import structlog

from feednorm.application.services.normalization import FeedNormalizer
from feednorm.domain import schema
from feednorm.infrastructure.feedparser_client import FeedparserClient
from feednorm.infrastructure.source import SourceResolver

RSS_DOCUMENT = b"""<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0">
  <channel>
    <title>Example Channel</title>
    <link>https://example.com/</link>
    <description>Channel description</description>
    <language>en-us</language>
    <copyright>Copyright 2024 Example</copyright>
    <pubDate>Mon, 01 Jan 2024 08:00:00 GMT</pubDate>
    <category domain="https://example.com/taxonomy">News</category>
    <image>
      <url>https://example.com/logo.png</url>
      <title>Example logo</title>
      <link>https://example.com/</link>
    </image>
    <item>
      <title>First item</title>
      <link>https://example.com/items/1</link>
      <description>First summary</description>
      <author>alice@example.com (Alice)</author>
      <category>Tech</category>
      <guid>https://example.com/items/1</guid>
      <pubDate>Mon, 01 Jan 2024 10:00:00 GMT</pubDate>
      <enclosure url="https://example.com/media/1.mp3" type="audio/mpeg" length="12345"/>
    </item>
    <item>
      <title>Second item</title>
      <link>https://example.com/items/2</link>
      <description>Second summary</description>
      <guid>https://example.com/items/2</guid>
      <pubDate>Tue, 02 Jan 2024 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Third item</title>
      <link>https://example.com/items/3</link>
      <pubDate>Wed, 03 Jan 2024 10:00:00 GMT</pubDate>
      <enclosure url="https://example.com/media/3a.mp3" type="audio/mpeg" length="100"/>
      <enclosure url="https://example.com/media/3b.ogg" type="audio/ogg" length="0"/>
    </item>
  </channel>
</rss>
"""

ATOM_DOCUMENT = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <subtitle>Atom subtitle</subtitle>
  <id>urn:uuid:feed-1</id>
  <link href="https://example.org/" rel="alternate" type="text/html" hreflang="en"/>
  <link href="https://example.org/feed.atom" rel="self" type="application/atom+xml"/>
  <updated>2024-02-01T12:00:00Z</updated>
  <rights>CC-BY</rights>
  <author>
    <name>Bob</name>
    <email>bob@example.org</email>
    <uri>https://example.org/bob</uri>
  </author>
  <contributor>
    <name>Carol</name>
  </contributor>
  <entry>
    <title>Entry one</title>
    <id>urn:uuid:entry-1</id>
    <link href="https://example.org/1" rel="alternate"/>
    <published>2024-02-01T09:00:00Z</published>
    <updated>2024-02-01T11:00:00Z</updated>
    <summary>Summary one</summary>
    <content type="html">&lt;p&gt;Body one&lt;/p&gt;</content>
    <category term="science" scheme="https://example.org/categories"/>
    <link rel="enclosure" href="https://example.org/1.ogg" type="audio/ogg" length="2048"/>
  </entry>
  <entry>
    <title>Entry two</title>
    <id>urn:uuid:entry-2</id>
    <link href="https://example.org/2" rel="alternate"/>
    <published>2024-02-02T09:00:00Z</published>
    <updated>2024-02-02T09:00:00Z</updated>
  </entry>
</feed>
"""

RSS_WITHOUT_PUBDATE = b"""<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0">
  <channel>
    <title>Dateless</title>
    <item>
      <title>Dated</title>
      <pubDate>Mon, 01 Jan 2024 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Undated</title>
    </item>
  </channel>
</rss>
"""

PUBLISHED = datetime(2024, 1, 1, 10, 0, tzinfo=UTC)

_PERSON = {"email": None, "name": None, "uri": None}
_CATEGORY = {"name": "general", "taxonomy_uri": None}
_CONTENT = {"type": "text/plain", "value": "body"}
_ENCLOSURE = {"url": "https://example.com/a.mp3", "type": "audio/mpeg", "length": 0}
_LINK = {"href": "https://example.com/", "hreflang": None, "length": 0,
         "rel": None, "title": None, "type": None}
_IMAGE = {"description": None, "link": None, "title": None, "url": None}
_ENTRY = {
    "authors": None, "categories": None, "contents": None, "contributors": None,
    "enclosures": None, "description": None, "author": None, "link": None,
    "published_date": PUBLISHED, "title": None, "updated_date": None, "uri": None,
}
_FEED = {
    "authors": None, "categories": None, "contributors": None, "entries": None,
    "links": None, "image": None, "author": None, "copyright": None,
    "description": None, "encoding": None, "feed_type": None, "language": None,
    "link": None, "published_date": None, "title": None, "uri": None,
}


def _node_factory(defaults: dict[str, Any]) -> Callable[..., SimpleNamespace]:
    def _make(**overrides: Any) -> SimpleNamespace:
        unknown = set(overrides) - set(defaults)
        assert not unknown, f"not a node accessor: {sorted(unknown)}"
        return SimpleNamespace(**{**defaults, **overrides})
    return _make


@pytest.fixture(autouse=True)
def _contracts_unchecked():
    """Every test starts and ends with advisory contract checking switched off."""
    schema.unstrument_all()
    yield
    schema.unstrument_all()


@pytest.fixture
def logger():
    return structlog.get_logger("feednorm.tests")


@pytest.fixture
def make_person():
    return _node_factory(_PERSON)


@pytest.fixture
def make_category():
    return _node_factory(_CATEGORY)


@pytest.fixture
def make_content():
    return _node_factory(_CONTENT)


@pytest.fixture
def make_enclosure():
    return _node_factory(_ENCLOSURE)


@pytest.fixture
def make_link():
    return _node_factory(_LINK)


@pytest.fixture
def make_image():
    return _node_factory(_IMAGE)


@pytest.fixture
def make_entry():
    return _node_factory(_ENTRY)


@pytest.fixture
def make_feed():
    return _node_factory(_FEED)


def _unexpected_request(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected HTTP request to {request.url}")


@pytest.fixture
def http_handler() -> Callable[[httpx.Request], httpx.Response]:
    """Override in a test module to serve canned HTTP responses."""
    return _unexpected_request


@pytest.fixture
def resolver(logger, http_handler):
    return SourceResolver(
        logger=logger,
        client_factory=lambda: httpx.Client(
            transport=httpx.MockTransport(http_handler), follow_redirects=True),
    )


@pytest.fixture
def parser_client(logger):
    return FeedparserClient(logger=logger)


@pytest.fixture
def normalizer(resolver, parser_client, logger):
    return FeedNormalizer(sources=resolver, parser=parser_client, logger=logger)
