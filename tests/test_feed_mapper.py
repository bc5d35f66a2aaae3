from datetime import datetime, UTC

import pytest

from feednorm.domain.errors import RequiredFieldMissing
from feednorm.domain.models import Category, EntryLink, Image, Person
from feednorm.domain.services.feed_mapper import map_feed


def test_feed_scalars_round_trip(make_feed):
    published = datetime(2024, 3, 1, tzinfo=UTC)
    node = make_feed(
        author="Editor",
        copyright="(c) Example",
        description="About",
        encoding="utf-8",
        feed_type="rss20",
        language="en-us",
        link="https://example.com/",
        published_date=published,
        title="Example",
        uri="urn:uuid:feed",
    )

    feed = map_feed(node)

    assert feed.author == "Editor"
    assert feed.copyright == "(c) Example"
    assert feed.description == "About"
    assert feed.encoding == "utf-8"
    assert feed.feed_type == "rss20"
    assert feed.language == "en-us"
    assert feed.link == "https://example.com/"
    assert feed.published_date == published
    assert feed.title == "Example"
    assert feed.uri == "urn:uuid:feed"


def test_empty_feed_node(make_feed):
    feed = map_feed(make_feed())

    assert feed.entries == ()
    assert feed.entry_links == ()
    assert feed.authors == ()
    assert feed.image is None
    assert feed.encoding is None


def test_image_absent_and_partially_present(make_feed, make_image):
    assert map_feed(make_feed(image=None)).image is None

    feed = map_feed(make_feed(image=make_image(title="Only title")))
    assert feed.image == Image(title="Only title", description=None, link=None, url=None)


def test_collections_are_mapped_through_primitives(
    make_feed, make_person, make_category, make_link,
):
    node = make_feed(
        authors=[make_person(name="A")],
        contributors=[make_person(name="B"), make_person(name="C")],
        categories=[make_category(name="news", taxonomy_uri="urn:tax")],
        links=[make_link(href="https://example.com/", rel="alternate"),
               make_link(href="https://example.com/feed", rel="self")],
    )

    feed = map_feed(node)

    assert feed.authors == (Person(name="A"),)
    assert [p.name for p in feed.contributors] == ["B", "C"]
    assert feed.categories == (Category(name="news", taxonomy_uri="urn:tax"),)
    assert feed.entry_links == (
        EntryLink(href="https://example.com/", length=0, rel="alternate"),
        EntryLink(href="https://example.com/feed", length=0, rel="self"),
    )


def test_entries_keep_source_order(make_feed, make_entry):
    node = make_feed(entries=[make_entry(title=str(i)) for i in range(5)])

    assert [e.title for e in map_feed(node).entries] == ["0", "1", "2", "3", "4"]


def test_failing_entry_is_located_by_index(make_feed, make_entry):
    node = make_feed(entries=[make_entry(), make_entry(), make_entry(published_date=None)])

    with pytest.raises(RequiredFieldMissing) as excinfo:
        map_feed(node)

    assert excinfo.value.entity == "Entry"
    assert excinfo.value.field == "published_date"
    assert excinfo.value.path == "entries[2]"
    assert "entries[2]" in str(excinfo.value)
