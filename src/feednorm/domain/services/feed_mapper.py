# src/feednorm/domain/services/feed_mapper.py

from typing import Iterable

from returns.maybe import Maybe

from ..errors import RequiredFieldMissing
from ..interfaces import EntryNode, FeedNode
from ..models import Entry, Feed
from ..schema import build, checked
from .entry_mapper import map_entry
from .primitives import (
    map_category,
    map_each,
    map_entry_link,
    map_image,
    map_person,
)


def _map_entries(nodes: Iterable[EntryNode] | None) -> tuple[Entry, ...]:
    entries: list[Entry] = []
    for index, node in enumerate(nodes or ()):
        try:
            entries.append(map_entry(node))
        except RequiredFieldMissing as e:
            raise e.at(f"entries[{index}]") from e
    return tuple(entries)


@checked
def map_feed(node: FeedNode) -> Feed:
    return build(
        Feed,
        authors=map_each(map_person, node.authors),
        categories=map_each(map_category, node.categories),
        contributors=map_each(map_person, node.contributors),
        entries=_map_entries(node.entries),
        entry_links=map_each(map_entry_link, node.links),
        image=Maybe.from_optional(node.image).map(map_image).value_or(None),
        author=node.author,
        copyright=node.copyright,
        description=node.description,
        encoding=node.encoding,
        feed_type=node.feed_type,
        language=node.language,
        link=node.link,
        published_date=node.published_date,
        title=node.title,
        uri=node.uri,
    )
