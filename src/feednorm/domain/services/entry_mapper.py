# src/feednorm/domain/services/entry_mapper.py

from returns.maybe import Maybe

from ..interfaces import EntryNode
from ..models import Entry
from ..schema import build, checked
from .primitives import (
    map_category,
    map_content,
    map_each,
    map_enclosure,
    map_person,
)


@checked
def map_entry(node: EntryNode) -> Entry:
    """Build one canonical entry; raises RequiredFieldMissing without a publish date."""
    return build(
        Entry,
        authors=map_each(map_person, node.authors),
        categories=map_each(map_category, node.categories),
        contents=map_each(map_content, node.contents),
        contributors=map_each(map_person, node.contributors),
        enclosures=map_each(map_enclosure, node.enclosures),
        description=Maybe.from_optional(node.description).map(map_content).value_or(None),
        author=node.author,
        link=node.link,
        published_date=node.published_date,
        title=node.title,
        updated_date=node.updated_date,
        uri=node.uri,
    )
