# src/feednorm/domain/services/primitives.py

from typing import Callable, Iterable, TypeVar

from ..interfaces import (
    CategoryNode,
    ContentNode,
    EnclosureNode,
    ImageNode,
    LinkNode,
    PersonNode,
)
from ..models import Category, Content, Enclosure, EntryLink, Image, Person
from ..schema import build, checked

N = TypeVar("N")
T = TypeVar("T")


def map_each(mapper: Callable[[N], T], nodes: Iterable[N] | None) -> tuple[T, ...]:
    """Apply ``mapper`` in source order. An absent collection maps to ``()``."""
    return tuple(mapper(node) for node in nodes or ())


@checked
def map_person(node: PersonNode) -> Person:
    return build(Person, email=node.email, name=node.name, uri=node.uri)


@checked
def map_category(node: CategoryNode) -> Category:
    return build(Category, name=node.name, taxonomy_uri=node.taxonomy_uri)


@checked
def map_content(node: ContentNode) -> Content:
    return build(Content, type=node.type, value=node.value)


@checked
def map_enclosure(node: EnclosureNode) -> Enclosure:
    return build(Enclosure, url=node.url, type=node.type, length=node.length)


@checked
def map_entry_link(node: LinkNode) -> EntryLink:
    return build(
        EntryLink,
        href=node.href,
        hreflang=node.hreflang,
        length=node.length,
        rel=node.rel,
        title=node.title,
        type=node.type,
    )


@checked
def map_image(node: ImageNode) -> Image:
    return build(
        Image,
        description=node.description,
        link=node.link,
        title=node.title,
        url=node.url,
    )
