# src/feednorm/application/services/normalization.py

import os
from dataclasses import dataclass
from returns.result import Failure, Result, Success
from structlog.typing import FilteringBoundLogger

from ...domain.errors import (
    NormalizationError,
    RequiredFieldMissing,
    SchemaValidationFailure,
)
from ...domain.interfaces import FeedNode, ParserProvider, SourceProvider
from ...domain.models import Feed, FeedSource, ParserHints
from ...domain.services.feed_mapper import map_feed


def describe_source(source: FeedSource) -> str:
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    name = getattr(source, "name", None)
    return name if isinstance(name, str) and name else f"<{type(source).__name__}>"


def _map_tree(tree: FeedNode) -> Result[Feed, NormalizationError]:
    try:
        return Success(map_feed(tree))
    except (RequiredFieldMissing, SchemaValidationFailure) as e:
        return Failure(e)


@dataclass(slots=True, frozen=True)
class FeedNormalizer:
    sources: SourceProvider
    parser: ParserProvider
    logger: FilteringBoundLogger

    def execute(
        self,
        source: FeedSource,
        hints: ParserHints,
    ) -> Result[Feed, NormalizationError]:
        """
        Resolve ``source``, hand it to the parser with ``hints`` and map the
        resulting tree onto a ``Feed``. Any handle opened here is released
        before returning, on success and on failure alike.
        """
        log = self.logger.bind(source=describe_source(source))
        log.info(
            "normalization_started",
            content_type=hints.content_type,
            lenient=hints.lenient,
            default_encoding=hints.default_encoding,
        )

        try:
            with self.sources.open(source) as handle:
                parsed = self.parser.parse(handle, hints)
        except NormalizationError as e:
            log.error("normalization_failed", error=str(e), error_type=type(e).__name__)
            return Failure(e)

        outcome = parsed.bind(_map_tree)
        match outcome:
            case Success(feed):
                log.info("feed_normalized", feed_type=feed.feed_type, entries=len(feed.entries))
            case Failure(e):
                log.error("normalization_failed", error=str(e), error_type=type(e).__name__)
            case _:
                pass
        return outcome
