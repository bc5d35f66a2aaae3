# src/feednorm/infrastructure/feedparser_client.py

import io
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import feedparser
from feedparser.exceptions import (
    CharacterEncodingOverride,
    CharacterEncodingUnknown,
    ThingsNobodyCaresAboutButMe,
)
from returns.result import Failure, Result, Success, safe
from structlog.typing import FilteringBoundLogger

from ..domain.errors import MalformedDocument, NormalizationError, SourceUnreadable
from ..domain.interfaces import FeedNode
from ..domain.models import ParserHints, SourceHandle
from .feedparser_tree import FeedparserFeed

_ENCODING_TROUBLE = (CharacterEncodingUnknown, CharacterEncodingOverride)


def _as_utf8(content_type: str | None) -> str:
    media_type = (content_type or "").split(";")[0].strip()
    return f"{media_type or 'application/xml'}; charset=utf-8"


@safe(exceptions=(OSError, UnicodeError))
def _read_source(handle: SourceHandle) -> tuple[bytes, bool]:
    """Returns the raw document and whether it arrived as text."""
    data = handle.stream.read()
    if isinstance(data, str):
        return data.encode("utf-8"), True
    return bytes(data), False


@safe(exceptions=(UnicodeError, LookupError))
def _decode(data: bytes, encoding: str) -> str:
    return data.decode(encoding)


@dataclass(slots=True, frozen=True)
class FeedparserClient:
    logger: FilteringBoundLogger
    sanitize_html: bool = True
    resolve_relative_uris: bool = True

    def _run(self, data: bytes, headers: dict[str, str]) -> Any:
        return feedparser.parse(
            io.BytesIO(data),
            response_headers=headers or None,
            sanitize_html=self.sanitize_html,
            resolve_relative_uris=self.resolve_relative_uris,
        )

    def _headers(
        self,
        handle: SourceHandle,
        hints: ParserHints,
        is_text: bool,
    ) -> dict[str, str]:
        content_type = hints.content_type or handle.content_type
        if is_text:
            content_type = _as_utf8(content_type)
        if not content_type:
            # Any header without a content type makes feedparser assume latin-1.
            return {}

        headers = {"content-type": content_type}
        if handle.location and urlparse(handle.location).scheme in ("http", "https", "file"):
            headers["content-location"] = handle.location
        return headers

    def parse(
        self,
        handle: SourceHandle,
        hints: ParserHints,
    ) -> Result[FeedNode, NormalizationError]:
        log = self.logger.bind(location=handle.location)

        read = _read_source(handle)
        if isinstance(read, Failure):
            error = read.failure()
            log.error("source_read_failed", error=str(error))
            return Failure(SourceUnreadable(handle.location, str(error)))
        data, is_text = read.unwrap()

        headers = self._headers(handle, hints, is_text)
        parsed = self._run(data, headers)

        problem = parsed.get("bozo_exception")
        if hints.default_encoding and isinstance(problem, _ENCODING_TROUBLE):
            match _decode(data, hints.default_encoding):
                case Success(text):
                    log.info(
                        "reparsing_with_default_encoding",
                        encoding=hints.default_encoding,
                        reason=str(problem),
                    )
                    parsed = self._run(
                        text.encode("utf-8"),
                        {**headers, "content-type": _as_utf8(headers.get("content-type"))},
                    )
                case Failure(e):
                    log.warning(
                        "default_encoding_unusable",
                        encoding=hints.default_encoding,
                        error=str(e),
                    )

        return self._accept(parsed, handle, hints, log)

    def _accept(
        self,
        parsed: Any,
        handle: SourceHandle,
        hints: ParserHints,
        log: FilteringBoundLogger,
    ) -> Result[FeedNode, NormalizationError]:
        problem = parsed.get("bozo_exception") if parsed.get("bozo") else None

        if not parsed.get("version"):
            reason = str(problem) if problem is not None else "unrecognised feed format"
            log.error("malformed_document", reason=reason)
            return Failure(MalformedDocument(reason, handle.location))

        if problem is not None and not isinstance(problem, ThingsNobodyCaresAboutButMe):
            if not hints.lenient:
                log.error("malformed_document", reason=str(problem))
                return Failure(MalformedDocument(str(problem), handle.location))
            log.warning("malformed_document_tolerated", reason=str(problem))
        elif problem is not None:
            log.debug("minor_document_issue", reason=str(problem))

        log.debug("document_parsed", feed_type=parsed.get("version"),
                  encoding=parsed.get("encoding"))
        return Success(FeedparserFeed(parsed))
