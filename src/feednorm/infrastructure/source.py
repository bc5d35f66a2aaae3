# src/feednorm/infrastructure/source.py

import io
import os
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx
from structlog.typing import FilteringBoundLogger

from ..domain.errors import SourceUnreadable
from ..domain.models import FeedSource, SourceHandle


def stream_name(stream: object) -> str | None:
    # OS-level files opened from a descriptor report an int name.
    name = getattr(stream, "name", None)
    return name if isinstance(name, str) else None


@dataclass(slots=True, frozen=True)
class SourceResolver:
    """
    Turns whatever the caller hands to ``normalize`` into a readable handle.

    Strings and paths are resolved (http/https URLs through httpx, file URLs
    and plain paths from disk) and closed again when the context exits.
    Bytes are wrapped in a buffer. Open streams are passed through untouched
    and stay owned by the caller.
    """
    logger: FilteringBoundLogger
    client_factory: Callable[[], httpx.Client]

    @contextmanager
    def open(self, source: FeedSource) -> Iterator[SourceHandle]:
        if isinstance(source, (bytes, bytearray)):
            yield SourceHandle(io.BytesIO(bytes(source)))
            return

        if not isinstance(source, (str, os.PathLike)):
            yield SourceHandle(source, stream_name(source))
            return

        location = os.fspath(source)
        try:
            parts = urlparse(location)
        except ValueError as e:
            self.logger.error("source_location_invalid", location=location, error=str(e))
            raise SourceUnreadable(location, str(e)) from e

        scheme = parts.scheme.lower()
        if scheme in ("http", "https"):
            with self._fetch(location) as handle:
                yield handle
        elif scheme == "file":
            with self._open_file(url2pathname(parts.path), location) as handle:
                yield handle
        else:
            with self._open_file(location, location) as handle:
                yield handle

    @contextmanager
    def _open_file(self, path: str, location: str) -> Iterator[SourceHandle]:
        try:
            stream = open(path, "rb")
        except (OSError, ValueError) as e:
            # ValueError: a NUL byte in the path.
            self.logger.error("source_open_failed", location=location, error=str(e))
            raise SourceUnreadable(location, str(e)) from e

        with stream:
            yield SourceHandle(stream, location)

    @contextmanager
    def _fetch(self, url: str) -> Iterator[SourceHandle]:
        log = self.logger.bind(location=url)
        with self.client_factory() as client:
            try:
                response = client.get(url)
                response.raise_for_status()
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                log.error("source_fetch_failed", error=str(e))
                raise SourceUnreadable(url, str(e)) from e

            log.info("source_fetched", status=response.status_code,
                     content_type=response.headers.get("content-type"))
            yield SourceHandle(
                io.BytesIO(response.content),
                str(response.url),
                response.headers.get("content-type"),
            )
