# src/feednorm/entrypoints/main.py

from dependency_injector.wiring import inject, Provide
from returns.result import Failure

from ..application.services.normalization import FeedNormalizer
from ..domain.models import Feed, FeedSource, ParserHints
from .dependency_layers import FeedNormalizerContainer, default_config


@inject
def normalize(
    source: FeedSource,
    content_type: str | None = None,
    lenient: bool | None = None,
    default_encoding: str | None = None,
    normalizer: FeedNormalizer = Provide[FeedNormalizerContainer.normalizer],
) -> Feed:
    """
    Parse one RSS or Atom document and return its canonical ``Feed``.

    ``source`` may be an open binary or text stream, raw bytes, a filesystem
    path, or a ``file``/``http``/``https`` URL. The three hints are handed to
    the parser untouched.

    Raises a ``NormalizationError`` subclass (``SourceUnreadable``,
    ``MalformedDocument``, ``RequiredFieldMissing`` or, with contract
    validation on, ``SchemaValidationFailure``). There is no partial result.
    """
    hints = ParserHints(
        content_type=content_type,
        lenient=lenient,
        default_encoding=default_encoding,
    )
    result = normalizer.execute(source, hints)
    if isinstance(result, Failure):
        raise result.failure()
    return result.unwrap()


container = FeedNormalizerContainer()
container.config.from_dict(default_config())
container.init_resources()
container.wire(modules=[__name__])
