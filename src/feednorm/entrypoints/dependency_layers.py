# src/feednorm/entrypoints/dependency_layers.py

import os
import sys
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator

import httpx
import structlog
from dependency_injector import containers, providers
from dotenv import load_dotenv
from structlog.processors import JSONRenderer, TimeStamper, StackInfoRenderer, format_exc_info

from ..application.services.normalization import FeedNormalizer
from ..domain import schema
from ..infrastructure.feedparser_client import FeedparserClient
from ..infrastructure.source import SourceResolver

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def default_config(env_file: Path | None = None) -> dict[str, Any]:
    """Builds the container config from the environment (and ``.env`` if present)."""
    load_dotenv(env_file or Path.cwd() / ".env")
    return {
        "http": {
            "timeout": os.getenv("FEEDNORM_HTTP_TIMEOUT", "30.0"),
            "user_agent": os.getenv("FEEDNORM_USER_AGENT", "feednorm/0.1"),
        },
        "parser": {
            "sanitize_html": _env_flag("FEEDNORM_SANITIZE_HTML", True),
            "resolve_relative_uris": _env_flag("FEEDNORM_RESOLVE_RELATIVE_URIS", True),
        },
        "contracts": {"validate": _env_flag("FEEDNORM_VALIDATE_CONTRACTS", False)},
        "logging": {
            "level": os.getenv("FEEDNORM_LOG_LEVEL", "INFO"),
            "file": os.getenv("FEEDNORM_LOG_FILE"),
        },
    }


def init_logging(level: str = "INFO", log_file: str | None = None) -> Iterator[None]:
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    # basicConfig is a no-op once the root logger has handlers.
    logging.root.setLevel(numeric_level)

    # RotatingFileHandler: truncates when it reaches maxBytes and overwrites
    file_handler: RotatingFileHandler | None = None
    if log_file:
        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=150 * 1024,
            backupCount=1,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        logging.root.addHandler(file_handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            TimeStamper(fmt='iso'),
            StackInfoRenderer(),
            format_exc_info,
            JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    yield

    if file_handler is not None:
        logging.root.removeHandler(file_handler)
        file_handler.close()


def init_contract_validation(enabled: bool = False) -> Iterator[bool]:
    if enabled:
        schema.instrument_all()
    yield enabled
    if enabled:
        schema.unstrument_all()


def _resolve_and_validate_http_config(
    config: dict[str, Any],
    logger: structlog.stdlib.BoundLogger,
) -> dict[str, Any]:
    assert isinstance(config['http'], dict)
    raw_timeout = config['http'].get('timeout')
    user_agent = config['http'].get('user_agent')

    problems = []
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError):
        timeout = 0.0
    if timeout <= 0:
        problems.append(f"http.timeout must be a positive number, got {raw_timeout!r}")
    if not user_agent:
        problems.append("http.user_agent is empty")

    if problems:
        logger.error("Invalid HTTP configuration", problems=problems)
        raise ValueError(f"Invalid HTTP configuration: {'; '.join(problems)}")

    return {"timeout": timeout, "user_agent": user_agent}


def _create_http_client(resolved_http_cfg: dict[str, Any]) -> httpx.Client:
    return httpx.Client(
        timeout=httpx.Timeout(resolved_http_cfg["timeout"]),
        headers={
            "User-Agent": resolved_http_cfg["user_agent"],
            "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, text/xml;q=0.8, */*;q=0.1",
        },
        follow_redirects=True,
    )


class FeedNormalizerContainer(containers.DeclarativeContainer):
    config = providers.Configuration()

    logging_setup = providers.Resource(
        init_logging,
        level=config.logging.level,
        log_file=config.logging.file,
    )

    contract_validation = providers.Resource(
        init_contract_validation,
        enabled=config.contracts.validate,
    )

    logger_provider = providers.Singleton(structlog.get_logger, "feednorm")

    resolved_http_config = providers.Factory(
        _resolve_and_validate_http_config,
        config=config,
        logger=logger_provider,
    )

    # One client per resolved URL; closed together with the source handle.
    http_client = providers.Factory(
        _create_http_client,
        resolved_http_cfg=resolved_http_config,
    )

    # --- Infrastructure Layers ---

    source_resolver = providers.Factory(
        SourceResolver,
        logger=logger_provider,
        client_factory=http_client.provider,
    )

    feed_parser = providers.Factory(
        FeedparserClient,
        logger=logger_provider,
        sanitize_html=config.parser.sanitize_html,
        resolve_relative_uris=config.parser.resolve_relative_uris,
    )

    # --- Application Layers ---

    normalizer = providers.Factory(
        FeedNormalizer,
        sources=source_resolver,
        parser=feed_parser,
        logger=logger_provider,
    )
