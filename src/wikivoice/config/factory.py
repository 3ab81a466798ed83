"""Factory functions to create components from configuration."""

from pathlib import Path

from wikivoice.config.models import (
    HistoryConfig,
    SearchConfig,
    WikipediaProviderConfig,
    WikiVoiceConfig,
)
from wikivoice.history.sql import SqlHistoryStore
from wikivoice.pipeline.orchestrator import SearchOrchestrator
from wikivoice.provider.base import SearchProvider
from wikivoice.provider.wikipedia import WikipediaProvider
from wikivoice.run_logger import RunLogger


def create_provider(config: WikipediaProviderConfig) -> SearchProvider:
    """Create a search provider from config.

    Uses explicit type matching rather than getattr.
    """
    if isinstance(config, WikipediaProviderConfig):
        return WikipediaProvider(
            api_url=config.api_url,
            user_agent=config.user_agent,
            timeout=config.timeout_seconds,
        )
    msg = f"Unknown provider config type: {type(config)}"
    raise ValueError(msg)


def create_history_store(config: HistoryConfig) -> SqlHistoryStore:
    """Create an (unopened) history store from config."""
    return SqlHistoryStore(config.url, echo=config.echo)


def create_orchestrator(
    config: SearchConfig,
    provider: SearchProvider,
    store: SqlHistoryStore | None,
    *,
    page_base_url: str,
    run_logger: RunLogger | None = None,
) -> SearchOrchestrator:
    """Create a search orchestrator from config."""
    return SearchOrchestrator(
        provider,
        store,
        max_candidates=config.max_candidates,
        persist_history=config.persist_history,
        persist_empty_results=config.persist_empty_results,
        request_timeout=config.request_timeout_seconds,
        page_base_url=page_base_url,
        run_logger=run_logger,
    )


def create_from_config(
    config: WikiVoiceConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[SearchOrchestrator, SqlHistoryStore, RunLogger | None]:
    """Create the orchestrator and its history store from root config.

    The store is returned unopened; the caller owns its lifecycle.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (orchestrator, store, run_logger).
        run_logger is None if run logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    provider = create_provider(config.provider)
    store = create_history_store(config.history)
    orchestrator = create_orchestrator(
        config.search,
        provider,
        store,
        page_base_url=config.provider.page_base_url,
        run_logger=run_logger,
    )
    return (orchestrator, store, run_logger)
