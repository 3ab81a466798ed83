"""Configuration module for WikiVoice."""

from wikivoice.config.factory import (
    create_from_config,
    create_history_store,
    create_orchestrator,
    create_provider,
)
from wikivoice.config.loader import apply_env_overrides, get_default_config_path, load_config
from wikivoice.config.models import (
    HistoryConfig,
    LoggingConfig,
    SearchConfig,
    ServerConfig,
    WikipediaProviderConfig,
    WikiVoiceConfig,
)

__all__ = [
    "HistoryConfig",
    "LoggingConfig",
    "SearchConfig",
    "ServerConfig",
    "WikiVoiceConfig",
    "WikipediaProviderConfig",
    "apply_env_overrides",
    "create_from_config",
    "create_history_store",
    "create_orchestrator",
    "create_provider",
    "get_default_config_path",
    "load_config",
]
