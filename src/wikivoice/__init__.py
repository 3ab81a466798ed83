"""WikiVoice: voice and text search over Wikipedia with per-user history."""

from wikivoice.api import app_from_config, create_app
from wikivoice.assembler import assemble, build_link, strip_tags, truncate
from wikivoice.config import WikiVoiceConfig, create_from_config, load_config
from wikivoice.data import (
    GUEST_IDENTITY,
    NO_SUMMARY_PLACEHOLDER,
    Candidate,
    QueryCount,
    ResultRecord,
    SearchEvent,
    SearchOutcome,
    SearchStage,
    SummaryFragment,
    normalize_identity,
)
from wikivoice.errors import (
    AssemblyViolation,
    InvalidQuery,
    ProviderError,
    ProviderUnavailable,
    StoreUnavailable,
    WikiVoiceError,
)
from wikivoice.history import HistoryStore, SqlHistoryStore
from wikivoice.pipeline import SearchOrchestrator
from wikivoice.provider import SearchProvider, WikipediaProvider
from wikivoice.run_logger import RunLogger

__all__ = [
    # Models
    "Candidate",
    "QueryCount",
    "ResultRecord",
    "SearchEvent",
    "SearchOutcome",
    "SearchStage",
    "SummaryFragment",
    "GUEST_IDENTITY",
    "NO_SUMMARY_PLACEHOLDER",
    # Errors
    "AssemblyViolation",
    "InvalidQuery",
    "ProviderError",
    "ProviderUnavailable",
    "StoreUnavailable",
    "WikiVoiceError",
    # Functions
    "assemble",
    "build_link",
    "normalize_identity",
    "strip_tags",
    "truncate",
    # Protocols
    "HistoryStore",
    "SearchProvider",
    # Components
    "SearchOrchestrator",
    "SqlHistoryStore",
    "WikipediaProvider",
    # Logging
    "RunLogger",
    # Config and service
    "WikiVoiceConfig",
    "app_from_config",
    "create_app",
    "create_from_config",
    "load_config",
]
