"""Pydantic configuration models for WikiVoice components."""

from typing import Literal

from pydantic import BaseModel, Field

from wikivoice.assembler import WIKI_PAGE_BASE_URL
from wikivoice.history.sql import DEFAULT_DATABASE_URL
from wikivoice.provider.wikipedia import DEFAULT_USER_AGENT, WIKI_API_URL

# ============================================================
# Provider Config
# ============================================================


class WikipediaProviderConfig(BaseModel):
    """Configuration for WikipediaProvider."""

    type: Literal["wikipedia"] = "wikipedia"
    api_url: str = WIKI_API_URL
    page_base_url: str = WIKI_PAGE_BASE_URL
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    timeout_seconds: float = Field(default=10.0, gt=0)

    model_config = {"frozen": True}


# ============================================================
# History Config
# ============================================================


class HistoryConfig(BaseModel):
    """Configuration for the SQL history store."""

    url: str = DEFAULT_DATABASE_URL
    echo: bool = False

    model_config = {"frozen": True}


# ============================================================
# Search Config
# ============================================================


class SearchConfig(BaseModel):
    """Configuration for the search orchestrator."""

    max_candidates: int = Field(default=5, ge=1, le=50)
    persist_history: bool = True
    persist_empty_results: bool = True
    request_timeout_seconds: float | None = Field(default=20.0, gt=0)

    model_config = {"frozen": True}


# ============================================================
# Server Config
# ============================================================


class ServerConfig(BaseModel):
    """Configuration for the HTTP service."""

    host: str = "127.0.0.1"
    port: int = Field(default=5000, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for process logging and per-search run logs."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class WikiVoiceConfig(BaseModel):
    """Root configuration for WikiVoice."""

    provider: WikipediaProviderConfig = Field(default_factory=WikipediaProviderConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
