"""YAML configuration loading utilities."""

import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from wikivoice.config.models import WikiVoiceConfig

DATABASE_URL_ENV = "WIKIVOICE_DATABASE_URL"
PORT_ENV = "PORT"


def load_config(path: Path | str, *, env: Mapping[str, str] | None = None) -> WikiVoiceConfig:
    """Load configuration from YAML file and apply environment overrides.

    Args:
        path: Path to YAML config file.
        env: Environment to read overrides from (defaults to ``os.environ``).

    Returns:
        Validated WikiVoiceConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    path = Path(path)
    with path.open() as f:
        raw = yaml.safe_load(f) or {}

    return apply_env_overrides(WikiVoiceConfig.model_validate(raw), env=env)


def apply_env_overrides(
    config: WikiVoiceConfig, *, env: Mapping[str, str] | None = None
) -> WikiVoiceConfig:
    """Replace the database URL and server port from the environment when set."""
    env = os.environ if env is None else env

    database_url = env.get(DATABASE_URL_ENV)
    if database_url:
        config = config.model_copy(
            update={"history": config.history.model_copy(update={"url": database_url})}
        )

    port = env.get(PORT_ENV)
    if port:
        server = config.server.model_validate(
            {**config.server.model_dump(), "port": port}
        )
        config = config.model_copy(update={"server": server})
    return config


def get_default_config_path() -> Path:
    """Get path to default config file."""
    return Path(__file__).parents[3] / "configs" / "default.yaml"
