"""Load KokoConfig from the environment."""

from __future__ import annotations

from loguru import logger
from pydantic import ValidationError

from koko.config.schema import KokoConfig
from koko.errors import ConfigError


def load_config(**overrides) -> KokoConfig:
    """Build the configuration, turning validation failures into ConfigError.

    Keyword overrides take precedence over environment values.
    """
    try:
        config = KokoConfig(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc

    logger.debug(
        "Configuration loaded (debug={}, github_api_url={})",
        config.debug,
        config.github_api_url,
    )
    return config
