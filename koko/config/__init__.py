"""Configuration for koko."""

from koko.config.loader import load_config
from koko.config.schema import KokoConfig

__all__ = ["KokoConfig", "load_config"]
