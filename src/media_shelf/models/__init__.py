"""Configuration models for media shelf."""

from .config import (
    Config,
    DatabaseConfig,
    StorageConfig,
    VocabularyConfig,
    create_default_config,
    load_config,
    save_config,
)

__all__ = [
    "Config",
    "DatabaseConfig",
    "StorageConfig",
    "VocabularyConfig",
    "create_default_config",
    "load_config",
    "save_config",
]
