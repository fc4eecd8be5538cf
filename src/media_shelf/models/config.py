"""Configuration model for media shelf."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..exceptions import ConfigurationError

DEFAULT_HOME = Path.home() / ".local" / "share" / "media-shelf"

SUPPORTED_BACKENDS = ("sqlite", "json")

# Environment variables that override file configuration
ENV_BACKEND = "MEDIA_SHELF_BACKEND"
ENV_DB_PATH = "MEDIA_SHELF_DB_PATH"
ENV_DATA_DIR = "MEDIA_SHELF_DATA_DIR"


@dataclass
class DatabaseConfig:
    """Configuration for the SQLite database."""
    path: Path = field(default_factory=lambda: DEFAULT_HOME / "library.db")
    timeout: float = 5.0  # seconds to wait on a locked database
    foreign_keys: bool = True


@dataclass
class StorageConfig:
    """Configuration for the storage backend."""
    backend: str = "sqlite"  # "sqlite" or "json"
    data_dir: Path = field(default_factory=lambda: DEFAULT_HOME)


@dataclass
class VocabularyConfig:
    """Default status vocabularies.

    Seeded into the status table on ``init`` and used as the fixed
    vocabulary of the JSON backend.
    """
    book: List[str] = field(default_factory=lambda: ["owned", "read", "reading", "wishlist"])
    movie: List[str] = field(default_factory=lambda: ["owned", "watched", "watchlist"])

    def as_mapping(self) -> Dict[str, List[str]]:
        return {"book": list(self.book), "movie": list(self.movie)}


@dataclass
class Config:
    """Main configuration model."""
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    vocabulary: VocabularyConfig = field(default_factory=VocabularyConfig)

    @classmethod
    def default(cls) -> "Config":
        """Create a default configuration."""
        return cls()

    def validate(self) -> None:
        """Check values that the dataclasses cannot enforce."""
        if self.storage.backend not in SUPPORTED_BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend: {self.storage.backend!r}. "
                f"Supported backends are: {', '.join(SUPPORTED_BACKENDS)}"
            )
        if self.database.timeout < 0:
            raise ConfigurationError("Database timeout cannot be negative.")
        for kind, statuses in self.vocabulary.as_mapping().items():
            if not all(isinstance(s, str) and s for s in statuses):
                raise ConfigurationError(f"Vocabulary for {kind} must be a list of non-empty strings.")


def _dataclass_to_dict(obj):
    """Convert dataclass to dict recursively."""
    from dataclasses import is_dataclass, asdict
    if is_dataclass(obj):
        result = {}
        for key, value in asdict(obj).items():
            result[key] = _dataclass_to_dict(value)
        return result
    elif isinstance(obj, Path):
        return str(obj)
    elif isinstance(obj, dict):
        return {key: _dataclass_to_dict(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_dataclass_to_dict(item) for item in obj]
    else:
        return obj


def _dict_to_dataclass(data, dataclass_type):
    """Convert dict to dataclass recursively."""
    from dataclasses import is_dataclass, fields
    if not is_dataclass(dataclass_type):
        return data
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected an object for {dataclass_type.__name__}, got {type(data).__name__}"
        )

    # Get field types
    field_types = {f.name: f.type for f in fields(dataclass_type)}

    kwargs = {}
    for field_name, field_type in field_types.items():
        if field_name in data:
            if hasattr(field_type, '__dataclass_fields__'):
                # It's a dataclass
                kwargs[field_name] = _dict_to_dataclass(data[field_name], field_type)
            elif field_type is Path:
                kwargs[field_name] = Path(data[field_name]).expanduser()
            else:
                kwargs[field_name] = data[field_name]

    try:
        return dataclass_type(**kwargs)
    except TypeError as e:
        raise ConfigurationError(f"Invalid {dataclass_type.__name__} settings: {e}") from e


def apply_env_overrides(config: Config, environ: Optional[Dict[str, str]] = None) -> Config:
    """Apply environment variable overrides in place and return the config."""
    environ = os.environ if environ is None else environ

    if environ.get(ENV_BACKEND):
        config.storage.backend = environ[ENV_BACKEND].strip().lower()
    if environ.get(ENV_DB_PATH):
        config.database.path = Path(environ[ENV_DB_PATH]).expanduser()
    if environ.get(ENV_DATA_DIR):
        config.storage.data_dir = Path(environ[ENV_DATA_DIR]).expanduser()

    return config


def load_config(config_path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> Config:
    """Load configuration from a JSON file, then apply environment overrides."""
    if config_path is None:
        config = Config.default()
    else:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read configuration file {config_path}: {e}") from e

        config = _dict_to_dataclass(config_data, Config)

    apply_env_overrides(config, environ)
    config.validate()
    return config


def save_config(config: Config, config_path: Path) -> None:
    """Save configuration to JSON file."""
    config_dict = _dataclass_to_dict(config)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config_dict, f, indent=2)


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    save_config(Config.default(), config_path)
