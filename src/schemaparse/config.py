"""Configuration management for schemaparse using Pydantic models."""

import json
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from schemaparse.constants import CONFIG_FILENAME, MISSING


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class ParserOptions(BaseModel):
    """Options recognized when building a parser.

    ``default`` holds the raw default value. It is transformed once, when the
    parser is constructed; ``MISSING`` means no default.
    """
    required: bool = False
    default: Any = MISSING

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.INFO

    model_config = ConfigDict(use_enum_values=True)


class SchemaparseConfig(BaseModel):
    """Complete schemaparse configuration model."""
    options: ParserOptions = Field(default_factory=ParserOptions)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def resolve_options(options: ParserOptions | dict | None = None, **overrides: Any) -> ParserOptions:
    """Build a ParserOptions from a model, a plain dict and/or keyword overrides.

    Keyword overrides take precedence over values in ``options``.

    Raises:
        pydantic.ValidationError: If an unknown option is given or a value has the wrong type
    """
    if options is None:
        data: dict[str, Any] = {}
    elif isinstance(options, ParserOptions):
        if not overrides:
            return options
        data = {"required": options.required, "default": options.default}
    else:
        data = dict(options)

    data.update(overrides)
    return ParserOptions.model_validate(data)


def load_config(config_path: str | Path | None = None) -> SchemaparseConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .schemaparse.json

    Returns:
        SchemaparseConfig: Loaded and validated configuration

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if config_path is None or not config_path.exists():
        return create_default_config()

    try:
        with open(config_path, encoding="utf-8") as f:
            config_data = json.load(f)
        return SchemaparseConfig(**config_data)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .schemaparse.json configuration file by searching up directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILENAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None


def create_default_config() -> SchemaparseConfig:
    """Create default configuration: optional parsers, no default, INFO logging."""
    return SchemaparseConfig()
