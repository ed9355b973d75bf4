"""Configuration loader and validator for the macro documentation generator.

Loads settings from configs/config.yaml and provides typed access
to all configuration sections via dataclasses.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "configs" / "config.yaml"

_DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class SourceConfig:
    """Configuration for locating and reading annotated sources."""

    input_dir: str = "."
    pattern: str = "*.asm"
    exclude: Optional[str] = "macros.asm"
    encoding: str = "utf-8"


@dataclass
class ParserConfig:
    """Configuration for the comment-block parser."""

    comment_prefix: str = ";"
    header_stop_keywords: list[str] = field(
        default_factory=lambda: ["MACRO", "IFNDEF", "DEFINE"]
    )
    block_opener: str = "MACRO"
    block_closer: str = "ENDM"


@dataclass
class OutputConfig:
    """Configuration for documentation output."""

    output_dir: str = "docs/generated"
    combined_table: str = "docs/generated/all-macros.md"
    index_file: str = "docs/generated/index.html"
    index_title: str = "Macro Index"


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = _DEFAULT_LOG_FORMAT
    file: Optional[str] = None


@dataclass
class AppConfig:
    """Top-level application configuration."""

    source: SourceConfig = field(default_factory=SourceConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _build_source_config(data: dict) -> SourceConfig:
    """Build a SourceConfig from a dictionary.

    Args:
        data: Dictionary with source settings.

    Returns:
        A configured SourceConfig instance.
    """
    defaults = SourceConfig()
    return SourceConfig(
        input_dir=data.get("input_dir", defaults.input_dir),
        pattern=data.get("pattern", defaults.pattern),
        exclude=data.get("exclude", defaults.exclude),
        encoding=data.get("encoding", defaults.encoding),
    )


def _build_parser_config(data: dict) -> ParserConfig:
    """Build a ParserConfig from a dictionary.

    Args:
        data: Dictionary with parser settings.

    Returns:
        A configured ParserConfig instance.
    """
    defaults = ParserConfig()
    return ParserConfig(
        comment_prefix=data.get("comment_prefix", defaults.comment_prefix),
        header_stop_keywords=list(
            data.get("header_stop_keywords", defaults.header_stop_keywords)
        ),
        block_opener=data.get("block_opener", defaults.block_opener),
        block_closer=data.get("block_closer", defaults.block_closer),
    )


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load application configuration from a YAML file.

    Reads the YAML config file and constructs a fully typed AppConfig
    object. Falls back to defaults for any missing values.

    Args:
        config_path: Path to the YAML config file. If None, uses the
            default path at configs/config.yaml.

    Returns:
        A fully populated AppConfig instance.

    Raises:
        yaml.YAMLError: If the config file contains invalid YAML.
    """
    path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.warning("Config file not found at %s, using defaults", path)
        return AppConfig()

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    logger.info("Loaded configuration from %s", path)

    output_data = raw.get("output", {})
    output_defaults = OutputConfig()
    output_config = OutputConfig(
        output_dir=output_data.get("output_dir", output_defaults.output_dir),
        combined_table=output_data.get("combined_table", output_defaults.combined_table),
        index_file=output_data.get("index_file", output_defaults.index_file),
        index_title=output_data.get("index_title", output_defaults.index_title),
    )

    logging_data = raw.get("logging", {})
    logging_config = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        format=logging_data.get("format", _DEFAULT_LOG_FORMAT),
        file=logging_data.get("file"),
    )

    return AppConfig(
        source=_build_source_config(raw.get("source", {})),
        parser=_build_parser_config(raw.get("parser", {})),
        output=output_config,
        logging=logging_config,
    )
