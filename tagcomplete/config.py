# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""config.py
Configuration model and file loader for the Tagcomplete engine.

The engine reads a `CompletionConfig` on every scan but never mutates it; a
host replaces it wholesale when its settings change. The token regex is only
compiled when first needed, so `loader()` compiles it up front to let hosts
fail fast at configuration time instead of on the first keystroke.
"""
from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import toml
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tagcomplete.exceptions import ConfigError
from tagcomplete.logger import logger
from tagcomplete.options import OptionSource, option_source

DEFAULT_TOKEN_REGEX = r"^[A-Za-z0-9\-_]+$"


@lru_cache(maxsize=32)
def compile_token_regex(pattern: str) -> re.Pattern[str]:
    """Compile the token regex, raising `ConfigError` if it is malformed."""
    try:
        return re.compile(pattern)
    except re.error as error:
        raise ConfigError(f"Invalid token regex {pattern!r}: {error}") from error


def _as_tag_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    tags = list(value)
    for tag in tags:
        if not isinstance(tag, str):
            raise ValueError(f"Trigger tags must be strings, got {type(tag).__name__}")
    return tags


class CompletionConfig(BaseModel):
    """Settings that drive trigger detection, gating and commit rewriting."""

    model_config = ConfigDict(frozen=True)

    triggers: list[str] = Field(default_factory=lambda: ["@"])
    min_chars: int = Field(default=0, ge=0)
    disable_min_chars_for: list[str] = Field(default_factory=list)
    match_any: bool = False
    token_regex: str = DEFAULT_TOKEN_REGEX
    request_only_if_no_options: bool = True
    separator_char: str = " "
    separator_removable_chars: list[str] = Field(
        default_factory=lambda: [",", ".", "!", "?"]
    )
    disable_separator_for: list[str] = Field(default_factory=list)

    max_options: int = Field(default=0, ge=0)
    pass_through_enter: bool = False
    path_separator: str | None = "."

    @field_validator(
        "triggers",
        "disable_min_chars_for",
        "disable_separator_for",
        "separator_removable_chars",
        mode="before",
    )
    @classmethod
    def validate_tag_list(cls, value: Any) -> list[str]:
        return _as_tag_list(value)

    @field_validator("triggers")
    @classmethod
    def dedupe_triggers(cls, value: list[str]) -> list[str]:
        return sorted(set(value))

    @field_validator("path_separator")
    @classmethod
    def validate_path_separator(cls, value: str | None) -> str | None:
        return value or None

    def compiled_regex(self) -> re.Pattern[str]:
        """Return the compiled token regex; raises `ConfigError` if invalid."""
        return compile_token_regex(self.token_regex)


def loader(file_path: Path | str) -> tuple[CompletionConfig, OptionSource]:
    """
    Load a completion configuration and its option source from YAML or TOML.

    The file holds the `CompletionConfig` fields at the top level plus an
    optional `options` entry, either a flat list of candidates or a mapping
    keyed by trigger tag.

    Example (YAML):
        triggers: ["@", "#"]
        min_chars: 1
        options:
          "@": [alice, bob]
          "#": {release: {notes: 1, blockers: 1}}

    Args:
        file_path (Path | str): Path to the config file.

    Returns:
        tuple[CompletionConfig, OptionSource]: The validated config and options.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file cannot be parsed, a value is invalid or the
            token regex does not compile.
    """
    if isinstance(file_path, (str, Path)):
        path = Path(file_path)
    else:
        raise TypeError("file_path must be a string or Path object.")

    if not path.is_file():
        raise FileNotFoundError(f"No such config file: {file_path}")

    suffix = path.suffix
    with path.open("r", encoding="UTF-8") as config_file:
        try:
            if suffix in (".yaml", ".yml"):
                raw_config = yaml.safe_load(config_file)
            elif suffix == ".toml":
                raw_config = toml.load(config_file)
            else:
                raise ConfigError(f"Unsupported config format: {suffix}")
        except (yaml.YAMLError, toml.TomlDecodeError) as error:
            raise ConfigError(f"Could not parse {path}: {error}") from error

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a mapping of settings.\n"
            "Example:\n"
            "triggers: ['@']\n"
            "options: [alice, bob]"
        )

    raw_options = raw_config.pop("options", [])
    try:
        config = CompletionConfig(**raw_config)
    except ValidationError as error:
        raise ConfigError(f"Invalid configuration in {path}: {error}") from error
    config.compiled_regex()

    try:
        options = option_source(raw_options)
    except TypeError as error:
        raise ConfigError(f"Invalid options in {path}: {error}") from error

    logger.debug(
        "Loaded config from '%s' with triggers %s", path, ", ".join(config.triggers)
    )
    return config, options
