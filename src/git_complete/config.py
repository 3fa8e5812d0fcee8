"""Configuration for completion behaviour, loaded from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .parens import SyntaxTable

DEFAULT_CONFIG_NAME = ".git-complete.yaml"

DEFAULT_LISPY_MODES: List[str] = [
    "lisp",
    "emacs-lisp",
    "lisp-interaction",
    "scheme",
    "gauche",
    "clojure",
    "racket",
    "egison",
]


class ConfigError(ValueError):
    """Raised when a configuration file cannot be parsed or validated."""


class CompletionConfig(BaseModel):
    """Tunables of the completion engine."""

    model_config = ConfigDict(extra="forbid")

    threshold: float = Field(default=0.01, ge=0.0)
    multiline_threshold: float = Field(default=0.4, ge=0.0)
    enable_omni_completion: bool = False
    enable_autopair: bool = True
    repeat_completion: bool = True
    max_continuations: int = Field(default=100, ge=0)
    lispy_modes: List[str] = Field(default_factory=lambda: list(DEFAULT_LISPY_MODES))
    paren_pairs: Dict[str, str] = Field(default_factory=lambda: {"(": ")", "[": "]", "{": "}"})
    escape_chars: str = "\\"

    @field_validator("paren_pairs")
    @classmethod
    def _single_characters(cls, value: Dict[str, str]) -> Dict[str, str]:
        for opener, closer in value.items():
            if len(opener) != 1 or len(closer) != 1:
                raise ValueError(f"paren pair {opener!r}/{closer!r} must be single characters")
        return value

    def syntax_table(self) -> SyntaxTable:
        return SyntaxTable(pairs=dict(self.paren_pairs), escapes=self.escape_chars)

    def is_lispy(self, mode: str) -> bool:
        """Whether closers of ``mode`` go on the next line without a blank line."""

        normalised = mode.strip().lower()
        if normalised.endswith("-mode"):
            normalised = normalised[: -len("-mode")]
        return normalised in {entry.lower() for entry in self.lispy_modes}


def config_from_mapping(data: Mapping[str, Any] | None) -> CompletionConfig:
    """Validate the ``completion`` section of a parsed configuration file."""

    section = (data or {}).get("completion") or {}
    if not isinstance(section, Mapping):
        raise ConfigError("'completion' must be a mapping.")
    try:
        return CompletionConfig.model_validate(dict(section))
    except ValidationError as error:
        raise ConfigError(str(error)) from error


def load_config(config_path: Path | None, *, required: bool = False) -> CompletionConfig:
    """Load configuration from ``config_path``.

    A missing file yields the defaults unless ``required`` is set.
    """

    if config_path is None or not config_path.exists():
        if required:
            raise ConfigError(f"Config file not found: {config_path}")
        return CompletionConfig()

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse config: {error}") from error

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping at the top level.")
    return config_from_mapping(data)


def dump_config(config: CompletionConfig) -> str:
    """Render ``config`` as a YAML document."""

    return yaml.safe_dump({"completion": config.model_dump()}, sort_keys=False)


__all__ = [
    "CompletionConfig",
    "ConfigError",
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_LISPY_MODES",
    "config_from_mapping",
    "dump_config",
    "load_config",
]
