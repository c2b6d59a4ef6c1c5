"""
Interpreter configuration.

Parses the [interpreter] section from slope.toml, then applies overrides
from the environment:

    SLOPE_MAX_CALL_DEPTH   maximum nested user function calls
    SLOPE_LOG_LEVEL        DEBUG, INFO, WARNING or ERROR

Example slope.toml:

    [interpreter]
    max_call_depth = 256
    log_level = "INFO"
    prompt = "slope> "
"""

from __future__ import annotations

import logging
import os
import tomllib
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from slope.core.expression_lang.evaluator import DEFAULT_MAX_CALL_DEPTH

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "slope.toml"
MAX_CALL_DEPTH_VAR = "SLOPE_MAX_CALL_DEPTH"
LOG_LEVEL_VAR = "SLOPE_LOG_LEVEL"


class LogLevel(StrEnum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class InterpreterConfig(BaseModel):
    """Complete interpreter configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_call_depth: int = Field(default=DEFAULT_MAX_CALL_DEPTH, ge=1)
    log_level: LogLevel = LogLevel.WARNING
    prompt: str = ">>> "
    continuation_prompt: str = "... "


def _environment_overrides() -> dict[str, Any]:
    """Read overrides from the environment, skipping malformed values."""
    overrides: dict[str, Any] = {}

    depth = os.environ.get(MAX_CALL_DEPTH_VAR, "").strip()
    if depth:
        try:
            overrides["max_call_depth"] = int(depth)
        except ValueError:
            logger.warning("Ignoring %s=%r: not an integer", MAX_CALL_DEPTH_VAR, depth)

    level = os.environ.get(LOG_LEVEL_VAR, "").strip().upper()
    if level:
        if level in LogLevel.__members__:
            overrides["log_level"] = level
        else:
            logger.warning(
                "Ignoring %s=%r: expected one of %s",
                LOG_LEVEL_VAR,
                level,
                ", ".join(LogLevel.__members__),
            )

    return overrides


def load_config(toml_path: Path | None = None) -> InterpreterConfig:
    """
    Load interpreter configuration from slope.toml and the environment.

    Args:
        toml_path: Path to the TOML file; defaults to slope.toml in the
            working directory. A missing file means defaults.

    Returns:
        InterpreterConfig with parsed values or defaults

    Raises:
        pydantic.ValidationError: If a value is out of range or unknown.
    """
    path = toml_path if toml_path is not None else Path(CONFIG_FILENAME)

    config_dict: dict[str, Any] = {}
    if path.exists():
        with open(path, "rb") as f:
            data = tomllib.load(f)
        config_dict.update(data.get("interpreter", {}))
        logger.debug("Loaded interpreter config from %s", path)

    config_dict.update(_environment_overrides())
    return InterpreterConfig(**config_dict)
