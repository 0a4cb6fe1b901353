"""
Pydantic configuration for the JSON diagnostic logger.

LoggerOptions is an immutable snapshot. The logger never merges options;
a new snapshot replaces the old one wholesale, so logger_name and
service_name must be supplied every time.

Minimal YAML:
    logger_name: otel-diag
    service_name: checkout

Demoting noisy shapes:
    logger_name: otel-diag
    service_name: checkout
    min_log_level: INFO
    log_level_for_timeout_error_messages: WARN
    log_level_for_service_request_error_messages: INFO
    log_first_incoming_request: true
    truncate_limit: 2000

Usage:
    options = LoggerOptions.from_yaml("diag.yaml")
    options.to_dict()
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from jsondiag.records import LogLevel
from jsondiag.rendering import DEFAULT_TRUNCATED_TEXT

_LEVEL_FIELDS = (
    "min_log_level",
    "log_level_for_verbose",
    "log_level_for_service_request_error_messages",
    "log_level_for_timeout_error_messages",
    "log_level_for_async_attribute_error",
    "log_level_for_register_global_messages",
)


class LoggerOptions(BaseModel):
    """
    Options that drive level overrides, filtering and truncation.

    A level field left as None is "not configured". OFF is a configured
    value: the matching messages are silently dropped.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # ── Identity (required) ───────────────────────────────────────
    logger_name: str
    service_name: str

    # ── Filtering ─────────────────────────────────────────────────
    min_log_level: Optional[LogLevel] = None

    # ── Level overrides ───────────────────────────────────────────
    log_level_for_verbose: Optional[LogLevel] = None
    log_level_for_service_request_error_messages: Optional[LogLevel] = None
    log_level_for_timeout_error_messages: Optional[LogLevel] = None
    log_level_for_async_attribute_error: Optional[LogLevel] = None
    log_level_for_register_global_messages: Optional[LogLevel] = None

    # ── First incoming request ────────────────────────────────────
    log_first_incoming_request: bool = False

    # ── Truncation ────────────────────────────────────────────────
    truncate_limit: Optional[int] = None  # None/0/negative = off
    truncated_text: str = DEFAULT_TRUNCATED_TEXT

    @field_validator(*_LEVEL_FIELDS, mode="before")
    @classmethod
    def resolve_level(cls, value: Any) -> Any:
        """Accept level names in any case, or numeric values."""
        if value is None:
            return None
        return LogLevel.from_value(value)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "LoggerOptions":
        """Load and validate from a YAML file."""
        path = Path(path)
        raw = path.read_text(encoding="utf-8")
        return cls.from_yaml_string(raw)

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "LoggerOptions":
        """Load and validate from a YAML string."""
        data = yaml.safe_load(yaml_string)
        if not isinstance(data, dict):
            raise ValueError(
                f"Logger options YAML must be a mapping, got {type(data).__name__}"
            )
        return cls.model_validate(data)

    @classmethod
    def from_dict(cls, data: dict) -> "LoggerOptions":
        """Load and validate from a dict."""
        return cls.model_validate(data)

    def to_dict(self, exclude_none: bool = True) -> dict:
        """Export as dict, with levels as names."""
        data = self.model_dump(exclude_none=exclude_none)
        for name in _LEVEL_FIELDS:
            if data.get(name) is not None:
                data[name] = LogLevel(data[name]).name
        return data
