"""Configuration settings and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sweepqa.errors import ConfigValidationError, ErrorContext


class ExerciserSettings(BaseSettings):
    """Placeholder literals and protocol expectations for SweepQA."""

    model_config = SettingsConfigDict(
        env_prefix="SWEEPQA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    integer_placeholder: str = "1"
    string_placeholder: str = "test"
    file_placeholder: str = "Test content"
    file_name: str = "test.txt"
    unauthorized_status: int = 401
    # int64 path parameters always get integer_placeholder, even over a hook
    force_int64_path_literal: bool = True

    @field_validator("integer_placeholder", mode="before")
    @classmethod
    def validate_integer_placeholder(cls, v: Any) -> str:
        text = str(v)
        if not text.lstrip("-").isdigit():
            raise ConfigValidationError(
                message="integer_placeholder must be an integer literal",
                field="integer_placeholder",
                value=v,
            )
        return text

    @field_validator("unauthorized_status", mode="before")
    @classmethod
    def validate_unauthorized_status(cls, v: Any) -> int:
        try:
            status = int(v)
        except (TypeError, ValueError):
            status = 0
        if not 400 <= status < 500:
            raise ConfigValidationError(
                message="unauthorized_status must be a 4xx HTTP status",
                field="unauthorized_status",
                value=v,
                context=ErrorContext(extra={"expected_range": "400-499"}),
            )
        return status


def load_settings(config_path: str | Path | None = None) -> ExerciserSettings:
    """Load settings from an optional YAML file and the environment.

    Priority: env vars > config file > defaults
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
            if not isinstance(config_data, dict):
                raise ConfigValidationError(
                    message=f"Settings file must contain a mapping: {config_path}",
                    field="config_path",
                    value=str(config_path),
                )

    config_data.update(_get_env_overrides())

    return ExerciserSettings(**config_data)


def _get_env_overrides() -> dict[str, Any]:
    """Get settings overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings = {
        "SWEEPQA_INTEGER_PLACEHOLDER": "integer_placeholder",
        "SWEEPQA_STRING_PLACEHOLDER": "string_placeholder",
        "SWEEPQA_FILE_PLACEHOLDER": "file_placeholder",
        "SWEEPQA_FILE_NAME": "file_name",
        "SWEEPQA_UNAUTHORIZED_STATUS": ("unauthorized_status", int),
        "SWEEPQA_FORCE_INT64_PATH_LITERAL": (
            "force_int64_path_literal",
            lambda x: x.lower() in ("true", "1", "yes"),
        ),
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            if isinstance(config_key, tuple):
                key, converter = config_key
                overrides[key] = converter(value)
            else:
                overrides[config_key] = value

    return overrides
