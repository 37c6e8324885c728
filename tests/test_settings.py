"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from sweepqa.config import ExerciserSettings, load_settings
from sweepqa.errors import ConfigValidationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "SWEEPQA_INTEGER_PLACEHOLDER",
        "SWEEPQA_STRING_PLACEHOLDER",
        "SWEEPQA_FILE_PLACEHOLDER",
        "SWEEPQA_FILE_NAME",
        "SWEEPQA_UNAUTHORIZED_STATUS",
        "SWEEPQA_FORCE_INT64_PATH_LITERAL",
    ):
        monkeypatch.delenv(key, raising=False)


class TestExerciserSettings:
    def test_defaults(self) -> None:
        settings = ExerciserSettings()

        assert settings.integer_placeholder == "1"
        assert settings.string_placeholder == "test"
        assert settings.file_placeholder == "Test content"
        assert settings.file_name == "test.txt"
        assert settings.unauthorized_status == 401
        assert settings.force_int64_path_literal is True

    def test_integer_placeholder_is_normalised_to_text(self) -> None:
        assert ExerciserSettings(integer_placeholder=7).integer_placeholder == "7"

    def test_integer_placeholder_must_be_numeric(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            ExerciserSettings(integer_placeholder="one")

        assert exc_info.value.field == "integer_placeholder"

    @pytest.mark.parametrize("status", [200, 500, "abc"])
    def test_unauthorized_status_must_be_4xx(self, status: object) -> None:
        with pytest.raises(ConfigValidationError):
            ExerciserSettings(unauthorized_status=status)

    def test_environment_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SWEEPQA_STRING_PLACEHOLDER", "env-value")
        assert ExerciserSettings().string_placeholder == "env-value"


class TestLoadSettings:
    def test_without_file(self) -> None:
        assert load_settings() == ExerciserSettings()

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        assert load_settings(tmp_path / "nope.yaml").string_placeholder == "test"

    def test_yaml_file(self, tmp_path: Path) -> None:
        config = tmp_path / "sweepqa.yaml"
        config.write_text("string_placeholder: fido\nunauthorized_status: 403\n")

        settings = load_settings(config)

        assert settings.string_placeholder == "fido"
        assert settings.unauthorized_status == 403

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config = tmp_path / "sweepqa.yaml"
        config.write_text("string_placeholder: fido\nforce_int64_path_literal: true\n")
        monkeypatch.setenv("SWEEPQA_STRING_PLACEHOLDER", "rex")
        monkeypatch.setenv("SWEEPQA_FORCE_INT64_PATH_LITERAL", "no")

        settings = load_settings(config)

        assert settings.string_placeholder == "rex"
        assert settings.force_int64_path_literal is False

    def test_file_must_be_a_mapping(self, tmp_path: Path) -> None:
        config = tmp_path / "sweepqa.yaml"
        config.write_text("- just\n- a list\n")

        with pytest.raises(ConfigValidationError, match="mapping"):
            load_settings(config)

    def test_empty_file(self, tmp_path: Path) -> None:
        config = tmp_path / "sweepqa.yaml"
        config.write_text("")

        assert load_settings(config).integer_placeholder == "1"
