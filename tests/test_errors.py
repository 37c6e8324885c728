"""Tests for the SweepQA error hierarchy."""

from __future__ import annotations

import pytest

from sweepqa.errors import (
    ConfigurationError,
    ConfigValidationError,
    DocumentLoadError,
    DocumentNotFoundError,
    ErrorCode,
    ErrorContext,
    SchemaCycleError,
    SweepQAError,
    TraversalCancelledError,
    UnsupportedSpecVersionError,
    VerificationFailedError,
)


class TestErrorCode:
    @pytest.mark.parametrize(
        "code,category",
        [
            (ErrorCode.DOCUMENT_INVALID, "load"),
            (ErrorCode.UNSUPPORTED_SPEC_VERSION, "load"),
            (ErrorCode.INVALID_CONFIG, "configuration"),
            (ErrorCode.SCHEMA_CYCLE, "synthesis"),
            (ErrorCode.VERIFICATION_FAILED, "verification"),
            (ErrorCode.TRAVERSAL_CANCELLED, "traversal"),
            (ErrorCode.UNKNOWN, "unknown"),
        ],
    )
    def test_category(self, code: ErrorCode, category: str) -> None:
        assert code.category == category


class TestErrorContext:
    def test_format_location(self) -> None:
        context = ErrorContext(
            source="openapi.yaml",
            operation_id="addPet",
            request={"method": "POST", "url": "http://test.com/pet"},
        )

        assert context.format_location() == (
            "source=openapi.yaml > POST http://test.com/pet > operation=addPet"
        )

    def test_empty_location(self) -> None:
        assert ErrorContext().format_location() == "unknown location"

    def test_to_dict_drops_empty_values(self) -> None:
        data = ErrorContext(source="a.yaml").to_dict()

        assert data["source"] == "a.yaml"
        assert "request" not in data
        assert "timestamp" in data


class TestSweepQAError:
    def test_defaults(self) -> None:
        error = SweepQAError()

        assert error.message == "An unexpected error occurred"
        assert error.error_code is ErrorCode.UNKNOWN
        assert str(error) == "[E999] An unexpected error occurred"

    def test_extra_context(self) -> None:
        error = SweepQAError("boom", attempt=3)
        assert error.context.extra == {"attempt": 3}

    def test_suggestions_override(self) -> None:
        error = DocumentLoadError("bad", suggestions=["fix it"])
        assert error.suggestions == ["fix it"]

    def test_default_suggestions_are_copied(self) -> None:
        error = DocumentLoadError("bad")
        error.suggestions.append("mutated")

        assert "mutated" not in DocumentLoadError.default_suggestions

    def test_to_dict(self) -> None:
        cause = ValueError("inner")
        error = ConfigurationError("nothing loaded", cause=cause)

        data = error.to_dict()

        assert data["error_code"] == "E202"
        assert data["error_type"] == "ConfigurationError"
        assert data["cause"] == "inner"

    def test_format_verbose(self) -> None:
        error = VerificationFailedError(
            "GET /pet/1 returned 200",
            method="GET",
            url="http://test.com/pet/1",
            operation_id="getPetById",
            status_code=200,
            suggestions=["Check the endpoint enforces authentication"],
        )

        text = error.format_verbose()

        assert "Error [E401]: GET /pet/1 returned 200" in text
        assert "Location: GET http://test.com/pet/1 > operation=getPetById" in text
        assert "Response: HTTP 200" in text
        assert "  - Check the endpoint enforces authentication" in text


class TestLoadErrors:
    def test_errors_are_joined_into_the_message(self) -> None:
        error = DocumentLoadError(errors=["#/info: missing", "#/paths: missing"])

        assert error.message == "Could not read OpenAPI document.\n#/info: missing\n#/paths: missing"
        assert error.to_dict()["errors"] == ["#/info: missing", "#/paths: missing"]

    def test_unsupported_version(self) -> None:
        error = UnsupportedSpecVersionError(version="1.2")

        assert isinstance(error, DocumentLoadError)
        assert error.version == "1.2"
        assert error.error_code is ErrorCode.UNSUPPORTED_SPEC_VERSION

    def test_not_found_is_catchable_both_ways(self) -> None:
        error = DocumentNotFoundError("gone", path="missing.yaml")

        assert isinstance(error, DocumentLoadError)
        assert isinstance(error, FileNotFoundError)
        assert error.context.source == "missing.yaml"
        assert str(error) == "[E102] gone | at source=missing.yaml"


class TestRunErrors:
    def test_verification_failure_context(self) -> None:
        error = VerificationFailedError(
            "nope", method="DELETE", url="http://test.com/pet/1", operation_id="deletePet", status_code=204
        )

        data = error.to_dict()

        assert data["status_code"] == 204
        assert data["context"]["request"] == {"method": "DELETE", "url": "http://test.com/pet/1"}
        assert data["context"]["response"] == {"status": 204}

    def test_cancelled(self) -> None:
        error = TraversalCancelledError(requests_sent=4)

        assert error.requests_sent == 4
        assert error.message == "Traversal cancelled"

    def test_schema_cycle(self) -> None:
        error = SchemaCycleError(parameter_name="mentor")

        assert error.parameter_name == "mentor"
        assert error.suggestions

    def test_config_validation_field(self) -> None:
        error = ConfigValidationError("bad status", field="unauthorized_status", value=200)

        assert str(error) == "[E201] bad status (field: unauthorized_status)"
        assert error.to_dict()["value"] == "200"
