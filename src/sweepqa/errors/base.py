"""Exception hierarchy for SweepQA.

Every SweepQA error inherits from SweepQAError and includes:
- error_code: An ErrorCode enum for programmatic handling
- context: ErrorContext with request/response details
- suggestions: List of actionable steps to resolve the issue

Errors fall into four groups that callers usually handle differently:

- Load errors (DocumentLoadError and subclasses) mean the API description
  could not be turned into a Document. Nothing has been sent yet.
- ConfigurationError means a source loaded but produced nothing usable.
- VerificationFailedError means an endpoint broke the contract being checked.
- TraversalCancelledError means the caller asked to stop.

Example:
    try:
        await tester.verify_secured_endpoints_require_authentication(client)
    except VerificationFailedError as e:
        print(f"{e.method} {e.url} answered {e.status_code}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for SweepQA.

    Error codes are organized by category:
    - E1xx: Document loading errors
    - E2xx: Configuration errors
    - E3xx: Synthesis errors
    - E4xx: Verification errors
    - E5xx: Traversal control
    - E9xx: Unknown/internal errors
    """

    # Document loading errors (E1xx)
    DOCUMENT_INVALID = "E101"
    DOCUMENT_NOT_FOUND = "E102"
    UNSUPPORTED_SPEC_VERSION = "E103"

    # Configuration errors (E2xx)
    INVALID_CONFIG = "E201"
    DOCUMENT_MISSING = "E202"

    # Synthesis errors (E3xx)
    SCHEMA_CYCLE = "E301"

    # Verification errors (E4xx)
    VERIFICATION_FAILED = "E401"

    # Traversal control (E5xx)
    TRAVERSAL_CANCELLED = "E501"

    # Unknown/internal errors (E9xx)
    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if code_num < 200:
            return "load"
        elif code_num < 300:
            return "configuration"
        elif code_num < 400:
            return "synthesis"
        elif code_num < 500:
            return "verification"
        elif code_num < 600:
            return "traversal"
        else:
            return "unknown"


@dataclass
class ErrorContext:
    """Structured context for error reporting.

    Attributes:
        source: Where the API description came from (path or "<stream>").
        operation_id: Identifier or summary of the operation involved.
        request: HTTP request details (method, url).
        response: HTTP response details (status).
        extra: Additional context-specific information.
        timestamp: When the error occurred.
    """

    source: str | None = None
    operation_id: str | None = None
    request: dict[str, Any] | None = None
    response: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        result = {
            "source": self.source,
            "operation_id": self.operation_id,
            "request": self.request,
            "response": self.response,
            "extra": self.extra,
            "timestamp": self.timestamp.isoformat(),
        }
        return {k: v for k, v in result.items() if v is not None}

    def format_location(self) -> str:
        """Format the error location as a readable string."""
        parts = []
        if self.source:
            parts.append(f"source={self.source}")
        if self.request:
            parts.append(f"{self.request.get('method', '?')} {self.request.get('url', '?')}")
        if self.operation_id:
            parts.append(f"operation={self.operation_id}")
        return " > ".join(parts) if parts else "unknown location"


class SweepQAError(Exception):
    """Base exception for all SweepQA errors.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        context: ErrorContext with execution details
        suggestions: List of actionable steps to resolve the issue
        cause: The underlying exception (if any)
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self._suggestions = suggestions

        if extra_context:
            self.context.extra.update(extra_context)

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        parts = [f"[{self.error_code.value}] {self.message}"]

        location = self.context.format_location()
        if location != "unknown location":
            parts.append(f"at {location}")

        return " | ".join(parts)

    def format_verbose(self) -> str:
        """Format error with full details including suggestions."""
        lines = [
            f"Error [{self.error_code.value}]: {self.message}",
            "",
        ]

        location = self.context.format_location()
        if location != "unknown location":
            lines.append(f"Location: {location}")

        if self.context.response:
            status = self.context.response.get("status", "?")
            lines.append(f"Response: HTTP {status}")

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


class DocumentLoadError(SweepQAError):
    """The API description could not be loaded.

    Raised for unreadable streams, YAML/JSON syntax errors and structural
    problems. All structural problems found in one pass are reported together;
    the individual messages are available in ``errors``.
    """

    error_code = ErrorCode.DOCUMENT_INVALID
    default_message = "Could not read OpenAPI document"
    default_suggestions = [
        "Validate the document with an OpenAPI linter",
        "Check that every $ref points to an existing component",
        "Make sure the file is UTF-8 encoded YAML or JSON",
    ]

    def __init__(
        self,
        message: str | None = None,
        errors: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        self.errors = list(errors or [])
        if message is None and self.errors:
            message = "Could not read OpenAPI document.\n" + "\n".join(self.errors)
        super().__init__(message=message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["errors"] = self.errors
        return result


class UnsupportedSpecVersionError(DocumentLoadError):
    """The document does not declare a supported OpenAPI/Swagger version."""

    error_code = ErrorCode.UNSUPPORTED_SPEC_VERSION
    default_message = "Unsupported OpenAPI specification version"
    default_suggestions = [
        "Declare 'openapi: 3.0.x' / 'openapi: 3.1.x' or 'swagger: \"2.0\"' at the top level",
    ]

    def __init__(self, message: str | None = None, version: Any = None, **kwargs: Any) -> None:
        self.version = version
        super().__init__(message=message, **kwargs)


class DocumentNotFoundError(DocumentLoadError, FileNotFoundError):
    """The document path does not exist."""

    error_code = ErrorCode.DOCUMENT_NOT_FOUND
    default_message = "OpenAPI document does not exist"
    default_suggestions = [
        "Check the path is relative to the current working directory",
    ]

    def __init__(self, message: str | None = None, path: str | None = None, **kwargs: Any) -> None:
        self.path = path
        kwargs.setdefault("context", ErrorContext(source=path))
        super().__init__(message=message, **kwargs)


class ValidationError(SweepQAError):
    """A value failed validation.

    Check the 'field' and 'value' attributes for details.
    """

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Validation failed"

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message=message, **kwargs)

    def __str__(self) -> str:
        base = super().__str__()
        if self.field:
            base = f"{base} (field: {self.field})"
        return base

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["field"] = self.field
        result["value"] = repr(self.value)
        return result


class ConfigValidationError(ValidationError):
    """Settings contain an invalid value."""

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration"
    default_suggestions = [
        "Check sweepqa.yaml syntax with a YAML linter",
        "Check SWEEPQA_* environment variables",
    ]


class ConfigurationError(SweepQAError):
    """A document source was accepted but yielded no usable Document."""

    error_code = ErrorCode.DOCUMENT_MISSING
    default_message = "Could not read OpenAPI document"


class SchemaCycleError(SweepQAError):
    """A schema refers back to itself along the synthesis path."""

    error_code = ErrorCode.SCHEMA_CYCLE
    default_message = "Self-referencing schema cannot be synthesized"
    default_suggestions = [
        "Install a parameter_value_hook or request_content_hook for this operation",
        "Make the recursive property optional so it is not synthesized",
    ]

    def __init__(self, message: str | None = None, parameter_name: str | None = None, **kwargs: Any) -> None:
        self.parameter_name = parameter_name
        super().__init__(message=message, **kwargs)


class VerificationFailedError(SweepQAError):
    """An endpoint did not behave as the running protocol requires.

    Carries the request method, resolved URL, operation identifier and the
    observed status code so the offending operation can be located.
    """

    error_code = ErrorCode.VERIFICATION_FAILED
    default_message = "Endpoint verification failed"

    def __init__(
        self,
        message: str | None = None,
        method: str | None = None,
        url: str | None = None,
        operation_id: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        self.method = method
        self.url = url
        self.operation_id = operation_id
        self.status_code = status_code
        kwargs.setdefault(
            "context",
            ErrorContext(
                operation_id=operation_id,
                request={"method": method, "url": url},
                response={"status": status_code},
            ),
        )
        super().__init__(message=message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["status_code"] = self.status_code
        return result


class TraversalCancelledError(SweepQAError):
    """The traversal was cancelled before all requests were sent."""

    error_code = ErrorCode.TRAVERSAL_CANCELLED
    default_message = "Traversal cancelled"

    def __init__(self, message: str | None = None, requests_sent: int = 0, **kwargs: Any) -> None:
        self.requests_sent = requests_sent
        super().__init__(message=message, **kwargs)
