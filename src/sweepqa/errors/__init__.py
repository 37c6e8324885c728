"""SweepQA Error Handling Module.

Custom exception hierarchy with error codes and structured context.
"""

from sweepqa.errors.base import (
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
    ValidationError,
    VerificationFailedError,
)

__all__ = [
    # Base exceptions
    "SweepQAError",
    "ErrorCode",
    "ErrorContext",
    # Load errors
    "DocumentLoadError",
    "DocumentNotFoundError",
    "UnsupportedSpecVersionError",
    # Configuration errors
    "ConfigurationError",
    "ValidationError",
    "ConfigValidationError",
    # Synthesis errors
    "SchemaCycleError",
    # Verification / traversal
    "VerificationFailedError",
    "TraversalCancelledError",
]
