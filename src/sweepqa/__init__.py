"""SweepQA - Schema-driven HTTP endpoint exerciser.

Point it at an OpenAPI document and an httpx client. SweepQA synthesizes a
request for every declared operation, with no hand-written fixtures, and runs
one of two protocols over the responses.

Quick Start:
    import httpx
    from sweepqa import WebServiceTester

    tester = WebServiceTester("openapi.yaml")

    async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
        # Every secured operation must answer 401 without credentials
        await tester.verify_secured_endpoints_require_authentication(client)

        # Every operation is called; assert whatever you like per response
        await tester.exercise_all_endpoints(client, lambda ep, resp: None)
"""

from __future__ import annotations

from sweepqa.config import ExerciserSettings, load_settings
from sweepqa.discovery import (
    Document,
    EndpointInformation,
    MediaTypeContent,
    Operation,
    Parameter,
    ParameterInformation,
    ParameterLocation,
    PathItem,
    RequestBody,
    RequestContentInformation,
    Schema,
    load_document,
    parse_document,
)
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
from sweepqa.generation import (
    ContentBuilder,
    ContentKind,
    RequestContent,
    SchemaValueSynthesizer,
    UriBuilder,
)
from sweepqa.runner import EndpointInvoker, WebServiceTester

__all__ = [
    # Protocols
    "WebServiceTester",
    "EndpointInvoker",
    # Generation
    "SchemaValueSynthesizer",
    "ContentBuilder",
    "ContentKind",
    "RequestContent",
    "UriBuilder",
    # Document model
    "Document",
    "PathItem",
    "Operation",
    "Parameter",
    "ParameterLocation",
    "Schema",
    "RequestBody",
    "MediaTypeContent",
    "EndpointInformation",
    "ParameterInformation",
    "RequestContentInformation",
    "load_document",
    "parse_document",
    # Settings
    "ExerciserSettings",
    "load_settings",
    # Errors
    "SweepQAError",
    "ErrorCode",
    "ErrorContext",
    "DocumentLoadError",
    "DocumentNotFoundError",
    "UnsupportedSpecVersionError",
    "ConfigurationError",
    "ConfigValidationError",
    "SchemaCycleError",
    "VerificationFailedError",
    "TraversalCancelledError",
]

__version__ = "0.1.0"
