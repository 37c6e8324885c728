"""Discovery - API description loading.

The Discovery package is responsible for:
- Reading OpenAPI 3.x and Swagger 2.0 documents from files or streams
- Resolving $ref references in schemas, parameters and request bodies
- Exposing the result as a read-only Document of paths and operations
"""

from sweepqa.discovery.document import (
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
)
from sweepqa.discovery.loader import load_document, parse_document
from sweepqa.discovery.ref_resolver import RefResolver, UnresolvedRef

__all__ = [
    # Core types
    "Document",
    "PathItem",
    "Operation",
    "Parameter",
    "ParameterLocation",
    "Schema",
    "RequestBody",
    "MediaTypeContent",
    # Hook payloads
    "EndpointInformation",
    "ParameterInformation",
    "RequestContentInformation",
    # Loading
    "load_document",
    "parse_document",
    "RefResolver",
    "UnresolvedRef",
]
