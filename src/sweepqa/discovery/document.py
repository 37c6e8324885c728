"""Document - Structured, read-only representation of an API description."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

# Methods recognised on a path item, in the order OpenAPI lists them.
HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

TYPE_STRING = "string"
TYPE_INTEGER = "integer"
TYPE_ARRAY = "array"
TYPE_OBJECT = "object"

FORMAT_INT64 = "int64"
FORMAT_BINARY = "binary"


class ParameterLocation:
    """Where a parameter lives in the request."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"
    # Not an OpenAPI location; used for request body properties.
    BODY = "body"


@dataclass(eq=False)
class Schema:
    """A type descriptor used to synthesize placeholder values.

    Schemas compare by identity: a ``$ref`` resolves to one shared instance, so
    a self-referencing schema is a real cycle in memory.

    Attributes:
        type: JSON schema type, or None when undeclared.
        format: Optional format refinement (e.g. "int64", "binary").
        items: Element schema for arrays.
        properties: Property schemas for objects, in declared order.
        required: Required property names, in declared order.
        ref: The ``$ref`` this schema was resolved from, if any.
    """

    type: str | None = None
    format: str | None = None
    items: Schema | None = None
    properties: dict[str, Schema] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    ref: str | None = None

    @property
    def is_array(self) -> bool:
        return self.type == TYPE_ARRAY

    @property
    def is_object(self) -> bool:
        return self.type == TYPE_OBJECT or (self.type is None and bool(self.properties))

    def __repr__(self) -> str:
        # Recursive schemas would make the generated dataclass repr loop.
        label = self.ref or self.type or "unknown"
        return f"Schema({label})"


@dataclass(frozen=True)
class Parameter:
    """A declared operation parameter."""

    name: str
    location: str
    schema: Schema = field(default_factory=Schema)
    required: bool = False


@dataclass(frozen=True)
class MediaTypeContent:
    """The body shape for one content type."""

    schema: Schema | None = None


@dataclass(frozen=True)
class RequestBody:
    """Request body declaration: content type -> MediaTypeContent, in declared order."""

    content: dict[str, MediaTypeContent] = field(default_factory=dict)
    required: bool = False

    def first(self) -> tuple[str, MediaTypeContent] | None:
        """Return the first declared (content type, content) pair."""
        for content_type, media in self.content.items():
            return content_type, media
        return None


@dataclass(frozen=True, eq=False)
class Operation:
    """One HTTP-method-scoped endpoint definition.

    Operations compare and hash by identity so endpoints built from them can
    be collected in sets and used as dict keys.
    """

    method: str
    operation_id: str | None = None
    summary: str | None = None
    description: str | None = None
    parameters: tuple[Parameter, ...] = ()
    request_body: RequestBody | None = None
    security: tuple[dict[str, Any], ...] = ()
    tags: tuple[str, ...] = ()

    @property
    def is_secured(self) -> bool:
        """True if the operation declares at least one security requirement.

        An empty requirement object (``security: [{}]``) means anonymous
        access is allowed. The loader drops it, so such an operation counts as
        public even though its raw ``security`` list is not empty.
        """
        return len(self.security) > 0

    @property
    def path_parameters(self) -> list[Parameter]:
        return [p for p in self.parameters if p.location == ParameterLocation.PATH]

    @property
    def display_name(self) -> str:
        """operationId, falling back to summary, then description."""
        return self.operation_id or self.summary or self.description or ""

    def __str__(self) -> str:
        return self.display_name or self.method.upper()


@dataclass(frozen=True)
class PathItem:
    """The operations declared for one path, keyed by lowercase method."""

    path: str
    operations: dict[str, Operation] = field(default_factory=dict)


@dataclass(frozen=True)
class Document:
    """Parsed API description.

    Example::

        document = load_document("openapi.yaml")
        for path, method, operation in document.iter_operations():
            print(method.upper(), path, operation.is_secured)
    """

    title: str = "API"
    version: str = ""
    spec_version: str = ""
    paths: tuple[PathItem, ...] = ()

    def iter_operations(self) -> Iterator[tuple[str, str, Operation]]:
        """Yield (path, method, operation) in document order."""
        for item in self.paths:
            for method, operation in item.operations.items():
                yield item.path, method, operation

    @property
    def operation_count(self) -> int:
        return sum(len(item.operations) for item in self.paths)

    @property
    def secured_operation_count(self) -> int:
        return sum(1 for _, _, op in self.iter_operations() if op.is_secured)


@dataclass(frozen=True)
class EndpointInformation:
    """Identifies an endpoint: path template, HTTP method and operation."""

    path: str
    method: str
    operation: Operation

    def __str__(self) -> str:
        return f"{self.method.upper()} {self.path}"


@dataclass(frozen=True)
class ParameterInformation(EndpointInformation):
    """Endpoint plus the parameter (URI or body property) being synthesized."""

    parameter_name: str = ""
    schema: Schema = field(default_factory=Schema)
    location: str = ParameterLocation.PATH


@dataclass(frozen=True)
class RequestContentInformation:
    """Everything the request-content hook gets to decide on a body."""

    operation: Operation
    content_type: str
    content: MediaTypeContent
    path: str
    method: str


__all__ = [
    "Document",
    "EndpointInformation",
    "FORMAT_BINARY",
    "FORMAT_INT64",
    "HTTP_METHODS",
    "MediaTypeContent",
    "Operation",
    "Parameter",
    "ParameterInformation",
    "ParameterLocation",
    "PathItem",
    "RequestBody",
    "RequestContentInformation",
    "Schema",
    "TYPE_ARRAY",
    "TYPE_INTEGER",
    "TYPE_OBJECT",
    "TYPE_STRING",
]
