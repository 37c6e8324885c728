"""Request body materialization, dispatched by declared content type."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sweepqa.config import ExerciserSettings
from sweepqa.discovery.document import (
    FORMAT_BINARY,
    MediaTypeContent,
    Operation,
    ParameterInformation,
    ParameterLocation,
    RequestContentInformation,
    Schema,
)
from sweepqa.discovery.loader import (
    CONTENT_TYPE_FORM_URLENCODED,
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_MULTIPART,
)
from sweepqa.generation.synthesizer import SchemaValueSynthesizer

logger = logging.getLogger(__name__)

FILE_PROPERTY_NAME = "file"


class ContentKind(Enum):
    """How a body is encoded on the wire."""

    MULTIPART = "multipart"
    URLENCODED = "urlencoded"
    JSON = "json"
    CUSTOM = "custom"


@dataclass
class RequestContent:
    """A transport-ready request body.

    Exactly one of ``content``, ``data`` or ``files`` is meaningful, matching
    the httpx request arguments of the same names.

    Attributes:
        kind: Encoding used for the body.
        content: Raw body (JSON text or any custom payload).
        data: Form fields for urlencoded bodies.
        files: Multipart parts as ``(name, (filename, payload[, content_type]))``.
        headers: Extra headers, usually just Content-Type for raw bodies.
    """

    kind: ContentKind = ContentKind.CUSTOM
    content: bytes | str | None = None
    data: dict[str, str] | None = None
    files: list[tuple[str, tuple[Any, ...]]] | None = None
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def raw(cls, content: bytes | str, content_type: str) -> RequestContent:
        """Build a custom body, e.g. from a request_content_hook."""
        return cls(kind=ContentKind.CUSTOM, content=content, headers={"Content-Type": content_type})

    def to_request_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``httpx.AsyncClient.build_request``."""
        kwargs: dict[str, Any] = {}
        if self.content is not None:
            kwargs["content"] = self.content
        if self.data is not None:
            kwargs["data"] = self.data
        if self.files is not None:
            kwargs["files"] = self.files
        if self.headers:
            kwargs["headers"] = dict(self.headers)
        return kwargs


RequestContentHook = Callable[[RequestContentInformation], "RequestContent | None"]


def classify_content_type(content_type: str) -> ContentKind:
    """Map a declared content type to the encoding used to synthesize it.

    Parameters such as ``; charset=utf-8`` and letter case are ignored.
    Anything that is neither multipart nor urlencoded is treated as JSON.
    """
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == CONTENT_TYPE_MULTIPART:
        return ContentKind.MULTIPART
    if media_type == CONTENT_TYPE_FORM_URLENCODED:
        return ContentKind.URLENCODED
    return ContentKind.JSON


class ContentBuilder:
    """Builds request bodies for operations that declare one.

    A ``request_content_hook`` returning a non-None RequestContent wins and
    skips synthesis entirely. Otherwise:

    - multipart: one part per declared property; binary properties (format
      ``binary`` or named ``file``) get placeholder file content, all others
      an empty text part.
    - urlencoded: one form field per declared property.
    - everything else: a JSON object of the *required* properties only.
    """

    def __init__(
        self,
        synthesizer: SchemaValueSynthesizer,
        request_content_hook: RequestContentHook | None = None,
    ) -> None:
        self.synthesizer = synthesizer
        self.request_content_hook = request_content_hook

    @property
    def settings(self) -> ExerciserSettings:
        return self.synthesizer.settings

    def build(
        self,
        operation: Operation,
        content_type: str,
        content: MediaTypeContent,
        path: str,
        method: str,
    ) -> RequestContent:
        if self.request_content_hook is not None:
            custom = self.request_content_hook(
                RequestContentInformation(
                    operation=operation,
                    content_type=content_type,
                    content=content,
                    path=path,
                    method=method,
                )
            )
            if custom is not None:
                logger.debug("Custom request content for %s %s", method.upper(), path)
                return custom

        context = ParameterInformation(
            path=path,
            method=method,
            operation=operation,
            schema=content.schema or Schema(),
            location=ParameterLocation.BODY,
        )

        kind = classify_content_type(content_type)
        if kind is ContentKind.MULTIPART:
            return self._multipart(content.schema)
        if kind is ContentKind.URLENCODED:
            return self._urlencoded(content.schema, context)
        return self._json(content.schema, content_type, context)

    def _multipart(self, schema: Schema | None) -> RequestContent:
        files: list[tuple[str, tuple[Any, ...]]] = []
        for name, prop in _properties(schema).items():
            if _is_binary(name, prop):
                payload = self.settings.file_placeholder.encode("utf-8")
                files.append((name, (self.settings.file_name, payload, "application/octet-stream")))
            else:
                files.append((name, (None, b"")))
        return RequestContent(kind=ContentKind.MULTIPART, files=files)

    def _urlencoded(self, schema: Schema | None, context: ParameterInformation) -> RequestContent:
        data = {}
        for name, prop in _properties(schema).items():
            data[name] = self.synthesizer.synthesize(prop, name, context, False)
        return RequestContent(kind=ContentKind.URLENCODED, data=data)

    def _json(
        self, schema: Schema | None, content_type: str, context: ParameterInformation
    ) -> RequestContent:
        body = self.synthesizer.render_json_object(schema, context)
        media_type = content_type.split(";", 1)[0].strip() or CONTENT_TYPE_JSON
        return RequestContent(
            kind=ContentKind.JSON,
            content=body,
            headers={"Content-Type": media_type},
        )


def _properties(schema: Schema | None) -> dict[str, Schema]:
    if schema is None:
        return {}
    return schema.properties


def _is_binary(name: str, schema: Schema) -> bool:
    return schema.format == FORMAT_BINARY or name == FILE_PROPERTY_NAME


__all__ = [
    "ContentBuilder",
    "ContentKind",
    "RequestContent",
    "RequestContentHook",
    "classify_content_type",
]
