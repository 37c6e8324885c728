"""Load OpenAPI 3.x and Swagger 2.0 documents into a Document.

JSON text is read with ``json.loads``, anything else with ``yaml.safe_load``.
The raw mapping is then
walked once; every structural problem found on the way is collected and
reported in a single DocumentLoadError.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import IO, Any, Union

import yaml

from sweepqa.discovery.document import (
    FORMAT_BINARY,
    HTTP_METHODS,
    TYPE_ARRAY,
    TYPE_OBJECT,
    TYPE_STRING,
    Document,
    MediaTypeContent,
    Operation,
    Parameter,
    ParameterLocation,
    PathItem,
    RequestBody,
    Schema,
)
from sweepqa.discovery.ref_resolver import RefResolver, UnresolvedRef
from sweepqa.errors import (
    DocumentLoadError,
    DocumentNotFoundError,
    ErrorContext,
    UnsupportedSpecVersionError,
)

logger = logging.getLogger(__name__)

DocumentSource = Union[str, "os.PathLike[str]", IO[bytes], IO[str]]

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_MULTIPART = "multipart/form-data"
CONTENT_TYPE_FORM_URLENCODED = "application/x-www-form-urlencoded"

SWAGGER_TYPE_FILE = "file"


def load_document(source: DocumentSource) -> Document:
    """Load an API description from a file path or an open stream.

    A path is opened and closed here. A stream is read to the end but left
    open; its lifetime belongs to the caller.

    Raises:
        DocumentNotFoundError: If a path is given and does not exist.
        UnsupportedSpecVersionError: If no supported version is declared.
        DocumentLoadError: For unreadable input or structural errors.
    """
    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        if not path.is_file():
            raise DocumentNotFoundError(
                f"OpenAPI document '{path}' does not exist!",
                path=str(path),
            )
        with open(path, "rb") as f:
            raw = f.read()
        origin = str(path)
    else:
        try:
            raw = source.read()
        except (OSError, ValueError) as e:
            raise DocumentLoadError(
                f"Could not read OpenAPI document stream: {e}",
                cause=e,
                context=ErrorContext(source="<stream>"),
            ) from e
        origin = "<stream>"

    return parse_document(raw, source_name=origin)


def parse_document(raw: bytes | str, source_name: str = "<string>") -> Document:
    """Parse YAML/JSON text into a Document."""
    context = ErrorContext(source=source_name)

    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DocumentLoadError(
                f"OpenAPI document is not valid UTF-8: {e}", cause=e, context=context
            ) from e
    else:
        text = raw

    spec = _load_json(text)
    if spec is None:
        try:
            spec = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DocumentLoadError(
                f"YAML/JSON parsing error: {e}", cause=e, context=context
            ) from e

    if spec is None:
        spec = {}
    if not isinstance(spec, dict):
        raise DocumentLoadError(
            f"OpenAPI document root must be a mapping, got {type(spec).__name__}",
            context=context,
        )

    return _DocumentParser(spec, source_name).parse()


def _load_json(text: str) -> Any:
    """Parse JSON text, or return None when the text is not JSON.

    JSON is tried first because PyYAML rejects valid JSON that is indented
    with tabs.
    """
    if not text.lstrip().startswith(("{", "[")):
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        # Flow-style YAML such as "{openapi: 3.0.0}" also starts with "{".
        return None


class _DocumentParser:
    """Single-use walker turning a raw spec mapping into a Document."""

    def __init__(self, spec: dict[str, Any], source_name: str) -> None:
        self._spec = spec
        self._source_name = source_name
        self._resolver = RefResolver(spec)
        self._schemas: dict[str, Schema] = {}
        self._errors: list[str] = []
        self._swagger2 = False

    def parse(self) -> Document:
        spec_version = self._check_version()

        info = self._spec.get("info")
        if not isinstance(info, dict):
            self._errors.append("#/info: required mapping is missing")
            info = {}

        paths = self._spec.get("paths")
        if paths is None:
            # OpenAPI 3.1 allows documents made only of webhooks/components.
            if not spec_version.startswith("3.1"):
                self._errors.append("#/paths: required mapping is missing")
            paths = {}
        elif not isinstance(paths, dict):
            self._errors.append("#/paths: must be a mapping")
            paths = {}

        global_security = self._spec.get("security", [])
        global_consumes = self._spec.get("consumes", [])

        items: list[PathItem] = []
        for path, path_item in paths.items():
            if not isinstance(path, str) or not path.startswith("/"):
                self._errors.append(f"#/paths/{path}: path must begin with '/'")
                continue
            if not isinstance(path_item, dict):
                self._errors.append(f"#/paths/{path}: path item must be a mapping")
                continue
            try:
                path_item = self._resolver.resolve_object(path_item)
            except UnresolvedRef as e:
                self._errors.append(f"#/paths/{path}: {e}")
                continue

            where = f"#/paths/{path}"
            path_params = self._raw_parameters(path_item.get("parameters", []), where)

            operations: dict[str, Operation] = {}
            for method, raw_op in path_item.items():
                if not isinstance(method, str) or method.lower() not in HTTP_METHODS:
                    continue
                if not isinstance(raw_op, dict):
                    self._errors.append(f"{where}/{method}: operation must be a mapping")
                    continue
                operations[method.lower()] = self._parse_operation(
                    f"{where}/{method}",
                    method.lower(),
                    raw_op,
                    path_params,
                    global_security,
                    global_consumes,
                )

            items.append(PathItem(path=path, operations=operations))

        if self._errors:
            raise DocumentLoadError(
                errors=self._errors,
                context=ErrorContext(source=self._source_name),
            )

        document = Document(
            title=str(info.get("title", "API")),
            version=str(info.get("version", "")),
            spec_version=spec_version,
            paths=tuple(items),
        )
        logger.info(
            "Loaded OpenAPI %s document '%s' from %s: %d operations (%d secured)",
            spec_version,
            document.title,
            self._source_name,
            document.operation_count,
            document.secured_operation_count,
        )
        return document

    def _check_version(self) -> str:
        openapi = self._spec.get("openapi")
        swagger = self._spec.get("swagger")

        if openapi is not None and str(openapi).startswith("3."):
            return str(openapi)
        if swagger is not None and str(swagger) in ("2.0", "2"):
            self._swagger2 = True
            return "2.0"

        declared = openapi if openapi is not None else swagger
        if declared is None:
            message = "OpenAPI document does not declare an 'openapi' or 'swagger' version"
        else:
            message = f"OpenAPI specification version '{declared}' is not supported"
        raise UnsupportedSpecVersionError(
            message,
            version=declared,
            context=ErrorContext(source=self._source_name),
        )

    def _raw_parameters(self, raw: Any, where: str) -> list[dict[str, Any]]:
        if not isinstance(raw, list):
            self._errors.append(f"{where}/parameters: must be a list")
            return []

        result = []
        for index, entry in enumerate(raw):
            if not isinstance(entry, dict):
                self._errors.append(f"{where}/parameters/{index}: parameter must be a mapping")
                continue
            try:
                entry = self._resolver.resolve_object(entry)
            except UnresolvedRef as e:
                self._errors.append(f"{where}/parameters/{index}: {e}")
                continue
            if "name" not in entry or "in" not in entry:
                self._errors.append(
                    f"{where}/parameters/{index}: parameter requires 'name' and 'in'"
                )
                continue
            result.append(entry)
        return result

    def _parse_operation(
        self,
        where: str,
        method: str,
        raw_op: dict[str, Any],
        path_params: list[dict[str, Any]],
        global_security: Any,
        global_consumes: Any,
    ) -> Operation:
        # Operation-level parameters replace path-level ones with the same (name, in).
        merged: dict[tuple[str, str], dict[str, Any]] = {}
        for entry in path_params + self._raw_parameters(raw_op.get("parameters", []), where):
            merged[(str(entry["name"]), str(entry["in"]))] = entry

        parameters: list[Parameter] = []
        body_param: dict[str, Any] | None = None
        form_params: list[dict[str, Any]] = []
        for (name, location), entry in merged.items():
            if self._swagger2 and location == "body":
                body_param = entry
                continue
            if self._swagger2 and location == "formData":
                form_params.append(entry)
                continue
            parameters.append(
                Parameter(
                    name=name,
                    location=location,
                    schema=self._parameter_schema(entry, f"{where}/parameters/{name}"),
                    required=bool(entry.get("required", location == ParameterLocation.PATH)),
                )
            )

        if self._swagger2:
            consumes = raw_op.get("consumes") or global_consumes or []
            request_body = self._swagger2_body(where, body_param, form_params, consumes)
        else:
            request_body = self._request_body(where, raw_op.get("requestBody"))

        security = raw_op["security"] if "security" in raw_op else global_security
        if not isinstance(security, list):
            self._errors.append(f"{where}/security: must be a list")
            security = []

        tags = raw_op.get("tags") or []
        return Operation(
            method=method,
            operation_id=raw_op.get("operationId"),
            summary=raw_op.get("summary"),
            description=raw_op.get("description"),
            parameters=tuple(parameters),
            request_body=request_body,
            # An empty requirement object means "anonymous allowed".
            security=tuple(req for req in security if isinstance(req, dict) and req),
            tags=tuple(str(t) for t in tags) if isinstance(tags, list) else (),
        )

    def _parameter_schema(self, entry: dict[str, Any], where: str) -> Schema:
        if "schema" in entry:
            return self._schema(entry["schema"], where)

        content = entry.get("content")
        if isinstance(content, dict) and content:
            media = next(iter(content.values()))
            if isinstance(media, dict) and "schema" in media:
                return self._schema(media["schema"], where)
            return Schema()

        # Swagger 2.0 non-body parameters carry type/format inline.
        inline = {k: entry[k] for k in ("type", "format", "items") if k in entry}
        return self._schema(inline, where)

    def _request_body(self, where: str, raw: Any) -> RequestBody | None:
        if raw is None:
            return None
        if not isinstance(raw, dict):
            self._errors.append(f"{where}/requestBody: must be a mapping")
            return None
        try:
            raw = self._resolver.resolve_object(raw)
        except UnresolvedRef as e:
            self._errors.append(f"{where}/requestBody: {e}")
            return None

        content: dict[str, MediaTypeContent] = {}
        raw_content = raw.get("content") or {}
        if not isinstance(raw_content, dict):
            self._errors.append(f"{where}/requestBody/content: must be a mapping")
            raw_content = {}
        for content_type, media in raw_content.items():
            schema = None
            if isinstance(media, dict) and "schema" in media:
                schema = self._schema(media["schema"], f"{where}/requestBody/{content_type}")
            content[str(content_type)] = MediaTypeContent(schema=schema)

        return RequestBody(content=content, required=bool(raw.get("required", False)))

    def _swagger2_body(
        self,
        where: str,
        body_param: dict[str, Any] | None,
        form_params: list[dict[str, Any]],
        consumes: list[str],
    ) -> RequestBody | None:
        if body_param is not None:
            content_type = consumes[0] if consumes else CONTENT_TYPE_JSON
            schema = self._schema(body_param.get("schema", {}), f"{where}/body")
            return RequestBody(
                content={content_type: MediaTypeContent(schema=schema)},
                required=bool(body_param.get("required", False)),
            )

        if not form_params:
            return None

        has_file = any(p.get("type") == SWAGGER_TYPE_FILE for p in form_params)
        if has_file or CONTENT_TYPE_MULTIPART in consumes:
            content_type = CONTENT_TYPE_MULTIPART
        else:
            content_type = CONTENT_TYPE_FORM_URLENCODED

        schema = Schema(type=TYPE_OBJECT)
        for entry in form_params:
            name = str(entry["name"])
            schema.properties[name] = self._parameter_schema(entry, f"{where}/formData/{name}")
            if entry.get("required"):
                schema.required.append(name)

        return RequestBody(
            content={content_type: MediaTypeContent(schema=schema)},
            required=bool(schema.required),
        )

    def _schema(self, raw: Any, where: str) -> Schema:
        if not isinstance(raw, dict):
            return Schema()

        if "$ref" in raw:
            ref = raw["$ref"]
            cached = self._schemas.get(ref)
            if cached is not None:
                return cached
            try:
                target = self._resolver.resolve(ref)
            except UnresolvedRef as e:
                self._errors.append(f"{where}: {e}")
                return Schema()
            if "$ref" in target:
                # Alias of another component: share the instance of the final target.
                try:
                    self._resolver.resolve_object(target)
                except UnresolvedRef as e:
                    self._errors.append(f"{where}: {e}")
                    return Schema()
                schema = self._schema(target, where)
                self._schemas[ref] = schema
                return schema
            # Register before filling so self references land on this instance.
            schema = Schema(ref=ref)
            self._schemas[ref] = schema
            self._fill(schema, target, where, frozenset({ref}))
            return schema

        schema = Schema()
        self._fill(schema, raw, where, frozenset())
        return schema

    def _fill(self, schema: Schema, raw: dict[str, Any], where: str, seen: frozenset[str]) -> None:
        raw = self._flatten(raw, where, seen)

        schema.type = _type_of(raw)
        schema.format = raw.get("format")
        if schema.type == SWAGGER_TYPE_FILE:
            schema.type = TYPE_STRING
            schema.format = FORMAT_BINARY

        if "items" in raw:
            schema.items = self._schema(raw["items"], f"{where}/items")
        elif schema.type == TYPE_ARRAY:
            schema.items = Schema()

        properties = raw.get("properties") or {}
        if isinstance(properties, dict):
            for name, prop in properties.items():
                schema.properties[str(name)] = self._schema(prop, f"{where}/{name}")

        required = raw.get("required")
        if isinstance(required, list):
            schema.required = [str(name) for name in required]

    def _flatten(self, raw: dict[str, Any], where: str, seen: frozenset[str]) -> dict[str, Any]:
        """Merge allOf members; pick the first oneOf/anyOf alternative."""
        all_of = raw.get("allOf")
        if isinstance(all_of, list):
            merged = {k: v for k, v in raw.items() if k != "allOf"}
            properties = dict(merged.get("properties") or {})
            required = list(merged.get("required") or [])
            for sub in all_of:
                resolved = self._deref(sub, where, seen)
                if resolved is None:
                    continue
                sub_raw, sub_seen = resolved
                sub_raw = self._flatten(sub_raw, where, sub_seen)
                properties.update(sub_raw.get("properties") or {})
                required.extend(r for r in sub_raw.get("required") or [] if r not in required)
                for key, value in sub_raw.items():
                    if key not in ("properties", "required"):
                        merged.setdefault(key, value)
            if properties:
                merged["properties"] = properties
            if required:
                merged["required"] = required
            return merged

        for key in ("oneOf", "anyOf"):
            options = raw.get(key)
            if isinstance(options, list) and options:
                resolved = self._deref(options[0], where, seen)
                rest = {k: v for k, v in raw.items() if k != key}
                if resolved is None:
                    return rest
                first, first_seen = resolved
                return {**rest, **self._flatten(first, where, first_seen)}

        return raw

    def _deref(
        self, sub: Any, where: str, seen: frozenset[str]
    ) -> tuple[dict[str, Any], frozenset[str]] | None:
        if not isinstance(sub, dict):
            return None
        if "$ref" not in sub:
            return sub, seen

        ref = sub["$ref"]
        if ref in seen:
            self._errors.append(f"{where}: '{ref}' is composed from itself")
            return None
        try:
            return self._resolver.resolve(ref), seen | {ref}
        except UnresolvedRef as e:
            self._errors.append(f"{where}: {e}")
            return None


def _type_of(raw: dict[str, Any]) -> str | None:
    declared = raw.get("type")
    if isinstance(declared, list):
        # OpenAPI 3.1 style: ["string", "null"]
        declared = next((t for t in declared if t != "null"), None)
    if declared is None:
        if "items" in raw:
            return TYPE_ARRAY
        if "properties" in raw:
            return TYPE_OBJECT
        return None
    return str(declared)


__all__ = [
    "CONTENT_TYPE_FORM_URLENCODED",
    "CONTENT_TYPE_JSON",
    "CONTENT_TYPE_MULTIPART",
    "DocumentSource",
    "load_document",
    "parse_document",
]
