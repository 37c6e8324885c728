"""Schema value synthesis.

Turns a Schema node into a literal placeholder string. The result only depends
on the schema, the parameter context and the installed hook, so repeated calls
with identical inputs give identical strings.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from sweepqa.config import ExerciserSettings
from sweepqa.discovery.document import (
    FORMAT_INT64,
    TYPE_INTEGER,
    TYPE_STRING,
    ParameterInformation,
    ParameterLocation,
    Schema,
)
from sweepqa.errors import ErrorContext, SchemaCycleError

logger = logging.getLogger(__name__)

ParameterValueHook = Callable[[ParameterInformation], "str | None"]


class SchemaValueSynthesizer:
    """Produces placeholder literals for schema nodes.

    Rules, in order:

    1. Arrays synthesize one element (their ``items`` schema).
    2. ``integer`` defaults to ``"1"``, everything else to ``"test"``.
    3. A non-None result from ``parameter_value_hook`` replaces the default.
       The hook always sees the declared schema, so for an array it gets the
       array schema and its result fills one element.
    4. Strings are JSON-quoted when ``enclose_strings_for_json`` is set.

    Path parameters with ``format: int64`` always get the integer placeholder,
    hook or not. Body properties with that format follow the normal rules.

    Example::

        synthesizer = SchemaValueSynthesizer()
        synthesizer.synthesize(Schema(type="string"), "name", info, True)  # '"test"'
    """

    def __init__(
        self,
        parameter_value_hook: ParameterValueHook | None = None,
        settings: ExerciserSettings | None = None,
    ) -> None:
        self.parameter_value_hook = parameter_value_hook
        self.settings = settings or ExerciserSettings()

    def synthesize(
        self,
        schema: Schema,
        parameter_name: str,
        context: ParameterInformation,
        enclose_strings_for_json: bool,
    ) -> str:
        """Return the placeholder literal for ``schema``."""
        return self._synthesize(schema, parameter_name, context, enclose_strings_for_json, ())

    def render_json(self, schema: Schema, parameter_name: str, context: ParameterInformation) -> str:
        """Return a JSON fragment for ``schema``.

        Arrays become ``[<element>]`` at every nesting level and objects with
        declared properties become nested objects of their required
        properties. Scalars go through :meth:`synthesize`.
        """
        return self._render_json(schema, parameter_name, context, ())

    def render_json_object(
        self, schema: Schema | None, context: ParameterInformation
    ) -> str:
        """Render the required properties of ``schema`` as a JSON object literal."""
        if schema is None:
            return "{}"
        return self._render_object(schema, context, ())

    def _synthesize(
        self,
        schema: Schema,
        parameter_name: str,
        context: ParameterInformation,
        enclose: bool,
        visiting: tuple[Schema, ...],
        declared: Schema | None = None,
    ) -> str:
        # declared: the array schema an element is synthesized for, if any
        visiting = self._enter(schema, parameter_name, context, visiting)

        if schema.is_array:
            return self._synthesize(
                schema.items or Schema(), parameter_name, context, enclose, visiting, declared or schema
            )

        if (
            context.location == ParameterLocation.PATH
            and schema.format == FORMAT_INT64
            and self.settings.force_int64_path_literal
        ):
            return self.settings.integer_placeholder

        if schema.type == TYPE_INTEGER:
            result = self.settings.integer_placeholder
        else:
            result = self.settings.string_placeholder

        custom = self._call_hook(declared or schema, parameter_name, context)
        if custom is not None:
            result = custom

        if schema.type == TYPE_STRING and enclose:
            return json.dumps(result)
        return result

    def _render_json(
        self,
        schema: Schema,
        parameter_name: str,
        context: ParameterInformation,
        visiting: tuple[Schema, ...],
        declared: Schema | None = None,
    ) -> str:
        if schema.is_array:
            visiting = self._enter(schema, parameter_name, context, visiting)
            element = self._render_json(
                schema.items or Schema(), parameter_name, context, visiting, declared or schema
            )
            return f"[{element}]"

        if schema.is_object and schema.properties:
            custom = self._call_hook(declared or schema, parameter_name, context)
            if custom is not None:
                return custom
            visiting = self._enter(schema, parameter_name, context, visiting)
            return self._render_object(schema, context, visiting)

        return self._synthesize(schema, parameter_name, context, True, visiting, declared)

    def _render_object(
        self,
        schema: Schema,
        context: ParameterInformation,
        visiting: tuple[Schema, ...],
    ) -> str:
        members = []
        for name in schema.required:
            prop = schema.properties.get(name)
            if prop is None:
                continue
            value = self._render_json(prop, name, _for_property(context, name, prop), visiting)
            members.append(f"{json.dumps(name)}: {value}")
        return "{" + ", ".join(members) + "}"

    def _call_hook(
        self, schema: Schema, parameter_name: str, context: ParameterInformation
    ) -> str | None:
        if self.parameter_value_hook is None:
            return None
        info = ParameterInformation(
            path=context.path,
            method=context.method,
            operation=context.operation,
            parameter_name=parameter_name,
            schema=schema,
            location=context.location,
        )
        custom = self.parameter_value_hook(info)
        if custom is not None:
            logger.debug(
                "Custom value for %s %s parameter '%s'", context.method.upper(), context.path, parameter_name
            )
            return str(custom)
        return None

    def _enter(
        self,
        schema: Schema,
        parameter_name: str,
        context: ParameterInformation,
        visiting: tuple[Schema, ...],
    ) -> tuple[Schema, ...]:
        if any(schema is seen for seen in visiting):
            raise SchemaCycleError(
                f"Schema '{schema.ref or schema.type}' refers back to itself "
                f"while synthesizing '{parameter_name}'",
                parameter_name=parameter_name,
                context=ErrorContext(
                    operation_id=context.operation.display_name or None,
                    request={"method": context.method.upper(), "url": context.path},
                ),
            )
        return visiting + (schema,)


def _for_property(context: ParameterInformation, name: str, schema: Schema) -> ParameterInformation:
    return ParameterInformation(
        path=context.path,
        method=context.method,
        operation=context.operation,
        parameter_name=name,
        schema=schema,
        location=context.location,
    )


__all__ = ["ParameterValueHook", "SchemaValueSynthesizer"]
