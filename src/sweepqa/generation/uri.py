"""Request URI construction from path templates."""

from __future__ import annotations

from sweepqa.discovery.document import Operation, ParameterInformation, ParameterLocation
from sweepqa.generation.synthesizer import SchemaValueSynthesizer


class UriBuilder:
    """Substitutes ``{name}`` placeholders with synthesized path parameter values.

    Substitution is textual. Parameters missing from the template are ignored
    and placeholders without a matching parameter are left as they are.
    """

    def __init__(self, synthesizer: SchemaValueSynthesizer) -> None:
        self.synthesizer = synthesizer

    def build(self, path_template: str, operation: Operation, method: str) -> str:
        result = path_template
        for param in operation.path_parameters:
            context = ParameterInformation(
                path=path_template,
                method=method,
                operation=operation,
                parameter_name=param.name,
                schema=param.schema,
                location=ParameterLocation.PATH,
            )
            value = self.synthesizer.synthesize(param.schema, param.name, context, False)
            result = result.replace("{" + param.name + "}", value)
        return result


__all__ = ["UriBuilder"]
