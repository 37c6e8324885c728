"""Generation - placeholder values, request bodies and URIs from schemas."""

from sweepqa.generation.content import (
    ContentBuilder,
    ContentKind,
    RequestContent,
    RequestContentHook,
    classify_content_type,
)
from sweepqa.generation.synthesizer import ParameterValueHook, SchemaValueSynthesizer
from sweepqa.generation.uri import UriBuilder

__all__ = [
    "ContentBuilder",
    "ContentKind",
    "ParameterValueHook",
    "RequestContent",
    "RequestContentHook",
    "SchemaValueSynthesizer",
    "UriBuilder",
    "classify_content_type",
]
