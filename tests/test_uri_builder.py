"""Tests for request URI construction."""

from __future__ import annotations

from sweepqa.discovery import Document, Operation, Parameter, ParameterInformation, Schema
from sweepqa.generation import SchemaValueSynthesizer, UriBuilder


def _operation(*parameters: Parameter) -> Operation:
    return Operation(method="get", operation_id="getThing", parameters=parameters)


class TestUriBuilder:
    def test_template_without_parameters_is_unchanged(self, uri_builder: UriBuilder) -> None:
        assert uri_builder.build("/store/inventory", _operation(), "get") == "/store/inventory"

    def test_string_path_parameter(self, uri_builder: UriBuilder) -> None:
        operation = _operation(Parameter("username", "path", Schema(type="string"), True))
        assert uri_builder.build("/user/{username}", operation, "get") == "/user/test"

    def test_integer_path_parameter(self, uri_builder: UriBuilder) -> None:
        operation = _operation(Parameter("orderId", "path", Schema(type="integer"), True))
        assert uri_builder.build("/store/order/{orderId}", operation, "get") == "/store/order/1"

    def test_multiple_parameters(self, uri_builder: UriBuilder) -> None:
        operation = _operation(
            Parameter("authorName", "path", Schema(type="string"), True),
            Parameter("isbn", "path", Schema(type="string"), True),
        )

        uri = uri_builder.build("/authors/{authorName}/books/{isbn}", operation, "get")

        assert uri == "/authors/test/books/test"

    def test_repeated_placeholder_is_replaced_everywhere(self, uri_builder: UriBuilder) -> None:
        operation = _operation(Parameter("id", "path", Schema(type="integer"), True))
        assert uri_builder.build("/a/{id}/b/{id}", operation, "get") == "/a/1/b/1"

    def test_query_parameters_are_not_substituted(self, uri_builder: UriBuilder) -> None:
        operation = _operation(Parameter("status", "query", Schema(type="string"), True))
        assert uri_builder.build("/pets/{status}", operation, "get") == "/pets/{status}"

    def test_unknown_placeholder_is_left_alone(self, uri_builder: UriBuilder) -> None:
        operation = _operation(Parameter("id", "path", Schema(type="integer"), True))
        assert uri_builder.build("/things/{other}", operation, "get") == "/things/{other}"

    def test_hook_value_is_used(self) -> None:
        builder = UriBuilder(SchemaValueSynthesizer(lambda info: "alice"))
        operation = _operation(Parameter("username", "path", Schema(type="string"), True))

        assert builder.build("/user/{username}", operation, "get") == "/user/alice"

    def test_hook_value_is_not_encoded(self) -> None:
        builder = UriBuilder(SchemaValueSynthesizer(lambda info: "a b"))
        operation = _operation(Parameter("username", "path", Schema(type="string"), True))

        assert builder.build("/user/{username}", operation, "get") == "/user/a b"

    def test_int64_path_parameter_ignores_hook(self) -> None:
        builder = UriBuilder(SchemaValueSynthesizer(lambda info: "999"))
        operation = _operation(
            Parameter("petId", "path", Schema(type="integer", format="int64"), True)
        )

        assert builder.build("/pet/{petId}", operation, "get") == "/pet/1"

    def test_hook_sees_template_and_method(self) -> None:
        seen: list[ParameterInformation] = []

        def hook(info: ParameterInformation) -> str | None:
            seen.append(info)
            return None

        builder = UriBuilder(SchemaValueSynthesizer(hook))
        operation = _operation(Parameter("username", "path", Schema(type="string"), True))
        builder.build("/user/{username}", operation, "delete")

        assert [(i.path, i.method, i.parameter_name) for i in seen] == [
            ("/user/{username}", "delete", "username")
        ]

    def test_path_level_parameters_reach_every_operation(
        self, uri_builder: UriBuilder, bookstore: Document
    ) -> None:
        uris = {
            (method, uri_builder.build(path, operation, method))
            for path, method, operation in bookstore.iter_operations()
            if path.startswith("/books/")
        }

        assert uris == {
            ("get", "/books/1"),
            ("put", "/books/1"),
            ("delete", "/books/1"),
            ("put", "/books/1/cover"),
        }
