"""Pytest fixtures for SweepQA tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from sweepqa.config import ExerciserSettings
from sweepqa.discovery import Document, load_document
from sweepqa.generation import ContentBuilder, SchemaValueSynthesizer, UriBuilder
from sweepqa.runner import EndpointInvoker

DATA_DIR = Path(__file__).parent / "data"
BASE_URL = "http://test.com"


class RequestRecorder:
    """MockTransport handler that records every request it answers.

    Answers with ``status`` unless a ``responder`` is installed, in which case
    the responder builds the response for each request.
    """

    def __init__(self, status: int = 200) -> None:
        self.status = status
        self.responder: Callable[[httpx.Request], httpx.Response] | None = None
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        # Read the body so multipart streams can be inspected afterwards.
        request.read()
        self.requests.append(request)
        if self.responder is not None:
            return self.responder(request)
        return httpx.Response(self.status)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def lines(self) -> list[tuple[str, str]]:
        """(method, path) of every recorded request, in order."""
        return [(r.method, r.url.path) for r in self.requests]


@pytest.fixture
def recorder() -> RequestRecorder:
    return RequestRecorder()


@pytest.fixture
def client(recorder: RequestRecorder) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(recorder), base_url=BASE_URL)


@pytest.fixture
def petstore_path() -> Path:
    return DATA_DIR / "petstore_swagger.json"


@pytest.fixture
def bookstore_path() -> Path:
    return DATA_DIR / "bookstore.yaml"


@pytest.fixture
def petstore(petstore_path: Path) -> Document:
    return load_document(petstore_path)


@pytest.fixture
def bookstore(bookstore_path: Path) -> Document:
    return load_document(bookstore_path)


@pytest.fixture
def settings() -> ExerciserSettings:
    return ExerciserSettings()


@pytest.fixture
def synthesizer(settings: ExerciserSettings) -> SchemaValueSynthesizer:
    return SchemaValueSynthesizer(settings=settings)


@pytest.fixture
def content_builder(synthesizer: SchemaValueSynthesizer) -> ContentBuilder:
    return ContentBuilder(synthesizer)


@pytest.fixture
def uri_builder(synthesizer: SchemaValueSynthesizer) -> UriBuilder:
    return UriBuilder(synthesizer)


@pytest.fixture
def invoker(uri_builder: UriBuilder, content_builder: ContentBuilder) -> EndpointInvoker:
    return EndpointInvoker(uri_builder, content_builder)
