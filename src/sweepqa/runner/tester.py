"""WebServiceTester - verification protocols over an API description.

Two protocols are offered:

- ``verify_secured_endpoints_require_authentication`` calls every operation
  that declares a security requirement without credentials and fails on the
  first one that does not answer HTTP 401.
- ``exercise_all_endpoints`` calls every operation and hands each response to
  a caller-supplied callback. It never judges status codes itself.

Example:
    >>> tester = WebServiceTester("openapi.yaml")
    >>> async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
    ...     await tester.verify_secured_endpoints_require_authentication(client)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable

import httpx

from sweepqa.config import ExerciserSettings
from sweepqa.discovery.document import Document, EndpointInformation
from sweepqa.discovery.loader import DocumentSource, load_document
from sweepqa.errors import ConfigurationError, ErrorContext, VerificationFailedError
from sweepqa.generation.content import ContentBuilder, RequestContentHook
from sweepqa.generation.synthesizer import ParameterValueHook, SchemaValueSynthesizer
from sweepqa.generation.uri import UriBuilder
from sweepqa.runner.invoker import EndpointInvoker, Transport

logger = logging.getLogger(__name__)

EndpointCallback = Callable[[EndpointInformation, httpx.Response], "Awaitable[None] | None"]


class WebServiceTester:
    """Runs verification protocols for the API described by one document.

    The document is loaded on first use and cached for the lifetime of the
    tester. A path source is opened and closed by the tester; a stream source
    stays owned by the caller.

    Attributes:
        settings: Placeholder literals and the expected unauthorized status.
        parameter_value_hook: Optional override for URI and body values.
        request_content_hook: Optional override for whole request bodies.
    """

    def __init__(
        self,
        source: DocumentSource,
        *,
        parameter_value_hook: ParameterValueHook | None = None,
        request_content_hook: RequestContentHook | None = None,
        settings: ExerciserSettings | None = None,
    ) -> None:
        if source is None:
            raise TypeError("'source' cannot be None.")
        if isinstance(source, str) and not source:
            raise ValueError("'source' cannot be an empty path.")

        self._source = source
        self._document: Document | None = None
        self.settings = settings or ExerciserSettings()

        self._synthesizer = SchemaValueSynthesizer(parameter_value_hook, self.settings)
        self._content_builder = ContentBuilder(self._synthesizer, request_content_hook)
        self._invoker = EndpointInvoker(UriBuilder(self._synthesizer), self._content_builder)

    @property
    def parameter_value_hook(self) -> ParameterValueHook | None:
        return self._synthesizer.parameter_value_hook

    @parameter_value_hook.setter
    def parameter_value_hook(self, hook: ParameterValueHook | None) -> None:
        self._synthesizer.parameter_value_hook = hook

    @property
    def request_content_hook(self) -> RequestContentHook | None:
        return self._content_builder.request_content_hook

    @request_content_hook.setter
    def request_content_hook(self, hook: RequestContentHook | None) -> None:
        self._content_builder.request_content_hook = hook

    @property
    def invoker(self) -> EndpointInvoker:
        return self._invoker

    @property
    def document(self) -> Document:
        """The loaded document, loading it on first access."""
        return self._ensure_document()

    async def verify_secured_endpoints_require_authentication(
        self,
        client: Transport,
        cancel_event: asyncio.Event | None = None,
    ) -> int:
        """Verify every secured endpoint rejects an unauthenticated call.

        Returns:
            The number of secured endpoints checked.

        Raises:
            DocumentLoadError: If the document cannot be loaded.
            VerificationFailedError: On the first endpoint that does not answer
                with ``settings.unauthorized_status``.
            TraversalCancelledError: If ``cancel_event`` gets set.
        """
        document = self._ensure_document()
        expected = self.settings.unauthorized_status

        def check(endpoint: EndpointInformation, response: httpx.Response) -> None:
            if response.status_code == expected:
                return

            method, url = _request_line(endpoint, response)
            name = endpoint.operation.display_name or None
            logger.warning(
                "Secured endpoint %s %s (%s) returned HTTP %d instead of %d",
                method,
                url,
                name,
                response.status_code,
                expected,
            )
            raise VerificationFailedError(
                f"Endpoint {method} {url} ({name or 'unnamed operation'}) "
                f"didn't return HTTP {expected}, got HTTP {response.status_code}",
                method=method,
                url=url,
                operation_id=name,
                status_code=response.status_code,
                suggestions=[
                    "Check the endpoint enforces authentication",
                    "If the endpoint is meant to be public, remove its security requirement",
                ],
            )

        checked = await self._invoker.invoke(
            client,
            document,
            check,
            cancel_event,
            operation_filter=lambda endpoint: endpoint.operation.is_secured,
        )
        logger.info("All %d secured endpoint(s) returned HTTP %d", checked, expected)
        return checked

    async def exercise_all_endpoints(
        self,
        client: Transport,
        callback: EndpointCallback,
        cancel_event: asyncio.Event | None = None,
    ) -> int:
        """Call every endpoint and pass each response to ``callback``.

        ``callback`` may be a plain function or a coroutine function. Its
        exceptions propagate unchanged and stop the traversal.

        Returns:
            The number of endpoints called.
        """
        document = self._ensure_document()
        called = await self._invoker.invoke(client, document, callback, cancel_event)
        logger.info("Exercised %d endpoint(s)", called)
        return called

    def _read_document(self) -> Document | None:
        return load_document(self._source)

    def _ensure_document(self) -> Document:
        if self._document is None:
            self._document = self._read_document()

        if self._document is None:
            raise ConfigurationError(
                "Could not read OpenAPI document",
                context=ErrorContext(source=_describe(self._source)),
            )
        return self._document


def _request_line(endpoint: EndpointInformation, response: httpx.Response) -> tuple[str, str]:
    """Method and resolved URL of the request that produced ``response``."""
    try:
        request = response.request
    except RuntimeError:
        # Responses built by hand in custom transports may carry no request.
        return endpoint.method.upper(), endpoint.path
    return request.method, str(request.url)


def _describe(source: DocumentSource) -> str:
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    return getattr(source, "name", None) or "<stream>"


__all__ = ["EndpointCallback", "WebServiceTester"]
