"""Sequential endpoint invocation over a Document."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import httpx

from sweepqa.discovery.document import Document, EndpointInformation
from sweepqa.errors import TraversalCancelledError
from sweepqa.generation.content import ContentBuilder
from sweepqa.generation.uri import UriBuilder

logger = logging.getLogger(__name__)

PerOperationCallback = Callable[[EndpointInformation, httpx.Response], "Awaitable[None] | None"]
OperationFilter = Callable[[EndpointInformation], bool]


class Transport(Protocol):
    """The part of ``httpx.AsyncClient`` the invoker relies on."""

    def build_request(self, method: str, url: str, **kwargs: Any) -> httpx.Request: ...

    async def send(self, request: httpx.Request) -> httpx.Response: ...


class EndpointInvoker:
    """Calls every operation of a Document, one request at a time.

    Operations are visited in document order, then in the declared method
    order of each path. Each response is fully awaited and handed to the
    callback before the next request is built, so callbacks observe
    operations in a stable order and a raising callback stops the traversal.

    Example::

        invoker = EndpointInvoker(UriBuilder(synth), ContentBuilder(synth))
        async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
            await invoker.invoke(client, document, on_response)
    """

    def __init__(self, uri_builder: UriBuilder, content_builder: ContentBuilder) -> None:
        self.uri_builder = uri_builder
        self.content_builder = content_builder

    async def invoke(
        self,
        client: Transport,
        document: Document,
        per_operation: PerOperationCallback,
        cancel_event: asyncio.Event | None = None,
        operation_filter: OperationFilter | None = None,
    ) -> int:
        """Send one request per (filtered) operation.

        Returns:
            The number of requests sent.

        Raises:
            TraversalCancelledError: If ``cancel_event`` is set before a request
                is started. Requests already sent are not undone.
        """
        sent = 0
        for path, method, operation in document.iter_operations():
            endpoint = EndpointInformation(path=path, method=method, operation=operation)
            if operation_filter is not None and not operation_filter(endpoint):
                continue

            if cancel_event is not None and cancel_event.is_set():
                logger.info("Traversal cancelled after %d request(s)", sent)
                raise TraversalCancelledError(
                    f"Traversal cancelled after {sent} request(s)",
                    requests_sent=sent,
                )

            response = await self.call_operation(client, endpoint)
            sent += 1

            result = per_operation(endpoint, response)
            if inspect.isawaitable(result):
                await result

        return sent

    def build_request(self, client: Transport, endpoint: EndpointInformation) -> httpx.Request:
        """Assemble the request for one operation without sending it."""
        operation = endpoint.operation
        uri = self.uri_builder.build(endpoint.path, operation, endpoint.method)

        kwargs: dict[str, Any] = {}
        first = operation.request_body.first() if operation.request_body is not None else None
        if first is not None:
            content_type, media = first
            content = self.content_builder.build(
                operation, content_type, media, endpoint.path, endpoint.method
            )
            kwargs = content.to_request_kwargs()

        return client.build_request(endpoint.method.upper(), uri, **kwargs)

    async def call_operation(self, client: Transport, endpoint: EndpointInformation) -> httpx.Response:
        request = self.build_request(client, endpoint)
        logger.debug("-> %s %s", request.method, request.url)
        response = await client.send(request)
        logger.debug("<- %s %s: HTTP %d", request.method, request.url, response.status_code)
        return response


__all__ = ["EndpointInvoker", "OperationFilter", "PerOperationCallback", "Transport"]
