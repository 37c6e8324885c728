"""Runner - endpoint invocation and verification protocols."""

from sweepqa.runner.invoker import EndpointInvoker, OperationFilter, PerOperationCallback, Transport
from sweepqa.runner.tester import EndpointCallback, WebServiceTester

__all__ = [
    "EndpointCallback",
    "EndpointInvoker",
    "OperationFilter",
    "PerOperationCallback",
    "Transport",
    "WebServiceTester",
]
