"""
Tracing helpers.

The FastAPI instrumentation opens the server span for each request. Handlers
never read the ambient "current span" themselves: a RequestContext holding
that span is built by a dependency and handed down explicitly.
"""

from dataclasses import dataclass
from typing import Dict

from fastapi import Request
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from email_service.config import EmailServiceConfig

TRACER_NAME = "email"


def build_tracer_provider(config: EmailServiceConfig) -> TracerProvider:
    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: config.service_name}))
    if config.otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=config.otlp_endpoint))
        )
    return provider


def trace_fields(span: trace.Span) -> Dict[str, str]:
    """Lowercase hex ids of ``span`` for log correlation."""
    span_context = span.get_span_context()
    return {
        "trace_id": trace.format_trace_id(span_context.trace_id),
        "span_id": trace.format_span_id(span_context.span_id),
    }


@dataclass(frozen=True)
class RequestContext:
    span: trace.Span
    tracer: trace.Tracer

    def start_span(self, name: str):
        """Start a child of the request span; use as a ``with`` block so it always ends."""
        return self.tracer.start_as_current_span(
            name, context=trace.set_span_in_context(self.span)
        )


def request_context(request: Request) -> RequestContext:
    """Return the request's context, creating it on first use."""
    ctx = getattr(request.state, "context", None)
    if ctx is None:
        ctx = RequestContext(span=trace.get_current_span(), tracer=request.app.state.tracer)
        request.state.context = ctx
    return ctx


async def get_request_context(request: Request) -> RequestContext:
    # async so it runs on the event loop, where the server span is current
    return request_context(request)
