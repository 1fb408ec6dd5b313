import io

import httpx
import pytest
import pytest_asyncio
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from email_service.config import EmailServiceConfig
from email_service.logs import configure_logging
from email_service.main import create_app
from email_service.mailer import TestMailer
from helpers import BASE_URL


@pytest.fixture
def config():
    return EmailServiceConfig(port=8080)


@pytest.fixture
def span_exporter():
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(span_exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider


@pytest.fixture
def log_stream():
    stream = io.StringIO()
    configure_logging(stream)
    return stream


@pytest.fixture
def mailer():
    return TestMailer()


@pytest.fixture
def app(config, mailer, tracer_provider, log_stream):
    return create_app(config, mailer=mailer, tracer_provider=tracer_provider)


@pytest_asyncio.fixture
async def client(app):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=BASE_URL) as c:
        yield c
