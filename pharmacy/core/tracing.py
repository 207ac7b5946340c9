from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from opentelemetry.propagate import extract
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
)
from opentelemetry.trace import Span, Status, StatusCode, Tracer

from pharmacy.core.config import Settings
from pharmacy.core.errors import InvalidArgument, NotFound

TRACER_NAME = "pharmacy.medicines"


def configure_tracing(
    settings: Settings, exporter: SpanExporter | None = None
) -> TracerProvider:
    """Build the application's tracer provider.

    The provider is not installed globally; handlers get their tracer from
    ``app.state`` so each application instance owns its spans.
    """
    provider = TracerProvider(
        resource=Resource.create({SERVICE_NAME: settings.app_name})
    )
    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))
    elif settings.trace_exporter == "console":
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    return provider


@contextmanager
def operation_span(
    tracer: Tracer, name: str, headers: Mapping[str, str] | None = None
) -> Iterator[Span]:
    parent = extract(headers) if headers is not None else None
    with tracer.start_as_current_span(
        name,
        context=parent,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except NotFound as exc:
            if exc.medicine_id is not None:
                span.set_attribute("medicine.id", exc.medicine_id)
            raise
        except InvalidArgument as exc:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR, exc.message))
            raise
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            raise
