# annotator/shared/observability.py
import structlog
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from annotator.shared.config import settings

logger = structlog.get_logger()


def setup_telemetry(app_name: str = settings.OTEL_SERVICE_NAME) -> None:
    """
    Initializes the OpenTelemetry SDK with OTLP export.
    Should be called once at process startup (api or cli).
    """
    if not settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        logger.info("telemetry_disabled", reason="no OTEL_EXPORTER_OTLP_ENDPOINT configured")
        return

    logger.info("telemetry_init", service=app_name)

    # 1. Service identity
    resource = Resource.create(attributes={
        "service.name": app_name,
        "deployment.environment": settings.APP_ENV.value,
    })

    # 2. Provider + OTLP exporter
    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=f"{settings.OTEL_EXPORTER_OTLP_ENDPOINT}/v1/traces")
    provider.add_span_processor(BatchSpanProcessor(exporter))

    # 3. Console exporter for local debugging
    if settings.DEBUG:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)


def instrument_fastapi(app: FastAPI) -> None:
    """Captures HTTP methods, paths and status codes for every request."""
    if not settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        return
    FastAPIInstrumentor.instrument_app(app)


def get_tracer(name: str):
    """
    Utility to get a tracer for manual instrumentation in Use Cases.
    Usage:
        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("my_custom_logic"):
            ...
    """
    return trace.get_tracer(name)
