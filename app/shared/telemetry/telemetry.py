"""OpenTelemetry tracing for the Voice Of Faith API.

Request spans come from the FastAPI instrumentation; services open their own
spans around outbound calls (storage uploads, push broadcasts) with
get_tracer(__name__). Spans are exported over OTLP gRPC to a collector, or
printed to the console during local development.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Polled by load balancers and uptime checks; not worth a span each.
_UNTRACED_URLS = "/health,/docs,/openapi.json"


class TelemetryConfig:
    """Tracer provider plus FastAPI and logging instrumentation.

    Exporter is "otlp" (needs an endpoint), "console" or "none"; with "none"
    spans are still created so trace ids reach the logs.
    """

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str,
        exporter: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.exporter = exporter
        self.otlp_endpoint = otlp_endpoint
        self.sample_rate = sample_rate
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> TelemetryConfig:
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.environment,
            exporter=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )

    def _build_exporter(self) -> SpanExporter | None:
        if self.exporter == "otlp":
            if not self.otlp_endpoint:
                logger.warning("OTLP exporter selected without an endpoint; spans stay local")
                return None
            return OTLPSpanExporter(
                endpoint=self.otlp_endpoint,
                insecure=self.otlp_endpoint.startswith("http://"),
            )
        if self.exporter == "none":
            return None
        if self.exporter != "console":
            logger.warning("Unknown span exporter %r, falling back to console", self.exporter)
        return ConsoleSpanExporter()

    def install(self, app: FastAPI) -> None:
        """Set the global tracer provider and instrument the app and logging.

        Tracing is optional: a failure here is logged and the API starts
        without it.
        """
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=ParentBased(TraceIdRatioBased(self.sample_rate)),
            )
            exporter = self._build_exporter()
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
            FastAPIInstrumentor.instrument_app(
                app, tracer_provider=provider, excluded_urls=_UNTRACED_URLS
            )
            LoggingInstrumentor().instrument(tracer_provider=provider, set_logging_format=True)
        except Exception:
            logger.exception("Tracing disabled: OpenTelemetry setup failed")
            return
        self.tracer_provider = provider
        logger.info(
            "Tracing enabled for %s %s (exporter=%s, sample_rate=%s)",
            self.service_name,
            self.service_version,
            self.exporter,
            self.sample_rate,
        )

    def shutdown(self) -> None:
        """Flush pending spans; called from the lifespan on exit."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception:
            logger.exception("Error flushing spans on shutdown")


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry


def get_tracer(name: str) -> trace.Tracer:
    """Tracer for custom spans; a no-op tracer while tracing is disabled."""
    return trace.get_tracer(name)
