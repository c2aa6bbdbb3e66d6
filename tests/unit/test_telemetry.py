"""Tests for tracing configuration."""

import pytest
from opentelemetry.sdk.trace.export import ConsoleSpanExporter

from app.core.config import Settings
from app.shared.telemetry import TelemetryConfig, get_tracer


def _config(exporter: str, endpoint: str | None = None) -> TelemetryConfig:
    return TelemetryConfig("Voice Of Faith", "1.0.0", "test", exporter=exporter, otlp_endpoint=endpoint)


@pytest.mark.parametrize(
    ("exporter", "endpoint", "expected"),
    [
        ("console", None, ConsoleSpanExporter),
        ("jaeger", None, ConsoleSpanExporter),
        ("none", None, type(None)),
        ("otlp", None, type(None)),
    ],
)
def test_exporter_selection(exporter: str, endpoint: str | None, expected: type) -> None:
    assert isinstance(_config(exporter, endpoint)._build_exporter(), expected)


def test_from_settings_copies_tracing_options() -> None:
    settings = Settings(
        _env_file=None,
        telemetry_exporter="otlp",
        telemetry_otlp_endpoint="http://collector:4317",
        telemetry_sample_rate=0.25,
    )
    telemetry = TelemetryConfig.from_settings(settings)
    assert telemetry.service_name == settings.app_name
    assert telemetry.otlp_endpoint == "http://collector:4317"
    assert telemetry.sample_rate == 0.25


def test_tracer_works_without_install() -> None:
    with get_tracer(__name__).start_as_current_span("storage.upload") as span:
        span.set_attribute("storage.folder", "audios")
