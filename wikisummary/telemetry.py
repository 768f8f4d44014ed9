"""Tracing setup.

Only the OpenTelemetry API is used here. Without an SDK and exporter
installed the tracer is a no-op, so spans cost nothing in tests.
"""

from opentelemetry import trace

from wikisummary.config import Settings


def get_tracer(settings: Settings) -> trace.Tracer:
    return trace.get_tracer(settings.service_name)
