"""
OpenTelemetry Integration Module

Provides distributed tracing and metrics collection for JSON-RPC client calls:
- tracer: Tracer setup and per-call spans
- metrics: Request counters and latency histograms
"""

from .tracer import setup_tracer, create_span, current_trace_id
from .metrics import setup_metrics, increment_counter, record_latency


def setup_telemetry(config):
    """Enable tracing and metrics export when the invoker config asks for it

    Args:
        config: InvokerConfig
    """
    if not config.enable_tracing:
        return
    setup_tracer(config.service_name, config.otlp_endpoint)
    setup_metrics(config.service_name, config.otlp_endpoint)


__all__ = [
    "setup_tracer",
    "setup_metrics",
    "setup_telemetry",
    "create_span",
    "current_trace_id",
    "increment_counter",
    "record_latency"
]
