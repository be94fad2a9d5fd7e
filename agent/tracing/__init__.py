"""Tracing infrastructure for observability."""

from agent.tracing.tracer import Tracer, TraceMetadata, NoOpTracer, LoggingTracer
from agent.tracing.tracer_factory import create_tracer, get_tracer_backend

__all__ = [
    "Tracer",
    "TraceMetadata",
    "NoOpTracer",
    "LoggingTracer",
    "create_tracer",
    "get_tracer_backend",
]
