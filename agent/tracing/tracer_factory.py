"""
Tracer factory.

Implements the TRACER_BACKEND setting:
- "noop" (default): No tracing
- "logging": Trace events written through the standard logger
"""

import logging
import os
from typing import Optional

from agent.tracing.tracer import LoggingTracer, NoOpTracer, Tracer

logger = logging.getLogger(__name__)

VALID_BACKENDS = {"noop", "logging"}


def get_tracer_backend(value: Optional[str] = None) -> str:
    """
    Get the configured tracer backend.

    Args:
        value: Explicit backend name; TRACER_BACKEND is read when omitted

    Returns:
        Backend name (lowercase). Unknown names fall back to "noop".
    """
    backend = (value if value is not None else os.getenv("TRACER_BACKEND", "noop"))
    backend = backend.lower().strip()
    if backend not in VALID_BACKENDS:
        logger.warning(f"Unknown tracer backend '{backend}', tracing disabled")
        return "noop"
    return backend


def create_tracer(backend: Optional[str] = None) -> Tracer:
    """
    Create a tracer instance.

    Returns:
        Tracer instance (never None, defaults to NoOpTracer)
    """
    if get_tracer_backend(backend) == "logging":
        return LoggingTracer()
    return NoOpTracer()
