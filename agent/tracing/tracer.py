"""
Run-event tracing for the fallback orchestrator.

A tracer only observes runs:
- Never influences a run
- Never mutates run state
- Failures are silent and non-fatal
- Metadata carries provider ids and statuses only, never credentials
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class TraceMetadata:
    """Metadata associated with a trace event."""

    trace_id: str  # Mandatory: globally unique identifier
    session_id: Optional[str] = None  # Optional: owning chat session


class Tracer(ABC):
    """
    Event sink for orchestrator runs.

    Implementations must not raise and must not change what a run does.
    """

    @abstractmethod
    def record_event(
        self, name: str, metadata: Dict[str, Any], trace_metadata: TraceMetadata
    ) -> None:
        """
        Record one run event.

        Args:
            name: Event name (e.g., "provider_attempt_started", "run_exhausted")
            metadata: Event data (provider_id, reason, etc.)
            trace_metadata: Identity of the run being traced
        """
        pass

    @abstractmethod
    def is_enabled(self) -> bool:
        """
        Whether events are kept anywhere.

        Used for: avoiding metadata construction when tracing is disabled
        """
        pass


class NoOpTracer(Tracer):
    """Tracer used when tracing is disabled. Does nothing."""

    def record_event(
        self, name: str, metadata: Dict[str, Any], trace_metadata: TraceMetadata
    ) -> None:
        pass

    def is_enabled(self) -> bool:
        return False


class LoggingTracer(Tracer):
    """Writes every event to the standard logger."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def record_event(
        self, name: str, metadata: Dict[str, Any], trace_metadata: TraceMetadata
    ) -> None:
        try:
            logger.log(self.level, f"[trace {trace_metadata.trace_id}] {name} {metadata}")
        except Exception:
            pass

    def is_enabled(self) -> bool:
        return True
