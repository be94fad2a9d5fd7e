"""
Fallback orchestrator.

Drives one run across the ordered backend list:

    IDLE → ATTEMPTING(i) → SUCCEEDED | EXHAUSTED | CANCELLED

Per backend:
    resolve credential ── empty ──────────────────────────→ unconfigured, next
          │
    build request → transport ── TransportFailure ───────→ transport_failure, next
          │
    normalize ── ResponseFormatError ────────────────────→ soft_failure, next
          │
    soft-failure scan ── quota/overload/rate limit ──────→ soft_failure, next
          │
    SUCCEEDED(text, provider)

Invariants:
- Attempts are strictly sequential; no backend is tried twice per run
- Nothing after the first success is attempted
- The token is checked at every transition; once set the run ends
  CANCELLED and any outcome computed for the in-flight attempt is dropped
- Exhausted carries the last non-unconfigured failure message, or
  NO_BACKEND_CONFIGURED when nothing was configured
- Credentials are never logged or traced
- The orchestrator holds no per-run state and may be shared by concurrent
  runs; a run's terminal state is SessionResult.state
"""

import logging
import uuid
from typing import List, Optional, Sequence

from agent.cancellation import CancellationToken
from agent.tracing import NoOpTracer, TraceMetadata, Tracer
from inference.credentials import CredentialResolver
from inference.errors import RunCancelled, RunExhausted, SoftProviderFailure, TransportFailure
from inference.normalizer import detect_soft_failure, normalize_response
from inference.providers import PROVIDERS
from inference.request_builder import build_request
from inference.transport import Transport
from inference.types import (
    AttemptOutcome,
    ProviderSpec,
    RequestContext,
    SessionResult,
)

logger = logging.getLogger(__name__)

NO_BACKEND_CONFIGURED = "No API key configured for any provider"
DEFAULT_TIMEOUT_S = 60.0


class FallbackOrchestrator:
    """
    Tries each backend in priority order until one yields usable text.

    Args:
        resolver:  Credential source
        transport: Blocking HTTP exchange
        providers: Ordered backend list (defaults to PROVIDERS)
        tracer:    Passive event sink (defaults to NoOpTracer)
        timeout_s: Per-attempt transport timeout
    """

    def __init__(
        self,
        resolver: CredentialResolver,
        transport: Transport,
        providers: Sequence[ProviderSpec] = PROVIDERS,
        tracer: Optional[Tracer] = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ):
        self.resolver = resolver
        self.transport = transport
        self.providers = tuple(providers)
        self.tracer = tracer or NoOpTracer()
        self.timeout_s = timeout_s

    def run(
        self, context: RequestContext, token: Optional[CancellationToken] = None
    ) -> SessionResult:
        """
        Execute one run. Always returns exactly one SessionResult.

        Args:
            context: Immutable request for this run
            token:   Cancellation token owned by the caller
        """
        token = token or CancellationToken()
        trace = TraceMetadata(
            trace_id=context.trace_id or uuid.uuid4().hex,
            session_id=context.session_id,
        )
        attempts: List[AttemptOutcome] = []

        try:
            for index, spec in enumerate(self.providers):
                token.check()
                self._emit("provider_attempt_started", {
                    "provider_id": spec.provider_id,
                    "index": index,
                }, trace)

                outcome = self._attempt(spec, context, token)
                attempts.append(outcome)
                self._record_outcome(outcome, trace)

                if outcome.succeeded:
                    token.check()
                    logger.info(f"Run succeeded via {spec.display_name}")
                    self._emit("run_succeeded", {"provider_id": spec.provider_id}, trace)
                    return SessionResult.completed(
                        text=outcome.text or "",
                        provider_id=spec.provider_id,
                        provider_name=spec.display_name,
                        attempts=tuple(attempts),
                    )

            token.check()
            raise RunExhausted(self._last_failure_message(attempts))
        except RunCancelled:
            logger.info("Run cancelled")
            self._emit("run_cancelled", {"attempt_count": len(attempts)}, trace)
            return SessionResult.cancelled(attempts=tuple(attempts))
        except RunExhausted as e:
            message = str(e)
            logger.warning(f"All providers failed: {message}")
            self._emit("run_exhausted", {"reason": message}, trace)
            return SessionResult.exhausted(message, attempts=tuple(attempts))

    # ── Single attempt ────────────────────────────────────────

    def _attempt(
        self, spec: ProviderSpec, context: RequestContext, token: CancellationToken
    ) -> AttemptOutcome:
        api_key = self.resolver.resolve(spec.credential_name)
        token.check()
        if not api_key:
            return AttemptOutcome.unconfigured(spec.provider_id)

        wire = build_request(spec, context, api_key)

        token.check()
        try:
            raw_body = self.transport.send(wire.url, wire.headers, wire.body, self.timeout_s)
        except TransportFailure as e:
            token.check()
            return AttemptOutcome.transport_failure(spec.provider_id, str(e) or "Network Error")
        except Exception as e:
            # A misbehaving transport only costs this attempt.
            logger.error(f"Unexpected transport error from {spec.provider_id}: {e}", exc_info=True)
            token.check()
            return AttemptOutcome.transport_failure(spec.provider_id, f"Network Error: {type(e).__name__}")
        token.check()

        try:
            text = normalize_response(raw_body)
            reason = detect_soft_failure(raw_body)
            if reason:
                raise SoftProviderFailure(reason)
        except SoftProviderFailure as e:
            return AttemptOutcome.soft_failure(spec.provider_id, str(e), raw_body=raw_body)

        return AttemptOutcome.success(spec.provider_id, raw_body, text)

    # ── Helpers ───────────────────────────────────────────────

    @staticmethod
    def _last_failure_message(attempts: Sequence[AttemptOutcome]) -> str:
        for outcome in reversed(attempts):
            if outcome.kind in ("transport_failure", "soft_failure"):
                return outcome.message or "Unknown error"
        return NO_BACKEND_CONFIGURED

    def _record_outcome(self, outcome: AttemptOutcome, trace: TraceMetadata) -> None:
        if outcome.kind == "unconfigured":
            logger.debug(f"Skipping {outcome.provider_id}: no credential")
            self._emit("provider_skipped_unconfigured", {"provider_id": outcome.provider_id}, trace)
        elif outcome.kind == "transport_failure":
            logger.info(f"{outcome.provider_id} transport failure: {outcome.message}")
            self._emit("provider_transport_failed", {
                "provider_id": outcome.provider_id,
                "reason": outcome.message,
            }, trace)
        elif outcome.kind == "soft_failure":
            logger.info(f"{outcome.provider_id} soft failure: {outcome.message}")
            self._emit("provider_soft_failed", {
                "provider_id": outcome.provider_id,
                "reason": outcome.message,
            }, trace)

    def _emit(self, name: str, metadata: dict, trace: TraceMetadata) -> None:
        try:
            self.tracer.record_event(name=name, metadata=metadata, trace_metadata=trace)
        except Exception:
            # Tracing failure is non-fatal
            pass
