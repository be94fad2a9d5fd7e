"""
Backend boundary layer for script generation.

This package owns everything that talks about a single backend:
descriptors, credentials, wire payloads, transport and reply parsing.
The fallback loop lives in agent.orchestrator and depends only on these
interfaces.

Transports:
- StubTransport: Deterministic scripted replies (default for CI/tests)
- RequestsTransport: Blocking HTTP via requests

Example usage:
    from inference import PROVIDERS, CredentialResolver, StubTransport

    resolver = CredentialResolver()
    transport = StubTransport()
"""

from .types import (
    AttemptOutcome,
    ImagePayload,
    ProviderSpec,
    RequestContext,
    RunState,
    SessionResult,
    WireRequest,
)
from .errors import (
    AutopaintError,
    ConfigurationError,
    ResponseFormatError,
    RunCancelled,
    RunExhausted,
    SnapshotError,
    SoftProviderFailure,
    TransportFailure,
)
from .providers import PROVIDERS, get_provider
from .credentials import CredentialResolver
from .request_builder import build_request
from .normalizer import detect_soft_failure, normalize_response
from .transport import RequestsTransport, Transport
from .stub import StubTransport

__all__ = [
    "AttemptOutcome",
    "ImagePayload",
    "ProviderSpec",
    "RequestContext",
    "RunState",
    "SessionResult",
    "WireRequest",
    "AutopaintError",
    "ConfigurationError",
    "ResponseFormatError",
    "RunCancelled",
    "RunExhausted",
    "SnapshotError",
    "SoftProviderFailure",
    "TransportFailure",
    "PROVIDERS",
    "get_provider",
    "CredentialResolver",
    "build_request",
    "detect_soft_failure",
    "normalize_response",
    "RequestsTransport",
    "Transport",
    "StubTransport",
]
