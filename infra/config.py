"""
Infrastructure configuration system.

Environment-based component selection with sensible defaults.
Defaults talk to the real backends over HTTP; TRANSPORT_BACKEND=stub gives a
fully offline, deterministic stack.
"""

import os
from dataclasses import dataclass
from typing import Literal

from agent.orchestrator import DEFAULT_TIMEOUT_S, FallbackOrchestrator
from agent.tracing import Tracer, create_tracer
from inference import CredentialResolver, RequestsTransport, StubTransport, Transport
from inference.providers import PROVIDERS

TransportBackendType = Literal["http", "stub"]


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    transport_backend: TransportBackendType
    request_timeout_s: float
    credentials_file: str
    shutdown_grace_s: float
    poll_interval_s: float
    script_language: str
    tracer_backend: str

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """Load configuration from environment variables."""
        return cls(
            transport_backend=os.getenv("TRANSPORT_BACKEND", "http"),  # type: ignore
            request_timeout_s=float(os.getenv("REQUEST_TIMEOUT_S", str(DEFAULT_TIMEOUT_S))),
            credentials_file=os.getenv("CREDENTIALS_FILE", ".env"),
            shutdown_grace_s=float(os.getenv("SHUTDOWN_GRACE_S", "0.5")),
            poll_interval_s=float(os.getenv("POLL_INTERVAL_S", "0.1")),
            script_language=os.getenv("SCRIPT_LANGUAGE", "lua"),
            tracer_backend=os.getenv("TRACER_BACKEND", "noop"),
        )

    @classmethod
    def from_settings(cls) -> "InfraConfig":
        """Load configuration from config.Config (.env file + environment)."""
        from config import Config

        return cls(
            transport_backend=Config.TRANSPORT_BACKEND,  # type: ignore
            request_timeout_s=Config.REQUEST_TIMEOUT_S,
            credentials_file=Config.CREDENTIALS_FILE,
            shutdown_grace_s=Config.SHUTDOWN_GRACE_S,
            poll_interval_s=Config.POLL_INTERVAL_S,
            script_language=Config.SCRIPT_LANGUAGE,
            tracer_backend=Config.TRACER_BACKEND,
        )

    def create_transport(self) -> Transport:
        """Create transport instance based on configuration."""
        if self.transport_backend == "stub":
            return StubTransport()
        return RequestsTransport()

    def create_resolver(self) -> CredentialResolver:
        return CredentialResolver(credentials_file=self.credentials_file)

    def create_tracer(self) -> Tracer:
        return create_tracer(self.tracer_backend)

    def create_orchestrator(self) -> FallbackOrchestrator:
        """Create a fully wired orchestrator."""
        return FallbackOrchestrator(
            resolver=self.create_resolver(),
            transport=self.create_transport(),
            providers=PROVIDERS,
            tracer=self.create_tracer(),
            timeout_s=self.request_timeout_s,
        )


def get_config() -> InfraConfig:
    """Get global infrastructure configuration."""
    return InfraConfig.from_env()
