"""
Infrastructure initialization and bootstrap.

Singleton pattern for creating the shared pipeline components from
configuration.
"""

from typing import Optional

from agent.orchestrator import FallbackOrchestrator
from agent.session import AutopaintSession
from services.document import DocumentHost
from services.script import ScriptExecutor

from .config import InfraConfig, get_config


class InfraBootstrap:
    """
    Bootstrap infrastructure based on configuration.

    Singleton pattern - single instance per process, so every session shares
    one credential resolver (and therefore one set of in-memory keys).
    """

    _instance: Optional["InfraBootstrap"] = None

    def __init__(self, config: Optional[InfraConfig] = None):
        """Initialize bootstrap with configuration."""
        self.config = config or get_config()
        self.orchestrator = self.config.create_orchestrator()

    @classmethod
    def get_instance(cls, config: Optional[InfraConfig] = None) -> "InfraBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def get_orchestrator(self) -> FallbackOrchestrator:
        return self.orchestrator

    def create_session(self, document: DocumentHost, executor: ScriptExecutor) -> AutopaintSession:
        """Open a chat session bound to a document host and script executor."""
        return AutopaintSession(
            orchestrator=self.orchestrator,
            document=document,
            executor=executor,
            language=self.config.script_language,
            grace_s=self.config.shutdown_grace_s,
        )

    def __repr__(self) -> str:
        """String representation showing configured components."""
        return (
            f"InfraBootstrap(transport={self.config.transport_backend}, "
            f"tracer={self.config.tracer_backend}, "
            f"timeout={self.config.request_timeout_s}s)"
        )


def bootstrap_infrastructure(config: Optional[InfraConfig] = None) -> InfraBootstrap:
    """
    Bootstrap all infrastructure components.

    Args:
        config: Optional custom configuration

    Returns:
        InfraBootstrap instance
    """
    return InfraBootstrap.get_instance(config)
