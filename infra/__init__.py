"""
Infrastructure module exports.

Configuration and bootstrap for the pipeline components.
"""

from .config import InfraConfig, get_config, TransportBackendType
from .bootstrap import InfraBootstrap, bootstrap_infrastructure

__all__ = [
    "InfraConfig",
    "get_config",
    "TransportBackendType",
    "InfraBootstrap",
    "bootstrap_infrastructure",
]
