"""
Configuration management for the autopaint agent.

Reads settings from the project .env file and the process environment
(environment wins). The .env values are NOT injected into os.environ:
API keys in that file are resolved by CredentialResolver, which re-reads
the file on every lookup so edits apply without a restart.
"""

import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

env_path = Path(__file__).parent / ".env"


def _load_settings() -> Dict[str, Optional[str]]:
    values = dict(dotenv_values(env_path)) if env_path.exists() else {}
    values.update(os.environ)
    return values


_settings = _load_settings()


def _get(name: str, default: str) -> str:
    value = _settings.get(name)
    return value if value else default


class Config:
    """Configuration class for the autopaint agent."""

    # Credentials
    CREDENTIALS_FILE = _get("CREDENTIALS_FILE", ".env")

    # Transport
    TRANSPORT_BACKEND = _get("TRANSPORT_BACKEND", "http")
    REQUEST_TIMEOUT_S = float(_get("REQUEST_TIMEOUT_S", "60"))

    # Background runs
    SHUTDOWN_GRACE_S = float(_get("SHUTDOWN_GRACE_S", "0.5"))
    POLL_INTERVAL_S = float(_get("POLL_INTERVAL_S", "0.1"))

    # Script generation
    SCRIPT_LANGUAGE = _get("SCRIPT_LANGUAGE", "lua")

    # Observability
    LOG_LEVEL = _get("LOG_LEVEL", "INFO")
    TRACER_BACKEND = _get("TRACER_BACKEND", "noop")

    @classmethod
    def validate(cls) -> bool:
        """Validate settings that have a closed set of values."""
        problems = []
        if cls.TRANSPORT_BACKEND not in ("http", "stub"):
            problems.append(f"TRANSPORT_BACKEND={cls.TRANSPORT_BACKEND!r} (expected http or stub)")
        if cls.REQUEST_TIMEOUT_S <= 0:
            problems.append("REQUEST_TIMEOUT_S must be positive")
        if cls.SHUTDOWN_GRACE_S < 0:
            problems.append("SHUTDOWN_GRACE_S must not be negative")

        if problems:
            print(f"⚠️  Invalid configuration: {'; '.join(problems)}")
            return False

        return True


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  Credentials file: {Config.CREDENTIALS_FILE}")
    print(f"  Transport: {Config.TRANSPORT_BACKEND} (timeout {Config.REQUEST_TIMEOUT_S}s)")
    print(f"  Script language: {Config.SCRIPT_LANGUAGE}")
    print(f"  Tracer: {Config.TRACER_BACKEND}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
