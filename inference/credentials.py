"""
Credential resolution.

Lookup order, first non-empty hit wins:
  1. in-memory override (set from the key configuration dialog)
  2. process environment variable
  3. NAME=value line in the local credentials file

Invariants:
- An empty string means "unconfigured" and is never an error
- The credentials file is re-read on every lookup so edits apply immediately
- Secret values are never logged
"""

import logging
import os
import threading
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Resolve a named secret through overrides, environment and file."""

    def __init__(
        self,
        credentials_file: Union[str, Path, None] = ".env",
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.credentials_file = Path(credentials_file) if credentials_file else None
        self._environ = environ if environ is not None else os.environ
        self._overrides: Dict[str, str] = {}
        self._lock = threading.Lock()

    def set_override(self, name: str, value: str) -> None:
        """Store an in-memory value. An empty value falls through to env/file."""
        with self._lock:
            self._overrides[name] = value or ""
        logger.debug(f"Credential override updated: {name} ({'set' if value else 'cleared'})")

    def clear_overrides(self) -> None:
        with self._lock:
            self._overrides.clear()

    def resolve(self, name: str) -> str:
        with self._lock:
            override = self._overrides.get(name, "")
        if override:
            return override

        env_value = self._environ.get(name, "")
        if env_value:
            return env_value

        return self._read_file(name)

    def is_configured(self, name: str) -> bool:
        return bool(self.resolve(name))

    def _read_file(self, name: str) -> str:
        if self.credentials_file is None:
            return ""

        prefix = f"{name}="
        try:
            with open(self.credentials_file, "r", encoding="utf-8") as fh:
                for line in fh:
                    if line.startswith(prefix):
                        return line[len(prefix):].rstrip("\r\n")
        except FileNotFoundError:
            return ""
        except OSError as e:
            logger.warning(f"Could not read credentials file {self.credentials_file}: {e}")
            return ""

        return ""
