"""
File-backed script executor.

Writes the wrapped script to disk so the host editor (or the user) can run
it. Used by the command-line entry point.
"""

import logging
from pathlib import Path
from typing import Union

from .base import ScriptExecutor, ScriptResult

logger = logging.getLogger(__name__)


class FileScriptExecutor(ScriptExecutor):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def execute(self, script: str) -> ScriptResult:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(script, encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not write script to {self.path}: {e}")
            return ScriptResult(status="error", error=str(e))

        logger.info(f"Script written to {self.path} ({len(script)} chars)")
        return ScriptResult(status="success")
