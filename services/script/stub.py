"""
Stub script executors for testing and offline development.
"""

from typing import List, Optional

from .base import ScriptExecutor, ScriptResult


class RecordingScriptExecutor(ScriptExecutor):
    """
    Records every script instead of running it.

    Args:
        fail_with: When set, every execution reports this error
    """

    def __init__(self, fail_with: Optional[str] = None):
        self.fail_with = fail_with
        self.scripts: List[str] = []

    def execute(self, script: str) -> ScriptResult:
        self.scripts.append(script)
        if self.fail_with:
            return ScriptResult(status="error", error=self.fail_with)
        return ScriptResult(status="success")
