"""
Script executor abstract interface.

Role: hand generated script text to the host's evaluator.

Rules:
- The executor owns its own error handling
- The pipeline only looks at success/failure for status reporting
- Failures are returned as ScriptResult(status="error"), never raised
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal, Optional

ScriptStatus = Literal["success", "error"]


@dataclass
class ScriptResult:
    """Outcome of one script execution."""

    status: ScriptStatus
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


class ScriptExecutor(ABC):
    """
    Abstract script-execution boundary.
    The session depends ONLY on this interface.
    """

    @abstractmethod
    def execute(self, script: str) -> ScriptResult:
        """
        Execute a block of script text.

        Args:
            script: Complete, wrapped script

        Returns:
            ScriptResult with success or explicit error
        """
        raise NotImplementedError
