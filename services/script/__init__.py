"""
Script execution service exports.
"""

from .base import ScriptExecutor, ScriptResult, ScriptStatus
from .stub import RecordingScriptExecutor
from .file_sink import FileScriptExecutor

__all__ = [
    "ScriptExecutor",
    "ScriptResult",
    "ScriptStatus",
    "RecordingScriptExecutor",
    "FileScriptExecutor",
]
