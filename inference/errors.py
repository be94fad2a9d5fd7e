"""
Error taxonomy for the script-generation pipeline.

Most of these never escape a run:
- ConfigurationError, TransportFailure and SoftProviderFailure (with its
  ResponseFormatError subclass) are absorbed per backend and only decide
  whether the next backend is tried.
- RunExhausted and SnapshotError are the only failures surfaced to the user.
- RunCancelled is internal control flow and is never shown to the user.
"""


class AutopaintError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(AutopaintError):
    """A backend has no resolvable credential."""


class TransportFailure(AutopaintError):
    """Network or connection problem talking to a backend."""


class SoftProviderFailure(AutopaintError):
    """Backend answered but the reply is unusable for this run."""


class ResponseFormatError(SoftProviderFailure):
    """
    Reply could not be turned into generated text.

    Covers unparseable bodies, structured API errors and unrecognized
    reply shapes.
    """


class RunExhausted(AutopaintError):
    """Every backend failed or was unconfigured."""


class RunCancelled(AutopaintError):
    """Raised at a checkpoint once the cancellation token is set."""


class SnapshotError(AutopaintError):
    """The active document could not be captured."""
