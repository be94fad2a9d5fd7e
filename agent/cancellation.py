"""
Background execution with cooperative cancellation.

One CancellableTask owns at most one run at a time (single-flight). A run
is any callable taking a CancellationToken and returning a SessionResult;
it executes on a daemon thread so the control path never blocks on I/O.

Handoff:
    The worker writes the result into its _Run slot and THEN sets the
    completion Event. The control path reads the slot only after observing
    the Event, so no other lock guards the result.

Cancellation is cooperative: the token is checked at the run's own
checkpoints. A Transport call in flight cannot be interrupted, so teardown
waits a bounded grace period and then abandons the run. An abandoned run's
result is dropped and its on_complete callback is never invoked; the same
holds for a run superseded by start().
"""

import logging
import threading
import uuid
from typing import Callable, Optional

from inference.errors import RunCancelled
from inference.types import SessionResult

logger = logging.getLogger(__name__)

DEFAULT_SHUTDOWN_GRACE_S = 0.5


class CancellationToken:
    """Single-writer, multi-reader flag. Once set it is never cleared."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def check(self) -> None:
        """Checkpoint: raise RunCancelled if cancellation was requested."""
        if self._event.is_set():
            raise RunCancelled()


RunFn = Callable[[CancellationToken], SessionResult]


class _Run:
    """State of one started run."""

    def __init__(self, fn: RunFn):
        self.run_id = uuid.uuid4().hex[:8]
        self.fn = fn
        self.token = CancellationToken()
        self.completed = threading.Event()
        self.result: Optional[SessionResult] = None
        self.consumed = False
        self.superseded = False
        self.abandoned = False
        self.thread: Optional[threading.Thread] = None


class CancellableTask:
    """
    Runs one orchestration at a time off the control path.

    Args:
        name:        Thread name prefix (for logs)
        on_complete: Optional push notification, called once from the worker
                     thread with the SessionResult, whether or not the
                     result was already taken. Never called for abandoned
                     or superseded runs.
    """

    def __init__(
        self,
        name: str = "autopaint-run",
        on_complete: Optional[Callable[[SessionResult], None]] = None,
    ):
        self.name = name
        self.on_complete = on_complete
        self._current: Optional[_Run] = None
        self._lock = threading.Lock()

    # ── Control path API ──────────────────────────────────────

    def start(self, fn: RunFn) -> str:
        """
        Start a run, superseding any active one.

        The previous run is cancelled and waited for before the new thread
        starts. Its result is discarded.

        Returns:
            Run id of the new run
        """
        with self._lock:
            previous = self._current
            if previous is not None:
                previous.superseded = True
                previous.consumed = True

        if previous is not None and not previous.completed.is_set():
            logger.info(f"Superseding active run {previous.run_id}")
            previous.token.cancel()
            previous.completed.wait()

        run = _Run(fn)
        run.thread = threading.Thread(
            target=self._execute,
            args=(run,),
            name=f"{self.name}-{run.run_id}",
            daemon=True,
        )
        with self._lock:
            self._current = run
        run.thread.start()
        logger.debug(f"Run {run.run_id} started")
        return run.run_id

    def request_cancel(self) -> None:
        with self._lock:
            run = self._current
        if run is not None:
            run.token.cancel()

    def is_running(self) -> bool:
        with self._lock:
            run = self._current
        return run is not None and not run.completed.is_set()

    def done(self) -> bool:
        """True once the current run has published its result."""
        with self._lock:
            run = self._current
        return run is not None and run.completed.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the current run completes. Tests and the CLI use this."""
        with self._lock:
            run = self._current
        if run is None:
            return True
        return run.completed.wait(timeout)

    def take_result(self) -> Optional[SessionResult]:
        """
        Return the current run's result exactly once.

        Returns None while the run is still active, when there is no run,
        or when the result was already taken.
        """
        with self._lock:
            run = self._current
            if run is None or not run.completed.is_set() or run.consumed:
                return None
            run.consumed = True
        return run.result

    def shutdown(self, grace_s: float = DEFAULT_SHUTDOWN_GRACE_S) -> bool:
        """
        Teardown: cancel, wait up to grace_s, then abandon.

        Returns:
            True if the run ended within the grace period (or none was active)
        """
        with self._lock:
            run = self._current
        if run is None or run.completed.is_set():
            return True

        run.token.cancel()
        if run.completed.wait(grace_s):
            return True

        # Still blocked inside a Transport call: abandon instead of killing.
        with self._lock:
            run.abandoned = True
            run.consumed = True
            self._current = None
        logger.warning(f"Run {run.run_id} abandoned after {grace_s}s grace period")
        return False

    # ── Worker ────────────────────────────────────────────────

    def _execute(self, run: _Run) -> None:
        try:
            result = run.fn(run.token)
        except RunCancelled:
            result = SessionResult.cancelled()
        except Exception as e:
            logger.error(f"Run {run.run_id} failed: {e}", exc_info=True)
            result = SessionResult.exhausted(str(e) or type(e).__name__)

        if run.token.is_cancelled and result.status != "cancelled":
            result = SessionResult.cancelled(attempts=result.attempts)

        run.result = result
        run.completed.set()
        logger.debug(f"Run {run.run_id} completed: {result.status}")

        with self._lock:
            notify = not (run.abandoned or run.superseded) and self.on_complete is not None
        if notify:
            try:
                self.on_complete(result)
            except Exception as e:
                logger.error(f"on_complete callback failed: {e}", exc_info=True)
