"""
Chat session: the interactive control path.

Models the assistant window without rendering anything. A host UI calls
submit() when the user sends a message and poll() from its timer; both
return immediately. All network I/O happens inside the background run.

Status messages:
    Thinking...                                  run started
    Error capturing image.                       snapshot failed, no run
    All providers failed. Last error: <msg>      run exhausted
    Executing script... (via <backend>)          code found, handing to host
    Done! (via <backend>)                        host ran the script
    No code found.                               reply had no fenced block
    (nothing)                                    run cancelled
"""

import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional

from agent.cancellation import DEFAULT_SHUTDOWN_GRACE_S, CancellableTask
from agent.extraction import extract_code, preview_text
from agent.orchestrator import FallbackOrchestrator
from agent.prompting import build_palette_table, build_prompt, wrap_script
from inference.errors import SnapshotError
from inference.types import ImagePayload, RequestContext, RunState, SessionResult
from services.document import CanvasInfo, DocumentHost
from services.script import ScriptExecutor

logger = logging.getLogger(__name__)

STATUS_THINKING = "Thinking..."
STATUS_CAPTURE_ERROR = "Error capturing image."
STATUS_NO_CODE = "No code found."
EXHAUSTED_PREFIX = "All providers failed. Last error: "


@dataclass
class ChatMessage:
    role: str  # User | System | AI
    text: str


class AutopaintSession:
    """
    One assistant window's worth of state.

    Args:
        orchestrator: Fallback orchestrator shared with the background run
        document:     Document host (snapshot + canvas hints)
        executor:     Host script executor
        language:     Fence tag of the target scripting language
        grace_s:      Teardown grace period for close()
    """

    def __init__(
        self,
        orchestrator: FallbackOrchestrator,
        document: DocumentHost,
        executor: ScriptExecutor,
        language: str = "lua",
        grace_s: float = DEFAULT_SHUTDOWN_GRACE_S,
    ):
        self.orchestrator = orchestrator
        self.document = document
        self.executor = executor
        self.language = language
        self.grace_s = grace_s
        self.session_id = uuid.uuid4().hex
        self.task = CancellableTask(name=f"autopaint-{self.session_id[:8]}")

        self.history: List[ChatMessage] = []
        self.status: str = ""
        self.capture_preview: str = "Ready to capture..."
        self.busy = False
        self.state = RunState.IDLE
        self._canvas: Optional[CanvasInfo] = None

    # ── Control path ──────────────────────────────────────────

    def submit(self, prompt: str) -> bool:
        """
        Send one user request.

        Returns:
            True if a background run was started
        """
        if not prompt or not prompt.strip():
            return False

        self._add("User", prompt)
        self._set_status(STATUS_THINKING)

        try:
            image_bytes = self.document.snapshot()
        except SnapshotError as e:
            logger.warning(f"Snapshot failed: {e}")
            self._set_status(STATUS_CAPTURE_ERROR)
            return False

        canvas = self.document.canvas_info()
        self._canvas = canvas
        if canvas is not None:
            self.capture_preview = f"Captured: {canvas.width}x{canvas.height}"

        context = RequestContext(
            prompt=build_prompt(prompt, canvas),
            image=ImagePayload.from_bytes(image_bytes),
            trace_id=uuid.uuid4().hex,
            session_id=self.session_id,
        )

        self.busy = True
        self.state = RunState.ATTEMPTING
        self.task.start(lambda token: self.orchestrator.run(context, token))
        return True

    def poll(self) -> Optional[SessionResult]:
        """
        Timer tick. Reacts once to a finished run.

        Returns:
            The SessionResult handled on this tick, or None
        """
        result = self.task.take_result()
        if result is None:
            return None

        self.busy = False
        self.state = result.state
        self.handle_result(result)
        return result

    def cancel(self) -> None:
        self.task.request_cancel()

    def close(self) -> bool:
        """Teardown. Returns False if a blocked run had to be abandoned."""
        if self.busy:
            self.state = RunState.CANCELLED
        self.busy = False
        return self.task.shutdown(self.grace_s)

    def set_api_key(self, name: str, value: str) -> None:
        """Store an in-memory key, as the key configuration dialog does."""
        self.orchestrator.resolver.set_override(name, value)

    # ── Result handling ───────────────────────────────────────

    def handle_result(self, result: SessionResult) -> None:
        if result.status == "cancelled":
            return

        if result.status == "exhausted":
            self._set_status(EXHAUSTED_PREFIX + (result.error or ""))
            return

        text = result.text or ""
        provider_info = f" (via {result.provider_name})" if result.provider_name else ""
        code = extract_code(text, self.language)

        if code is None:
            self._set_status(STATUS_NO_CODE)
            self._add("AI", preview_text(text))
            return

        self._set_status("Executing script..." + provider_info)

        canvas = self._canvas
        script = wrap_script(
            code,
            palette_table=build_palette_table(canvas.palette if canvas else []),
            selection=canvas.selection if canvas else None,
        )
        outcome = self.executor.execute(script)
        if outcome.ok:
            self._set_status("Done!" + provider_info)
        else:
            logger.warning(f"Script execution failed: {outcome.error}")
            self._set_status(f"Script error: {outcome.error}" + provider_info)

    # ── Helpers ───────────────────────────────────────────────

    def _add(self, role: str, text: str) -> ChatMessage:
        message = ChatMessage(role=role, text=text)
        self.history.append(message)
        return message

    def _set_status(self, status: str) -> None:
        self.status = status
        # The status line lives in the history, like the window's "System:" label.
        if self.history and self.history[-1].role == "System":
            self.history[-1].text = status
        else:
            self._add("System", status)
