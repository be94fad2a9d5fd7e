"""
Stub transport for testing, CI and offline development.

Deterministic and fast. Replies are scripted per URL prefix; anything
unscripted gets a canned chat-completion reply carrying a fenced Lua block.
"""

import json
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from .errors import TransportFailure
from .transport import Transport

StubReply = Union[bytes, str, Exception]

DEFAULT_STUB_SCRIPT = (
    "local sprite = app.activeSprite\n"
    "local layer = sprite:newLayer()\n"
    "layer.name = 'AI Generation'\n"
    "app.activeLayer = layer\n"
    "local cel = sprite:newCel(layer, app.activeFrame)\n"
    "drawHexGrid(0, 0, 4, \"0110122112210110\", palette, selX, selY, selW, selH)\n"
    "app.refresh()\n"
)


def chat_reply(content: str) -> bytes:
    """Serialize a minimal chat-completion reply."""
    return json.dumps({"choices": [{"message": {"role": "assistant", "content": content}}]}).encode()


def candidate_reply(text: str) -> bytes:
    """Serialize a minimal candidate-list reply."""
    return json.dumps({"candidates": [{"content": {"parts": [{"text": text}]}}]}).encode()


DEFAULT_STUB_REPLY = chat_reply(f"Here is your drawing:\n```lua\n{DEFAULT_STUB_SCRIPT}```\n")


@dataclass
class StubCall:
    url: str
    headers: Dict[str, str]
    body: str
    timeout_s: float


class StubTransport(Transport):
    """
    Scripted transport.

    Args:
        replies:  URL prefix -> bytes/str body, or an exception instance to raise
        default:  Reply for URLs matching no prefix
        on_send:  Hook called with each StubCall before replying (tests use it
                  to block or to cancel a run mid-call)
    """

    def __init__(
        self,
        replies: Optional[Dict[str, StubReply]] = None,
        default: StubReply = DEFAULT_STUB_REPLY,
        on_send: Optional[Callable[[StubCall], None]] = None,
    ):
        self.replies = dict(replies or {})
        self.default = default
        self.on_send = on_send
        self.calls: List[StubCall] = []
        self._lock = threading.Lock()

    def send(self, url: str, headers: Dict[str, str], body: str, timeout_s: float) -> bytes:
        call = StubCall(url=url, headers=dict(headers), body=body, timeout_s=timeout_s)
        with self._lock:
            self.calls.append(call)

        if self.on_send is not None:
            self.on_send(call)

        reply = self._match(url)
        if isinstance(reply, TransportFailure):
            raise reply
        if isinstance(reply, Exception):
            raise TransportFailure(str(reply)) from reply
        if isinstance(reply, str):
            return reply.encode("utf-8")
        return reply

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.calls)

    def _match(self, url: str) -> StubReply:
        for prefix, reply in self.replies.items():
            if url.startswith(prefix):
                return reply
        return self.default
