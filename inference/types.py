import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Literal, Optional, Tuple

AuthScheme = Literal["query_param", "bearer"]
PayloadShape = Literal["multimodal_inline", "chat_messages"]
AttemptKind = Literal["success", "unconfigured", "transport_failure", "soft_failure"]
SessionStatus = Literal["completed", "exhausted", "cancelled"]


@dataclass(frozen=True)
class ProviderSpec:
    provider_id: str
    display_name: str
    endpoint: str
    auth_scheme: AuthScheme
    payload_shape: PayloadShape
    model: str
    credential_name: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    query_param: str = "key"           # only used by query_param auth


@dataclass(frozen=True)
class ImagePayload:
    data: str                          # base64 text, never raw bytes
    mime_type: str = "image/png"

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str = "image/png") -> "ImagePayload":
        return cls(data=base64.b64encode(raw).decode("ascii"), mime_type=mime_type)


@dataclass(frozen=True)
class RequestContext:
    prompt: str
    image: Optional[ImagePayload] = None
    trace_id: Optional[str] = None
    session_id: Optional[str] = None


@dataclass(frozen=True)
class WireRequest:
    url: str
    headers: Dict[str, str]
    body: str                          # JSON text


@dataclass(frozen=True)
class AttemptOutcome:
    kind: AttemptKind
    provider_id: str
    raw_body: Optional[bytes] = None
    text: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, provider_id: str, raw_body: bytes, text: str) -> "AttemptOutcome":
        return cls(kind="success", provider_id=provider_id, raw_body=raw_body, text=text)

    @classmethod
    def unconfigured(cls, provider_id: str) -> "AttemptOutcome":
        return cls(kind="unconfigured", provider_id=provider_id)

    @classmethod
    def transport_failure(cls, provider_id: str, message: str) -> "AttemptOutcome":
        return cls(kind="transport_failure", provider_id=provider_id, message=message)

    @classmethod
    def soft_failure(
        cls, provider_id: str, message: str, raw_body: Optional[bytes] = None
    ) -> "AttemptOutcome":
        return cls(
            kind="soft_failure", provider_id=provider_id, raw_body=raw_body, message=message
        )

    @property
    def succeeded(self) -> bool:
        return self.kind == "success"


@dataclass(frozen=True)
class SessionResult:
    status: SessionStatus
    text: Optional[str] = None
    provider_id: Optional[str] = None
    provider_name: Optional[str] = None
    error: Optional[str] = None
    attempts: Tuple[AttemptOutcome, ...] = field(default_factory=tuple)

    @classmethod
    def completed(
        cls,
        text: str,
        provider_id: str,
        provider_name: Optional[str] = None,
        attempts: Tuple[AttemptOutcome, ...] = (),
    ) -> "SessionResult":
        return cls(
            status="completed",
            text=text,
            provider_id=provider_id,
            provider_name=provider_name,
            attempts=attempts,
        )

    @classmethod
    def exhausted(
        cls, error: str, attempts: Tuple[AttemptOutcome, ...] = ()
    ) -> "SessionResult":
        return cls(status="exhausted", error=error, attempts=attempts)

    @classmethod
    def cancelled(cls, attempts: Tuple[AttemptOutcome, ...] = ()) -> "SessionResult":
        return cls(status="cancelled", attempts=attempts)

    @property
    def state(self) -> "RunState":
        """Terminal RunState of the run that produced this result."""
        return _TERMINAL_STATES[self.status]


class RunState(str, Enum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


_TERMINAL_STATES = {
    "completed": RunState.SUCCEEDED,
    "exhausted": RunState.EXHAUSTED,
    "cancelled": RunState.CANCELLED,
}
