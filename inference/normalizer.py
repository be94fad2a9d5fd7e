"""
Reply normalization.

Turns a raw reply body into one generated-text string. Detection is
format-driven, not backend-driven: whichever known shape is populated wins,
so a backend switching reply dialects needs no change elsewhere.

Known shapes (probed in this order):
  candidates → {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}
  chat       → {"choices": [{"message": {"content": "..."}}]}

Structured API errors:
  {"error": {"message": "..."}}  (or {"error": "..."})
"""

import json
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from .errors import ResponseFormatError

SOFT_FAILURE_TOKENS = ("quota", "overload", "rate limit")
SOFT_FAILURE_REASON = "Provider quota/overload error"


# ──────────────────────────────────────────────────────────────
# REPLY SCHEMAS
# ──────────────────────────────────────────────────────────────


class _Part(BaseModel):
    text: Optional[str] = None


class _Content(BaseModel):
    parts: List[_Part] = Field(default_factory=list)


class _Candidate(BaseModel):
    content: _Content = Field(default_factory=_Content)


class CandidateReply(BaseModel):
    """Multimodal generateContent reply."""

    candidates: List[_Candidate] = Field(default_factory=list)


class _Message(BaseModel):
    content: Optional[str] = None


class _Choice(BaseModel):
    message: _Message = Field(default_factory=_Message)


class ChatCompletionReply(BaseModel):
    """OpenAI-compatible chat completion reply."""

    choices: List[_Choice] = Field(default_factory=list)


# ──────────────────────────────────────────────────────────────
# NORMALIZATION
# ──────────────────────────────────────────────────────────────


def normalize_response(raw_body: Union[bytes, str]) -> str:
    """
    Extract the generated text from a reply body.

    Returns:
        Generated text (may be empty when a populated shape carries no text)

    Raises:
        ResponseFormatError: unparseable body, API error object, or no
            known shape populated
    """
    data = _parse(raw_body)

    error = data.get("error")
    if error is not None:
        raise ResponseFormatError(_error_message(error))

    # Each shape is probed on its own; a key that is missing, null or not a
    # list counts as empty and the next shape is tried.
    try:
        if _populated(data, "candidates"):
            candidate_reply = CandidateReply.model_validate({"candidates": data["candidates"]})
            parts = candidate_reply.candidates[0].content.parts
            return (parts[0].text or "") if parts else ""

        if _populated(data, "choices"):
            chat_reply = ChatCompletionReply.model_validate({"choices": data["choices"]})
            return chat_reply.choices[0].message.content or ""
    except ValidationError as e:
        raise ResponseFormatError(f"Unrecognized response shape: {e.error_count()} errors") from e

    raise ResponseFormatError("No response content found.")


def _populated(data: dict, key: str) -> bool:
    value = data.get(key)
    return isinstance(value, list) and len(value) > 0


def detect_soft_failure(raw_body: Union[bytes, str]) -> Optional[str]:
    """
    Case-insensitive scan of the whole raw body for quota/overload/rate-limit tokens.

    The scan includes legitimate generated text, so an on-topic reply that
    mentions e.g. "quota" is also classified as a soft failure.
    """
    text = _decode(raw_body).lower()
    for token in SOFT_FAILURE_TOKENS:
        if token in text:
            return SOFT_FAILURE_REASON
    return None


def _decode(raw_body: Union[bytes, str]) -> str:
    if isinstance(raw_body, bytes):
        return raw_body.decode("utf-8", errors="replace")
    return raw_body


def _parse(raw_body: Union[bytes, str]) -> dict:
    try:
        data = json.loads(_decode(raw_body))
    except (json.JSONDecodeError, ValueError) as e:
        raise ResponseFormatError("JSON Parse Error") from e

    if not isinstance(data, dict):
        raise ResponseFormatError("JSON Parse Error: expected an object")
    return data


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
        return "API Error"
    return str(error) or "API Error"
