"""
Canonical request -> backend wire request.

Pure mapping, no I/O. One branch per payload shape:

  Shape               Body                                   Auth
  ──────────────────  ─────────────────────────────────────  ─────────────
  multimodal_inline   contents[0].parts = [text, inline_data] ?key=... in URL
  chat_messages       model + messages[system, user]          Bearer header

Text-only backends cannot see the captured image. The user message gets an
explicit note saying so instead of silently dropping the image.
"""

import json
from typing import Any, Dict
from urllib.parse import urlencode

from .errors import ConfigurationError
from .types import ProviderSpec, RequestContext, WireRequest

TEXT_ONLY_SYSTEM_INSTRUCTION = (
    "You are an Aseprite Lua script generator. Generate ONLY valid Lua code "
    "in markdown code blocks. Follow all instructions precisely."
)

IMAGE_UNAVAILABLE_NOTE = (
    "\n\nNote: Image context not available, generate based on text description only."
)


def build_request(spec: ProviderSpec, context: RequestContext, api_key: str) -> WireRequest:
    """
    Build url, headers and JSON body for one backend.

    Args:
        spec:    Backend descriptor
        context: Provider-agnostic request
        api_key: Resolved credential (must be non-empty)

    Raises:
        ConfigurationError: api_key is empty. Callers short-circuit to an
            unconfigured outcome before getting here.
        ValueError: unknown auth scheme or payload shape
    """
    if not api_key:
        raise ConfigurationError(f"No credential for {spec.provider_id}")

    if spec.payload_shape == "multimodal_inline":
        body = _multimodal_body(spec, context)
    elif spec.payload_shape == "chat_messages":
        body = _chat_body(spec, context)
    else:
        raise ValueError(f"Unknown payload shape: {spec.payload_shape}")

    headers = {"Content-Type": "application/json"}

    if spec.auth_scheme == "bearer":
        url = spec.endpoint
        headers["Authorization"] = f"Bearer {api_key}"
    elif spec.auth_scheme == "query_param":
        separator = "&" if "?" in spec.endpoint else "?"
        url = f"{spec.endpoint}{separator}{urlencode({spec.query_param: api_key})}"
    else:
        raise ValueError(f"Unknown auth scheme: {spec.auth_scheme}")

    return WireRequest(url=url, headers=headers, body=json.dumps(body))


def _multimodal_body(spec: ProviderSpec, context: RequestContext) -> Dict[str, Any]:
    parts = [{"text": context.prompt}]
    if context.image is not None:
        parts.append({
            "inline_data": {
                "mime_type": context.image.mime_type,
                "data": context.image.data,
            }
        })

    body: Dict[str, Any] = {"contents": [{"parts": parts}]}

    generation_config: Dict[str, Any] = {}
    if spec.temperature is not None:
        generation_config["temperature"] = spec.temperature
    if spec.max_tokens is not None:
        generation_config["maxOutputTokens"] = spec.max_tokens
    if generation_config:
        body["generationConfig"] = generation_config

    return body


def _chat_body(spec: ProviderSpec, context: RequestContext) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "model": spec.model,
        "messages": [
            {"role": "system", "content": TEXT_ONLY_SYSTEM_INSTRUCTION},
            {"role": "user", "content": context.prompt + IMAGE_UNAVAILABLE_NOTE},
        ],
    }
    if spec.temperature is not None:
        body["temperature"] = spec.temperature
    if spec.max_tokens is not None:
        body["max_tokens"] = spec.max_tokens
    return body
