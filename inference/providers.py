"""
Backend catalogue.

The tuple order is the fallback priority: the multimodal backend first,
then the text-only OpenAI-compatible chat backends.

To add a backend, append a ProviderSpec here and, if it needs a new
payload shape, one branch in request_builder. The orchestrator never
changes.
"""

from typing import Tuple

from .types import ProviderSpec

GEMINI = ProviderSpec(
    provider_id="gemini",
    display_name="Gemini",
    endpoint=(
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-2.0-flash-exp:generateContent"
    ),
    auth_scheme="query_param",
    payload_shape="multimodal_inline",
    model="gemini-2.0-flash-exp",
    credential_name="GEMINI_API_KEY",
)

GROQ = ProviderSpec(
    provider_id="groq",
    display_name="Groq (Llama 3.3)",
    endpoint="https://api.groq.com/openai/v1/chat/completions",
    auth_scheme="bearer",
    payload_shape="chat_messages",
    model="llama-3.3-70b-versatile",
    credential_name="GROQ_API_KEY",
    temperature=0.7,
    max_tokens=2048,
)

OPENROUTER = ProviderSpec(
    provider_id="openrouter",
    display_name="OpenRouter (Llama 3.2)",
    endpoint="https://openrouter.ai/api/v1/chat/completions",
    auth_scheme="bearer",
    payload_shape="chat_messages",
    model="meta-llama/llama-3.2-3b-instruct:free",
    credential_name="OPENROUTER_API_KEY",
)

PROVIDERS: Tuple[ProviderSpec, ...] = (GEMINI, GROQ, OPENROUTER)


def get_provider(provider_id: str) -> ProviderSpec:
    """Look up a backend by id. Raises KeyError for unknown ids."""
    for spec in PROVIDERS:
        if spec.provider_id == provider_id:
            return spec
    raise KeyError(provider_id)
