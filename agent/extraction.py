"""
Code block extraction from generated text.

Selection rule:
  1. first line-leading opening fence carrying the target language tag
     (```lua); stray fences earlier in the reply do not shift it
  2. otherwise the first fenced block of any kind, pairing fences in order
  3. otherwise None: the reply is conversational and is shown as a preview

A block's body starts after the opening fence line and ends right before
the next closing fence. An opening fence with no closing fence is not a
block.
"""

import re
from typing import Optional

FENCE = "```"
PREVIEW_CHARS = 100


def _tagged_opener(language: str) -> "re.Pattern[str]":
    # Line-leading ```lua, ```Lua, ```lua title=x ... but never ```luax
    return re.compile(
        r"^[ \t]*" + re.escape(FENCE) + re.escape(language) + r"(?![\w+#.-])[^\n]*\n",
        re.IGNORECASE | re.MULTILINE,
    )


def _find_tagged_block(text: str, language: str) -> Optional[str]:
    """Body of the first closed block opened with ```<language>, or None."""
    for match in _tagged_opener(language).finditer(text):
        end = text.find(FENCE, match.end())
        if end != -1:
            return text[match.end():end]
    return None


def _first_fenced_block(text: str) -> Optional[str]:
    """Body of the first complete fenced block of any kind, pairing fences in order."""
    start = text.find(FENCE)
    if start == -1:
        return None
    body_start = start + len(FENCE)
    end = text.find(FENCE, body_start)
    if end == -1:
        return None

    newline = text.find("\n", body_start, end)
    if newline == -1:
        # Single-line block: ```code```
        return text[body_start:end]
    return text[newline + 1:end]


def extract_code(text: Optional[str], language: str = "lua") -> Optional[str]:
    """
    Pull the script out of generated text.

    Args:
        text:     Generated reply text
        language: Preferred fence tag (case-insensitive)

    Returns:
        Block body verbatim (fence markers removed), or None when the text
        has no usable fenced block
    """
    if not text:
        return None

    body = _find_tagged_block(text, language)
    if body is None:
        body = _first_fenced_block(text)

    if body is None or not body.strip():
        return None
    return body


def preview_text(text: Optional[str], limit: int = PREVIEW_CHARS) -> str:
    """Shortened reply shown to the user when there is no code to run."""
    return (text or "")[:limit] + "..."
