"""Split ``<think>...</think>`` reasoning out of a model's answer.

Reasoning models served through OpenAI-compatible endpoints often inline
their chain of thought in the answer text rather than in a separate field.
"""

from __future__ import annotations

import re
from typing import NamedTuple

_THINK_BLOCK = re.compile(r"<think>(.*?)</think>", re.IGNORECASE | re.DOTALL)
_CLOSE_TAG = "</think>"

# A bare closing tag only counts as a reasoning delimiter this early in the text.
_BARE_CLOSE_MAX_POSITION = 0.8


class ThinkingSplit(NamedTuple):
    thinking: str | None
    content: str


def extract_thinking(text: str) -> ThinkingSplit:
    """Separate reasoning blocks from the answer.

    All complete ``<think>`` blocks (case-insensitive) are collected, stripped
    and joined with blank lines.  If there are none but a bare ``</think>``
    appears within the first 80% of the text, everything before it is
    treated as reasoning, provided both halves are non-empty.
    """
    blocks = [match.strip() for match in _THINK_BLOCK.findall(text) if match]
    if blocks:
        return ThinkingSplit("\n\n".join(blocks), _THINK_BLOCK.sub("", text).strip())

    close_index = text.lower().find(_CLOSE_TAG)
    if close_index != -1 and close_index < len(text) * _BARE_CLOSE_MAX_POSITION:
        thinking = text[:close_index].strip()
        remaining = text[close_index + len(_CLOSE_TAG):].strip()
        if thinking and remaining:
            return ThinkingSplit(thinking, remaining)

    return ThinkingSplit(None, text)
