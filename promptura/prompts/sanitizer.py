"""Cleanup of raw completion text"""

import logging
import re

logger = logging.getLogger(__name__)

KNOWN_PREAMBLES = [
    "Here is the optimized prompt:",
    "Here's the optimized prompt:",
    "Optimized prompt:",
    "The optimized prompt is:",
    "Here is your optimized prompt:",
    "Here's your optimized prompt:",
]

_FENCE_OPEN = re.compile(r"^```[\w-]*\n?")
_FENCE_CLOSE = re.compile(r"\n?```$")


def clean(raw_text: str) -> str:
    """
    Strip model chatter around an optimized prompt

    Removes the first matching known preamble, a code fence wrapping the
    whole text, and one layer of wrapping quotes. Never raises.
    """
    try:
        cleaned = raw_text.strip()

        lowered = cleaned.lower()
        for preamble in KNOWN_PREAMBLES:
            if lowered.startswith(preamble.lower()):
                cleaned = cleaned[len(preamble):].strip()
                break

        if len(cleaned) >= 6 and cleaned.startswith("```") and cleaned.endswith("```"):
            cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", cleaned, count=1), count=1).strip()

        if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in ("'", '"'):
            cleaned = cleaned[1:-1].strip()

        return cleaned
    except Exception as e:
        logger.error(f"Failed to clean completion text: {e}")
        return raw_text.strip() if isinstance(raw_text, str) else ""
