"""
Response Parser: recovers a JSON array from a 'chatty' model reply.

Models prepend commentary ("Here is the JSON:") and wrap output in Markdown
fences even when told not to. This stage only does syntactic recovery;
semantic checks belong to `pitchplot.schemas.pitch`.
"""

import json
import logging
import re
from typing import Any, List

from pitchplot.errors import MalformedJson, NoJsonFound, truncate

logger = logging.getLogger(__name__)

# Opening or closing fence, with an optional language tag (```json, ```JSON, ```)
_FENCE_RE = re.compile(r"```[A-Za-z0-9_+-]*")


def _reject_constant(name: str):
    # json.loads accepts NaN/Infinity by default; strict JSON does not
    raise ValueError(f"Non-standard JSON constant: {name}")


def strip_code_fences(text: str) -> str:
    """Removes every Markdown code-fence marker, wherever it sits."""
    return _FENCE_RE.sub("", text)


def locate_json_array(text: str) -> str:
    """
    Returns the substring from the first '[' to the last ']' (inclusive),
    after fences are removed. Raises NoJsonFound when no such pair exists.
    """
    if not text:
        raise NoJsonFound(text or "")

    cleaned = strip_code_fences(text)
    start_idx = cleaned.find("[")
    end_idx = cleaned.rfind("]")

    if start_idx == -1 or end_idx < start_idx:
        logger.warning(f"⚠️ No JSON array in model reply: {truncate(text)!r}")
        raise NoJsonFound(text)

    return cleaned[start_idx:end_idx + 1]


def extract_json_array(text: str) -> List[Any]:
    """
    Robustly extracts the embedded JSON array from a model reply.

    Raises:
        NoJsonFound: no '[' ... ']' pair in the text.
        MalformedJson: the candidate did not decode as strict JSON.
    """
    candidate = locate_json_array(text)

    try:
        parsed = json.loads(candidate, parse_constant=_reject_constant)
    except ValueError as e:
        # JSONDecodeError is a ValueError subclass
        logger.error(f"❌ JSON decode failed: {e} | candidate: {truncate(candidate)!r}")
        raise MalformedJson(e, candidate) from e

    logger.debug(f"Decoded JSON array with {len(parsed)} item(s)")
    return parsed
