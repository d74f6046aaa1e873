"""
Best-effort parsing of JSON arrays returned by language models.

Repairs are an ordered list of text transformations. Each one is applied to
the output of the previous stages and the result is parsed; the first
successful parse wins.
"""
import json
import logging
import re
from typing import Callable, List, Optional, Tuple

log = logging.getLogger(__name__)

CODE_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
FULLWIDTH_QUOTES_RE = re.compile(r"[“”＂]")
BARE_KEY_RE = re.compile(r"([{,]\s*)([a-zA-Z0-9_]+)(\s*:)")
TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


class JSONRepairError(ValueError):
    """No repair stage produced parseable JSON."""


def strip_code_fences(text: str) -> str:
    return CODE_FENCE_RE.sub("", text).strip()


def fix_quotes_and_keys(text: str) -> str:
    """{title: “x”,} -> {"title": "x"}"""
    text = FULLWIDTH_QUOTES_RE.sub('"', text)
    text = BARE_KEY_RE.sub(r'\1"\2"\3', text)
    return TRAILING_COMMA_RE.sub(r"\1", text)


def close_array(text: str) -> Optional[str]:
    """Output cut off mid-array: add the missing bracket."""
    stripped = text.strip()
    if stripped.startswith("[") and not stripped.endswith("]"):
        return stripped + "]"
    return None


def truncate_to_last_object(text: str) -> Optional[str]:
    """Drop a half-written trailing object and close the array."""
    last_brace = text.rfind("}")
    if last_brace <= 0:
        return None
    return text[:last_brace + 1] + "]"


# (name, transform). A transform returning None does not apply to its input.
REPAIR_STAGES: List[Tuple[str, Callable[[str], Optional[str]]]] = [
    ("as-is", lambda text: text),
    ("quotes-and-keys", fix_quotes_and_keys),
    ("close-array", close_array),
    ("truncate-to-last-object", truncate_to_last_object),
]


def parse_model_json(raw: str):
    """
    Parse model output into a Python value, repairing it if needed.
    Raises JSONRepairError when every stage fails.
    """
    candidate = strip_code_fences(raw)
    first_error = None

    for name, transform in REPAIR_STAGES:
        repaired = transform(candidate)
        if repaired is None:
            continue
        candidate = repaired
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError as e:
            if first_error is None:
                first_error = e
            continue
        if name != "as-is":
            log.warning("Model JSON needed repair stage '%s'", name)
        return value

    raise JSONRepairError(f"Could not parse model output as JSON: {first_error}")
