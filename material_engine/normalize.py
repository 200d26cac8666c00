"""Tolerant decoding of generative model output.

Model replies are *meant* to be JSON but regularly arrive wrapped in prose or a
markdown fence, or with small syntax slips. ``extract_and_parse`` recovers the
JSON value or fails with ``MalformedResponse``; the ``coerce_*`` helpers absorb
field-level drift so rendering code can iterate without guards.
"""
from __future__ import annotations

import copy
import json
import re
from typing import Any, Dict, List, Optional

from .errors import MalformedResponse, SchemaMismatch
from .logger import setup_logger
from .utils import normalize_jsonish, to_float

logger = setup_logger(__name__)

_FENCE_RE = re.compile(r"```[\w+-]*[^\S\n]*\n?(.*?)```", flags=re.DOTALL)
_CLOSERS = {"{": "}", "[": "]"}


def strip_fence(text: str) -> str:
    """Return the contents of the first fenced block, or the text without stray fence markers."""
    src = str(text or "")
    m = _FENCE_RE.search(src)
    if m:
        return m.group(1).strip()
    return re.sub(r"```[\w+-]*", "", src).strip()


def slice_json_span(text: str) -> str:
    """Cut ``text`` down to the first opener and the last matching closer, if both exist."""
    obj_pos = text.find("{")
    arr_pos = text.find("[")
    candidates = [p for p in [obj_pos, arr_pos] if p != -1]
    if not candidates:
        return text
    start = min(candidates)
    end = text.rfind(_CLOSERS[text[start]])
    if end <= start:
        return text
    return text[start : end + 1]


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN/Infinity by default; those are not JSON.
    raise ValueError(f"non-JSON constant {name}")


def _loads(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


def extract_and_parse(raw_text: Optional[str], default: Any = None) -> Any:
    """Recover a JSON value from raw model text.

    Empty input returns a copy of ``default`` (``{}`` when not given). Anything
    else either parses or raises ``MalformedResponse`` carrying ``raw_text``.
    """
    src = str(raw_text or "")
    if not src.strip():
        return copy.deepcopy(default) if default is not None else {}

    candidate = strip_fence(src)
    for trial in [src, candidate]:
        try:
            return _loads(trial)
        except ValueError:
            continue

    span = slice_json_span(candidate)
    for trial in [span, normalize_jsonish(span)]:
        try:
            return _loads(trial)
        except ValueError:
            continue

    logger.debug("Unparseable model output (%d chars): %.300s", len(src), src)
    raise MalformedResponse(src)


def coerce_list(value: Any) -> List[Any]:
    """Always hand back a list: lists pass through, None becomes [], anything else is wrapped.

    Not idempotent over nesting: ``coerce_list([[x]])`` stays ``[[x]]``.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def coerce_field_list(payload: Dict[str, Any], field: str, context: str = "") -> List[Any]:
    """``coerce_list`` on ``payload[field]`` that logs when the model broke the list contract."""
    value = payload.get(field) if isinstance(payload, dict) else None
    if value is None:
        logger.warning("%sfield '%s' missing; defaulting to []", f"{context}: " if context else "", field)
    elif not isinstance(value, list):
        logger.warning(
            "%sfield '%s' was %s, not a list; wrapping",
            f"{context}: " if context else "",
            field,
            type(value).__name__,
        )
    return coerce_list(value)


def coerce_dict_list(value: Any) -> List[Dict[str, Any]]:
    return [x for x in coerce_list(value) if isinstance(x, dict)]


def coerce_str(value: Any, default: str = "") -> str:
    if value is None or isinstance(value, (dict, list)):
        return default
    text = str(value).strip()
    return text if text else default


def coerce_str_list(value: Any) -> List[str]:
    return [coerce_str(v) for v in coerce_list(value) if coerce_str(v)]


def coerce_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def coerce_number(value: Any, default: float = 0.0) -> float:
    num = to_float(value)
    return default if num is None else num


def _shape_name(value: Any) -> str:
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if value is None:
        return "null"
    return type(value).__name__


def expect_object(payload: Any, raw_text: str = "") -> Dict[str, Any]:
    """Accept an object; a one-element array holding an object is unwrapped."""
    if isinstance(payload, dict):
        return payload
    if isinstance(payload, list) and len(payload) == 1 and isinstance(payload[0], dict):
        logger.warning("Expected an object, got a one-element array; unwrapping")
        return payload[0]
    raise SchemaMismatch("object", raw_text=raw_text, actual=_shape_name(payload))


def expect_array(payload: Any, raw_text: str = "") -> List[Any]:
    """Accept an array, or an object wrapping exactly one array field."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        list_fields = [v for v in payload.values() if isinstance(v, list)]
        if len(list_fields) == 1:
            return list_fields[0]
    raise SchemaMismatch("array", raw_text=raw_text, actual=_shape_name(payload))
