from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Optional


def now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f") + "Z"


def normalize_ws(text: str) -> str:
    return re.sub(r"\s+", " ", str(text or "")).strip()


def clean_text(text: Any) -> str:
    """Strip markdown artifacts the model adds despite plain-text instructions."""
    if text is None:
        return ""
    out = str(text)
    if not out:
        return ""
    out = re.sub(r"\*\*(.*?)\*\*", r"\1", out)
    out = re.sub(r"__(.*?)__", r"\1", out)
    out = re.sub(r"#{1,3}\s?", "", out)
    out = re.sub(r"^\s*\*\s", "• ", out, flags=re.MULTILINE)
    out = re.sub(r"^\s*-\s", "• ", out, flags=re.MULTILINE)
    out = out.replace("`", "")
    return out.strip()


def normalize_jsonish(raw: str) -> str:
    text = str(raw or "")
    if not text:
        return text
    text = text.replace("“", '"').replace("”", '"').replace("‘", "'").replace("’", "'")
    # Trailing commas before a container close.
    text = re.sub(r",\s*([\]}])", r"\1", text)
    return text


def to_float(val: Any) -> Optional[float]:
    if isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        return float(val)
    text = normalize_ws(str(val or ""))
    if not text:
        return None
    m = re.search(r"-?\d+(?:\.\d+)?", text.replace(",", ""))
    if not m:
        return None
    try:
        return float(m.group(0))
    except ValueError:
        return None


def ellipsize(text: str, max_chars: int = 44) -> str:
    raw = normalize_ws(text)
    if len(raw) <= max_chars:
        return raw
    if max_chars <= 3:
        return raw[:max_chars]
    return raw[: max_chars - 3].rstrip() + "..."
