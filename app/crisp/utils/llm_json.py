"""Helpers for pulling structured data out of free-form LLM replies."""

from __future__ import annotations
import json
import re
from typing import Any

_JSON_BLOCK = re.compile(r"(\{.*\}|\[.*\])", re.DOTALL)
_FENCE_OPEN = re.compile(r"^```[A-Za-z0-9_-]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")
_NUMBERED_ITEM = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s*")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```...``` fence (with or without a language tag)."""
    t = (text or "").strip()
    if t.startswith("```") and t.endswith("```"):
        t = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", t))
    return t.strip()


def extract_json(text: str) -> Any:
    """
    Parse the first JSON object/array found in an LLM reply.
    Returns {} when nothing parses, [] when an array-looking block is broken.
    """
    if not text:
        return {}
    t = strip_code_fences(text)

    try:
        return json.loads(t)
    except ValueError:
        pass

    m = _JSON_BLOCK.search(t)
    if not m:
        return {}
    block = m.group(1)
    try:
        return json.loads(block)
    except ValueError:
        return [] if block.lstrip().startswith("[") else {}


def require_object(text: str, err: str = "Expected a JSON object.") -> dict:
    """Strict: must return an object, else raise."""
    data = extract_json(text)
    if not isinstance(data, dict) or not data:
        raise ValueError(err)
    return data


def split_numbered_list(text: str) -> list[str]:
    """
    Split "1. foo\\n2. bar" (or bulleted) replies into clean items.
    Lines that do not start a new item are joined to the previous one; a
    preamble before the first numbered item is dropped.
    """
    items: list[str] = []
    first_marked: int | None = None
    for raw in strip_code_fences(text).splitlines():
        line = raw.strip()
        if not line:
            continue
        if _NUMBERED_ITEM.match(line):
            if first_marked is None:
                first_marked = len(items)
            items.append(_NUMBERED_ITEM.sub("", line, count=1).strip())
        elif items and first_marked is not None:
            items[-1] = f"{items[-1]} {line}"
        else:
            items.append(line)
    if first_marked:
        items = items[first_marked:]
    return [i for i in items if i]


def clean_single_line(text: str) -> str:
    """Collapse a one-item reply: drop fences, numbering and wrapping quotes."""
    t = strip_code_fences(text)
    t = _NUMBERED_ITEM.sub("", t, count=1)
    t = " ".join(t.split())
    if len(t) >= 2 and t[0] == t[-1] and t[0] in "\"'":
        t = t[1:-1].strip()
    return t
