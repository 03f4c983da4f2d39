from __future__ import annotations

import re
from typing import Any, Dict, List, MutableMapping

_SEGMENT_RE = re.compile(r"\[([^\[\]]+)\]")


def split_ref(ref: str) -> List[str]:
    """Split a field reference into path segments.

    "[wmts][zoomlevel]" -> ["wmts", "zoomlevel"]; a bare name is a top-level key.
    """
    ref = ref.strip()
    if not ref:
        raise ValueError("empty field reference")
    if not ref.startswith("["):
        return [ref]
    parts = _SEGMENT_RE.findall(ref)
    if "".join(f"[{p}]" for p in parts) != ref:
        raise ValueError(f"malformed field reference: {ref!r}")
    return parts


def get_field(record: MutableMapping[str, Any], ref: str) -> Any:
    cur: Any = record
    for seg in split_ref(ref):
        if not isinstance(cur, dict) or seg not in cur:
            return None
        cur = cur[seg]
    return cur


def set_field(record: MutableMapping[str, Any], ref: str, value: Any) -> None:
    parts = split_ref(ref)
    cur: Any = record
    for seg in parts[:-1]:
        nxt = cur.get(seg)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[seg] = nxt
        cur = nxt
    cur[parts[-1]] = value


def group_ref(target: str, key: str) -> str:
    """Reference to `key` inside the `target` group ("wmts" or "[geo][wmts]")."""
    base = target if target.startswith("[") else f"[{target}]"
    return f"{base}[{key}]"


def set_group(record: MutableMapping[str, Any], target: str, values: Dict[str, Any]) -> None:
    """Write every key of `values` under the `target` field group."""
    for k, v in values.items():
        set_field(record, group_ref(target, k), v)


__all__ = ["split_ref", "get_field", "set_field", "group_ref", "set_group"]
