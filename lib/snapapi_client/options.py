from __future__ import annotations

import json
from typing import Any, Mapping

# Keys whose values are free-form mappings owned by the caller.
_PASSTHROUGH_KEYS = {"extraHeaders", "jsonSchema", "structured"}

_SPECIAL_KEYS = {
    "prefer_css_page_size": "preferCSSPageSize",
}


def camel_key(key: str) -> str:
    if key in _SPECIAL_KEYS:
        return _SPECIAL_KEYS[key]
    if "_" not in key:
        return key
    parts = [part for part in key.split("_") if part]
    if not parts:
        return key
    head, *rest = parts
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_wire(value: Any) -> Any:
    """Rename snake_case option keys to the camelCase the service expects.

    Keys that are already camelCase are left alone, so callers may mix both
    styles. ``None`` values are dropped.
    """
    if isinstance(value, Mapping):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if v is None:
                continue
            key = camel_key(str(k))
            out[key] = dict(v) if key in _PASSTHROUGH_KEYS and isinstance(v, Mapping) else to_wire(v)
        return out
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    return value


def merge_options(options: Mapping[str, Any] | None, fields: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(to_wire(options or {}))
    merged.update(to_wire(fields))
    return merged


def dump_body(body: Mapping[str, Any]) -> bytes:
    return json.dumps(body, ensure_ascii=False).encode("utf-8")
