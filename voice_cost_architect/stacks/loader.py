"""Stack file loader.

Loads a YAML/JSON document describing the stacks to compare:

    monthly_minutes: 20000
    stacks:
      - label: LiveKit Cloud
        platform: livekit
        hosting: cloud
        stt_model: deepgram-nova-3
        ...

The loader is intentionally strict about shape (a mapping with a ``stacks``
list of mappings) and lenient about spelling: camelCase keys and a
few value aliases are accepted. Shape errors raise ValueError with a readable,
path-qualified message so the CLI can fail fast.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..config import MAX_STACKS
from .model import FIELD_ALIASES, StackConfig, StackIdGenerator
from .validation import normalize_value

_STACK_FIELDS = {f.name for f in fields(StackConfig)}


@dataclass(frozen=True)
class StackFile:
    stacks: List[StackConfig]
    monthly_minutes: Optional[int] = None
    source_file: str = ""


def _as_list(x: Any) -> List[Any]:
    if x is None:
        return []
    if isinstance(x, list):
        return x
    return [x]


def _load_one(path: Path) -> Dict[str, Any]:
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(raw) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Top-level YAML must be a mapping in {path}")
        return data
    if path.suffix.lower() == ".json":
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Top-level JSON must be an object in {path}")
        return data
    raise ValueError(f"Unsupported stack file type: {path}")


def _parse_bool(value: Any, *, ctx: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in {"1", "true", "yes", "on"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"visible must be a boolean in {ctx}")


def _parse_minutes(value: Any, *, ctx: str) -> int:
    # bool is an int subclass; 2.9 must not truncate to 2.
    if isinstance(value, bool):
        raise ValueError(f"monthly_minutes must be an integer in {ctx}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"monthly_minutes must be an integer in {ctx}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"monthly_minutes must be an integer in {ctx}") from None


def parse_stack(obj: Any, *, index: int, ids: StackIdGenerator, ctx: str) -> StackConfig:
    sctx = f"{ctx}.stacks[{index}]"
    if not isinstance(obj, dict):
        raise ValueError(f"stack must be an object in {sctx}")

    values: Dict[str, Any] = {}
    for key, value in obj.items():
        name = FIELD_ALIASES.get(key, key)
        if name not in _STACK_FIELDS:
            raise ValueError(f"Unknown key '{key}' in {sctx}")
        if value is None:
            continue
        if name == "visible":
            values[name] = _parse_bool(value, ctx=sctx)
        elif name in ("id", "label"):
            values[name] = str(value).strip()
        else:
            value = normalize_value(name, value)
            if not isinstance(value, str):
                raise ValueError(f"{name} must be a string in {sctx}")
            values[name] = value

    if not values.get("id"):
        values["id"] = ids.next_id()
    if not values.get("label"):
        values["label"] = f"Stack {index + 1}"
    return StackConfig(**values)


def parse_stack_document(data: Dict[str, Any], *, ids: Optional[StackIdGenerator] = None, ctx: str = "stacks") -> StackFile:
    ids = ids or StackIdGenerator()
    items = _as_list(data.get("stacks"))
    if not items:
        raise ValueError(f"Missing stacks list in {ctx}")
    if len(items) > MAX_STACKS:
        raise ValueError(f"At most {MAX_STACKS} stacks can be compared, got {len(items)} in {ctx}")

    stacks = [parse_stack(it, index=i, ids=ids, ctx=ctx) for i, it in enumerate(items)]
    seen: set[str] = set()
    for s in stacks:
        if s.id in seen:
            raise ValueError(f"Duplicate stack id '{s.id}' in {ctx}")
        seen.add(s.id)

    minutes = data.get("monthly_minutes", data.get("monthlyMinutes"))
    if minutes is not None:
        minutes = _parse_minutes(minutes, ctx=ctx)
        if minutes < 0:
            raise ValueError(f"monthly_minutes cannot be negative in {ctx}")
    return StackFile(stacks=stacks, monthly_minutes=minutes)


def load_stack_file(path: Path | str, ids: Optional[StackIdGenerator] = None) -> StackFile:
    p = Path(path)
    data = _load_one(p)
    parsed = parse_stack_document(data, ids=ids, ctx=f"stackfile({p.name})")
    return StackFile(stacks=parsed.stacks, monthly_minutes=parsed.monthly_minutes, source_file=p.name)


__all__ = ["StackFile", "parse_stack", "parse_stack_document", "load_stack_file"]
