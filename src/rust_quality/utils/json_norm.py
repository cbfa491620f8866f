"""Canonical JSON serialization — single dump path for CLI output.

Guarantees:
  - Stable key ordering (``sort_keys=True``)
  - Trailing newline at EOF
  - Tuples and sets → lists
"""

from __future__ import annotations

import json
from typing import Any, Mapping


def _to_builtin(obj: Any) -> Any:
    """Normalize containers into JSON-safe builtins."""
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, Mapping):
        return {str(k): _to_builtin(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_builtin(v) for v in obj]
    raise TypeError(f"not JSON serialisable: {type(obj).__name__}")


def stable_json_dumps(obj: Any, *, indent: int | None = 2) -> str:
    """Canonical JSON text for *obj*, newline-terminated."""
    s = json.dumps(
        _to_builtin(obj),
        indent=indent,
        sort_keys=True,
        ensure_ascii=False,
    )
    return s + "\n"
