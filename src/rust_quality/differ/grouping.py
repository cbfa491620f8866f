"""Display-only grouping of ``use`` paths.

``std::fs::read`` and ``std::fs::write`` are shown as
``use std::fs::{read, write};``.  The fix engine never merges imports; this
is purely for the diff view.
"""

from __future__ import annotations

from typing import Iterable


def _strip(path: str) -> str:
    path = path.strip()
    if path.startswith("use "):
        path = path[4:]
    return path.rstrip(";").strip()


def common_prefix(paths: list[str]) -> str:
    """Longest shared ``::``-segment prefix, excluding each path's last segment."""
    if len(paths) < 2:
        return ""
    split = [p.split("::") for p in paths]
    shortest = min(len(parts) for parts in split) - 1
    common: list[str] = []
    for i in range(shortest):
        seg = split[0][i]
        if all(parts[i] == seg for parts in split):
            common.append(seg)
        else:
            break
    return "::".join(common)


def group_imports(imports: Iterable[str]) -> list[str]:
    """Collapse *imports* into grouped ``use`` lines, sorted by root."""
    grouped: dict[str, set[str]] = {}
    for raw in imports:
        path = _strip(raw)
        if not path:
            continue
        root, sep, rest = path.partition("::")
        grouped.setdefault(root, set()).add(rest if sep else "")

    result: list[str] = []
    for root in sorted(grouped):
        tails = sorted(grouped[root])
        if len(tails) == 1:
            tail = tails[0]
            result.append(f"use {root}::{tail};" if tail else f"use {root};")
            continue
        if "" in tails:
            # `use std;` alongside `use std::x;` cannot share braces sensibly.
            result.append(f"use {root};")
            tails = [t for t in tails if t]
            if len(tails) == 1:
                result.append(f"use {root}::{tails[0]};")
                continue
        prefix = common_prefix(tails)
        if prefix:
            suffixes = [t[len(prefix) + 2:] for t in tails]
            result.append(f"use {root}::{prefix}::{{{', '.join(suffixes)}}};")
        else:
            result.append(f"use {root}::{{{', '.join(tails)}}};")
    return result
