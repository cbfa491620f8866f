"""File discovery — find Rust sources under a path."""

from __future__ import annotations

import os
from pathlib import Path

# Directory names never descended into.
_DEFAULT_EXCLUDES = frozenset(
    {
        "target",
        ".git",
        "node_modules",
    }
)

RUST_SUFFIX = ".rs"


def collect_rust_files(
    path: Path,
    *,
    exclude: frozenset[str] | set[str] | tuple[str, ...] = (),
) -> list[Path]:
    """Rust files addressed by *path*.

    A ``.rs`` file yields itself; a directory yields every ``.rs`` file
    below it, skipping ``target``, hidden directories and anything named in
    *exclude*.  Anything else yields nothing.

    Returns
    -------
    Sorted list of ``Path`` objects.
    """
    if path.is_file():
        return [path] if path.suffix == RUST_SUFFIX else []
    if not path.is_dir():
        return []

    skip = _DEFAULT_EXCLUDES | set(exclude)
    results: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(path):
        dirnames[:] = [
            d for d in dirnames if d not in skip and not d.startswith(".")
        ]
        for name in filenames:
            if name.endswith(RUST_SUFFIX):
                results.append(Path(dirpath) / name)
    return sorted(results)
