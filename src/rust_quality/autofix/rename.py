"""Moving ``<name>/mod.rs`` to ``<name>.rs``.

This is the one fix that is not a text edit, so it lives outside the
``EditPlan`` machinery and runs after a file's text fixes are written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from rust_quality.analyzers.mod_rs import suggested_path
from rust_quality.errors import IoFailure

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModRsRename:
    source: Path
    target: Path


@dataclass(frozen=True, slots=True)
class RenameResult:
    rename: ModRsRename
    renamed: bool = False
    error: IoFailure | None = None

    @property
    def success(self) -> bool:
        return self.error is None


def plan_renames(paths: Iterable[Path | str]) -> list[ModRsRename]:
    """Renames for every ``mod.rs`` among *paths*, in the given order."""
    renames: list[ModRsRename] = []
    for raw in paths:
        source = Path(raw)
        target = suggested_path(source)
        if target is not None:
            renames.append(ModRsRename(source, target))
    return renames


def rename_module_file(rename: ModRsRename, *, dry_run: bool = False) -> RenameResult:
    """Move one ``mod.rs`` into place, dropping its directory if left empty.

    An existing target is never overwritten.  Errors are recorded in the
    result, so a batch keeps going.
    """
    source, target = rename.source, rename.target
    if target.exists():
        return RenameResult(rename, error=IoFailure(target, "already exists; not overwriting"))
    if dry_run:
        return RenameResult(rename)
    try:
        source.rename(target)
        parent = source.parent
        if not any(parent.iterdir()):
            parent.rmdir()
    except OSError as exc:
        err = IoFailure(exc.filename or source, exc.strerror or str(exc))
        _logger.warning("%s", err)
        return RenameResult(rename, error=err)
    _logger.info("renamed %s -> %s", source, target)
    return RenameResult(rename, renamed=True)
