"""Apply an ``EditPlan`` to file text, and the per-file fix driver."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from rust_quality.autofix.plan import EditPlan, build_plan
from rust_quality.core.runner import read_source, write_source
from rust_quality.core.syntax import SyntaxModel, parse_source
from rust_quality.errors import ConflictError, IoFailure
from rust_quality.model.issue import Issue
from rust_quality.model.span import SourceSpan

_logger = logging.getLogger(__name__)


class _Offsets:
    """``(line, col)`` → absolute character offset for one text."""

    def __init__(self, text: str) -> None:
        self._starts: list[int] = [0]
        self._lengths: list[int] = []
        for line in text.split("\n"):
            self._lengths.append(len(line))
            self._starts.append(self._starts[-1] + len(line) + 1)

    def __call__(self, line: int, col: int) -> int:
        if not 1 <= line <= len(self._lengths):
            raise ValueError(f"line {line} out of range 1..{len(self._lengths)}")
        if col > self._lengths[line - 1]:
            raise ValueError(f"column {col} past end of line {line}")
        return self._starts[line - 1] + col

    def span(self, span: SourceSpan) -> tuple[int, int]:
        return self(*span.start), self(*span.end)


def missing_imports(model: SyntaxModel, imports: Iterable[str]) -> list[str]:
    """The subset of *imports* not already brought in by a top-level ``use``."""
    present = {path for name, path in model.use_bindings(top_level_only=True)
               if path.rsplit("::", 1)[-1] == name}
    return [p for p in imports if p not in present]


def import_block(model: SyntaxModel, imports: list[str]) -> tuple[int, int, str]:
    """``(line, col, text)`` of the ``use`` lines to insert."""
    anchor = model.import_anchor()
    block = "".join(f"use {path};\n" for path in imports)
    if anchor.at_eof:
        if model.text and not model.text.endswith("\n"):
            block = "\n" + block
    elif not anchor.has_imports:
        block += "\n"
    return anchor.line, anchor.column, block


def apply(plan: EditPlan, original_text: str, model: SyntaxModel | None = None) -> str:
    """Return *original_text* with every entry of *plan* applied.

    Edits are applied bottom-to-top so that each one sees the offsets of
    the original text.  Imports go in front of the first top-level ``use``
    (or the first item when there is none), one ``use`` line per path.
    """
    offsets = _Offsets(original_text)
    # (start, order, end, text); order 1 = replacement, 0 = insertion
    edits: list[tuple[int, int, int, str]] = []
    for entry in plan.entries:
        start, end = offsets.span(entry.span)
        edits.append((start, 1, end, entry.replacement))

    if plan.imports:
        if model is None:
            model = parse_source(original_text)
        needed = missing_imports(model, plan.imports)
        if needed:
            line, col, block = import_block(model, needed)
            at = offsets(line, col)
            edits.append((at, 0, at, block))

    text = original_text
    for start, _order, end, replacement in sorted(edits, reverse=True):
        text = text[:start] + replacement + text[end:]
    return text


# ── per-file driver ─────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class FixResult:
    """What happened to one file."""

    path: str
    applied: tuple[Issue, ...] = ()
    skipped: tuple[Issue, ...] = ()
    conflict: ConflictError | None = None
    written: bool = False
    new_text: str | None = None
    error: IoFailure | None = None

    @property
    def success(self) -> bool:
        return self.conflict is None and self.error is None

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def fix_file(
    path: Path | str,
    issues: Iterable[Issue],
    *,
    dry_run: bool = False,
    source: str | None = None,
    model: SyntaxModel | None = None,
) -> FixResult:
    """Build and apply the plan for one file.

    A conflict abandons the file: nothing is applied and nothing written.
    With *dry_run* the new text is computed but never persisted.
    """
    path = Path(path)
    issues = list(issues)
    skipped = tuple(i for i in issues if not i.is_fixable)
    try:
        plan = build_plan(issues)
    except ConflictError as exc:
        _logger.warning("%s: %s; file left unchanged", path, exc)
        return FixResult(path=str(path), skipped=skipped, conflict=exc)

    if not plan:
        return FixResult(path=str(path), skipped=skipped)

    text = source if source is not None else read_source(path)
    new_text = apply(plan, text, model)
    written = False
    if not dry_run and new_text != text:
        write_source(path, new_text)
        written = True
    return FixResult(
        path=str(path),
        applied=tuple(plan.issues),
        skipped=skipped,
        written=written,
        new_text=new_text,
    )
