"""Diff rendering — before/after views of a single fix."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from rust_quality.model import REGISTRY_ORDER, AnalyzerId, DiffMode
from rust_quality.model.fix import ImportFix, SimpleFix
from rust_quality.model.issue import Issue

IMPORTS_TITLE = "Imports (file top)"


@dataclass(frozen=True, slots=True)
class DiffBlock:
    """One hunk: the lines removed at ``line`` and the lines put there.

    ``line`` is 0 for the import block, which targets the file's import
    section rather than the issue's own location.
    """

    title: str
    line: int
    removed: tuple[str, ...] = ()
    added: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RenderedDiff:
    issue: Issue
    mode: DiffMode
    blocks: tuple[DiffBlock, ...] = ()
    summary: str = ""


def _touched_lines(issue: Issue, lines: list[str]) -> tuple[int, int]:
    """1-indexed inclusive line range covered by the issue's span."""
    span = issue.span
    last = span.end_line - 1 if span.end_col == 0 and span.end_line > span.start_line else span.end_line
    return span.start_line, min(last, len(lines))


def replacement_block(issue: Issue, lines: list[str], replacement: str) -> DiffBlock:
    span = issue.span
    first, last = _touched_lines(issue, lines)
    before = lines[first - 1:last]
    head = lines[first - 1][:span.start_col]
    if span.end_col == 0 and span.end_line > last:
        # Span swallows the newline of its last line.
        after_text = head + replacement
        after = tuple(after_text.split("\n")) if after_text else ()
    else:
        tail = lines[span.end_line - 1][span.end_col:]
        after = tuple((head + replacement + tail).split("\n"))
    return DiffBlock(title=f"Line {first}", line=first, removed=tuple(before), added=after)


def render(issue: Issue, original_text: str, mode: DiffMode = DiffMode.FULL) -> RenderedDiff:
    """Render one issue's fix.

    ``FULL`` and ``INTERACTIVE`` give the exact hunks; an import fix yields
    two blocks (the ``use`` line and the rewritten call) since they land in
    different places.  ``SUMMARY`` gives a one-line description only.
    """
    mode = DiffMode(mode)
    if mode is DiffMode.SUMMARY:
        return RenderedDiff(
            issue=issue,
            mode=mode,
            summary=f"{issue.analyzer_id}: line {issue.line}: {issue.message}",
        )

    fix = issue.fix
    lines = original_text.split("\n")
    if isinstance(fix, ImportFix):
        blocks = (
            DiffBlock(title=IMPORTS_TITLE, line=0, added=(fix.import_line,)),
            replacement_block(issue, lines, fix.call_text),
        )
    elif isinstance(fix, SimpleFix):
        blocks = (replacement_block(issue, lines, fix.replacement),)
    else:
        blocks = ()
    return RenderedDiff(issue=issue, mode=mode, blocks=blocks)


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def summarize(results: Mapping[str, Sequence[Issue]]) -> list[str]:
    """Summary-mode lines: per file, one line per analyzer with changes.

    ``empty_lines`` is collapsed into a single note listing its lines.
    """
    out: list[str] = []
    total = files = 0
    for path, issues in results.items():
        fixable = [i for i in issues if i.is_fixable]
        if not fixable:
            continue
        files += 1
        total += len(fixable)
        out.append(f"{path}:")
        for aid in REGISTRY_ORDER:
            mine = [i for i in fixable if i.analyzer_id == aid]
            if not mine:
                continue
            if aid == AnalyzerId.EMPTY_LINES.value:
                listed = ", ".join(str(i.line) for i in mine)
                out.append(f"  {aid}: remove blank lines {listed}")
            else:
                out.append(f"  {aid}: {_plural(len(mine), 'change')}")
        out.append("")
    out.append(f"Total: {_plural(total, 'change')} in {_plural(files, 'file')}")
    return out
