"""Edit plans — conflict-free, ordered replacements for one file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from rust_quality.errors import ConflictError
from rust_quality.model.fix import ImportFix, NoFix, SimpleFix
from rust_quality.model.issue import Issue
from rust_quality.model.span import SourceSpan


@dataclass(frozen=True, slots=True)
class PlanEntry:
    issue: Issue
    span: SourceSpan
    replacement: str


@dataclass(frozen=True, slots=True)
class EditPlan:
    """Entries sorted by span start, pairwise non-overlapping.

    ``imports`` holds the import paths to insert, deduplicated, in the
    order they were first requested.
    """

    entries: tuple[PlanEntry, ...] = ()
    imports: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def issues(self) -> list[Issue]:
        return [e.issue for e in self.entries]


def _replacement(issue: Issue) -> str:
    fix = issue.fix
    if isinstance(fix, ImportFix):
        return fix.call_text
    if isinstance(fix, SimpleFix):
        return fix.replacement
    raise TypeError(f"no replacement for {type(fix).__name__}")


def build_plan(issues: Iterable[Issue]) -> EditPlan:
    """Order the fixable *issues* into an ``EditPlan``.

    Issues without a fix are dropped.  Two spans that overlap raise
    ``ConflictError`` naming both issues; spans that merely touch
    (``a.end == b.start``) are fine.
    """
    # sorted() is stable, so equal starts keep discovery order.
    fixable = sorted(
        (i for i in issues if not isinstance(i.fix, NoFix)),
        key=lambda i: i.span.start,
    )

    entries: list[PlanEntry] = []
    imports: dict[str, None] = {}
    last: PlanEntry | None = None
    for issue in fixable:
        if last is not None and issue.span.start < last.span.end:
            raise ConflictError(last.issue, issue)
        entry = PlanEntry(issue=issue, span=issue.span, replacement=_replacement(issue))
        entries.append(entry)
        if isinstance(issue.fix, ImportFix):
            imports.setdefault(issue.fix.import_path, None)
        if last is None or entry.span.end > last.span.end:
            last = entry
    return EditPlan(entries=tuple(entries), imports=tuple(imports))
