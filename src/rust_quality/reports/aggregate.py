"""Report aggregation — fold per-file issues into per-analyzer groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from rust_quality.core.runner import FileAnalysis
from rust_quality.errors import QualityError
from rust_quality.model import REGISTRY_ORDER
from rust_quality.model.issue import Issue


@dataclass(frozen=True)
class AnalyzerSummary:
    """Counts and groups for one analyzer.

    ``grouped_by_message`` maps message → file path → distinct line numbers
    in first-seen order.  Messages are in first-seen order across files.
    """

    analyzer_id: str
    issue_count: int = 0
    fixable_count: int = 0
    grouped_by_message: dict[str, dict[str, list[int]]] = field(default_factory=dict)


@dataclass(frozen=True)
class Report:
    """Aggregate over a whole run; analyzers appear in registry order."""

    analyzers: dict[str, AnalyzerSummary]
    files_scanned: int = 0
    files_with_issues: int = 0
    errors: tuple[tuple[str, QualityError], ...] = ()

    @property
    def total_issues(self) -> int:
        return sum(s.issue_count for s in self.analyzers.values())

    @property
    def total_fixable(self) -> int:
        return sum(s.fixable_count for s in self.analyzers.values())

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def aggregate(
    results: Mapping[str, Sequence[Issue]],
    analyzer_ids: Sequence[str] = REGISTRY_ORDER,
    *,
    errors: Iterable[tuple[str, QualityError]] = (),
) -> Report:
    """Build a ``Report`` from ``file_path → issues``.

    *analyzer_ids* is the set that actually ran; each gets an entry even
    with zero issues.  An issue from an analyzer outside that set is a
    caller bug and raises ``ValueError``.
    """
    ran = set(analyzer_ids)
    order = [aid for aid in REGISTRY_ORDER if aid in ran]
    order += [aid for aid in analyzer_ids if aid not in REGISTRY_ORDER]

    counts = {aid: [0, 0] for aid in order}
    groups: dict[str, dict[str, dict[str, dict[int, None]]]] = {aid: {} for aid in order}
    files_with_issues = 0

    for path, issues in results.items():
        if issues:
            files_with_issues += 1
        for issue in issues:
            if issue.analyzer_id not in ran:
                raise ValueError(
                    f"issue from {issue.analyzer_id!r} but only {sorted(ran)} ran"
                )
            c = counts[issue.analyzer_id]
            c[0] += 1
            if issue.is_fixable:
                c[1] += 1
            by_file = groups[issue.analyzer_id].setdefault(issue.message, {})
            by_file.setdefault(path, {})[issue.line] = None

    summaries = {
        aid: AnalyzerSummary(
            analyzer_id=aid,
            issue_count=counts[aid][0],
            fixable_count=counts[aid][1],
            grouped_by_message={
                msg: {p: list(lines) for p, lines in by_file.items()}
                for msg, by_file in groups[aid].items()
            },
        )
        for aid in order
    }
    errors = tuple(errors)
    return Report(
        analyzers=summaries,
        files_scanned=len(results) + len(errors),
        files_with_issues=files_with_issues,
        errors=errors,
    )


def aggregate_analyses(
    analyses: Sequence[FileAnalysis],
    analyzer_ids: Sequence[str] = REGISTRY_ORDER,
) -> Report:
    """``aggregate`` over runner output, carrying per-file errors along."""
    results = {a.path: list(a.issues) for a in analyses if a.ok}
    errors = [(a.path, a.error) for a in analyses if a.error is not None]
    return aggregate(results, analyzer_ids, errors=errors)
