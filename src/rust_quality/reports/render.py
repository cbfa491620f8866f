"""Terminal rendering of reports (compact and verbose) through rich."""

from __future__ import annotations

from typing import IO, Sequence

from rich.console import Console
from rich.markup import escape

from rust_quality.core.runner import FileAnalysis
from rust_quality.model import REGISTRY_ORDER
from rust_quality.model.fix import ImportFix, SimpleFix, describe_fix
from rust_quality.reports.aggregate import Report


def make_console(color: bool | None = None, file: IO[str] | None = None) -> Console:
    """Console for CLI output.  ``color=None`` lets rich detect the terminal."""
    if color is None:
        return Console(file=file, highlight=False, soft_wrap=True)
    return Console(
        file=file,
        highlight=False,
        soft_wrap=True,
        force_terminal=color,
        no_color=not color,
    )


def _lines(lines: Sequence[int]) -> str:
    return ", ".join(str(n) for n in lines)


def render_errors(report: Report, console: Console) -> None:
    for _path, error in report.errors:
        console.print(f"[bold red]error[/]: {escape(str(error))}")


def render_compact(report: Report, console: Console) -> None:
    """Issues grouped by analyzer, then message, then file with line lists."""
    render_errors(report, console)
    if report.total_issues == 0:
        console.print(
            f"[green]No issues found[/] in {report.files_scanned} file(s)"
        )
        return

    for summary in report.analyzers.values():
        if summary.issue_count == 0:
            continue
        console.print(
            f"[bold cyan]{summary.analyzer_id}[/]: {summary.issue_count} issue(s), "
            f"{summary.fixable_count} fixable"
        )
        for message, by_file in summary.grouped_by_message.items():
            console.print(f"  {escape(message)}")
            for path, lines in by_file.items():
                console.print(f"    {escape(path)}: [dim]lines[/] {_lines(lines)}")
        console.print()

    console.print(f"Total issues: {report.total_issues}")
    console.print(f"Fixable: {report.total_fixable}")
    console.print(
        f"Files: {report.files_with_issues} of {report.files_scanned} with issues"
    )


def render_verbose(
    analyses: Sequence[FileAnalysis],
    console: Console,
    analyzer_ids: Sequence[str] = REGISTRY_ORDER,
) -> None:
    """One entry per issue: location, source line and fix preview."""
    total = fixable = 0
    for analysis in analyses:
        if analysis.error is not None:
            console.print(f"[bold red]error[/]: {escape(str(analysis.error))}")
            continue
        console.print(f"[bold]Quality report for: {escape(analysis.path)}[/]")
        lines = analysis.source.split("\n")
        for aid in analyzer_ids:
            issues = analysis.issues_for(aid)
            if not issues:
                continue
            console.print(f"\n[bold cyan]{aid}[/]")
            for issue in issues:
                total += 1
                s = issue.span
                console.print(
                    f"  {s.start_line}:{s.start_col + 1}-{s.end_line}:{s.end_col + 1}"
                    f" - {escape(issue.message)}"
                )
                if 0 < issue.line <= len(lines) and lines[issue.line - 1].strip():
                    console.print(f"    [dim]| {escape(lines[issue.line - 1].strip())}[/]")
                if isinstance(issue.fix, ImportFix):
                    fixable += 1
                    console.print(f"    Fix: Add import: {escape(issue.fix.import_line)}")
                    console.print(f"         Call becomes: {escape(issue.fix.call_text)}")
                elif isinstance(issue.fix, SimpleFix):
                    fixable += 1
                    console.print(f"    Fix: {escape(describe_fix(issue.fix))}")
        console.print()

    console.print(f"Total issues: {total}")
    console.print(f"Fixable: {fixable}")
