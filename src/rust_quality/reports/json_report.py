"""Machine-readable report, validated against ``report.schema.json``."""

from __future__ import annotations

from typing import Any, Sequence

from rust_quality.contracts.load import validate_instance
from rust_quality.core.runner import FileAnalysis
from rust_quality.errors import IoFailure, ParseFailure, QualityError
from rust_quality.reports.aggregate import Report
from rust_quality.utils.json_norm import stable_json_dumps

SCHEMA_NAME = "report.schema.json"
SCHEMA_VERSION = "rust_quality_report_v1"


def _error_dict(path: str, error: QualityError) -> dict[str, Any]:
    d: dict[str, Any] = {"path": path, "message": str(error)}
    if isinstance(error, ParseFailure):
        d["kind"] = "parse"
        d["line"] = error.line
        d["column"] = error.column
    elif isinstance(error, IoFailure):
        d["kind"] = "io"
    else:
        d["kind"] = "other"
    return d


def report_to_dict(report: Report, analyses: Sequence[FileAnalysis] = ()) -> dict[str, Any]:
    """JSON-ready report.

    Ordered collections are lists so that key sorting on output cannot
    disturb registry or first-seen order.
    """
    from rust_quality import __version__

    analyzers = []
    for summary in report.analyzers.values():
        analyzers.append({
            "id": summary.analyzer_id,
            "issue_count": summary.issue_count,
            "fixable_count": summary.fixable_count,
            "messages": [
                {
                    "message": message,
                    "files": [
                        {"path": path, "lines": list(lines)}
                        for path, lines in by_file.items()
                    ],
                }
                for message, by_file in summary.grouped_by_message.items()
            ],
        })

    issues = []
    for analysis in analyses:
        for issue in analysis.issues:
            issues.append({"path": analysis.path, **issue.to_dict()})

    return {
        "schema_version": SCHEMA_VERSION,
        "tool_version": __version__,
        "files_scanned": report.files_scanned,
        "files_with_issues": report.files_with_issues,
        "total_issues": report.total_issues,
        "total_fixable": report.total_fixable,
        "analyzers": analyzers,
        "issues": issues,
        "errors": [_error_dict(path, err) for path, err in report.errors],
    }


def render_json(report: Report, analyses: Sequence[FileAnalysis] = ()) -> str:
    """Validated, canonical JSON text for *report*."""
    data = report_to_dict(report, analyses)
    validate_instance(data, SCHEMA_NAME)
    return stable_json_dumps(data)
