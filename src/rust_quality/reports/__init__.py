"""Reports — aggregation and rendering of analysis results."""

from rust_quality.reports.aggregate import (
    AnalyzerSummary,
    Report,
    aggregate,
    aggregate_analyses,
)
from rust_quality.reports.json_report import render_json, report_to_dict
from rust_quality.reports.render import make_console, render_compact, render_verbose

__all__ = [
    "AnalyzerSummary",
    "Report",
    "aggregate",
    "aggregate_analyses",
    "make_console",
    "render_compact",
    "render_json",
    "render_verbose",
    "report_to_dict",
]
