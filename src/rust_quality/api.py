"""
rust_quality.api
================

Programmatic entrypoints: the CLI is a thin layer over these.

Usage::

    from rust_quality.api import analyze_text, check_path, fix_path, rename_mod_rs

    report, analyses = check_path("src/")
    results, analyses = fix_path("src/", dry_run=True)
    renames = rename_mod_rs(analyses, dry_run=True)
    issues = analyze_text('fn main() { std::process::exit(0); }')
"""

from __future__ import annotations

import logging
from pathlib import Path

from rust_quality.analyzers import get_analyzers, resolve_analyzer_ids
from rust_quality.autofix import (
    FixResult,
    ModRsRename,
    RenameResult,
    apply,
    build_plan,
    fix_file,
    plan_renames,
    rename_module_file,
)
from rust_quality.core.config import RunConfig
from rust_quality.core.discover import collect_rust_files
from rust_quality.core.runner import FileAnalysis, analyze_files
from rust_quality.core.syntax import parse_source
from rust_quality.errors import IoFailure
from rust_quality.model import AnalyzerId
from rust_quality.model.issue import Issue
from rust_quality.reports.aggregate import Report, aggregate_analyses

_logger = logging.getLogger(__name__)


def _config(path: str | Path, analyzer: str | None, config: RunConfig | None) -> RunConfig:
    if config is not None:
        return config
    return RunConfig.from_env(path, analyzer=analyzer)


# ── in-memory helpers ───────────────────────────────────────────────


def analyze_text(text: str, analyzer: str | None = None) -> list[Issue]:
    """Issues for a single source string.

    Raises ``ParseFailure`` when *text* is not valid Rust.
    """
    model = parse_source(text)
    issues: list[Issue] = []
    for a in get_analyzers(analyzer):
        issues.extend(a.analyze(model))
    return issues


def fix_text(text: str, analyzer: str | None = None) -> str:
    """*text* with every available fix applied.

    Raises ``ConflictError`` when two fixes overlap.
    """
    model = parse_source(text)
    issues: list[Issue] = []
    for a in get_analyzers(analyzer):
        issues.extend(a.analyze(model))
    return apply(build_plan(issues), text, model)


# ── path-based entrypoints ──────────────────────────────────────────


def collect(
    path: str | Path = ".",
    *,
    analyzer: str | None = None,
    config: RunConfig | None = None,
) -> list[FileAnalysis]:
    """Discover, read, parse and analyze every Rust file under *path*.

    Raises ``UnknownAnalyzerError`` before touching any file when the
    analyzer filter is not a registered id.
    """
    cfg = _config(path, analyzer, config)
    analyzers = get_analyzers(cfg.analyzer)
    files = collect_rust_files(cfg.root, exclude=cfg.exclude_dirs)
    _logger.debug("analyzing %d file(s) with %d worker(s)", len(files), cfg.workers)
    return analyze_files(files, analyzers, workers=cfg.workers)


def check_path(
    path: str | Path = ".",
    *,
    analyzer: str | None = None,
    config: RunConfig | None = None,
) -> tuple[Report, list[FileAnalysis]]:
    """Analyze and aggregate; never modifies files."""
    cfg = _config(path, analyzer, config)
    analyses = collect(cfg.root, config=cfg)
    return aggregate_analyses(analyses, resolve_analyzer_ids(cfg.analyzer)), analyses


def fix_analysis(analysis: FileAnalysis, *, dry_run: bool = False) -> FixResult:
    """Fix one analyzed file; a failed write is recorded, not raised."""
    try:
        return fix_file(
            analysis.path,
            analysis.issues,
            dry_run=dry_run,
            source=analysis.source,
            model=analysis.model,
        )
    except IoFailure as exc:
        _logger.warning("%s", exc)
        return FixResult(path=analysis.path, error=exc)


def fix_path(
    path: str | Path = ".",
    *,
    analyzer: str | None = None,
    dry_run: bool = False,
    config: RunConfig | None = None,
) -> tuple[list[FixResult], list[FileAnalysis]]:
    """Apply every available fix under *path*, file by file.

    Files whose plan conflicts are left untouched and reported in their
    ``FixResult``; files that failed to parse or read have no result.
    """
    cfg = _config(path, analyzer, config)
    analyses = collect(cfg.root, config=cfg)
    results = [fix_analysis(a, dry_run=dry_run) for a in analyses if a.ok]
    return results, analyses


# ── mod.rs renames ──────────────────────────────────────────────────


def find_mod_rs(path: str | Path = ".", *, config: RunConfig | None = None) -> list[ModRsRename]:
    """Every ``mod.rs`` under *path* with its target; nothing is parsed."""
    cfg = _config(path, None, config)
    return plan_renames(collect_rust_files(cfg.root, exclude=cfg.exclude_dirs))


def rename_mod_rs(analyses: list[FileAnalysis], *, dry_run: bool = False) -> list[RenameResult]:
    """Move each analyzed file flagged by the ``mod_rs`` analyzer.

    Run this after ``fix_path`` so text fixes land before the file moves.
    """
    flagged = [
        a.path
        for a in analyses
        if a.ok and any(i.analyzer_id == AnalyzerId.MOD_RS.value for i in a.issues)
    ]
    return [rename_module_file(r, dry_run=dry_run) for r in plan_renames(flagged)]
