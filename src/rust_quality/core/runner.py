"""Runner — reads files, parses them, runs the analyzer set per file."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from rust_quality.core.syntax import SyntaxModel, parse_source
from rust_quality.errors import IoFailure, ParseFailure, QualityError
from rust_quality.model.issue import Issue

if TYPE_CHECKING:
    from rust_quality.analyzers import Analyzer

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileAnalysis:
    """Outcome for one file: either issues or an error, never both."""

    path: str
    source: str = ""
    issues: tuple[Issue, ...] = ()
    error: QualityError | None = None
    model: SyntaxModel | None = field(default=None, repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    def issues_for(self, analyzer_id: str) -> list[Issue]:
        return [i for i in self.issues if i.analyzer_id == analyzer_id]


def read_source(path: Path) -> str:
    """Read *path* as UTF-8, raising ``IoFailure`` on any OS or decode error."""
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise IoFailure(path, f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise IoFailure(path, exc.strerror or str(exc)) from exc


def write_source(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise IoFailure(path, exc.strerror or str(exc)) from exc
    _logger.info("wrote %s", path)


def run_analyzers(model: SyntaxModel, analyzers: Sequence[Analyzer]) -> list[Issue]:
    """All issues for *model*, analyzer by analyzer in the given order."""
    issues: list[Issue] = []
    for analyzer in analyzers:
        issues.extend(analyzer.analyze(model))
    return issues


def analyze_source(text: str, analyzers: Sequence[Analyzer], path: str = "<memory>") -> FileAnalysis:
    try:
        model = parse_source(text, path)
    except ParseFailure as exc:
        _logger.warning("%s", exc)
        return FileAnalysis(path=path, source=text, error=exc)
    issues = run_analyzers(model, analyzers)
    _logger.debug("%s: %d issue(s)", path, len(issues))
    return FileAnalysis(path=path, source=text, issues=tuple(issues), model=model)


def analyze_file(path: Path, analyzers: Sequence[Analyzer]) -> FileAnalysis:
    """Read, parse and analyze one file; errors are captured, not raised."""
    try:
        text = read_source(path)
    except IoFailure as exc:
        _logger.warning("%s", exc)
        return FileAnalysis(path=str(path), error=exc)
    return analyze_source(text, analyzers, str(path))


def analyze_files(
    files: Sequence[Path],
    analyzers: Sequence[Analyzer],
    *,
    workers: int = 1,
) -> list[FileAnalysis]:
    """Analyze *files* in parallel; results keep the order of *files*.

    Files share nothing mutable, so each one is an independent task.
    """
    if workers <= 1 or len(files) <= 1:
        return [analyze_file(p, analyzers) for p in files]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(lambda p: analyze_file(p, analyzers), files))
