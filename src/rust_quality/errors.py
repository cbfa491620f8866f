"""Error taxonomy for analysis, fixing and reporting.

``ParseFailure`` and ``IoFailure`` are per-file: the runner records them next
to the successful results and moves on.  ``ConflictError`` is raised by the
fix engine when two edits claim overlapping text.  ``MalformedFixContract``
is an internal invariant violation (an analyzer produced a broken
``ImportFix``) and is deliberately *not* a ``QualityError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from rust_quality.model.issue import Issue


class QualityError(Exception):
    """Base class for recoverable, user-reportable failures."""


class ParseFailure(QualityError):
    """The source file could not be parsed into a syntax model."""

    def __init__(self, path: str | Path, line: int, column: int, detail: str = "") -> None:
        self.path = str(path)
        self.line = line
        self.column = column
        self.detail = detail
        msg = f"{self.path}:{line}:{column}: syntax error"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class IoFailure(QualityError):
    """A file could not be read or written."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class ConflictError(QualityError):
    """Two fixes target overlapping spans of the same file."""

    def __init__(self, first: Issue, second: Issue) -> None:
        self.first = first
        self.second = second
        super().__init__(
            f"conflicting fixes: {first.analyzer_id} at "
            f"{first.span.start_line}:{first.span.start_col} overlaps "
            f"{second.analyzer_id} at "
            f"{second.span.start_line}:{second.span.start_col}"
        )


class ConfigError(QualityError):
    """Invalid run configuration, e.g. a malformed environment override."""


class UnknownAnalyzerError(QualityError):
    """The analyzer filter names an identifier outside the registry."""

    def __init__(self, name: str, available: Iterable[str]) -> None:
        self.name = name
        self.available = tuple(available)
        super().__init__(
            f"unknown analyzer: {name!r} (available: {', '.join(self.available)})"
        )


class MalformedFixContract(AssertionError):
    """An ``ImportFix`` template does not match its preserved arguments."""
