"""Enums shared across the analyzer, fix and presentation layers."""

from __future__ import annotations

from enum import Enum


class AnalyzerId(str, Enum):
    """Canonical analyzer identifiers.

    Declaration order **is** the registry order used for every grouped
    output, so new rules are appended, never inserted.
    """

    PATH_IMPORT = "path_import"
    FORMAT_ARGS = "format_args"
    EMPTY_LINES = "empty_lines"
    INLINE_COMMENTS = "inline_comments"
    MOD_RS = "mod_rs"


class DiffMode(str, Enum):
    """Presentation modes of the diff renderer."""

    FULL = "full"
    SUMMARY = "summary"
    INTERACTIVE = "interactive"


REGISTRY_ORDER: tuple[str, ...] = tuple(a.value for a in AnalyzerId)
