"""Analyzers turn a parsed file into issues.

Every analyzer exposes ``id``, ``version`` and
``analyze(model) -> list[Issue]``.  Analyzers are pure: they read the
shared ``SyntaxModel`` and keep no state between calls, so the full set
can run over one file in any order (or in parallel) with identical
results.

The rule set is closed.  ``get_analyzers()`` hands out fresh instances in
registry order:

    - PathImportAnalyzer: module-path function calls that should be imported
    - FormatArgsAnalyzer: formatting macros with 3+ positional placeholders
    - EmptyLinesAnalyzer: blank lines inside function bodies
    - InlineCommentsAnalyzer: line comments inside function bodies
    - ModRsAnalyzer: modules laid out as ``<name>/mod.rs``
"""

from __future__ import annotations

from typing import Protocol

from rust_quality.core.syntax import SyntaxModel
from rust_quality.errors import UnknownAnalyzerError
from rust_quality.model import REGISTRY_ORDER, AnalyzerId
from rust_quality.model.issue import Issue


class Analyzer(Protocol):
    """Every analyzer must expose ``id``, ``version``, and ``analyze()``."""

    id: str
    version: str

    def analyze(self, model: SyntaxModel) -> list[Issue]:
        """Return issues for *model* in source order."""
        ...


def _registry() -> dict[str, type]:
    # Imported here so that ``rust_quality.analyzers.<rule>`` can be
    # imported on its own without pulling in every rule.
    from .empty_lines import EmptyLinesAnalyzer
    from .format_args import FormatArgsAnalyzer
    from .inline_comments import InlineCommentsAnalyzer
    from .mod_rs import ModRsAnalyzer
    from .path_import import PathImportAnalyzer

    return {
        AnalyzerId.PATH_IMPORT.value: PathImportAnalyzer,
        AnalyzerId.FORMAT_ARGS.value: FormatArgsAnalyzer,
        AnalyzerId.EMPTY_LINES.value: EmptyLinesAnalyzer,
        AnalyzerId.INLINE_COMMENTS.value: InlineCommentsAnalyzer,
        AnalyzerId.MOD_RS.value: ModRsAnalyzer,
    }


def available_analyzers() -> tuple[str, ...]:
    return REGISTRY_ORDER


def resolve_analyzer_ids(name: str | None = None) -> tuple[str, ...]:
    """Identifiers selected by the optional filter *name*."""
    if name is None:
        return REGISTRY_ORDER
    if name not in REGISTRY_ORDER:
        raise UnknownAnalyzerError(name, REGISTRY_ORDER)
    return (name,)


def get_analyzers(name: str | None = None) -> list[Analyzer]:
    """Fresh analyzer instances in registry order.

    Raises ``UnknownAnalyzerError`` when *name* is not a registered id.
    """
    registry = _registry()
    return [registry[aid]() for aid in resolve_analyzer_ids(name)]


def __getattr__(name: str):
    if name == "PathImportAnalyzer":
        from .path_import import PathImportAnalyzer
        return PathImportAnalyzer
    if name == "FormatArgsAnalyzer":
        from .format_args import FormatArgsAnalyzer
        return FormatArgsAnalyzer
    if name == "EmptyLinesAnalyzer":
        from .empty_lines import EmptyLinesAnalyzer
        return EmptyLinesAnalyzer
    if name == "InlineCommentsAnalyzer":
        from .inline_comments import InlineCommentsAnalyzer
        return InlineCommentsAnalyzer
    if name == "ModRsAnalyzer":
        from .mod_rs import ModRsAnalyzer
        return ModRsAnalyzer
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
