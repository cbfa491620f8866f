"""Empty-lines analyzer — blank lines inside function bodies."""

from __future__ import annotations

from rust_quality.core.syntax import STRING_TYPES, SyntaxModel
from rust_quality.model import AnalyzerId
from rust_quality.model.fix import SimpleFix
from rust_quality.model.issue import Issue
from rust_quality.model.span import SourceSpan

MESSAGE = "Empty line in function body indicates untamed complexity"

_DELETE_LINE = SimpleFix("")


def _literal_rows(model: SyntaxModel) -> set[int]:
    """Lines that belong to the middle or tail of a multi-line literal or
    block comment; blank lines there are content, not layout."""
    rows: set[int] = set()
    for node in model.walk(STRING_TYPES | {"block_comment"}):
        start, end = node.start_point[0] + 1, node.end_point[0] + 1
        if end > start:
            rows.update(range(start + 1, end + 1))
    return rows


class EmptyLinesAnalyzer:
    """Flags whitespace-only lines strictly between a body's braces."""

    id: str = AnalyzerId.EMPTY_LINES.value
    version: str = "1.0.0"

    def analyze(self, model: SyntaxModel) -> list[Issue]:
        blank: set[int] = set()
        for _fn, body in model.function_bodies():
            open_line = body.start_point[0] + 1
            close_line = body.end_point[0] + 1
            for line in range(open_line + 1, close_line):
                if not model.line_text(line).strip():
                    blank.add(line)
        if not blank:
            return []

        blank -= _literal_rows(model)
        return [
            Issue(
                analyzer_id=self.id,
                message=MESSAGE,
                span=SourceSpan.whole_line(line),
                fix=_DELETE_LINE,
            )
            for line in sorted(blank)
        ]
