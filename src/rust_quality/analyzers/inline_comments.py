"""Inline-comments analyzer — advisory only.

Comments inside a function body usually explain something that belongs in
the function's doc block.  There is no automatic fix: the suggested target
is a ``# Notes`` section, e.g.::

    /// Reads the config file.
    ///
    /// # Notes
    ///
    /// - Falls back to defaults when the file is missing.
"""

from __future__ import annotations

from rust_quality.core.syntax import SyntaxModel, is_doc_comment
from rust_quality.model import AnalyzerId
from rust_quality.model.fix import NO_FIX
from rust_quality.model.issue import Issue

MESSAGE = "Inline comment found; move it to the doc block # Notes section"


class InlineCommentsAnalyzer:
    """Flags non-doc ``//`` comments located inside function bodies."""

    id: str = AnalyzerId.INLINE_COMMENTS.value
    version: str = "1.0.0"

    def analyze(self, model: SyntaxModel) -> list[Issue]:
        seen: set[int] = set()
        issues: list[Issue] = []
        for _fn, body in model.function_bodies():
            for comment in model.walk({"line_comment"}, body):
                # Nested fns are visited again with their own body.
                if comment.start_byte in seen:
                    continue
                seen.add(comment.start_byte)
                if is_doc_comment(model.text_of(comment)):
                    continue
                issues.append(
                    Issue(
                        analyzer_id=self.id,
                        message=MESSAGE,
                        span=model.span_of(comment),
                        fix=NO_FIX,
                    )
                )
        issues.sort(key=lambda i: i.span.start)
        return issues
