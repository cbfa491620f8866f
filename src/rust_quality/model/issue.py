"""Issue — a located finding emitted by one analyzer."""

from __future__ import annotations

from dataclasses import dataclass

from rust_quality.model.fix import NO_FIX, Fix, NoFix, fix_to_dict
from rust_quality.model.span import SourceSpan


@dataclass(frozen=True, slots=True)
class Issue:
    """Immutable analyzer finding.

    Issues from one analyzer are kept in discovery order (source order,
    outer before inner); nothing downstream re-sorts them except the fix
    engine.
    """

    analyzer_id: str
    message: str
    span: SourceSpan
    fix: Fix = NO_FIX

    @property
    def line(self) -> int:
        return self.span.start_line

    @property
    def column(self) -> int:
        return self.span.start_col

    @property
    def is_fixable(self) -> bool:
        return not isinstance(self.fix, NoFix)

    def to_dict(self) -> dict:
        return {
            "analyzer": self.analyzer_id,
            "message": self.message,
            "span": self.span.to_dict(),
            "fix": fix_to_dict(self.fix),
        }
